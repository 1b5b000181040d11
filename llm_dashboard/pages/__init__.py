"""Pages module containing the dashboard pages."""

from llm_dashboard.pages.hardware_calculator import hardware_calculator_page
from llm_dashboard.pages.model_pricing import model_pricing_page
from llm_dashboard.pages.model_comparison import model_comparison_page
from llm_dashboard.pages.model_explorer import model_explorer_page
from llm_dashboard.pages.token_calculator import token_calculator_page

__all__ = [
    "model_pricing_page",
    "model_comparison_page",
    "model_explorer_page",
    "token_calculator_page",
    "hardware_calculator_page",
]
