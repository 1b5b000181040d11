from llm_dashboard.pages.model_comparison.page import model_comparison_page

__all__ = ["model_comparison_page"]
