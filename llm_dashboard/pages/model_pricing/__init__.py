from llm_dashboard.pages.model_pricing.page import model_pricing_page

__all__ = ["model_pricing_page"]
