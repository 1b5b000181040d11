from llm_dashboard.pages.token_calculator.page import token_calculator_page

__all__ = ["token_calculator_page"]
