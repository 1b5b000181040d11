from llm_dashboard.pages.hardware_calculator.page import hardware_calculator_page

__all__ = ["hardware_calculator_page"]
