from llm_dashboard.pages.model_explorer.page import model_explorer_page

__all__ = ["model_explorer_page"]
