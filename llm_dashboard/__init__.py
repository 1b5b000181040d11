"""LLM API Dashboard - model catalog, comparison and token estimation."""

from llm_dashboard.common import *
from llm_dashboard.common import __all__ as _common_all

__version__ = "0.1.0"

__all__ = list(_common_all)
