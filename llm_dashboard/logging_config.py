"""Logging setup for the dashboard and the catalog engine."""

import logging

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

_configured = False


def configure_logging(level: str = "INFO") -> None:
    """
    Configure the package logger once.

    Streamlit reruns the script on every interaction, so repeated calls only
    update the level instead of stacking handlers.

    Args:
        level: Log level name (e.g. "INFO", "DEBUG")
    """
    global _configured

    logger = logging.getLogger("llm_dashboard")
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    if _configured:
        return

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    logger.propagate = False
    _configured = True
