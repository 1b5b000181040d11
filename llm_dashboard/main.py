"""
LLM API Dashboard - Main Application

A Streamlit application for comparing prices, capabilities and token usage of
LLM API offerings, combining a curated model list with the live OpenRouter
catalog.
"""

import asyncio
import sys
from datetime import datetime
from pathlib import Path

import streamlit as st

# Add parent directory to path to support both direct execution and package import
if __name__ == "__main__":
    sys.path.insert(0, str(Path(__file__).parent.parent))

from llm_dashboard.common import (
    CatalogService,
    comparison_records,
    load_curated_catalog,
    pricing_records,
)
from llm_dashboard.config import Settings
from llm_dashboard.logging_config import configure_logging
from llm_dashboard.pages.hardware_calculator import hardware_calculator_page
from llm_dashboard.pages.model_comparison import model_comparison_page
from llm_dashboard.pages.model_explorer import model_explorer_page
from llm_dashboard.pages.model_pricing import model_pricing_page
from llm_dashboard.pages.token_calculator import token_calculator_page


@st.cache_resource
def get_catalog() -> CatalogService:
    """Build the catalog service once per server process."""
    settings = Settings.from_env()
    configure_logging(settings.log_level)

    curated_df = load_curated_catalog(settings.static_catalog)
    catalog = CatalogService.from_settings(
        settings,
        static_pricing=pricing_records(curated_df),
        static_comparison=comparison_records(curated_df),
    )
    asyncio.run(catalog.load())
    return catalog


def catalog_status_sidebar(catalog: CatalogService):
    """Show cache status and refresh controls."""
    st.sidebar.divider()
    status = catalog.cache_status()
    if status.is_valid:
        updated = datetime.fromtimestamp(status.timestamp / 1000).strftime("%H:%M:%S")
        minutes_left = status.time_until_expiry_ms // 60_000
        st.sidebar.caption(f"OpenRouter catalog cached at {updated} ({minutes_left} min left)")
    else:
        st.sidebar.caption("OpenRouter catalog not cached")

    left, right = st.sidebar.columns(2)
    if left.button("Refresh", key="catalog_refresh"):
        with st.spinner("Fetching models from OpenRouter..."):
            asyncio.run(catalog.refresh())
    if right.button("Clear cache", key="catalog_clear"):
        catalog.clear_cache()

    if catalog.error:
        st.sidebar.warning(f"{catalog.error}. Showing the last available data.")


def main():
    """Main function to run the Streamlit application."""
    st.set_page_config(
        page_title="LLM API Dashboard",
        page_icon="💰",
        layout="wide"
    )

    st.title("💰 LLM API Dashboard")

    catalog = get_catalog()

    # Page selection using radio buttons
    page = st.sidebar.radio(
        "Select Page",
        ["Pricing", "Comparison", "Explorer", "Token Calculator", "Hardware Calculator"]
    )

    catalog_status_sidebar(catalog)

    if page == "Pricing":
        model_pricing_page(catalog)
    elif page == "Comparison":
        model_comparison_page(catalog)
    elif page == "Explorer":
        model_explorer_page(catalog)
    elif page == "Token Calculator":
        token_calculator_page(catalog)
    elif page == "Hardware Calculator":
        hardware_calculator_page(catalog)
    else:
        st.error("Invalid page selection.")


if __name__ == "__main__":
    main()
