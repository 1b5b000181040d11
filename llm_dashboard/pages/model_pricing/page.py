"""Per-request pricing comparison page implementation."""

import pandas as pd
import streamlit as st

from llm_dashboard.common import (
    CatalogService,
    PRICING_COLUMNS,
    COL_INPUT_COST,
    COL_OUTPUT_COST,
    filter_dataframe,
    records_to_dataframe,
)
from llm_dashboard.pages.model_pricing.cost_calculator import calculate_paid_api_costs


def model_pricing_page(catalog: CatalogService):
    """Per-request pricing comparison page."""
    st.markdown(
        "Compare the cost of running a specific number of requests across "
        "**curated** and **live OpenRouter** model prices."
    )

    stats = catalog.stats("pricing")
    st.caption(
        f"{stats.total_count} models ({stats.static_count} curated, "
        f"{stats.dynamic_count} from OpenRouter)"
    )

    # Sidebar inputs
    st.sidebar.header("Per-Request Configuration")
    num_requests = st.sidebar.number_input(
        "Number of Requests",
        min_value=1, value=1000, step=100,
        key="per_request_num"
    )
    input_tokens = st.sidebar.number_input(
        "Input Tokens Per Request",
        min_value=1, value=1000, step=100,
        key="per_request_input_tokens"
    )
    output_tokens = st.sidebar.number_input(
        "Output Tokens Per Request",
        min_value=1, value=500, step=100,
        key="per_request_output_tokens"
    )

    records = catalog.pricing_models()
    if not records:
        st.warning("No pricing data available")
        return

    results = calculate_paid_api_costs(records, num_requests, input_tokens, output_tokens)

    st.subheader("💳 API Cost Comparison")
    results_df = filter_dataframe(pd.DataFrame(results), key_prefix="paid_api")
    st.dataframe(
        results_df.style.format({
            "Total Cost ($)": "${:,.4f}",
            "Cost per Request ($)": "${:,.6f}",
        }).highlight_min(subset=["Total Cost ($)"], color='lightgreen'),
        use_container_width=True,
        hide_index=True
    )

    st.divider()

    st.subheader("📋 Price List")
    prices_df = filter_dataframe(
        records_to_dataframe(records, PRICING_COLUMNS), key_prefix="price_list"
    )
    st.dataframe(
        prices_df.style.format({COL_INPUT_COST: "${:.6f}", COL_OUTPUT_COST: "${:.6f}"}),
        use_container_width=True,
        hide_index=True
    )
