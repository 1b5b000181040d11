"""Side-by-side model comparison page implementation."""

import streamlit as st

from llm_dashboard.common import (
    CatalogService,
    COMPARISON_COLUMNS,
    COL_NAME,
    filter_dataframe,
    records_to_dataframe,
)

SCORE_COLUMNS = ["Speed", "Reasoning", "Coding", "Creative"]


def model_comparison_page(catalog: CatalogService):
    """Model comparison page."""
    st.markdown(
        "Compare models by size, context window, price and capability scores."
    )
    st.info(
        "Models loaded from OpenRouter have no benchmark data, so their scores "
        "are placeholders (75). Only curated models carry measured scores."
    )

    df = records_to_dataframe(catalog.comparison_models(), COMPARISON_COLUMNS)
    if df.empty:
        st.warning("No comparison data available")
        return

    selected = st.multiselect(
        "Models to compare",
        options=df[COL_NAME].tolist(),
        default=df[COL_NAME].tolist()[:3],
        key="comparison_models"
    )
    if selected:
        st.bar_chart(df[df[COL_NAME].isin(selected)].set_index(COL_NAME)[SCORE_COLUMNS])

    st.dataframe(
        filter_dataframe(df, key_prefix="comparison"),
        use_container_width=True,
        hide_index=True
    )
