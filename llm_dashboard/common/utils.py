from dataclasses import asdict
from typing import Any, Iterable, Literal, Optional

import pandas as pd
import streamlit as st
from pandas.api.types import is_bool_dtype, is_numeric_dtype

from llm_dashboard.common.normalizer import parse_price
from llm_dashboard.common.schemas import Pricing

FilterKind = Literal["values", "range", "text"]

# Column name constants - centralized to avoid duplication
COL_NAME = "Model"
COL_PROVIDER = "Provider"
COL_CATEGORY = "Category"
COL_INPUT_COST = "Input Cost ($/1K tokens)"
COL_OUTPUT_COST = "Output Cost ($/1K tokens)"
COL_CONTEXT = "Context Window"

# Record field -> display column
PRICING_COLUMNS = {
    "name": COL_NAME,
    "provider": COL_PROVIDER,
    "input_cost": COL_INPUT_COST,
    "output_cost": COL_OUTPUT_COST,
    "category": COL_CATEGORY,
    "context_window": COL_CONTEXT,
    "score": "Score",
    "license": "License",
}

COMPARISON_COLUMNS = {
    "name": COL_NAME,
    "provider": COL_PROVIDER,
    "parameters": "Parameters",
    "context_window": COL_CONTEXT,
    "input_cost": COL_INPUT_COST,
    "output_cost": COL_OUTPUT_COST,
    "speed": "Speed",
    "reasoning": "Reasoning",
    "coding": "Coding",
    "creative": "Creative",
    "multimodal": "Multimodal",
    "languages": "Languages",
    "category": COL_CATEGORY,
    "license": "License",
}

PRICING_FIELD_LABELS = {
    "prompt": "Prompt",
    "completion": "Completion",
    "image": "Image",
    "request": "Request",
    "web_search": "Web Search",
    "internal_reasoning": "Internal Reasoning",
    "input_cache_read": "Input Cache Read",
    "input_cache_write": "Input Cache Write",
}

# Prices that are charged per unit rather than per token
_PER_UNIT_PRICES = {"image", "request", "web_search"}


def records_to_dataframe(records: Iterable, columns: dict[str, str]) -> pd.DataFrame:
    """
    Convert record dataclasses into a display dataframe.

    Args:
        records: PricingRecord or ComparisonRecord instances
        columns: Mapping of record field to display column name

    Returns:
        DataFrame with the display columns in mapping order
    """
    rows = [asdict(record) for record in records]
    df = pd.DataFrame(rows, columns=list(columns))
    return df.rename(columns=columns)


def format_price(value: Optional[str], per_unit: bool = False) -> str:
    """
    Format a per-token (or per-unit) price string for display.

    Args:
        value: Decimal price string from the listing
        per_unit: Show the raw unit price instead of a per-1M-token price

    Returns:
        Formatted price, "Free" for zero, or "N/A" when missing
    """
    if value is None or value == "":
        return "N/A"
    price = parse_price(value)
    if price == 0:
        return "Free"
    if per_unit:
        return f"${price:.4f}"
    return f"${price * 1_000_000:.2f} / 1M tokens"


def format_pricing(pricing: Pricing) -> dict[str, str]:
    """Format every known price of a listing entry, keyed by field name."""
    return {
        field: format_price(getattr(pricing, field), per_unit=field in _PER_UNIT_PRICES)
        for field in PRICING_FIELD_LABELS
    }


def format_supported_parameters(parameters: Iterable[str]) -> list[str]:
    """Turn ``snake_case`` request parameters into sorted title-cased labels."""
    return sorted(param.replace("_", " ").title() for param in parameters)


def column_filter_kind(series: pd.Series, max_categories: int = 20) -> FilterKind:
    """
    Pick the filter widget for a table column.

    Booleans, categoricals and low-cardinality columns filter by value, other
    numeric columns by range, everything else by substring.
    """
    if (
        isinstance(series.dtype, pd.CategoricalDtype)
        or is_bool_dtype(series)
        or series.nunique() < max_categories
    ):
        return "values"
    if is_numeric_dtype(series):
        return "range"
    return "text"


def apply_column_filter(
    df: pd.DataFrame,
    column: str,
    kind: FilterKind,
    selection: Any
) -> pd.DataFrame:
    """
    Keep the rows of ``df`` that match one column filter.

    Args:
        df: Table to filter
        column: Column the filter applies to
        kind: Result of ``column_filter_kind``
        selection: Chosen values, a (low, high) range, or a search string

    Returns:
        Filtered dataframe
    """
    if kind == "values":
        return df[df[column].isin(selection)]
    if kind == "range":
        low, high = selection
        return df[df[column].between(low, high)]
    if not selection:
        return df
    # Model names contain brackets and dots, so match literally
    return df[df[column].astype(str).str.contains(selection, case=False, regex=False)]


def _filter_widget(container, df: pd.DataFrame, column: str, kind: FilterKind, key_prefix: str):
    key = f"{key_prefix}_{kind}_{column}"
    if kind == "values":
        options = list(df[column].unique())
        return container.multiselect(f"Values for {column}", options, default=options, key=key)
    if kind == "range":
        low, high = float(df[column].min()), float(df[column].max())
        return container.slider(
            f"Range for {column}",
            min_value=low,
            max_value=high,
            value=(low, high),
            step=(high - low) / 100 if high != low else 1.0,
            key=key
        )
    return container.text_input(f"Text in {column}", key=key)


def filter_dataframe(df: pd.DataFrame, key_prefix: str = "") -> pd.DataFrame:
    """
    Let the viewer narrow a catalog table column by column.

    Args:
        df: Table shown on the page
        key_prefix: Widget key prefix, unique per table on a page

    Returns:
        The filtered table (``df`` itself when filtering is off)
    """
    if not st.checkbox("Add filters", key=f"{key_prefix}_add_filters"):
        return df

    columns = st.multiselect("Filter on", list(df.columns), key=f"{key_prefix}_filter_columns")
    for column in columns:
        kind = column_filter_kind(df[column])
        _, right = st.columns((1, 20))
        selection = _filter_widget(right, df, column, kind, key_prefix)
        df = apply_column_filter(df, column, kind, selection)
    return df
