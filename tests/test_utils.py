import pandas as pd
import pytest

from conftest import make_entry
from llm_dashboard.common.schemas import PricingRecord
from llm_dashboard.common.utils import (
    COL_CONTEXT,
    COL_NAME,
    PRICING_COLUMNS,
    apply_column_filter,
    column_filter_kind,
    format_price,
    format_pricing,
    format_supported_parameters,
    records_to_dataframe,
)


@pytest.mark.parametrize("value, per_unit, formatted", [
    (None, False, "N/A"),
    ("", False, "N/A"),
    ("0", False, "Free"),
    ("0.0000025", False, "$2.50 / 1M tokens"),
    ("0.003613", True, "$0.0036"),
])
def test_format_price(value, per_unit, formatted):
    assert format_price(value, per_unit=per_unit) == formatted


def test_format_pricing_covers_every_field():
    formatted = format_pricing(make_entry().pricing)

    assert formatted["prompt"] == "$2.50 / 1M tokens"
    assert formatted["completion"] == "$10.00 / 1M tokens"
    assert formatted["image"] == "$0.0036"
    assert formatted["request"] == "Free"
    assert formatted["web_search"] == "N/A"


def test_format_supported_parameters():
    assert format_supported_parameters(["top_p", "max_tokens", "tools"]) == ["Max Tokens", "Tools", "Top P"]


def test_records_to_dataframe():
    records = [
        PricingRecord("GPT-4", "OpenAI", 0.03, 0.06, "flagship", "8K"),
        PricingRecord("Gemini Pro", "Google", 0.0005, 0.0015, "efficient"),
    ]

    df = records_to_dataframe(records, PRICING_COLUMNS)

    assert list(df.columns) == list(PRICING_COLUMNS.values())
    assert df[COL_NAME].tolist() == ["GPT-4", "Gemini Pro"]
    assert df[COL_CONTEXT].tolist()[0] == "8K"


@pytest.fixture
def models_df():
    return pd.DataFrame({
        "Model": [f"Model {i} (free)" if i % 5 == 0 else f"Model {i}" for i in range(30)],
        "Provider": ["OpenAI", "Meta", "Google"] * 10,
        "Input Cost": [i / 1000 for i in range(30)],
        "Multimodal": [i % 2 == 0 for i in range(30)],
    })


def test_column_filter_kind(models_df):
    assert column_filter_kind(models_df["Provider"]) == "values"
    assert column_filter_kind(models_df["Multimodal"]) == "values"
    assert column_filter_kind(models_df["Input Cost"]) == "range"
    assert column_filter_kind(models_df["Model"]) == "text"


def test_value_filter(models_df):
    filtered = apply_column_filter(models_df, "Provider", "values", ["Meta"])

    assert set(filtered["Provider"]) == {"Meta"}
    assert len(filtered) == 10


def test_range_filter_is_inclusive(models_df):
    filtered = apply_column_filter(models_df, "Input Cost", "range", (0.005, 0.009))

    assert len(filtered) == 5


def test_text_filter_matches_literally(models_df):
    filtered = apply_column_filter(models_df, "Model", "text", "(FREE)")

    assert len(filtered) == 6


def test_empty_text_filter_keeps_everything(models_df):
    assert apply_column_filter(models_df, "Model", "text", "") is models_df
