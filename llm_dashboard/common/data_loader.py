"""Load the curated static model catalog."""

import math
from pathlib import Path
from typing import Any, Optional, Union

import pandas as pd

from llm_dashboard.common.normalizer import format_context_window
from llm_dashboard.common.schemas import (
    ComparisonRecord,
    DEFAULT_PARAMETERS,
    DEFAULT_SCORES,
    PricingRecord,
)
from llm_dashboard.config import DEFAULT_STATIC_CATALOG

NUMERIC_COLUMNS = [
    "input_cost",
    "output_cost",
    "context_window",
    "score",
    "speed",
    "reasoning",
    "coding",
    "creative",
    "languages",
]

DEFAULT_CONTEXT_WINDOW = 4096
DEFAULT_LANGUAGES = 1
DEFAULT_CATEGORY = "efficient"


def load_curated_catalog(path: Union[str, Path] = DEFAULT_STATIC_CATALOG) -> pd.DataFrame:
    """
    Load the curated model CSV.

    Args:
        path: Path to the CSV file

    Returns:
        DataFrame with numeric columns converted
    """
    df = pd.read_csv(path)
    df = df[df["name"].notna() & (df["name"].astype(str).str.strip() != "")]
    return prepare_numeric_columns(df, NUMERIC_COLUMNS)


def prepare_numeric_columns(
    df: pd.DataFrame,
    numeric_columns: list[str]
) -> pd.DataFrame:
    """
    Convert columns to numeric, turning unparsable cells into NaN.

    Args:
        df: Input dataframe
        numeric_columns: List of column names to convert to numeric

    Returns:
        DataFrame with numeric columns converted
    """
    df = df.copy()
    for col in numeric_columns:
        if col in df.columns:
            df[col] = pd.to_numeric(df[col], errors='coerce')
    return df


def _value(row: pd.Series, column: str) -> Optional[Any]:
    """Return the cell value, or None for missing columns and empty cells."""
    value = row.get(column)
    if value is None:
        return None
    if isinstance(value, float) and math.isnan(value):
        return None
    if isinstance(value, str) and not value.strip():
        return None
    return value


def _as_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ("true", "1", "yes")


def pricing_records(df: pd.DataFrame) -> list[PricingRecord]:
    """
    Build pricing records from the curated dataframe.

    Args:
        df: Output of ``load_curated_catalog``

    Returns:
        One PricingRecord per row, in file order
    """
    records = []
    for _, row in df.iterrows():
        context_window = _value(row, "context_window")
        score = _value(row, "score")
        records.append(PricingRecord(
            name=str(row["name"]).strip(),
            provider=_value(row, "provider") or "Unknown Provider",
            input_cost=float(_value(row, "input_cost") or 0),
            output_cost=float(_value(row, "output_cost") or 0),
            category=_value(row, "category") or DEFAULT_CATEGORY,
            context_window=(
                format_context_window(int(context_window))
                if context_window is not None else None
            ),
            score=float(score) if score is not None else None,
            license=_value(row, "license"),
        ))
    return records


def comparison_records(df: pd.DataFrame) -> list[ComparisonRecord]:
    """
    Build comparison records, filling missing scores with the shared defaults.

    Args:
        df: Output of ``load_curated_catalog``

    Returns:
        One ComparisonRecord per row, in file order
    """
    records = []
    for _, row in df.iterrows():
        scores = {}
        for field, default in DEFAULT_SCORES.items():
            score = _value(row, field)
            scores[field] = default if score is None else score
        multimodal = _value(row, "multimodal")
        records.append(ComparisonRecord(
            name=str(row["name"]).strip(),
            provider=_value(row, "provider") or "Unknown Provider",
            parameters=_value(row, "parameters") or DEFAULT_PARAMETERS,
            context_window=int(_value(row, "context_window") or DEFAULT_CONTEXT_WINDOW),
            input_cost=float(_value(row, "input_cost") or 0),
            output_cost=float(_value(row, "output_cost") or 0),
            multimodal=_as_bool(multimodal) if multimodal is not None else False,
            languages=int(_value(row, "languages") or DEFAULT_LANGUAGES),
            category=_value(row, "category") or DEFAULT_CATEGORY,
            license=_value(row, "license"),
            **scores,
        ))
    return records
