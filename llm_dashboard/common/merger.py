"""Combine the curated static catalog with the normalized dynamic catalog."""

from typing import Callable, Iterable, TypeVar

from llm_dashboard.common.schemas import (
    ComparisonRecord,
    PricingRecord,
    is_default_comparison,
    is_default_pricing,
)

T = TypeVar("T", PricingRecord, ComparisonRecord)


def merge(
    static_records: Iterable[T],
    dynamic_records: Iterable[T],
    is_default: Callable[[T], bool],
) -> list[T]:
    """
    Deduplicate static-then-dynamic records by exact name.

    The first record for a name keeps its position. A later record with the
    same name replaces it in place only when the kept one is default-filled and
    the newcomer is not, so curated data wins whenever it has real values.

    Args:
        static_records: Curated records, considered first
        dynamic_records: Records normalized from the listing
        is_default: Returns True for records carrying only fill values

    Returns:
        New list in first-occurrence order
    """
    merged: list[T] = []
    index_by_name: dict[str, int] = {}

    for records in (static_records, dynamic_records):
        for record in records:
            index = index_by_name.get(record.name)
            if index is None:
                index_by_name[record.name] = len(merged)
                merged.append(record)
            elif is_default(merged[index]) and not is_default(record):
                merged[index] = record

    return merged


def merge_pricing(
    static_records: Iterable[PricingRecord],
    dynamic_records: Iterable[PricingRecord],
) -> list[PricingRecord]:
    return merge(static_records, dynamic_records, is_default_pricing)


def merge_comparison(
    static_records: Iterable[ComparisonRecord],
    dynamic_records: Iterable[ComparisonRecord],
) -> list[ComparisonRecord]:
    return merge(static_records, dynamic_records, is_default_comparison)
