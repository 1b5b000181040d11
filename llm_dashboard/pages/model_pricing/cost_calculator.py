"""Cost calculation utilities for per-request API pricing."""

from typing import Iterable

from llm_dashboard.common.schemas import PricingRecord


def calculate_request_cost(
    record: PricingRecord,
    input_tokens: int,
    output_tokens: int,
    num_requests: int = 1
) -> float:
    """
    Calculate the cost of a number of identical requests against one model.

    Args:
        record: Pricing record (costs per 1K tokens)
        input_tokens: Input tokens per request
        output_tokens: Output tokens per request
        num_requests: Number of requests

    Returns:
        Total cost in dollars
    """
    input_cost = (input_tokens * num_requests / 1000) * record.input_cost
    output_cost = (output_tokens * num_requests / 1000) * record.output_cost
    return input_cost + output_cost


def calculate_paid_api_costs(
    records: Iterable[PricingRecord],
    num_requests: int,
    input_tokens: int,
    output_tokens: int
) -> list[dict]:
    """
    Calculate costs for every model in a pricing catalog.

    Args:
        records: Pricing records
        num_requests: Number of requests
        input_tokens: Input tokens per request
        output_tokens: Output tokens per request

    Returns:
        List of result dictionaries, cheapest first
    """
    results = []

    for record in records:
        total_cost = calculate_request_cost(record, input_tokens, output_tokens, num_requests)
        results.append({
            "Provider": record.provider,
            "Model": record.name,
            "Total Cost ($)": total_cost,
            "Cost per Request ($)": total_cost / num_requests if num_requests else 0.0,
            "Score": record.score if record.score is not None else "N/A",
            "Category": record.category,
        })

    return sorted(results, key=lambda row: row["Total Cost ($)"])
