"""
Map catalog entries onto the pricing and comparison record shapes.

Every derivation here is a heuristic over the entry's id, name and description.
The rule tables are ordered: the first matching predicate wins.
"""

import math
from typing import Callable, Optional

from llm_dashboard.common.schemas import (
    CatalogEntry,
    ComparisonRecord,
    PricingRecord,
    UNBENCHMARKED_SCORE,
)

Rule = tuple[Callable[[CatalogEntry], bool], str]

PROVIDER_NAMES = {
    "openai": "OpenAI",
    "anthropic": "Anthropic",
    "google": "Google",
    "meta-llama": "Meta",
    "mistralai": "Mistral",
    "cohere": "Cohere",
    "microsoft": "Microsoft",
    "amazon": "AWS",
    "deepseek": "DeepSeek",
    "xai": "xAI",
    "perplexity": "Perplexity",
    "fireworks": "Fireworks",
    "together": "Together",
    "groq": "Groq",
}

FLAGSHIP_MARKERS = ("gpt-4", "claude-3.5", "claude-3-opus", "gemini-2", "o1")
EFFICIENT_MARKERS = ("mini", "fast", "turbo", "flash", "haiku")
SPECIALIZED_MARKERS = ("code", "vision", "multimodal")

SIZE_TOKENS = ("405b", "70b", "8b", "7b", "3b", "1b")

KNOWN_FAMILY_PARAMETERS = (
    ("gpt-4", "1.76T"),
    ("gpt-3.5", "175B"),
    ("claude-3.5", "~175B"),
    ("claude-3-opus", "~175B"),
    ("claude-3-sonnet", "~100B"),
    ("claude-3-haiku", "~20B"),
    ("gemini-2", "~175B"),
    ("gemini-1.5-pro", "~175B"),
    ("gemini-1.5-flash", "~8B"),
)

CONTEXT_PARAMETER_BUCKETS = (
    (1_000_000, "175B+"),
    (200_000, "70B-175B"),
    (32_000, "7B-70B"),
)


def _name(entry: CatalogEntry) -> str:
    return entry.name.lower()


def _description(entry: CatalogEntry) -> str:
    return entry.description.lower()


def _name_has(*markers: str) -> Callable[[CatalogEntry], bool]:
    return lambda entry: any(marker in _name(entry) for marker in markers)


def _description_has(*markers: str) -> Callable[[CatalogEntry], bool]:
    return lambda entry: any(marker in _description(entry) for marker in markers)


CATEGORY_RULES: list[Rule] = [
    (_name_has(*FLAGSHIP_MARKERS), "flagship"),
    (_description_has("flagship"), "flagship"),
    (_name_has(*EFFICIENT_MARKERS), "efficient"),
    (_description_has("efficient"), "efficient"),
    (_name_has(*SPECIALIZED_MARKERS), "specialized"),
    (_description_has("vision", "code", "multimodal"), "specialized"),
]
DEFAULT_CATEGORY = "efficient"

MULTIMODAL_RULES: list[Callable[[CatalogEntry], bool]] = [
    lambda entry: len(entry.architecture.input_modalities) > 1,
    lambda entry: "image" in entry.architecture.input_modalities,
    _name_has("vision", "multimodal"),
    _description_has("vision", "multimodal"),
]

LANGUAGE_SUPPORT_RULES: list[tuple[Callable[[CatalogEntry], bool], int]] = [
    (_name_has("gpt-4", "claude-3", "gemini"), 100),
    (_name_has("llama", "mistral"), 50),
]
DEFAULT_LANGUAGE_SUPPORT = 20


def first_match(rules: list, entry: CatalogEntry, default):
    """Return the result of the first rule whose predicate accepts ``entry``."""
    for predicate, result in rules:
        if predicate(entry):
            return result
    return default


def extract_provider(model_id: str) -> str:
    """
    Derive a display provider name from a ``provider/model`` identifier.

    Args:
        model_id: Catalog identifier

    Returns:
        Mapped provider name, the title-cased slug if unmapped, or "Unknown"
    """
    if "/" not in model_id:
        return "Unknown"
    slug = model_id.split("/", 1)[0]
    if slug in PROVIDER_NAMES:
        return PROVIDER_NAMES[slug]
    return slug[:1].upper() + slug[1:]


def categorize(entry: CatalogEntry) -> str:
    return first_match(CATEGORY_RULES, entry, DEFAULT_CATEGORY)


def estimate_parameters(entry: CatalogEntry) -> str:
    """
    Guess a parameter count string for a model.

    Size tokens in the name win, then known model families, then a bucket keyed
    on the context length.
    """
    name = _name(entry)
    for token in SIZE_TOKENS:
        if token in name:
            return token.upper()
    for marker, estimate in KNOWN_FAMILY_PARAMETERS:
        if marker in name:
            return estimate
    for threshold, estimate in CONTEXT_PARAMETER_BUCKETS:
        if entry.context_length >= threshold:
            return estimate
    return "Unknown"


def is_multimodal(entry: CatalogEntry) -> bool:
    return any(rule(entry) for rule in MULTIMODAL_RULES)


def estimate_language_support(entry: CatalogEntry) -> int:
    return first_match(LANGUAGE_SUPPORT_RULES, entry, DEFAULT_LANGUAGE_SUPPORT)


def parse_price(value: Optional[str]) -> float:
    """Parse a decimal price string; missing or non-numeric values become 0."""
    if value is None:
        return 0.0
    try:
        price = float(value)
    except (TypeError, ValueError):
        return 0.0
    return price if math.isfinite(price) else 0.0


def per_thousand(value: Optional[str]) -> float:
    """Convert a per-token price string to cost per 1,000 tokens."""
    return parse_price(value) * 1000


def format_context_window(context_length: int) -> str:
    """
    Format a context length for display.

    Args:
        context_length: Context window in tokens

    Returns:
        String such as "1.0M", "128K" or "512"
    """
    if context_length >= 1_000_000:
        return f"{context_length / 1_000_000:.1f}M"
    if context_length >= 1000:
        return f"{context_length / 1000:.0f}K"
    return str(context_length)


def to_pricing(entry: CatalogEntry) -> PricingRecord:
    # The listing carries no quality score or license
    return PricingRecord(
        name=entry.name,
        provider=extract_provider(entry.id),
        input_cost=per_thousand(entry.pricing.prompt),
        output_cost=per_thousand(entry.pricing.completion),
        category=categorize(entry),
        context_window=format_context_window(entry.context_length),
    )


def to_comparison(entry: CatalogEntry) -> ComparisonRecord:
    return ComparisonRecord(
        name=entry.name,
        provider=extract_provider(entry.id),
        parameters=estimate_parameters(entry),
        context_window=entry.context_length,
        input_cost=per_thousand(entry.pricing.prompt),
        output_cost=per_thousand(entry.pricing.completion),
        speed=UNBENCHMARKED_SCORE,
        reasoning=UNBENCHMARKED_SCORE,
        coding=UNBENCHMARKED_SCORE,
        creative=UNBENCHMARKED_SCORE,
        multimodal=is_multimodal(entry),
        languages=estimate_language_support(entry),
        category=categorize(entry),
    )
