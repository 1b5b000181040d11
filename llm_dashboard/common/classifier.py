"""
Detailed classification and capability projection for catalog entries.

All functions are deterministic over a single ``CatalogEntry``.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Optional

from llm_dashboard.common.normalizer import (
    EFFICIENT_MARKERS,
    FLAGSHIP_MARKERS,
    SPECIALIZED_MARKERS,
    first_match,
    parse_price,
)
from llm_dashboard.common.schemas import CatalogEntry

FLAGSHIP_PROMPT_COST_PER_M = 15.0
EFFICIENT_PROMPT_COST_PER_M = 1.0

CODE_MARKERS = ("code", "coder", "codestral", "programming")
REASONING_MARKERS = ("reasoning", "think", "o1", "o3", "r1")


@dataclass(frozen=True)
class Classification:
    category: str
    tier: str


@dataclass(frozen=True)
class Capabilities:
    modality: str
    tokenizer: str
    instruct_type: Optional[str]
    input_modalities: list[str] = field(default_factory=list)
    output_modalities: list[str] = field(default_factory=list)
    text_input: bool = False
    image_input: bool = False
    file_input: bool = False
    is_multimodal: bool = False
    has_vision: bool = False
    has_code_capabilities: bool = False
    has_reasoning_capabilities: bool = False
    is_moderated: bool = False


@dataclass(frozen=True)
class ModelLimits:
    context_length: int
    max_completion_tokens: Optional[int]
    is_moderated: bool
    per_request_limits: dict[str, Any] = field(default_factory=dict)


def prompt_cost_per_million(entry: CatalogEntry) -> float:
    return parse_price(entry.pricing.prompt) * 1_000_000


def completion_cost_per_million(entry: CatalogEntry) -> float:
    return parse_price(entry.pricing.completion) * 1_000_000


def _text(entry: CatalogEntry) -> str:
    return f"{entry.name} {entry.description}".lower()


def _mentions(*markers: str) -> Callable[[CatalogEntry], bool]:
    return lambda entry: any(marker in _text(entry) for marker in markers)


def _is_free(entry: CatalogEntry) -> bool:
    return prompt_cost_per_million(entry) == 0 and completion_cost_per_million(entry) == 0


TIER_RULES: list[tuple[Callable[[CatalogEntry], bool], Classification]] = [
    (_is_free, Classification("free", "community")),
    (_mentions(*FLAGSHIP_MARKERS, "flagship"), Classification("flagship", "premium")),
    (
        lambda entry: prompt_cost_per_million(entry) > FLAGSHIP_PROMPT_COST_PER_M,
        Classification("flagship", "premium"),
    ),
    (_mentions(*EFFICIENT_MARKERS, "efficient"), Classification("efficient", "budget")),
    (
        lambda entry: prompt_cost_per_million(entry) < EFFICIENT_PROMPT_COST_PER_M,
        Classification("efficient", "budget"),
    ),
    (_mentions(*SPECIALIZED_MARKERS), Classification("specialized", "standard")),
]
DEFAULT_CLASSIFICATION = Classification("standard", "standard")


def classify(entry: CatalogEntry) -> Classification:
    """
    Assign a (category, tier) pair from price and name heuristics.

    Args:
        entry: Catalog entry

    Returns:
        Classification, e.g. ``Classification("free", "community")``
    """
    return first_match(TIER_RULES, entry, DEFAULT_CLASSIFICATION)


def capabilities(entry: CatalogEntry) -> Capabilities:
    architecture = entry.architecture
    inputs = list(architecture.input_modalities)
    image_input = "image" in inputs

    return Capabilities(
        modality=architecture.modality or "text->text",
        tokenizer=architecture.tokenizer or "Unknown",
        instruct_type=architecture.instruct_type,
        input_modalities=inputs,
        output_modalities=list(architecture.output_modalities),
        text_input="text" in inputs,
        image_input=image_input,
        file_input="file" in inputs,
        is_multimodal=len(inputs) > 1 or image_input,
        has_vision=image_input or _mentions("vision")(entry),
        has_code_capabilities=_mentions(*CODE_MARKERS)(entry),
        has_reasoning_capabilities=(
            "reasoning" in entry.supported_parameters
            or "include_reasoning" in entry.supported_parameters
            or _mentions(*REASONING_MARKERS)(entry)
        ),
        is_moderated=entry.top_provider.is_moderated,
    )


def limits(entry: CatalogEntry) -> ModelLimits:
    return ModelLimits(
        context_length=entry.top_provider.context_length or entry.context_length,
        max_completion_tokens=entry.top_provider.max_completion_tokens,
        is_moderated=entry.top_provider.is_moderated,
        per_request_limits=dict(entry.per_request_limits or {}),
    )
