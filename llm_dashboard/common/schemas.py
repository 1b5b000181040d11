"""
Data shapes used by the catalog engine.

Raw listing payloads are validated once, at ingestion, into ``CatalogEntry``
pydantic models. Everything downstream works on the typed entries or on the
two normalized record dataclasses.
"""

from dataclasses import dataclass
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator


def _default_if_null(model: type[BaseModel], value: Any, info: ValidationInfo) -> Any:
    """Replace an explicit null with the field's declared default."""
    if value is None:
        return model.model_fields[info.field_name].get_default(call_default_factory=True)
    return value


class Architecture(BaseModel):
    """Modality and tokenizer descriptor of a listed model."""
    model_config = ConfigDict(extra="ignore")

    modality: Optional[str] = None
    input_modalities: list[str]
    output_modalities: list[str] = Field(default_factory=list)
    tokenizer: Optional[str] = None
    instruct_type: Optional[str] = None

    @field_validator("output_modalities", mode="before")
    @classmethod
    def null_output_modalities(cls, value: Any, info: ValidationInfo) -> Any:
        return _default_if_null(cls, value, info)


class TopProvider(BaseModel):
    """Limits reported by the provider currently serving the model."""
    model_config = ConfigDict(extra="ignore")

    context_length: Optional[int] = None
    max_completion_tokens: Optional[int] = None
    is_moderated: bool = False

    @field_validator("is_moderated", mode="before")
    @classmethod
    def null_is_moderated(cls, value: Any, info: ValidationInfo) -> Any:
        return _default_if_null(cls, value, info)


class Pricing(BaseModel):
    """Per-token prices, kept as the decimal strings the listing returns."""
    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)

    prompt: str
    completion: str
    image: Optional[str] = None
    request: Optional[str] = None
    input_cache_read: Optional[str] = None
    input_cache_write: Optional[str] = None
    web_search: Optional[str] = None
    internal_reasoning: Optional[str] = None


class CatalogEntry(BaseModel):
    """
    A single model as listed by the upstream catalog.

    Only id, name, description, the prompt/completion prices and the input
    modalities decide admission. Every other field tolerates null and falls
    back to its default.
    """
    model_config = ConfigDict(extra="ignore")

    id: str = Field(min_length=1)
    name: str = Field(min_length=1)
    created: int = 0
    description: str = Field(min_length=1)
    architecture: Architecture
    context_length: int = 0
    top_provider: TopProvider = Field(default_factory=TopProvider)
    pricing: Pricing
    per_request_limits: Optional[dict[str, Any]] = None
    supported_parameters: list[str] = Field(default_factory=list)
    hugging_face_id: Optional[str] = None

    @field_validator(
        "created", "context_length", "top_provider", "supported_parameters", mode="before"
    )
    @classmethod
    def null_to_default(cls, value: Any, info: ValidationInfo) -> Any:
        return _default_if_null(cls, value, info)


class CacheEnvelope(BaseModel):
    """Stored cache slot: the payload plus its write time in epoch milliseconds."""

    payload: list[Any]
    timestamp: int


@dataclass(frozen=True)
class PricingRecord:
    name: str
    provider: str
    input_cost: float  # per 1K tokens
    output_cost: float  # per 1K tokens
    category: str
    context_window: Optional[str] = None
    score: Optional[float] = None
    license: Optional[str] = None


@dataclass(frozen=True)
class ComparisonRecord:
    name: str
    provider: str
    parameters: str
    context_window: int
    input_cost: float  # per 1K tokens
    output_cost: float  # per 1K tokens
    speed: float
    reasoning: float
    coding: float
    creative: float
    multimodal: bool
    languages: int
    category: str
    license: Optional[str] = None


# Fill values for curated records that lack benchmark scores. This is the only
# definition of "default" used by the merge paths.
DEFAULT_PARAMETERS = "Unknown"
DEFAULT_SCORES = {
    "speed": 50,
    "reasoning": 70,
    "coding": 70,
    "creative": 70,
}

# The listing has no benchmark data, so every dynamic comparison record gets this.
UNBENCHMARKED_SCORE = 75


def is_default_comparison(record: ComparisonRecord) -> bool:
    """Return True when a comparison record carries nothing beyond fill values."""
    return record.parameters == DEFAULT_PARAMETERS and all(
        getattr(record, field) == value for field, value in DEFAULT_SCORES.items()
    )


def is_default_pricing(record: PricingRecord) -> bool:
    """Return True when a pricing record has no score, context window or license."""
    return (
        record.score is None
        and record.context_window is None
        and record.license is None
    )
