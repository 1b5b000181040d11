"""
Token and cost estimation for text and multimodal inputs.

OpenAI text is counted exactly with ``tiktoken`` when the encoding can be
loaded. Every other provider (and any encoder failure) goes through a blended
word/character heuristic tuned per provider.
"""

import logging
import math
import re
from dataclasses import dataclass
from functools import lru_cache
from typing import Callable, Literal, Optional

import tiktoken

from llm_dashboard.common.schemas import ComparisonRecord
from llm_dashboard.errors import EncoderFailure

logger = logging.getLogger(__name__)

ImageMode = Literal["fixed", "formula", "none"]
ImageSize = Literal["small", "large"]
Encoder = Callable[[str], int]

IMAGE_FORMULA_PIXELS_PER_TOKEN = 750
EXACT_FALLBACK_FACTOR = 0.95
WORD_WEIGHT = 0.7
CHAR_WEIGHT = 0.3

# Correction applied to the blended heuristic
PROVIDER_MULTIPLIERS = {
    "Google": 0.9,
    "Meta": 0.85,
    "Anthropic": 1.05,
}


@dataclass(frozen=True)
class TokenizerProfile:
    name: str
    provider: str
    avg_tokens_per_word: float = 1.3
    avg_chars_per_token: float = 4.0
    description: str = ""
    context_window: int = 4096
    output_limit: int = 4096
    image_tokens: Optional[dict[str, int]] = None  # keyed by "small" / "large"
    image_tokenization_mode: Optional[ImageMode] = None
    video_tokens_per_second: Optional[float] = None
    audio_tokens_per_second: Optional[float] = None
    tokenizer_type: str = "BPE"
    input_cost_per_1k: Optional[float] = None
    output_cost_per_1k: Optional[float] = None
    license: Optional[str] = None

    @property
    def has_cost(self) -> bool:
        return self.input_cost_per_1k is not None and self.output_cost_per_1k is not None


@dataclass(frozen=True)
class MultimodalQuantities:
    image_count: int = 0
    image_width: int = 0
    image_height: int = 0
    image_size: ImageSize = "small"
    video_seconds: float = 0
    audio_seconds: float = 0


@dataclass(frozen=True)
class TokenBreakdown:
    text: int = 0
    image: int = 0
    video: int = 0
    audio: int = 0

    @property
    def total(self) -> int:
        return self.text + self.image + self.video + self.audio


@dataclass(frozen=True)
class TokenEstimate:
    characters: int
    words: int
    sentences: int
    paragraphs: int
    token_breakdown: TokenBreakdown
    total_tokens: int
    context_usage_percent: float
    estimated_cost: float

    @property
    def tokens_per_word(self) -> float:
        if self.words == 0:
            return 0.0
        return round(self.token_breakdown.text / self.words, 2)


DEFAULT_TOKENIZER_PROFILES = [
    TokenizerProfile(
        name="GPT-4/GPT-3.5",
        provider="OpenAI",
        avg_tokens_per_word=1.3,
        description="OpenAI tiktoken encoder",
        context_window=128_000,
        tokenizer_type="tiktoken",
    ),
    TokenizerProfile(
        name="Claude",
        provider="Anthropic",
        avg_tokens_per_word=1.25,
        description="Anthropic tokenizer",
        context_window=200_000,
    ),
    TokenizerProfile(
        name="Gemini",
        provider="Google",
        avg_tokens_per_word=1.2,
        description="Google SentencePiece",
        context_window=1_000_000,
        tokenizer_type="SentencePiece",
    ),
    TokenizerProfile(
        name="Command",
        provider="Cohere",
        avg_tokens_per_word=1.35,
        description="Cohere tokenizer",
        context_window=128_000,
    ),
]

# Per-provider settings used when deriving a profile from a catalog record
_PROVIDER_PROFILE_DEFAULTS = {
    "OpenAI": {
        "avg_tokens_per_word": 1.3,
        "tokenizer_type": "tiktoken",
        "image_tokenization_mode": "fixed",
        "image_tokens": {"small": 85, "large": 765},
    },
    "Anthropic": {
        "avg_tokens_per_word": 1.25,
        "image_tokenization_mode": "formula",
    },
    "Google": {
        "avg_tokens_per_word": 1.2,
        "tokenizer_type": "SentencePiece",
        "image_tokenization_mode": "fixed",
        "image_tokens": {"small": 258, "large": 258},
        "video_tokens_per_second": 263,
        "audio_tokens_per_second": 32,
    },
    "Cohere": {"avg_tokens_per_word": 1.35},
}

_MEDIA_FIELDS = (
    "image_tokenization_mode",
    "image_tokens",
    "video_tokens_per_second",
    "audio_tokens_per_second",
)


def profile_from_record(record: ComparisonRecord) -> TokenizerProfile:
    """
    Derive a tokenizer profile from a normalized comparison record.

    Args:
        record: Normalized model record

    Returns:
        Profile using the provider's family defaults and the record's costs
    """
    defaults = dict(_PROVIDER_PROFILE_DEFAULTS.get(record.provider, {}))
    if not record.multimodal:
        for media_field in _MEDIA_FIELDS:
            defaults.pop(media_field, None)
        defaults["image_tokenization_mode"] = "none"

    return TokenizerProfile(
        name=record.name,
        provider=record.provider,
        description=record.name,
        context_window=record.context_window or 4096,
        input_cost_per_1k=record.input_cost,
        output_cost_per_1k=record.output_cost,
        license=record.license,
        **defaults,
    )


@lru_cache(maxsize=1)
def _openai_encoding() -> tiktoken.Encoding:
    return tiktoken.get_encoding("cl100k_base")


def _tiktoken_count(text: str) -> int:
    return len(_openai_encoding().encode(text, disallowed_special=()))


EXACT_ENCODERS: dict[str, Encoder] = {
    "OpenAI": _tiktoken_count,
}


def count_words(text: str) -> int:
    return len([word for word in re.split(r"\W+", text) if word])


def count_sentences(text: str) -> int:
    return len([s for s in re.split(r"[.!?]+", text) if s.strip()])


def count_paragraphs(text: str) -> int:
    return len([p for p in re.split(r"\n\s*\n", text) if p.strip()])


def heuristic_text_tokens(characters: int, words: int, profile: TokenizerProfile) -> int:
    """
    Blend word- and character-based estimates, floored by the character estimate.

    Args:
        characters: Character count
        words: Word count
        profile: Tokenizer profile

    Returns:
        Estimated token count
    """
    multiplier = PROVIDER_MULTIPLIERS.get(profile.provider, 1.0)
    chars_per_token = profile.avg_chars_per_token or 4.0
    char_estimate = characters / chars_per_token

    blended = math.ceil(
        (words * profile.avg_tokens_per_word * WORD_WEIGHT + char_estimate * CHAR_WEIGHT)
        * multiplier
    )
    return max(blended, math.ceil(char_estimate))


def _exact_text_tokens(text: str, encoder: Encoder) -> int:
    try:
        return int(encoder(text))
    except Exception as e:
        raise EncoderFailure(str(e)) from e


def text_tokens(
    text: str,
    profile: TokenizerProfile,
    encoders: Optional[dict[str, Encoder]] = None,
) -> int:
    """
    Count tokens for ``text`` using the exact encoder when one exists.

    Args:
        text: Raw input text
        profile: Tokenizer profile of the target model
        encoders: Provider name to exact counter (defaults to ``EXACT_ENCODERS``)

    Returns:
        Token count
    """
    if not text:
        return 0

    encoders = EXACT_ENCODERS if encoders is None else encoders
    words = count_words(text)
    encoder = encoders.get(profile.provider)

    if encoder is None:
        return heuristic_text_tokens(len(text), words, profile)

    try:
        return _exact_text_tokens(text, encoder)
    except EncoderFailure as e:
        logger.warning(f"Exact tokenizer failed for {profile.provider}, using estimate: {e}")
        return math.ceil(words * profile.avg_tokens_per_word * EXACT_FALLBACK_FACTOR)


def image_tokens(media: MultimodalQuantities, profile: TokenizerProfile) -> int:
    if media.image_count <= 0:
        return 0

    mode = profile.image_tokenization_mode
    if mode == "formula":
        if media.image_width <= 0 or media.image_height <= 0:
            return 0
        per_image = math.ceil(
            media.image_width * media.image_height / IMAGE_FORMULA_PIXELS_PER_TOKEN
        )
        return per_image * media.image_count
    if mode == "fixed" and profile.image_tokens:
        return profile.image_tokens.get(media.image_size, 0) * media.image_count
    return 0


def _rate_tokens(seconds: float, tokens_per_second: Optional[float]) -> int:
    if not tokens_per_second or seconds <= 0:
        return 0
    return math.ceil(seconds * tokens_per_second)


def estimate(
    text: str,
    profile: TokenizerProfile,
    media: Optional[MultimodalQuantities] = None,
    expected_output_words: int = 0,
    encoders: Optional[dict[str, Encoder]] = None,
) -> TokenEstimate:
    """
    Estimate token usage and cost for a prompt.

    Args:
        text: Prompt text
        profile: Tokenizer profile of the target model
        media: Image/video/audio quantities sent with the prompt
        expected_output_words: Expected length of the response, in words
        encoders: Exact token counters by provider (defaults to ``EXACT_ENCODERS``)

    Returns:
        TokenEstimate with text statistics, token breakdown, context usage and cost
    """
    media = media or MultimodalQuantities()

    breakdown = TokenBreakdown(
        text=text_tokens(text, profile, encoders),
        image=image_tokens(media, profile),
        video=_rate_tokens(media.video_seconds, profile.video_tokens_per_second),
        audio=_rate_tokens(media.audio_seconds, profile.audio_tokens_per_second),
    )
    total = breakdown.total

    context_usage = 0.0
    if profile.context_window > 0:
        context_usage = round(100 * total / profile.context_window, 1)

    cost = 0.0
    if profile.has_cost:
        output_tokens = math.ceil(expected_output_words * profile.avg_tokens_per_word)
        cost = (total / 1000) * profile.input_cost_per_1k + (
            output_tokens / 1000
        ) * profile.output_cost_per_1k

    return TokenEstimate(
        characters=len(text),
        words=count_words(text),
        sentences=count_sentences(text),
        paragraphs=count_paragraphs(text),
        token_breakdown=breakdown,
        total_tokens=total,
        context_usage_percent=context_usage,
        estimated_cost=cost,
    )
