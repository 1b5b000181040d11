import logging

import pytest

from llm_dashboard.common.schemas import ComparisonRecord
from llm_dashboard.common.token_estimator import (
    DEFAULT_TOKENIZER_PROFILES,
    MultimodalQuantities,
    TokenizerProfile,
    count_paragraphs,
    count_sentences,
    count_words,
    estimate,
    heuristic_text_tokens,
    image_tokens,
    profile_from_record,
    text_tokens,
)

GENERIC = TokenizerProfile(name="Generic", provider="Generic")
OPENAI = TokenizerProfile(name="GPT", provider="OpenAI", context_window=4000)
TEN_WORDS = "one two three four five six seven eight nine ten"
NO_EXACT = {}


def fixed_count(count):
    return {"OpenAI": lambda text: count}


def broken_encoder(text):
    raise RuntimeError("encoding unavailable")


def record(provider, multimodal=True, **kwargs):
    fields = dict(
        name=f"{provider} model",
        provider=provider,
        parameters="Unknown",
        context_window=128000,
        input_cost=0.01,
        output_cost=0.03,
        speed=75,
        reasoning=75,
        coding=75,
        creative=75,
        multimodal=multimodal,
        languages=100,
        category="flagship",
    )
    fields.update(kwargs)
    return ComparisonRecord(**fields)


def test_hello_world_heuristic():
    assert text_tokens("Hello world", GENERIC, NO_EXACT) == 3


def test_empty_text_is_zero_tokens():
    result = estimate("", GENERIC, encoders=NO_EXACT)

    assert result.total_tokens == 0
    assert result.words == 0
    assert result.tokens_per_word == 0.0
    assert result.context_usage_percent == 0.0


def test_text_statistics():
    text = "Hello, world! How are you?\n\nFine."

    assert count_words(text) == 6
    assert count_sentences(text) == 3
    assert count_paragraphs(text) == 2


@pytest.mark.parametrize("provider, tokens", [
    ("Meta", 97),
    ("Generic", 114),
    ("Anthropic", 120),
])
def test_provider_multiplier(provider, tokens):
    profile = TokenizerProfile(name=provider, provider=provider)
    text = " ".join(["hi"] * 100)

    assert text_tokens(text, profile, NO_EXACT) == tokens


def test_character_estimate_is_a_floor():
    assert heuristic_text_tokens(characters=40, words=1, profile=GENERIC) == 10


def test_exact_encoder_is_used_when_available():
    assert text_tokens(TEN_WORDS, OPENAI, fixed_count(42)) == 42


def test_exact_encoder_only_applies_to_its_provider():
    assert text_tokens("Hello world", GENERIC, fixed_count(42)) == 3


def test_encoder_failure_falls_back_to_estimate(caplog):
    with caplog.at_level(logging.WARNING):
        tokens = text_tokens(TEN_WORDS, OPENAI, {"OpenAI": broken_encoder})

    assert tokens == 13
    assert "Exact tokenizer failed for OpenAI" in caplog.text


def test_formula_image_tokens():
    profile = TokenizerProfile(name="Claude", provider="Anthropic", image_tokenization_mode="formula")
    media = MultimodalQuantities(image_count=2, image_width=1000, image_height=1000)

    assert image_tokens(media, profile) == 2668


def test_formula_without_dimensions_is_zero():
    profile = TokenizerProfile(name="Claude", provider="Anthropic", image_tokenization_mode="formula")

    assert image_tokens(MultimodalQuantities(image_count=2), profile) == 0


def test_fixed_image_tokens():
    profile = TokenizerProfile(
        name="GPT",
        provider="OpenAI",
        image_tokenization_mode="fixed",
        image_tokens={"small": 85, "large": 765},
    )

    assert image_tokens(MultimodalQuantities(image_count=3), profile) == 255
    assert image_tokens(MultimodalQuantities(image_count=1, image_size="large"), profile) == 765


def test_images_ignored_without_image_mode():
    assert image_tokens(MultimodalQuantities(image_count=4), GENERIC) == 0


def test_video_and_audio_round_up():
    profile = profile_from_record(record("Google"))
    media = MultimodalQuantities(video_seconds=10, audio_seconds=1.1)

    result = estimate("", profile, media, encoders=NO_EXACT)

    assert result.token_breakdown.video == 2630
    assert result.token_breakdown.audio == 36
    assert result.total_tokens == 2666


def test_total_is_sum_of_breakdown():
    profile = profile_from_record(record("OpenAI"))
    media = MultimodalQuantities(image_count=2, video_seconds=5)

    result = estimate(TEN_WORDS, profile, media, encoders=fixed_count(12))

    assert result.token_breakdown.text == 12
    assert result.token_breakdown.image == 170
    assert result.token_breakdown.video == 0
    assert result.total_tokens == 182


def test_context_usage_percent():
    result = estimate(TEN_WORDS, OPENAI, encoders=fixed_count(1000))

    assert result.context_usage_percent == 25.0


def test_cost_uses_expected_output_words():
    profile = TokenizerProfile(
        name="GPT",
        provider="OpenAI",
        input_cost_per_1k=0.01,
        output_cost_per_1k=0.03,
    )

    result = estimate(TEN_WORDS, profile, expected_output_words=100, encoders=fixed_count(1000))

    assert result.estimated_cost == pytest.approx(0.0139)


def test_cost_is_zero_without_prices():
    result = estimate(TEN_WORDS, OPENAI, expected_output_words=100, encoders=fixed_count(1000))

    assert result.estimated_cost == 0.0


def test_estimate_is_deterministic():
    text = "The quick brown fox jumps over the lazy dog.\n\nTwice."
    media = MultimodalQuantities(image_count=1, image_width=640, image_height=480)
    profile = profile_from_record(record("Anthropic"))

    assert estimate(text, profile, media, encoders=NO_EXACT) == estimate(text, profile, media, encoders=NO_EXACT)


def test_profile_from_multimodal_record():
    profile = profile_from_record(record("Google", license="Proprietary"))

    assert profile.avg_tokens_per_word == 1.2
    assert profile.image_tokenization_mode == "fixed"
    assert profile.image_tokens == {"small": 258, "large": 258}
    assert profile.video_tokens_per_second == 263
    assert profile.context_window == 128000
    assert profile.input_cost_per_1k == 0.01
    assert profile.license == "Proprietary"


def test_profile_from_text_only_record_has_no_media():
    profile = profile_from_record(record("Google", multimodal=False))
    media = MultimodalQuantities(image_count=3, video_seconds=10)

    assert profile.image_tokenization_mode == "none"
    assert estimate("", profile, media, encoders=NO_EXACT).total_tokens == 0


def test_profile_from_unknown_provider_uses_generic_defaults():
    profile = profile_from_record(record("Nousresearch", context_window=0))

    assert profile.avg_tokens_per_word == 1.3
    assert profile.context_window == 4096
    assert profile.image_tokenization_mode is None


def test_builtin_profiles_cover_major_providers():
    providers = {profile.provider for profile in DEFAULT_TOKENIZER_PROFILES}

    assert {"OpenAI", "Anthropic", "Google", "Cohere"} <= providers
