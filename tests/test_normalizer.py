import pytest

from conftest import make_entry
from llm_dashboard.common.normalizer import (
    categorize,
    estimate_language_support,
    estimate_parameters,
    extract_provider,
    format_context_window,
    is_multimodal,
    parse_price,
    to_comparison,
    to_pricing,
)
from llm_dashboard.common.schemas import UNBENCHMARKED_SCORE


@pytest.mark.parametrize("model_id, provider", [
    ("openai/gpt-4o", "OpenAI"),
    ("meta-llama/llama-3.1-70b-instruct", "Meta"),
    ("mistralai/mistral-large", "Mistral"),
    ("amazon/nova-pro-v1", "AWS"),
    ("nousresearch/hermes-3", "Nousresearch"),
    ("gpt-4o", "Unknown"),
])
def test_extract_provider(model_id, provider):
    assert extract_provider(model_id) == provider


def test_pricing_costs_are_per_thousand_tokens():
    entry = make_entry(pricing={"prompt": "0.000003", "completion": "0.000015"})

    record = to_pricing(entry)

    assert record.input_cost == float("0.000003") * 1000
    assert record.output_cost == float("0.000015") * 1000
    assert record.input_cost == pytest.approx(0.003)


@pytest.mark.parametrize("value", [None, "", "abc", "NaN", "inf"])
def test_unparsable_price_normalizes_to_zero(value):
    assert parse_price(value) == 0.0


def test_pricing_record_fields():
    record = to_pricing(make_entry())

    assert record.name == "OpenAI: GPT-4o"
    assert record.provider == "OpenAI"
    assert record.category == "flagship"
    assert record.context_window == "128K"
    assert record.score is None
    assert record.license is None


@pytest.mark.parametrize("name, description, category", [
    ("OpenAI: GPT-4 Turbo", "A general purpose model.", "flagship"),
    ("OpenAI: o1-preview", "A general purpose model.", "flagship"),
    ("Some Model", "Our flagship offering.", "flagship"),
    ("OpenAI: GPT-4o-mini", "A general purpose model.", "flagship"),
    ("Google: Gemini 1.5 Flash", "A general purpose model.", "efficient"),
    ("Some Model", "An efficient small model.", "efficient"),
    ("Qwen 2.5 Coder 32B", "A general purpose model.", "specialized"),
    ("Some Model", "Strong at vision tasks.", "specialized"),
    ("Some Model", "A general purpose model.", "efficient"),
])
def test_categorize_precedence(name, description, category):
    assert categorize(make_entry(name=name, description=description)) == category


@pytest.mark.parametrize("name, context_length, parameters", [
    ("Meta: Llama 3.1 405B Instruct", 131072, "405B"),
    ("Meta: Llama 3.1 70B Instruct", 131072, "70B"),
    ("Meta: Llama 3.1 8B Instruct", 131072, "8B"),
    ("Mistral 7B Instruct", 32768, "7B"),
    ("Llama 3.2 3B", 131072, "3B"),
    ("Llama 3.2 1B", 131072, "1B"),
    ("OpenAI: GPT-4 Turbo", 128000, "1.76T"),
    ("OpenAI: GPT-3.5 Turbo", 16385, "175B"),
    ("Anthropic: claude-3-haiku", 200000, "~20B"),
    ("Google: gemini-1.5-flash", 1000000, "~8B"),
    ("Some Model", 1_000_000, "175B+"),
    ("Some Model", 200_000, "70B-175B"),
    ("Some Model", 32_000, "7B-70B"),
    ("Some Model", 8_000, "Unknown"),
])
def test_estimate_parameters(name, context_length, parameters):
    assert estimate_parameters(make_entry(name=name, context_length=context_length)) == parameters


def test_multimodal_from_modalities():
    assert is_multimodal(make_entry(architecture={"input_modalities": ["text", "image"]}))
    assert is_multimodal(make_entry(architecture={"input_modalities": ["image"]}))
    assert is_multimodal(make_entry(architecture={"input_modalities": ["text", "file"]}))


def test_multimodal_from_text_mentions():
    text_only = {"input_modalities": ["text"]}

    assert is_multimodal(make_entry(architecture=text_only, name="Llama Vision"))
    assert is_multimodal(make_entry(architecture=text_only, description="A multimodal model."))
    assert not is_multimodal(make_entry(architecture=text_only, name="Plain"))


@pytest.mark.parametrize("name, languages", [
    ("OpenAI: GPT-4o", 100),
    ("Anthropic: Claude-3 Opus", 100),
    ("Google: Gemini Pro", 100),
    ("Meta: Llama 3 8B", 50),
    ("Mistral Large", 50),
    ("Some Model", 20),
])
def test_language_support(name, languages):
    assert estimate_language_support(make_entry(name=name)) == languages


def test_comparison_record_uses_placeholder_scores():
    record = to_comparison(make_entry(name="Meta: Llama 3.1 70B Instruct", id="meta-llama/llama-3.1-70b"))

    assert record.provider == "Meta"
    assert record.parameters == "70B"
    assert record.context_window == 128000
    assert (record.speed, record.reasoning, record.coding, record.creative) == (UNBENCHMARKED_SCORE,) * 4
    assert record.multimodal is True
    assert record.languages == 50


def test_normalizer_does_not_mutate_entry():
    entry = make_entry()
    before = entry.model_dump()

    to_pricing(entry)
    to_comparison(entry)

    assert entry.model_dump() == before


@pytest.mark.parametrize("context_length, formatted", [
    (2_000_000, "2.0M"),
    (1_048_576, "1.0M"),
    (128_000, "128K"),
    (8192, "8K"),
    (512, "512"),
])
def test_format_context_window(context_length, formatted):
    assert format_context_window(context_length) == formatted
