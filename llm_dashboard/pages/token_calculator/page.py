"""Token calculator page implementation."""

import streamlit as st

from llm_dashboard.common import (
    CatalogService,
    DEFAULT_TOKENIZER_PROFILES,
    MultimodalQuantities,
    estimate,
    profile_from_record,
)

EXAMPLES = [
    "Hello, how are you today?",
    "The quick brown fox jumps over the lazy dog.",
    "Lorem ipsum dolor sit amet, consectetur adipiscing elit.",
]


def token_calculator_page(catalog: CatalogService):
    """Token calculator page."""
    st.markdown(
        "Estimate tokens, context usage and cost for a prompt. OpenAI text is "
        "counted with tiktoken; other providers are approximated."
    )

    profiles = {profile.name: profile for profile in DEFAULT_TOKENIZER_PROFILES}
    for record in catalog.comparison_models():
        profiles.setdefault(record.name, profile_from_record(record))

    st.sidebar.header("Token Calculator")
    profile_name = st.sidebar.selectbox(
        "Tokenizer / Model", options=list(profiles), key="token_profile"
    )
    profile = profiles[profile_name]
    st.sidebar.caption(f"{profile.provider} · {profile.tokenizer_type} · {profile.description}")

    example = st.selectbox("Quick examples", ["(none)"] + EXAMPLES, key="token_example")
    text = st.text_area(
        "Text Content",
        value="" if example == "(none)" else example,
        height=300,
        key="token_text"
    )

    with st.expander("Images, video and audio"):
        left, right = st.columns(2)
        image_count = left.number_input("Images", min_value=0, value=0, key="token_images")
        image_size = right.selectbox("Image size", ["small", "large"], key="token_image_size")
        image_width = left.number_input("Image width (px)", min_value=0, value=1024, key="token_width")
        image_height = right.number_input("Image height (px)", min_value=0, value=1024, key="token_height")
        video_seconds = left.number_input("Video (seconds)", min_value=0.0, value=0.0, key="token_video")
        audio_seconds = right.number_input("Audio (seconds)", min_value=0.0, value=0.0, key="token_audio")

    expected_output_words = st.sidebar.number_input(
        "Expected output (words)", min_value=0, value=250, step=50, key="token_output_words"
    )

    result = estimate(
        text,
        profile,
        MultimodalQuantities(
            image_count=image_count,
            image_width=image_width,
            image_height=image_height,
            image_size=image_size,
            video_seconds=video_seconds,
            audio_seconds=audio_seconds,
        ),
        expected_output_words=expected_output_words,
    )

    st.metric("Estimated Tokens", f"{result.total_tokens:,}")
    cols = st.columns(4)
    cols[0].metric("Characters", f"{result.characters:,}")
    cols[1].metric("Words", f"{result.words:,}")
    cols[2].metric("Sentences", f"{result.sentences:,}")
    cols[3].metric("Paragraphs", f"{result.paragraphs:,}")

    breakdown = result.token_breakdown
    cols = st.columns(4)
    cols[0].metric("Text Tokens", f"{breakdown.text:,}")
    cols[1].metric("Image Tokens", f"{breakdown.image:,}")
    cols[2].metric("Video Tokens", f"{breakdown.video:,}")
    cols[3].metric("Audio Tokens", f"{breakdown.audio:,}")

    cols = st.columns(3)
    cols[0].metric("Tokens per Word", f"{result.tokens_per_word:.2f}")
    cols[1].metric("Context Usage", f"{result.context_usage_percent:.1f}%")
    cols[2].metric(
        "Estimated Cost",
        f"${result.estimated_cost:.6f}" if profile.has_cost else "N/A"
    )

    if result.context_usage_percent > 100:
        st.error(f"Input exceeds the {profile.context_window:,}-token context window.")
