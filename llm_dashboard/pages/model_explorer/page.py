"""Model explorer page: search the live catalog and inspect a single model."""

from datetime import datetime, timezone

import pandas as pd
import streamlit as st

from llm_dashboard.common import (
    CatalogEntry,
    CatalogService,
    PRICING_FIELD_LABELS,
    capabilities,
    classify,
    format_context_window,
    format_pricing,
    format_supported_parameters,
    limits,
)

CATEGORY_OPTIONS = ["All", "flagship", "efficient", "specialized", "free", "standard"]


def _models_table(models: list[CatalogEntry]) -> pd.DataFrame:
    rows = []
    for model in models:
        classification = classify(model)
        rows.append({
            "ID": model.id,
            "Name": model.name,
            "Category": classification.category,
            "Tier": classification.tier,
            "Context": format_context_window(model.context_length),
            "Input Modalities": ", ".join(model.architecture.input_modalities),
        })
    return pd.DataFrame(rows)


def _model_detail(model: CatalogEntry):
    classification = classify(model)
    caps = capabilities(model)
    model_limits = limits(model)

    st.subheader(model.name)
    st.caption(f"ID: {model.id}")
    st.markdown(f"**{classification.category} - {classification.tier}**")
    st.write(model.description)

    left, right = st.columns(2)
    with left:
        st.markdown("**Architecture**")
        st.write({
            "Modality": caps.modality,
            "Tokenizer": caps.tokenizer,
            "Instruct Type": caps.instruct_type or "N/A",
            "Created": datetime.fromtimestamp(model.created, tz=timezone.utc).strftime("%B %d, %Y"),
            "Hugging Face ID": model.hugging_face_id or "N/A",
        })
        st.markdown("**Capabilities**")
        st.write({
            "Text Input": caps.text_input,
            "Image Input": caps.image_input,
            "File Input": caps.file_input,
            "Vision": caps.has_vision,
            "Code": caps.has_code_capabilities,
            "Reasoning": caps.has_reasoning_capabilities,
            "Moderated": caps.is_moderated,
        })
    with right:
        st.markdown("**Limits**")
        st.write({
            "Context Length": f"{format_context_window(model_limits.context_length)} tokens",
            "Max Completion Tokens": model_limits.max_completion_tokens or "N/A",
            "Per-Request Limits": model_limits.per_request_limits or "None",
        })
        st.markdown("**Pricing**")
        pricing = format_pricing(model.pricing)
        st.write({
            label: pricing[field]
            for field, label in PRICING_FIELD_LABELS.items()
            if pricing[field] != "N/A"
        })

    if model.supported_parameters:
        st.markdown("**Supported Parameters**")
        st.write(", ".join(format_supported_parameters(model.supported_parameters)))


def model_explorer_page(catalog: CatalogService):
    """Model explorer page."""
    st.markdown("Browse every model currently listed by OpenRouter.")

    query = st.text_input("Search models", key="explorer_query")
    models = catalog.search_models(query)

    st.sidebar.header("Explorer Filters")
    provider = st.sidebar.text_input("Provider", key="explorer_provider")
    category = st.sidebar.selectbox("Category", CATEGORY_OPTIONS, key="explorer_category")
    multimodal_only = st.sidebar.checkbox("Multimodal only", key="explorer_multimodal")
    free_only = st.sidebar.checkbox("Free only", key="explorer_free")

    filters = []
    if provider.strip():
        filters.append(catalog.models_by_provider(provider.strip()))
    if category != "All":
        filters.append(catalog.models_by_category(category))
    if multimodal_only:
        filters.append(catalog.multimodal_models())
    if free_only:
        filters.append(catalog.free_models())
    for allowed in filters:
        allowed_ids = {model.id for model in allowed}
        models = [model for model in models if model.id in allowed_ids]

    st.caption(f"{len(models)} of {catalog.stats('detailed').total_count} models")
    if not models:
        st.warning("No models match the current filters")
        return

    st.dataframe(_models_table(models), use_container_width=True, hide_index=True)

    selected_id = st.selectbox(
        "Model details",
        options=[model.id for model in models],
        key="explorer_selected"
    )
    selected = catalog.get_model_by_id(selected_id)
    if selected is not None:
        st.divider()
        _model_detail(selected)
