"""Self-hosting hardware calculator page implementation."""

from datetime import datetime

import pandas as pd
import streamlit as st

from llm_dashboard.common import (
    CatalogService,
    GPU_VRAM_OPTIONS,
    KV_CACHE_QUANTIZATIONS,
    MODEL_QUANTIZATIONS,
    SYSTEM_TYPES,
    estimate_hardware,
    parse_parameter_count,
)

HISTORY_KEY = "hardware_history"
HISTORY_SIZE = 10


def _known_sizes(catalog: CatalogService) -> dict[str, float]:
    sizes = {}
    for record in catalog.comparison_models():
        parameters_b = parse_parameter_count(record.parameters)
        if parameters_b is not None:
            sizes.setdefault(record.name, parameters_b)
    return sizes


def hardware_calculator_page(catalog: CatalogService):
    """Hardware calculator page."""
    st.markdown(
        "Estimate the **VRAM, memory, storage and power** needed to self-host an "
        "open-weight model at a given quantization."
    )
    st.info(
        "Figures assume an F16 baseline of 2 bytes per parameter and are meant "
        "for rough capacity planning."
    )

    sizes = _known_sizes(catalog)

    # Sidebar inputs
    st.sidebar.header("Hardware Configuration")
    preset = st.sidebar.selectbox(
        "Start from model",
        options=["(custom)"] + list(sizes),
        key="hardware_preset"
    )
    parameters_b = st.sidebar.number_input(
        "Parameters (billions)",
        min_value=1.0, max_value=2000.0,
        value=float(sizes.get(preset, 65.0)), step=1.0,
        key=f"hardware_parameters_{preset}"
    )
    quantization = st.sidebar.selectbox(
        "Model Quantization",
        options=list(MODEL_QUANTIZATIONS),
        index=list(MODEL_QUANTIZATIONS).index("F16"),
        format_func=lambda name: (
            f"{name} ({MODEL_QUANTIZATIONS[name].size_multiplier:.0%} size, "
            f"{MODEL_QUANTIZATIONS[name].quality_score}% quality)"
        ),
        key="hardware_quantization"
    )
    context_length = st.sidebar.slider(
        "Context Length (tokens)",
        min_value=128, max_value=32768, value=4096, step=128,
        key="hardware_context"
    )
    kv_cache_quantization = None
    if st.sidebar.checkbox("Include KV cache", key="hardware_kv_cache"):
        kv_cache_quantization = st.sidebar.selectbox(
            "KV Cache Quantization",
            options=list(KV_CACHE_QUANTIZATIONS),
            index=list(KV_CACHE_QUANTIZATIONS).index("F16"),
            key="hardware_kv_quantization"
        )
    system_type = st.sidebar.selectbox(
        "System Type",
        options=list(SYSTEM_TYPES),
        format_func=SYSTEM_TYPES.get,
        key="hardware_system_type"
    )
    gpu_vram = st.sidebar.selectbox(
        "GPU VRAM (GB)",
        options=GPU_VRAM_OPTIONS,
        index=GPU_VRAM_OPTIONS.index(24),
        key="hardware_gpu_vram"
    )

    requirements = estimate_hardware(
        parameters_b,
        quantization=quantization,
        context_length=context_length,
        kv_cache_quantization=kv_cache_quantization,
        system_type=system_type,
        gpu_vram=gpu_vram,
    )

    st.subheader("🖥️ VRAM")
    cols = st.columns(4)
    cols[0].metric("Model", f"{requirements.model_vram} GB")
    cols[1].metric("KV Cache", f"{requirements.kv_cache_vram} GB" if kv_cache_quantization else "Off")
    cols[2].metric("Overhead", f"{requirements.overhead} GB")
    cols[3].metric("Total", f"{requirements.total_vram} GB")

    st.subheader("💾 Storage, Memory and Performance")
    cols = st.columns(4)
    cols[0].metric("On-disk Size", f"{requirements.on_disk_size} GB")
    cols[1].metric("System RAM", f"{requirements.system_ram} GB")
    cols[2].metric("Tokens / s", f"~{requirements.tokens_per_second}")
    cols[3].metric("Power Draw", f"{requirements.power_consumption} W")

    st.subheader("🔌 GPU Configuration")
    st.write(f"**{requirements.gpu_config}** (quality score {requirements.quality_score}%)")
    if requirements.required_gpus > 1:
        st.warning("Multi-GPU setup required")
    else:
        st.success("Single GPU sufficient")

    history = st.session_state.setdefault(HISTORY_KEY, [])
    if st.button("Save configuration", key="hardware_save"):
        history.insert(0, {
            "Saved": datetime.now().strftime("%H:%M:%S"),
            "Parameters (B)": parameters_b,
            "Quantization": quantization,
            "Context": context_length,
            "KV Cache": kv_cache_quantization or "Off",
            "System": SYSTEM_TYPES[system_type],
            "Total VRAM (GB)": requirements.total_vram,
            "GPUs": requirements.gpu_config,
        })
        del history[HISTORY_SIZE:]

    if history:
        st.divider()
        st.subheader("📋 Recent Configurations")
        st.dataframe(pd.DataFrame(history), use_container_width=True, hide_index=True)
