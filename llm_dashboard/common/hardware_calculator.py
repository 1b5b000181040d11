"""
Hardware requirement estimates for self-hosting an open-weight model.

Sizes are in GB and start from an F16 baseline of 2 bytes per parameter, scaled
by the chosen quantization. All figures are rough planning numbers.
"""

import math
import re
from dataclasses import dataclass
from typing import Optional

DISCRETE_GPU = "DISCRETE_GPU"
UNIFIED_MEMORY = "UNIFIED_MEMORY"

SYSTEM_TYPES = {
    DISCRETE_GPU: "Discrete GPU",
    UNIFIED_MEMORY: "Unified Memory (Apple Silicon, AMD Ryzen AI Max+ 395)",
}

GPU_VRAM_OPTIONS = [8, 12, 16, 20, 24, 32, 40, 48, 80]

F16_GB_PER_BILLION_PARAMS = 2.0
KV_CACHE_GB_PER_BILLION_PARAMS_PER_1K_TOKENS = 0.5
MIN_OVERHEAD_GB = 2.0
OVERHEAD_GB_PER_BILLION_PARAMS = 0.05
ON_DISK_FORMAT_FACTOR = 1.1
MIN_DISCRETE_SYSTEM_RAM_GB = 16
UNIFIED_SYSTEM_RESERVE_GB = 8


@dataclass(frozen=True)
class Quantization:
    name: str
    size_multiplier: float  # relative to F16
    speed_multiplier: float
    quality_score: int


MODEL_QUANTIZATIONS = {
    q.name: q for q in [
        Quantization("F32", 2.0, 0.8, 100),
        Quantization("F16", 1.0, 1.0, 100),
        Quantization("Q8", 0.5, 1.2, 95),
        Quantization("Q6", 0.375, 1.4, 90),
        Quantization("Q5", 0.3125, 1.6, 87),
        Quantization("Q4", 0.25, 1.8, 85),
        Quantization("Q3", 0.1875, 2.0, 75),
        Quantization("Q2", 0.125, 2.2, 70),
        Quantization("GPTQ", 0.25, 1.9, 88),
        Quantization("AWQ", 0.25, 2.0, 89),
    ]
}

KV_CACHE_QUANTIZATIONS = {
    q.name: q for q in [
        Quantization("F32", 2.0, 1.0, 100),
        Quantization("F16", 1.0, 1.0, 100),
        Quantization("Q8", 0.5, 1.1, 95),
        Quantization("Q5", 0.3125, 1.2, 87),
        Quantization("Q4", 0.25, 1.3, 85),
    ]
}

_PARAMETER_COUNT = re.compile(r"(\d+(?:\.\d+)?)\s*([TB])", re.IGNORECASE)


@dataclass(frozen=True)
class HardwareRequirements:
    model_vram: float
    kv_cache_vram: float
    overhead: float
    total_vram: float
    on_disk_size: float
    system_ram: int
    tokens_per_second: int
    power_consumption: int
    required_gpus: int
    gpu_vram: int
    quality_score: int

    @property
    def gpu_config(self) -> str:
        if self.required_gpus > 1:
            return f"{self.required_gpus}x {self.gpu_vram}GB GPUs"
        return f"1x {self.gpu_vram}GB GPU"


def _round_half_up(value: float, digits: int = 0) -> float:
    scale = 10 ** digits
    return math.floor(value * scale + 0.5) / scale


def _lookup(options: dict[str, Quantization], name: str) -> Quantization:
    try:
        return options[name]
    except KeyError:
        raise ValueError(f"Unknown quantization '{name}', expected one of {', '.join(options)}") from None


def parse_parameter_count(parameters: str) -> Optional[float]:
    """
    Read a parameter count in billions from strings such as "70B", "~20B" or "1.76T".

    Ranges like "70B-175B" give their lower bound. Returns None when no count is found.
    """
    match = _PARAMETER_COUNT.search(parameters or "")
    if match is None:
        return None
    value = float(match.group(1))
    return value * 1000 if match.group(2).upper() == "T" else value


def calculate_model_vram(parameters_b: float, quantization: str = "F16") -> float:
    """
    Calculate VRAM needed for the model weights.

    Args:
        parameters_b: Parameter count in billions
        quantization: Key of ``MODEL_QUANTIZATIONS``

    Returns:
        VRAM required in GB
    """
    quant = _lookup(MODEL_QUANTIZATIONS, quantization)
    return parameters_b * F16_GB_PER_BILLION_PARAMS * quant.size_multiplier


def calculate_kv_cache_vram(
    parameters_b: float,
    context_length: int,
    quantization: str = "F16"
) -> float:
    """
    Calculate VRAM needed for the KV cache.

    Approximated at 0.5 GB per billion parameters per 1K tokens of context in F16.

    Args:
        parameters_b: Parameter count in billions
        context_length: Context length in tokens
        quantization: Key of ``KV_CACHE_QUANTIZATIONS``

    Returns:
        VRAM required in GB
    """
    quant = _lookup(KV_CACHE_QUANTIZATIONS, quantization)
    base = parameters_b * context_length * KV_CACHE_GB_PER_BILLION_PARAMS_PER_1K_TOKENS / 1000
    return base * quant.size_multiplier


def calculate_overhead(parameters_b: float) -> float:
    # Activations and runtime buffers
    return max(MIN_OVERHEAD_GB, parameters_b * OVERHEAD_GB_PER_BILLION_PARAMS)


def calculate_min_vram(model_vram: float, kv_cache_vram: float, overhead: float) -> float:
    """
    Calculate minimum VRAM required to serve the model.

    Args:
        model_vram: Weights VRAM (GB)
        kv_cache_vram: KV cache VRAM (GB), 0 when the cache is disabled
        overhead: Runtime overhead (GB)

    Returns:
        Minimum VRAM required in GB
    """
    return model_vram + kv_cache_vram + overhead


def calculate_system_ram(total_vram: float, system_type: str = DISCRETE_GPU) -> float:
    if system_type == UNIFIED_MEMORY:
        return total_vram + UNIFIED_SYSTEM_RESERVE_GB
    return max(MIN_DISCRETE_SYSTEM_RAM_GB, total_vram * 0.5)


def estimate_tokens_per_second(parameters_b: float, quantization: str = "F16") -> int:
    """Rough generation speed: 100 tok/s at 7B, minus 2 per extra billion, floor 5."""
    quant = _lookup(MODEL_QUANTIZATIONS, quantization)
    base = max(5, 100 - (parameters_b - 7) * 2)
    return int(_round_half_up(base * quant.speed_multiplier))


def calculate_required_gpus(total_vram: float, gpu_vram: int) -> int:
    """
    Calculate how many GPUs of ``gpu_vram`` GB are needed to hold ``total_vram``.

    Raises:
        ValueError: If gpu_vram is not positive
    """
    if gpu_vram <= 0:
        raise ValueError("gpu_vram must be positive")
    if total_vram <= gpu_vram:
        return 1
    return math.ceil(total_vram / gpu_vram)


def estimate_power_draw(total_vram: float, required_gpus: int, system_type: str = DISCRETE_GPU) -> int:
    base = 50 if system_type == UNIFIED_MEMORY else 300
    if total_vram > 24:
        per_gpu = 400
    elif total_vram > 16:
        per_gpu = 300
    else:
        per_gpu = 200
    return base + per_gpu * required_gpus


def estimate_hardware(
    parameters_b: float,
    quantization: str = "F16",
    context_length: int = 4096,
    kv_cache_quantization: Optional[str] = None,
    system_type: str = DISCRETE_GPU,
    gpu_vram: int = 24
) -> HardwareRequirements:
    """
    Estimate the hardware needed to self-host a model.

    Args:
        parameters_b: Parameter count in billions
        quantization: Weights quantization
        context_length: Context length in tokens
        kv_cache_quantization: KV cache quantization, or None to leave the cache out
        system_type: ``DISCRETE_GPU`` or ``UNIFIED_MEMORY``
        gpu_vram: VRAM of a single GPU in GB

    Returns:
        HardwareRequirements with GB figures rounded to one decimal
    """
    if system_type not in SYSTEM_TYPES:
        raise ValueError(f"Unknown system type '{system_type}'")

    model_vram = calculate_model_vram(parameters_b, quantization)
    kv_cache_vram = 0.0
    if kv_cache_quantization is not None:
        kv_cache_vram = calculate_kv_cache_vram(parameters_b, context_length, kv_cache_quantization)
    overhead = calculate_overhead(parameters_b)
    total_vram = calculate_min_vram(model_vram, kv_cache_vram, overhead)
    required_gpus = calculate_required_gpus(total_vram, gpu_vram)

    return HardwareRequirements(
        model_vram=_round_half_up(model_vram, 1),
        kv_cache_vram=_round_half_up(kv_cache_vram, 1),
        overhead=_round_half_up(overhead, 1),
        total_vram=_round_half_up(total_vram, 1),
        on_disk_size=_round_half_up(model_vram * ON_DISK_FORMAT_FACTOR, 1),
        system_ram=int(_round_half_up(calculate_system_ram(total_vram, system_type))),
        tokens_per_second=estimate_tokens_per_second(parameters_b, quantization),
        power_consumption=estimate_power_draw(total_vram, required_gpus, system_type),
        required_gpus=required_gpus,
        gpu_vram=gpu_vram,
        quality_score=MODEL_QUANTIZATIONS[quantization].quality_score,
    )
