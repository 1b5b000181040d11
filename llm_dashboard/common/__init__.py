"""Model catalog and token estimation engine shared across pages."""

from llm_dashboard.common.cache_store import (
    CacheStatus,
    CacheStore,
    FileBackend,
    MemoryBackend,
)
from llm_dashboard.common.catalog import CatalogService, CatalogStats
from llm_dashboard.common.catalog_fetcher import CatalogFetcher, parse_catalog_entries
from llm_dashboard.common.classifier import (
    Capabilities,
    Classification,
    ModelLimits,
    capabilities,
    classify,
    limits,
)
from llm_dashboard.common.data_loader import (
    load_curated_catalog,
    prepare_numeric_columns,
    pricing_records,
    comparison_records,
)
from llm_dashboard.common.hardware_calculator import (
    GPU_VRAM_OPTIONS,
    KV_CACHE_QUANTIZATIONS,
    MODEL_QUANTIZATIONS,
    SYSTEM_TYPES,
    HardwareRequirements,
    estimate_hardware,
    parse_parameter_count,
)
from llm_dashboard.common.merger import merge, merge_comparison, merge_pricing
from llm_dashboard.common.normalizer import (
    extract_provider,
    format_context_window,
    to_comparison,
    to_pricing,
)
from llm_dashboard.common.schemas import CatalogEntry, ComparisonRecord, PricingRecord
from llm_dashboard.common.token_estimator import (
    DEFAULT_TOKENIZER_PROFILES,
    MultimodalQuantities,
    TokenEstimate,
    TokenizerProfile,
    estimate,
    profile_from_record,
)
from llm_dashboard.common.utils import (
    COL_INPUT_COST,
    COL_NAME,
    COL_OUTPUT_COST,
    COMPARISON_COLUMNS,
    PRICING_COLUMNS,
    PRICING_FIELD_LABELS,
    filter_dataframe,
    format_pricing,
    format_supported_parameters,
    records_to_dataframe,
)

__all__ = [
    "CacheStatus",
    "CacheStore",
    "FileBackend",
    "MemoryBackend",
    "CatalogService",
    "CatalogStats",
    "CatalogFetcher",
    "parse_catalog_entries",
    "Capabilities",
    "Classification",
    "ModelLimits",
    "capabilities",
    "classify",
    "limits",
    "load_curated_catalog",
    "prepare_numeric_columns",
    "pricing_records",
    "comparison_records",
    "GPU_VRAM_OPTIONS",
    "KV_CACHE_QUANTIZATIONS",
    "MODEL_QUANTIZATIONS",
    "SYSTEM_TYPES",
    "HardwareRequirements",
    "estimate_hardware",
    "parse_parameter_count",
    "merge",
    "merge_comparison",
    "merge_pricing",
    "extract_provider",
    "format_context_window",
    "to_comparison",
    "to_pricing",
    "CatalogEntry",
    "ComparisonRecord",
    "PricingRecord",
    "DEFAULT_TOKENIZER_PROFILES",
    "MultimodalQuantities",
    "TokenEstimate",
    "TokenizerProfile",
    "estimate",
    "profile_from_record",
    "COL_INPUT_COST",
    "COL_NAME",
    "COL_OUTPUT_COST",
    "COMPARISON_COLUMNS",
    "PRICING_COLUMNS",
    "PRICING_FIELD_LABELS",
    "filter_dataframe",
    "format_pricing",
    "format_supported_parameters",
    "records_to_dataframe",
]
