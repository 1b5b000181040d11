"""Runtime configuration read from the environment (and an optional .env file)."""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

OPENROUTER_MODELS_URL = "https://openrouter.ai/api/v1/models"
DEFAULT_STATIC_CATALOG = Path(__file__).parent / "data" / "curated_models.csv"

# One slot per logical catalog
PRICING_CACHE_KEY = "openrouter_models_pricing"
COMPARISON_CACHE_KEY = "openrouter_models_comparison"
DETAILED_CACHE_KEY = "openrouter_models_detailed"

CACHE_TTL_SECONDS = 60 * 60


@dataclass(frozen=True)
class Settings:
    models_url: str = OPENROUTER_MODELS_URL
    cache_ttl_seconds: float = CACHE_TTL_SECONDS
    cache_dir: Optional[Path] = None
    http_timeout: float = 30.0
    retries: int = 2
    retry_max_wait: float = 30.0
    log_level: str = "INFO"
    static_catalog: Path = DEFAULT_STATIC_CATALOG

    @classmethod
    def from_env(cls) -> "Settings":
        """
        Build settings from ``LLM_DASHBOARD_*`` environment variables.

        Returns:
            Settings instance with defaults for anything unset
        """
        load_dotenv()

        cache_dir = os.getenv("LLM_DASHBOARD_CACHE_DIR")
        static_catalog = os.getenv("LLM_DASHBOARD_STATIC_CATALOG")

        return cls(
            models_url=os.getenv("LLM_DASHBOARD_MODELS_URL", OPENROUTER_MODELS_URL),
            cache_ttl_seconds=float(
                os.getenv("LLM_DASHBOARD_CACHE_TTL_SECONDS", CACHE_TTL_SECONDS)
            ),
            cache_dir=Path(cache_dir) if cache_dir else None,
            http_timeout=float(os.getenv("LLM_DASHBOARD_HTTP_TIMEOUT", 30.0)),
            retries=int(os.getenv("LLM_DASHBOARD_RETRIES", 2)),
            retry_max_wait=float(os.getenv("LLM_DASHBOARD_RETRY_MAX_WAIT", 30.0)),
            log_level=os.getenv("LLM_DASHBOARD_LOG_LEVEL", "INFO"),
            static_catalog=Path(static_catalog) if static_catalog else DEFAULT_STATIC_CATALOG,
        )
