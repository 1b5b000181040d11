"""
Read-only catalog accessors used by the dashboard pages.

``CatalogService`` owns three logical catalogs, each backed by its own fetcher
and cache slot:

- ``pricing``: curated + dynamic ``PricingRecord`` list
- ``comparison``: curated + dynamic ``ComparisonRecord`` list
- ``detailed``: raw ``CatalogEntry`` list for the explorer

Each ``load``/``refresh`` replaces the lists wholesale. When the listing cannot
be reached the previous lists are kept and ``error`` carries an advisory.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Iterable, Optional

import httpx

from llm_dashboard.common.cache_store import CacheStatus, CacheStore, FileBackend
from llm_dashboard.common.catalog_fetcher import CatalogFetcher
from llm_dashboard.common.classifier import classify
from llm_dashboard.common.merger import merge_comparison, merge_pricing
from llm_dashboard.common.normalizer import is_multimodal, parse_price, to_comparison, to_pricing
from llm_dashboard.common.schemas import CatalogEntry, ComparisonRecord, PricingRecord
from llm_dashboard.config import (
    COMPARISON_CACHE_KEY,
    DETAILED_CACHE_KEY,
    PRICING_CACHE_KEY,
    Settings,
)
from llm_dashboard.errors import UpstreamError

logger = logging.getLogger(__name__)

PRICING = "pricing"
COMPARISON = "comparison"
DETAILED = "detailed"

CACHE_KEYS = {
    PRICING: PRICING_CACHE_KEY,
    COMPARISON: COMPARISON_CACHE_KEY,
    DETAILED: DETAILED_CACHE_KEY,
}

CATEGORY_ALIASES = {
    "premium": "flagship",
    "budget": "efficient",
}


@dataclass(frozen=True)
class CatalogStats:
    static_count: int
    dynamic_count: int
    total_count: int


class CatalogService:
    """
    Args:
        cache: Cache store shared by the three fetchers
        static_pricing: Curated pricing records
        static_comparison: Curated comparison records
        **fetcher_options: Passed to every ``CatalogFetcher`` (url, client, retries, ...)
    """

    def __init__(
        self,
        cache: CacheStore,
        static_pricing: Iterable[PricingRecord] = (),
        static_comparison: Iterable[ComparisonRecord] = (),
        **fetcher_options,
    ):
        self.cache = cache
        self.static_pricing = list(static_pricing)
        self.static_comparison = list(static_comparison)
        self.fetchers = {
            slot: CatalogFetcher(cache, key, **fetcher_options)
            for slot, key in CACHE_KEYS.items()
        }
        self.error: Optional[str] = None
        self._dynamic_counts = {slot: 0 for slot in CACHE_KEYS}
        self._pricing = merge_pricing(self.static_pricing, [])
        self._comparison = merge_comparison(self.static_comparison, [])
        self._detailed: list[CatalogEntry] = []

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        static_pricing: Iterable[PricingRecord] = (),
        static_comparison: Iterable[ComparisonRecord] = (),
        client: Optional[httpx.AsyncClient] = None,
    ) -> "CatalogService":
        backend = FileBackend(settings.cache_dir) if settings.cache_dir else None
        cache = CacheStore(backend, ttl_seconds=settings.cache_ttl_seconds)
        return cls(
            cache,
            static_pricing,
            static_comparison,
            url=settings.models_url,
            client=client,
            timeout=settings.http_timeout,
            retries=settings.retries,
            max_backoff=settings.retry_max_wait,
        )

    async def load(self, force: bool = False) -> None:
        """
        Populate all three catalogs concurrently.

        Args:
            force: Bypass the cache read for every slot
        """
        errors = await asyncio.gather(
            *(self._load_slot(slot, force) for slot in CACHE_KEYS)
        )
        messages = [message for message in errors if message]
        self.error = "; ".join(messages) if messages else None

    async def refresh(self) -> None:
        """Refetch every catalog, ignoring cached data, and repopulate the cache."""
        await self.load(force=True)

    async def _load_slot(self, slot: str, force: bool) -> Optional[str]:
        try:
            entries = await self.fetchers[slot].fetch(force=force)
        except UpstreamError as e:
            logger.warning(f"Keeping previous {slot} catalog: {e}")
            return f"Failed to load {slot} models: {e}"

        self._dynamic_counts[slot] = len(entries)
        if slot == PRICING:
            self._pricing = merge_pricing(self.static_pricing, [to_pricing(e) for e in entries])
        elif slot == COMPARISON:
            self._comparison = merge_comparison(
                self.static_comparison, [to_comparison(e) for e in entries]
            )
        else:
            self._detailed = list(entries)
        return None

    def pricing_models(self) -> list[PricingRecord]:
        return list(self._pricing)

    def comparison_models(self) -> list[ComparisonRecord]:
        return list(self._comparison)

    def detailed_models(self) -> list[CatalogEntry]:
        return list(self._detailed)

    def stats(self, slot: str = PRICING) -> CatalogStats:
        """
        Count curated, dynamic and merged records for a catalog.

        Args:
            slot: "pricing", "comparison" or "detailed"

        Returns:
            CatalogStats for the slot
        """
        if slot == PRICING:
            static_count, total = len(self.static_pricing), len(self._pricing)
        elif slot == COMPARISON:
            static_count, total = len(self.static_comparison), len(self._comparison)
        else:
            static_count, total = 0, len(self._detailed)
        return CatalogStats(static_count, self._dynamic_counts[slot], total)

    def get_model_by_id(self, model_id: str) -> Optional[CatalogEntry]:
        return next((entry for entry in self._detailed if entry.id == model_id), None)

    def models_by_provider(self, provider: str) -> list[CatalogEntry]:
        provider = provider.lower()
        return [
            entry for entry in self._detailed
            if entry.id.lower().startswith(provider + "/") or provider in entry.name.lower()
        ]

    def models_by_category(self, category: str) -> list[CatalogEntry]:
        """
        Filter detailed models by classifier category.

        Args:
            category: "flagship", "efficient", "specialized", "free" or "standard";
                "premium" and "budget" are accepted as aliases

        Returns:
            Matching entries
        """
        category = category.lower()
        category = CATEGORY_ALIASES.get(category, category)
        return [entry for entry in self._detailed if classify(entry).category == category]

    def multimodal_models(self) -> list[CatalogEntry]:
        return [entry for entry in self._detailed if is_multimodal(entry)]

    def free_models(self) -> list[CatalogEntry]:
        return [
            entry for entry in self._detailed
            if parse_price(entry.pricing.prompt) == 0 and parse_price(entry.pricing.completion) == 0
        ]

    def search_models(self, query: str) -> list[CatalogEntry]:
        """
        Case-insensitive substring search over name, id, description and Hugging Face id.

        Args:
            query: Search text; blank returns every model

        Returns:
            Matching entries
        """
        if not query.strip():
            return list(self._detailed)

        query = query.lower()
        return [
            entry for entry in self._detailed
            if query in entry.name.lower()
            or query in entry.id.lower()
            or query in entry.description.lower()
            or (entry.hugging_face_id and query in entry.hugging_face_id.lower())
        ]

    def cache_status(self, slot: str = DETAILED) -> CacheStatus:
        return self.cache.status(CACHE_KEYS[slot])

    def clear_cache(self, slot: Optional[str] = None) -> None:
        """Clear one cache slot, or all of them when ``slot`` is None."""
        slots = [slot] if slot else list(CACHE_KEYS)
        for name in slots:
            self.cache.invalidate(CACHE_KEYS[name])
        logger.info(f"Cleared model cache: {', '.join(slots)}")
