"""
Fetch the remote model listing with a read-through / write-through cache.

The listing endpoint returns ``{"data": [...]}``. Entries are validated into
``CatalogEntry`` models at this single ingestion point; entries that do not
conform are dropped and counted, never raised.
"""

import asyncio
import logging
from typing import Any, Iterable, Optional

import httpx
from pydantic import ValidationError
from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from llm_dashboard.common.cache_store import CacheStore
from llm_dashboard.common.schemas import CatalogEntry
from llm_dashboard.config import OPENROUTER_MODELS_URL
from llm_dashboard.errors import UpstreamError

logger = logging.getLogger(__name__)


def parse_catalog_entries(raw_models: Iterable[Any]) -> tuple[list[CatalogEntry], int]:
    """
    Validate raw listing items into catalog entries.

    Args:
        raw_models: Items from the listing's ``data`` array

    Returns:
        Tuple of (valid entries in input order, number of skipped items)
    """
    entries = []
    skipped = 0
    for item in raw_models:
        try:
            entries.append(CatalogEntry.model_validate(item))
        except ValidationError as e:
            skipped += 1
            model_id = item.get("id", "unknown") if isinstance(item, dict) else "unknown"
            logger.debug(f"Skipping catalog entry {model_id}: {e.error_count()} validation errors")
    return entries, skipped


class CatalogFetcher:
    """
    Fetches one logical catalog and keeps it in its own cache slot.

    Args:
        cache: Shared cache store
        cache_key: Slot owned by this fetcher
        url: Listing endpoint
        client: Optional ``httpx.AsyncClient`` (a short-lived one is created per fetch otherwise)
        timeout: Request timeout in seconds
        retries: Retries after the first failed attempt
        backoff: Base of the exponential wait between attempts, in seconds
        max_backoff: Upper bound on a single wait, in seconds
    """

    def __init__(
        self,
        cache: CacheStore,
        cache_key: str,
        url: str = OPENROUTER_MODELS_URL,
        client: Optional[httpx.AsyncClient] = None,
        timeout: float = 30.0,
        retries: int = 2,
        backoff: float = 1.0,
        max_backoff: float = 30.0,
    ):
        self.cache = cache
        self.cache_key = cache_key
        self.url = url
        self.client = client
        self.timeout = timeout
        self.retries = retries
        self.backoff = backoff
        self.max_backoff = max_backoff
        self.last_skipped = 0
        self._inflight: Optional[asyncio.Task] = None

    async def fetch(self, force: bool = False) -> list[CatalogEntry]:
        """
        Return the catalog, from cache when valid, otherwise from the network.

        Args:
            force: Skip the cache read (the result is still written through)

        Returns:
            Valid catalog entries, possibly empty

        Raises:
            UpstreamError: If every attempt failed; the cache is left untouched
        """
        if not force:
            envelope = self.cache.read(self.cache_key)
            if envelope is not None:
                logger.info(f"Using cached models from '{self.cache_key}'")
                entries, _ = parse_catalog_entries(envelope.payload)
                return entries

        # Concurrent callers share one request
        if self._inflight is None:
            self._inflight = asyncio.ensure_future(self._fetch_and_store())
            self._inflight.add_done_callback(self._clear_inflight)
        return await asyncio.shield(self._inflight)

    def _clear_inflight(self, _task: asyncio.Task) -> None:
        self._inflight = None

    async def _fetch_and_store(self) -> list[CatalogEntry]:
        logger.info(f"Fetching fresh models for '{self.cache_key}' from {self.url}")
        raw_models = await self._fetch_with_retry()

        entries, skipped = parse_catalog_entries(raw_models)
        self.last_skipped = skipped
        if skipped:
            logger.info(f"Dropped {skipped} invalid entries from the model listing")

        self.cache.write(
            self.cache_key,
            [entry.model_dump(mode="json") for entry in entries],
        )
        logger.info(f"Fetched {len(entries)} valid models for '{self.cache_key}'")
        return entries

    async def _fetch_with_retry(self) -> list[Any]:
        retrying = AsyncRetrying(
            stop=stop_after_attempt(self.retries + 1),
            wait=wait_exponential(multiplier=self.backoff, max=self.max_backoff),
            retry=retry_if_exception_type(UpstreamError),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True,
        )
        try:
            async for attempt in retrying:
                with attempt:
                    return await self._request()
        except UpstreamError as e:
            logger.error(f"Failed to fetch models for '{self.cache_key}': {e}")
            raise

    async def _request(self) -> list[Any]:
        if self.client is not None:
            return await self._get(self.client)
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            return await self._get(client)

    async def _get(self, client: httpx.AsyncClient) -> list[Any]:
        try:
            response = await client.get(
                self.url, headers={"Content-Type": "application/json"}
            )
        except httpx.HTTPError as e:
            raise UpstreamError(f"Model listing request failed: {e}") from e

        if response.is_error:
            raise UpstreamError(
                f"Model listing API error: {response.status_code} {response.reason_phrase}",
                status_code=response.status_code,
            )

        try:
            body = response.json()
        except ValueError as e:
            raise UpstreamError("Model listing returned an unparsable body") from e

        data = body.get("data") if isinstance(body, dict) else None
        if not isinstance(data, list):
            raise UpstreamError("Model listing response has no 'data' array")
        return data
