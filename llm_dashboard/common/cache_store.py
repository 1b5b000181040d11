"""
Time-bounded cache for catalog payloads.

Each slot holds a serialized ``{"payload": [...], "timestamp": <epoch ms>}``
envelope. Validity is checked lazily on read: a stale or unparsable envelope is
purged and reported as a miss. Writes are best-effort and never raise.

Backends only need ``get``/``set``/``delete`` over text, so the same store runs
against a dict, a directory of JSON files, or anything else with that shape.
"""

import json
import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Optional, Protocol

from pydantic import ValidationError

from llm_dashboard.common.schemas import CacheEnvelope
from llm_dashboard.config import CACHE_TTL_SECONDS
from llm_dashboard.errors import CacheCorruptionError

logger = logging.getLogger(__name__)


class CacheBackend(Protocol):
    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...

    def delete(self, key: str) -> None: ...


class MemoryBackend:
    """Dict-backed storage, lives as long as the process."""

    def __init__(self):
        self._data: dict[str, str] = {}

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)


class FileBackend:
    """One JSON file per key inside ``directory``."""

    def __init__(self, directory: Path):
        self.directory = Path(directory)

    def _path(self, key: str) -> Path:
        return self.directory / f"{key}.json"

    def get(self, key: str) -> Optional[str]:
        path = self._path(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def set(self, key: str, value: str) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        # Write to a sibling file first so readers never see a partial envelope
        tmp_path = self._path(key).with_suffix(".tmp")
        tmp_path.write_text(value, encoding="utf-8")
        tmp_path.replace(self._path(key))

    def delete(self, key: str) -> None:
        self._path(key).unlink(missing_ok=True)


@dataclass(frozen=True)
class CacheStatus:
    has_data: bool
    is_valid: bool
    timestamp: Optional[int] = None
    time_until_expiry_ms: Optional[int] = None


def is_fresh(timestamp_ms: int, now_ms: int, ttl_ms: int) -> bool:
    """Return True while ``now - timestamp < ttl``."""
    return now_ms - timestamp_ms < ttl_ms


class CacheStore:
    """
    Envelope cache over a ``CacheBackend``.

    Args:
        backend: Storage for the serialized envelopes
        ttl_seconds: How long an envelope stays valid
        clock: Returns the current time in seconds (injectable for tests)
    """

    def __init__(
        self,
        backend: Optional[CacheBackend] = None,
        ttl_seconds: float = CACHE_TTL_SECONDS,
        clock: Callable[[], float] = time.time,
    ):
        self.backend = backend if backend is not None else MemoryBackend()
        self.ttl_ms = int(ttl_seconds * 1000)
        self.clock = clock

    def _now_ms(self) -> int:
        return int(self.clock() * 1000)

    def _load(self, key: str) -> Optional[CacheEnvelope]:
        """Parse the stored envelope, raising CacheCorruptionError if unusable."""
        try:
            raw = self.backend.get(key)
        except (OSError, UnicodeDecodeError) as e:
            raise CacheCorruptionError(f"Unreadable cache slot '{key}'") from e
        if raw is None:
            return None
        try:
            return CacheEnvelope.model_validate_json(raw)
        except ValidationError as e:
            raise CacheCorruptionError(f"Unparsable cache envelope for '{key}'") from e

    def read(self, key: str) -> Optional[CacheEnvelope]:
        """
        Read a valid envelope.

        Stale and corrupt envelopes are deleted and reported as a miss.

        Args:
            key: Cache slot name

        Returns:
            The envelope, or None on a miss
        """
        try:
            envelope = self._load(key)
        except CacheCorruptionError as e:
            logger.warning(f"{e}; purging slot")
            self.invalidate(key)
            return None

        if envelope is None:
            logger.debug(f"Cache miss: {key}")
            return None

        if not is_fresh(envelope.timestamp, self._now_ms(), self.ttl_ms):
            logger.info(f"Cache expired: {key}")
            self.invalidate(key)
            return None

        logger.debug(f"Cache hit: {key} ({len(envelope.payload)} items)")
        return envelope

    def write(self, key: str, payload: list[Any]) -> None:
        """
        Store ``payload`` under ``key`` with the current timestamp.

        Failures from serialization or the backend are logged, never raised.

        Args:
            key: Cache slot name
            payload: JSON-serializable list
        """
        envelope = {"payload": payload, "timestamp": self._now_ms()}
        try:
            self.backend.set(key, json.dumps(envelope))
        except Exception as e:
            logger.warning(f"Failed to write cache slot '{key}': {e}")

    def invalidate(self, key: str) -> None:
        try:
            self.backend.delete(key)
        except Exception as e:
            logger.warning(f"Failed to delete cache slot '{key}': {e}")
        else:
            logger.debug(f"Cache cleared: {key}")

    def status(self, key: str) -> CacheStatus:
        """
        Describe a slot without modifying it.

        Args:
            key: Cache slot name

        Returns:
            CacheStatus with validity and remaining lifetime in milliseconds
        """
        try:
            envelope = self._load(key)
        except CacheCorruptionError:
            return CacheStatus(has_data=False, is_valid=False)

        if envelope is None:
            return CacheStatus(has_data=False, is_valid=False)

        now_ms = self._now_ms()
        valid = is_fresh(envelope.timestamp, now_ms, self.ttl_ms)
        remaining = envelope.timestamp + self.ttl_ms - now_ms if valid else 0

        return CacheStatus(
            has_data=True,
            is_valid=valid,
            timestamp=envelope.timestamp,
            time_until_expiry_ms=remaining,
        )
