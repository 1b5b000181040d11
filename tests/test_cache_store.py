import json
import logging

import pytest

from llm_dashboard.common.cache_store import CacheStore, FileBackend, is_fresh


class FullBackend:
    """Backend that rejects every write, like a full storage quota."""

    def get(self, key):
        return None

    def set(self, key, value):
        raise OSError("quota exceeded")

    def delete(self, key):
        pass


def test_write_then_read_returns_payload(cache):
    payload = [{"id": "a/b"}, {"id": "c/d"}]
    cache.write("models", payload)

    envelope = cache.read("models")

    assert envelope is not None
    assert envelope.payload == payload


def test_read_missing_key_is_miss(cache):
    assert cache.read("missing") is None


def test_envelope_valid_until_ttl(cache, clock):
    cache.write("models", [1, 2, 3])

    clock.advance(3599)
    assert cache.read("models") is not None

    clock.advance(1)
    assert cache.read("models") is None


def test_stale_envelope_is_purged_on_read(cache, backend, clock):
    cache.write("models", [1])
    clock.advance(3600)

    assert cache.read("models") is None
    assert backend.get("models") is None


@pytest.mark.parametrize("stored", [
    "not json at all",
    json.dumps({"payload": "nope", "timestamp": 1}),
    json.dumps({"timestamp": 1}),
    json.dumps([1, 2, 3]),
])
def test_corrupt_envelope_is_miss_and_purged(cache, backend, stored):
    backend.set("models", stored)

    assert cache.read("models") is None
    assert backend.get("models") is None


def test_write_failure_is_swallowed(clock, caplog):
    cache = CacheStore(FullBackend(), clock=clock)

    with caplog.at_level(logging.WARNING):
        cache.write("models", [1])

    assert "Failed to write cache slot 'models'" in caplog.text


def test_invalidate_removes_slot(cache):
    cache.write("models", [1])
    cache.invalidate("models")

    assert cache.read("models") is None


def test_status_reports_remaining_lifetime(cache, clock):
    assert cache.status("models").has_data is False

    cache.write("models", [1])
    written_at = int(clock.now * 1000)
    clock.advance(600)

    status = cache.status("models")
    assert status.has_data is True
    assert status.is_valid is True
    assert status.timestamp == written_at
    assert status.time_until_expiry_ms == 3000 * 1000


def test_status_does_not_purge_stale_slot(cache, backend, clock):
    cache.write("models", [1])
    clock.advance(7200)

    status = cache.status("models")

    assert status.has_data is True
    assert status.is_valid is False
    assert status.time_until_expiry_ms == 0
    assert backend.get("models") is not None


def test_slots_are_independent(cache):
    cache.write("pricing", [1])
    cache.write("detailed", [2])
    cache.invalidate("pricing")

    assert cache.read("pricing") is None
    assert cache.read("detailed").payload == [2]


def test_file_backend_round_trip(tmp_path, clock):
    cache = CacheStore(FileBackend(tmp_path / "cache"), clock=clock)

    cache.write("models", [{"id": "x/y"}])

    assert (tmp_path / "cache" / "models.json").exists()
    assert cache.read("models").payload == [{"id": "x/y"}]

    cache.invalidate("models")
    assert not (tmp_path / "cache" / "models.json").exists()


def test_is_fresh_boundary():
    assert is_fresh(0, 999, 1000)
    assert not is_fresh(0, 1000, 1000)
