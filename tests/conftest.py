import json

import httpx
import pytest

from llm_dashboard.common.cache_store import CacheStore, MemoryBackend
from llm_dashboard.common.schemas import CatalogEntry


def raw_entry(**overrides) -> dict:
    """Build a listing item shaped like an OpenRouter ``/models`` entry."""
    entry = {
        "id": "openai/gpt-4o",
        "name": "OpenAI: GPT-4o",
        "created": 1715367049,
        "description": "A general purpose model.",
        "architecture": {
            "modality": "text+image->text",
            "input_modalities": ["text", "image"],
            "output_modalities": ["text"],
            "tokenizer": "GPT",
            "instruct_type": None,
        },
        "context_length": 128000,
        "top_provider": {
            "context_length": 128000,
            "max_completion_tokens": 16384,
            "is_moderated": True,
        },
        "pricing": {
            "prompt": "0.0000025",
            "completion": "0.00001",
            "image": "0.003613",
            "request": "0",
        },
        "per_request_limits": None,
        "supported_parameters": ["max_tokens", "temperature", "tools"],
    }
    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(entry.get(key), dict):
            entry[key] = {**entry[key], **value}
        else:
            entry[key] = value
    return entry


def make_entry(**overrides) -> CatalogEntry:
    return CatalogEntry.model_validate(raw_entry(**overrides))


class FakeClock:
    """Controllable replacement for ``time.time``."""

    def __init__(self, now: float = 1_700_000_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class ListingServer:
    """Scripted responses for the model listing endpoint."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.requests = 0

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests += 1
        response = self.responses.pop(0) if len(self.responses) > 1 else self.responses[0]
        if isinstance(response, httpx.Response):
            return response
        return httpx.Response(200, content=json.dumps(response))

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handler))


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def backend():
    return MemoryBackend()


@pytest.fixture
def cache(backend, clock):
    return CacheStore(backend, ttl_seconds=3600, clock=clock)
