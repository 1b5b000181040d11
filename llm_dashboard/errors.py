"""Exception types raised inside the model catalog engine."""

from typing import Optional


class CatalogError(Exception):
    """Base class for catalog engine errors."""


class UpstreamError(CatalogError):
    """The model listing endpoint failed or returned an unusable body."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class CacheCorruptionError(CatalogError):
    """A stored cache envelope could not be parsed."""


class EncoderFailure(CatalogError):
    """An exact tokenizer raised while encoding text."""
