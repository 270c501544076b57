"""Domain port definitions for adapters."""

from __future__ import annotations

from .providers import (
    Capability,
    ImportResult,
    MediaLookup,
    ProviderAdapter,
    ProviderConfig,
    SearchOptions,
    SearchResult,
)
from .store import DuplicateKeyError, LocalStore, RecordTable

__all__ = [
    "Capability",
    "DuplicateKeyError",
    "ImportResult",
    "LocalStore",
    "MediaLookup",
    "ProviderAdapter",
    "ProviderConfig",
    "RecordTable",
    "SearchOptions",
    "SearchResult",
]
