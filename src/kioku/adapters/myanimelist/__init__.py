"""Public interface for the MyAnimeList adapter."""

from __future__ import annotations

from .client import MYANIMELIST_PROVIDER_CONFIG, MyAnimeListProvider, resolve_import_method
from .normalize import (
    normalize_duration,
    normalize_format,
    normalize_genre,
    normalize_library_status,
    normalize_rating,
    normalize_status,
)
from .translator import translate_jikan_media, translate_list_item

__all__ = [
    "MYANIMELIST_PROVIDER_CONFIG",
    "MyAnimeListProvider",
    "normalize_duration",
    "normalize_format",
    "normalize_genre",
    "normalize_library_status",
    "normalize_rating",
    "normalize_status",
    "resolve_import_method",
    "translate_jikan_media",
    "translate_list_item",
]
