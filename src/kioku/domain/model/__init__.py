"""Canonical media, library and account model."""

from __future__ import annotations

from .account import USERNAME_KEY, ExternalAccount, UserData
from .enums import (
    Genre,
    ImportMethod,
    LibraryStatus,
    MediaFormat,
    MediaRating,
    MediaStatus,
    MediaType,
    ProviderCode,
)
from .media import (
    MAX_SCORE,
    LibraryEntry,
    MappingId,
    Media,
    MediaMapping,
    MediaTitle,
    make_mapping,
)

__all__ = [
    "MAX_SCORE",
    "USERNAME_KEY",
    "ExternalAccount",
    "Genre",
    "ImportMethod",
    "LibraryEntry",
    "LibraryStatus",
    "MappingId",
    "Media",
    "MediaFormat",
    "MediaMapping",
    "MediaRating",
    "MediaStatus",
    "MediaTitle",
    "MediaType",
    "ProviderCode",
    "UserData",
    "make_mapping",
]
