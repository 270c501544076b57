"""Canonical catalog and library records shared by every provider."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date  # noqa: TC003
from typing import Final

from .enums import (
    Genre,
    LibraryStatus,
    MediaFormat,
    MediaRating,
    MediaStatus,
    MediaType,
    ProviderCode,
)

MAPPING_SEPARATOR: Final[str] = ":"
MAX_SCORE: Final[int] = 100

type MappingId = str
"""Cross-provider natural key, ``<provider>:<media type>:<native id>``."""


@dataclass(frozen=True, slots=True)
class MediaMapping:
    provider: ProviderCode
    media_type: MediaType
    native_id: str

    def __post_init__(self) -> None:
        if not self.native_id or MAPPING_SEPARATOR in self.native_id:
            raise ValueError(f"Invalid native id for mapping: {self.native_id!r}")

    def format(self) -> MappingId:
        return MAPPING_SEPARATOR.join(
            (self.provider.value.lower(), self.media_type.value, self.native_id)
        )

    def __str__(self) -> str:
        return self.format()

    @classmethod
    def parse(cls, value: str) -> MediaMapping:
        parts = value.split(MAPPING_SEPARATOR)
        if len(parts) != 3:  # noqa: PLR2004
            raise ValueError(f"Malformed mapping: {value!r}")
        provider, media_type, native_id = parts
        try:
            return cls(
                provider=ProviderCode(provider.lower()),
                media_type=MediaType(media_type),
                native_id=native_id,
            )
        except ValueError as exc:
            raise ValueError(f"Malformed mapping: {value!r}") from exc


def make_mapping(
    provider: ProviderCode, media_type: MediaType, native_id: int | str
) -> MappingId:
    mapping = MediaMapping(provider=provider, media_type=media_type, native_id=str(native_id))
    return mapping.format()


def _require_non_negative(name: str, value: int | None) -> None:
    if value is not None and value < 0:
        raise ValueError(f"{name} must be non-negative, got {value}")


def _require_date_order(start: date | None, finish: date | None) -> None:
    if start is not None and finish is not None and finish < start:
        raise ValueError(f"finish_date {finish} is before start_date {start}")


@dataclass(frozen=True, slots=True)
class MediaTitle:
    romaji: str | None = None
    english: str | None = None
    native: str | None = None

    @property
    def preferred(self) -> str | None:
        return self.english or self.romaji or self.native


@dataclass(frozen=True, slots=True, kw_only=True)
class Media:
    """Catalog entry as cached from a provider.

    Media rows behave as a cache: a fresh fetch or import replaces the stored
    record with the same ``mapping`` wholesale, and nothing ever deletes them.
    """

    type: MediaType
    mapping: MappingId
    title: MediaTitle = field(default_factory=MediaTitle)
    image_url: str | None = None
    banner_url: str | None = None
    episodes: int | None = None
    chapters: int | None = None
    volumes: int | None = None
    start_date: date | None = None
    finish_date: date | None = None
    genres: frozenset[Genre] = frozenset()
    status: MediaStatus | None = None
    format: MediaFormat | None = None
    duration: int | None = None
    rating: MediaRating | None = None
    is_adult: bool = False

    def __post_init__(self) -> None:
        for name in ("episodes", "chapters", "volumes", "duration"):
            _require_non_negative(name, getattr(self, name))
        _require_date_order(self.start_date, self.finish_date)
        if not isinstance(self.genres, frozenset):
            object.__setattr__(self, "genres", frozenset(self.genres))


@dataclass(frozen=True, slots=True, kw_only=True)
class LibraryEntry:
    """The user's own record for one ``Media``; shares its ``mapping`` key."""

    type: MediaType
    mapping: MappingId
    favorite: bool = False
    status: LibraryStatus = LibraryStatus.NOT_STARTED
    score: int = 0
    episode_progress: int = 0
    chapter_progress: int = 0
    volume_progress: int = 0
    restarts: int = 0
    start_date: date | None = None
    finish_date: date | None = None
    notes: str = ""

    def __post_init__(self) -> None:
        if not 0 <= self.score <= MAX_SCORE:
            raise ValueError(f"score must be 0 (unset) or 1-{MAX_SCORE}, got {self.score}")
        for name in ("episode_progress", "chapter_progress", "volume_progress", "restarts"):
            _require_non_negative(name, getattr(self, name))

    @property
    def is_scored(self) -> bool:
        return self.score > 0
