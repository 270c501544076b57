"""Map MyAnimeList/Jikan vocabulary onto the canonical enums.

Every function is total and case-insensitive. ``None`` means the value has no
canonical counterpart; callers drop it rather than treating it as an error.
"""

from __future__ import annotations

from typing import Final

from kioku.domain.model import Genre, LibraryStatus, MediaFormat, MediaRating, MediaStatus

_GENRES: Final[dict[str, Genre]] = {
    "action": Genre.ACTION,
    "adventure": Genre.ADVENTURE,
    "boys love": Genre.YAOI,
    "shounen ai": Genre.YAOI,
    "comedy": Genre.COMEDY,
    "drama": Genre.DRAMA,
    "ecchi": Genre.ECCHI,
    "fantasy": Genre.FANTASY,
    "girls love": Genre.YURI,
    "shoujo ai": Genre.YURI,
    "horror": Genre.HORROR,
    "mystery": Genre.MYSTERY,
    "mistery": Genre.MYSTERY,
    "romance": Genre.ROMANCE,
    "sci-fi": Genre.SCI_FI,
    "slice of life": Genre.SLICE_OF_LIFE,
    "sports": Genre.SPORTS,
    "supernatural": Genre.SUPERNATURAL,
    "suspense": Genre.SUSPENSE,
}

_STATUSES: Final[dict[str, MediaStatus]] = {
    "not yet aired": MediaStatus.NOT_STARTED,
    "not yet started": MediaStatus.NOT_STARTED,
    "not yet published": MediaStatus.NOT_STARTED,
    "upcoming": MediaStatus.NOT_STARTED,
    "currently airing": MediaStatus.IN_PROGRESS,
    "currently publishing": MediaStatus.IN_PROGRESS,
    "publishing": MediaStatus.IN_PROGRESS,
    "on hiatus": MediaStatus.IN_PROGRESS,
    "finished airing": MediaStatus.FINISHED,
    "finished": MediaStatus.FINISHED,
    "discontinued": MediaStatus.FINISHED,
}

_FORMATS: Final[dict[str, MediaFormat]] = {
    "tv": MediaFormat.TV,
    "movie": MediaFormat.MOVIE,
    "special": MediaFormat.SPECIAL,
    "tv special": MediaFormat.SPECIAL,
    "ova": MediaFormat.OVA,
    "ona": MediaFormat.ONA,
    "music": MediaFormat.MUSIC,
}

_RATINGS: Final[dict[str, MediaRating]] = {
    "g": MediaRating.G,
    "pg": MediaRating.PG,
    "pg-13": MediaRating.PG13,
    "r": MediaRating.R,
    "r+": MediaRating.R_PLUS,
    "rx": MediaRating.RX,
}

_LIBRARY_STATUSES: Final[dict[str, LibraryStatus]] = {
    "watching": LibraryStatus.IN_PROGRESS,
    "reading": LibraryStatus.IN_PROGRESS,
    "completed": LibraryStatus.COMPLETED,
    "on hold": LibraryStatus.PAUSED,
    "dropped": LibraryStatus.DROPPED,
    "plan to watch": LibraryStatus.PLANNED,
    "plan to read": LibraryStatus.PLANNED,
}

_SECONDS_PER_UNIT: Final[dict[str, int]] = {
    "hr": 3600,
    "hrs": 3600,
    "min": 60,
    "mins": 60,
    "sec": 1,
    "secs": 1,
}


def _key(value: str | None) -> str:
    if not value:
        return ""
    return " ".join(value.replace("_", " ").lower().split())


def normalize_genre(value: str | None) -> Genre | None:
    return _GENRES.get(_key(value))


def normalize_status(value: str | None) -> MediaStatus | None:
    return _STATUSES.get(_key(value))


def normalize_format(value: str | None) -> MediaFormat | None:
    return _FORMATS.get(_key(value))


def normalize_rating(value: str | None) -> MediaRating | None:
    """Accept ``"PG-13 - Teens 13 or older"`` (Jikan) as well as ``"pg_13"`` (v2)."""

    if not value:
        return None
    code = value.split(" - ", 1)[0].strip().lower().replace("_", "-")
    return _RATINGS.get(code)


def normalize_library_status(value: str | None) -> LibraryStatus:
    return _LIBRARY_STATUSES.get(_key(value), LibraryStatus.NOT_STARTED)


def normalize_duration(value: str | None) -> int:
    """Convert ``"1 hr 30 min"``-style text to seconds.

    Each integer is paired with the token that follows it; pairs whose unit is
    not recognised contribute nothing, so ``"24 min per ep"`` is 1440.
    """

    tokens = _key(value).replace(".", " ").split()
    total = 0
    for number, unit in zip(tokens, tokens[1:], strict=False):
        if not number.isdecimal():
            continue
        total += int(number) * _SECONDS_PER_UNIT.get(unit, 0)
    return total
