"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class ProviderCode(StrEnum):
    MYANIMELIST = "myanimelist"


class MediaType(StrEnum):
    ANIME = "anime"
    MANGA = "manga"


class Genre(StrEnum):
    ACTION = "action"
    ADVENTURE = "adventure"
    COMEDY = "comedy"
    DRAMA = "drama"
    ECCHI = "ecchi"
    FANTASY = "fantasy"
    HORROR = "horror"
    MYSTERY = "mystery"
    ROMANCE = "romance"
    SCI_FI = "sci-fi"
    SLICE_OF_LIFE = "slice-of-life"
    SPORTS = "sports"
    SUPERNATURAL = "supernatural"
    SUSPENSE = "suspense"
    YAOI = "yaoi"
    YURI = "yuri"


class MediaStatus(StrEnum):
    NOT_STARTED = "not-started"
    IN_PROGRESS = "in-progress"
    FINISHED = "finished"


class MediaFormat(StrEnum):
    TV = "tv"
    MOVIE = "movie"
    SPECIAL = "special"
    OVA = "ova"
    ONA = "ona"
    MUSIC = "music"


class MediaRating(StrEnum):
    G = "G"
    PG = "PG"
    PG13 = "PG13"
    R = "R"
    R_PLUS = "R+"
    RX = "RX"


class LibraryStatus(StrEnum):
    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    PAUSED = "paused"
    DROPPED = "dropped"
    PLANNED = "planned"


class ImportMethod(StrEnum):
    """Conflict policy applied to library entries during an import."""

    OVERRIDE = "override"
    KEEP = "keep"
    LATEST = "latest"
