"""Pydantic models describing the Jikan v4 and MyAnimeList v2 payloads."""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

TitleKind = Literal["Default", "English", "Japanese", "Synonym"]


def _parse_partial_date(value: object) -> object:
    """Accept ``YYYY``, ``YYYY-MM``, ``YYYY-MM-DD`` and ISO timestamps.

    Missing month/day default to 1; blank strings become ``None``.
    """

    if not isinstance(value, str):
        return value
    text = value.strip()
    if not text:
        return None
    if "T" in text:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    parts = [int(part) for part in text.split("-")]
    year, month, day = (*parts, 1, 1)[:3]
    return date(year, month, day)


def _blank_to_none(value: object) -> object:
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    return value


class MalBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


# Jikan (unofficial read API) ------------------------------------------------


class JikanImageSet(MalBaseModel):
    image_url: str | None = None
    small_image_url: str | None = None
    large_image_url: str | None = None


class JikanImages(MalBaseModel):
    jpg: JikanImageSet | None = None
    webp: JikanImageSet | None = None

    @property
    def best_url(self) -> str | None:
        for image_set in (self.webp, self.jpg):
            if image_set is None:
                continue
            url = image_set.large_image_url or image_set.image_url
            if url:
                return url
        return None


class JikanTitle(MalBaseModel):
    type: str
    title: str


class JikanNamedResource(MalBaseModel):
    mal_id: int | None = None
    name: str


class JikanDateRange(MalBaseModel):
    from_: date | None = Field(default=None, alias="from")
    to: date | None = None

    parse_dates = field_validator("from_", "to", mode="before")(_parse_partial_date)


class JikanMedia(MalBaseModel):
    """Fields shared by Jikan anime and manga resources."""

    mal_id: int
    url: str | None = None
    images: JikanImages = Field(default_factory=JikanImages)
    titles: list[JikanTitle] = Field(default_factory=list["JikanTitle"])
    title: str | None = None
    type: str | None = None
    status: str | None = None
    genres: list[JikanNamedResource] = Field(default_factory=list["JikanNamedResource"])
    explicit_genres: list[JikanNamedResource] = Field(
        default_factory=list["JikanNamedResource"]
    )

    def title_of(self, kind: TitleKind) -> str | None:
        for entry in self.titles:
            if entry.type == kind:
                return entry.title
        if kind == "Default":
            return self.title
        return None


class JikanAnime(JikanMedia):
    episodes: int | None = None
    aired: JikanDateRange = Field(default_factory=JikanDateRange)
    duration: str | None = None
    rating: str | None = None

    normalize_text = field_validator("duration", "rating", mode="before")(_blank_to_none)


class JikanManga(JikanMedia):
    chapters: int | None = None
    volumes: int | None = None
    published: JikanDateRange = Field(default_factory=JikanDateRange)


class JikanPagination(MalBaseModel):
    last_visible_page: int | None = None
    has_next_page: bool = False


class JikanAnimeSearchResponse(MalBaseModel):
    data: list[JikanAnime] = Field(default_factory=list["JikanAnime"])
    pagination: JikanPagination | None = None


class JikanMangaSearchResponse(MalBaseModel):
    data: list[JikanManga] = Field(default_factory=list["JikanManga"])
    pagination: JikanPagination | None = None


class JikanAnimeResponse(MalBaseModel):
    data: JikanAnime


class JikanMangaResponse(MalBaseModel):
    data: JikanManga


class JikanUser(MalBaseModel):
    mal_id: int | None = None
    username: str
    url: str | None = None
    images: JikanImages = Field(default_factory=JikanImages)


class JikanUserResponse(MalBaseModel):
    data: JikanUser


# MyAnimeList v2 (official list API) -----------------------------------------


class MalPicture(MalBaseModel):
    medium: str | None = None
    large: str | None = None

    @property
    def best_url(self) -> str | None:
        return self.large or self.medium


class MalAlternativeTitles(MalBaseModel):
    synonyms: list[str] = Field(default_factory=list)
    en: str | None = None
    ja: str | None = None

    normalize_titles = field_validator("en", "ja", mode="before")(_blank_to_none)


class MalGenre(MalBaseModel):
    id: int | None = None
    name: str


class MalNode(MalBaseModel):
    id: int
    title: str
    main_picture: MalPicture | None = None
    alternative_titles: MalAlternativeTitles | None = None
    start_date: date | None = None
    end_date: date | None = None
    nsfw: str | None = None
    genres: list[MalGenre] = Field(default_factory=list["MalGenre"])
    media_type: str | None = None
    status: str | None = None

    parse_dates = field_validator("start_date", "end_date", mode="before")(_parse_partial_date)

    @property
    def image_url(self) -> str | None:
        return self.main_picture.best_url if self.main_picture is not None else None

    @property
    def is_explicit(self) -> bool:
        return self.nsfw == "black"


class MalAnimeNode(MalNode):
    num_episodes: int | None = None
    rating: str | None = None
    average_episode_duration: int | None = None

    normalize_rating = field_validator("rating", mode="before")(_blank_to_none)


class MalMangaNode(MalNode):
    num_chapters: int | None = None
    num_volumes: int | None = None


class MalListStatus(MalBaseModel):
    status: str | None = None
    score: int = 0
    start_date: date | None = None
    finish_date: date | None = None
    comments: str | None = None
    updated_at: datetime | None = None

    parse_dates = field_validator("start_date", "finish_date", mode="before")(
        _parse_partial_date
    )


class MalAnimeListStatus(MalListStatus):
    num_episodes_watched: int = 0
    is_rewatching: bool = False
    num_times_rewatched: int = 0


class MalMangaListStatus(MalListStatus):
    num_chapters_read: int = 0
    num_volumes_read: int = 0
    is_rereading: bool = False
    num_times_reread: int = 0


class MalAnimeListItem(MalBaseModel):
    node: MalAnimeNode
    list_status: MalAnimeListStatus = Field(default_factory=MalAnimeListStatus)


class MalMangaListItem(MalBaseModel):
    node: MalMangaNode
    list_status: MalMangaListStatus = Field(default_factory=MalMangaListStatus)


class MalPaging(MalBaseModel):
    previous: str | None = None
    next: str | None = None


class MalListPage(MalBaseModel):
    """One page of a v2 list.

    Rows stay raw here and are validated one by one against
    ``MalAnimeListItem`` or ``MalMangaListItem``, so a single malformed row does
    not discard its neighbours.
    """

    data: list[dict[str, Any]] = Field(default_factory=list[dict[str, Any]])
    paging: MalPaging = Field(default_factory=MalPaging)


type MalListItem = MalAnimeListItem | MalMangaListItem
