"""Translate MyAnimeList/Jikan payloads into canonical media and library records."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from kioku.domain.model import (
    MAX_SCORE,
    Genre,
    LibraryEntry,
    Media,
    MediaFormat,
    MediaRating,
    MediaTitle,
    MediaType,
    ProviderCode,
    make_mapping,
)
from kioku.domain.reconciliation import ImportCandidate

from .normalize import (
    normalize_duration,
    normalize_format,
    normalize_genre,
    normalize_library_status,
    normalize_rating,
    normalize_status,
)
from .schema import JikanAnime, MalAnimeListItem

if TYPE_CHECKING:
    from collections.abc import Iterable
    from datetime import date

    from .schema import (
        JikanManga,
        JikanMedia,
        MalListItem,
        MalListStatus,
        MalMangaListItem,
        MalNode,
    )

log = getLogger(__name__)

# MyAnimeList scores are 1-10.
_SCORE_SCALE = MAX_SCORE // 10


def _genres(names: Iterable[str]) -> frozenset[Genre]:
    return frozenset(genre for genre in map(normalize_genre, names) if genre is not None)


def _consistent_finish(mapping: str, start: date | None, finish: date | None) -> date | None:
    if start is not None and finish is not None and finish < start:
        log.debug("Dropping finish date %s before start %s for %s", finish, start, mapping)
        return None
    return finish


def _positive(value: int | None) -> int | None:
    # The list API reports unknown counts as 0.
    return value if value else None


def _is_adult_rating(rating: MediaRating | None) -> bool:
    return rating is MediaRating.RX


# Jikan ----------------------------------------------------------------------


def _jikan_title(payload: JikanMedia) -> MediaTitle:
    return MediaTitle(
        romaji=payload.title_of("Default"),
        english=payload.title_of("English"),
        native=payload.title_of("Japanese"),
    )


def translate_jikan_anime(payload: JikanAnime) -> Media:
    mapping = make_mapping(ProviderCode.MYANIMELIST, MediaType.ANIME, payload.mal_id)
    rating = normalize_rating(payload.rating)
    start = payload.aired.from_
    return Media(
        type=MediaType.ANIME,
        mapping=mapping,
        title=_jikan_title(payload),
        image_url=payload.images.best_url,
        episodes=payload.episodes,
        start_date=start,
        finish_date=_consistent_finish(mapping, start, payload.aired.to),
        genres=_genres(genre.name for genre in payload.genres),
        status=normalize_status(payload.status),
        format=normalize_format(payload.type) or MediaFormat.TV,
        duration=normalize_duration(payload.duration) or None,
        rating=rating,
        is_adult=_is_adult_rating(rating) or bool(payload.explicit_genres),
    )


def translate_jikan_manga(payload: JikanManga) -> Media:
    mapping = make_mapping(ProviderCode.MYANIMELIST, MediaType.MANGA, payload.mal_id)
    start = payload.published.from_
    return Media(
        type=MediaType.MANGA,
        mapping=mapping,
        title=_jikan_title(payload),
        image_url=payload.images.best_url,
        chapters=payload.chapters,
        volumes=payload.volumes,
        start_date=start,
        finish_date=_consistent_finish(mapping, start, payload.published.to),
        genres=_genres(genre.name for genre in payload.genres),
        status=normalize_status(payload.status),
        is_adult=bool(payload.explicit_genres),
    )


def translate_jikan_media(payload: JikanAnime | JikanManga) -> Media:
    if isinstance(payload, JikanAnime):
        return translate_jikan_anime(payload)
    return translate_jikan_manga(payload)


# MyAnimeList v2 list --------------------------------------------------------


def _node_title(node: MalNode) -> MediaTitle:
    alternative = node.alternative_titles
    return MediaTitle(
        romaji=node.title,
        english=alternative.en if alternative else None,
        native=alternative.ja if alternative else None,
    )


def _score(status: MalListStatus) -> int:
    return min(max(status.score, 0), 10) * _SCORE_SCALE


def _translate_anime_item(item: MalAnimeListItem) -> ImportCandidate:
    node = item.node
    status = item.list_status
    mapping = make_mapping(ProviderCode.MYANIMELIST, MediaType.ANIME, node.id)
    rating = normalize_rating(node.rating)
    media = Media(
        type=MediaType.ANIME,
        mapping=mapping,
        title=_node_title(node),
        image_url=node.image_url,
        episodes=_positive(node.num_episodes),
        start_date=node.start_date,
        finish_date=_consistent_finish(mapping, node.start_date, node.end_date),
        genres=_genres(genre.name for genre in node.genres),
        status=normalize_status(node.status),
        format=normalize_format(node.media_type) or MediaFormat.TV,
        duration=_positive(node.average_episode_duration),
        rating=rating,
        is_adult=_is_adult_rating(rating) or node.is_explicit,
    )
    entry = LibraryEntry(
        type=MediaType.ANIME,
        mapping=mapping,
        status=normalize_library_status(status.status),
        score=_score(status),
        episode_progress=status.num_episodes_watched,
        restarts=status.num_times_rewatched,
        start_date=status.start_date,
        finish_date=status.finish_date,
        notes=status.comments or "",
    )
    return ImportCandidate(media=media, entry=entry)


def _translate_manga_item(item: MalMangaListItem) -> ImportCandidate:
    node = item.node
    status = item.list_status
    mapping = make_mapping(ProviderCode.MYANIMELIST, MediaType.MANGA, node.id)
    media = Media(
        type=MediaType.MANGA,
        mapping=mapping,
        title=_node_title(node),
        image_url=node.image_url,
        chapters=_positive(node.num_chapters),
        volumes=_positive(node.num_volumes),
        start_date=node.start_date,
        finish_date=_consistent_finish(mapping, node.start_date, node.end_date),
        genres=_genres(genre.name for genre in node.genres),
        status=normalize_status(node.status),
        is_adult=node.is_explicit,
    )
    entry = LibraryEntry(
        type=MediaType.MANGA,
        mapping=mapping,
        status=normalize_library_status(status.status),
        score=_score(status),
        chapter_progress=status.num_chapters_read,
        volume_progress=status.num_volumes_read,
        restarts=status.num_times_reread,
        start_date=status.start_date,
        finish_date=status.finish_date,
        notes=status.comments or "",
    )
    return ImportCandidate(media=media, entry=entry)


def translate_list_item(item: MalListItem) -> ImportCandidate:
    """Build the ``(Media, LibraryEntry)`` pair for one list row."""

    if isinstance(item, MalAnimeListItem):
        return _translate_anime_item(item)
    return _translate_manga_item(item)
