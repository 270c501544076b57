from __future__ import annotations

from datetime import date

from kioku.adapters.myanimelist import translate_jikan_media, translate_list_item
from kioku.adapters.myanimelist.schema import (
    JikanAnime,
    JikanAnimeResponse,
    JikanMangaResponse,
    MalAnimeListItem,
    MalMangaListItem,
)
from kioku.domain.model import (
    Genre,
    LibraryStatus,
    MediaFormat,
    MediaRating,
    MediaStatus,
    MediaType,
)
from tests.helpers.library import load_payload


def test_translate_jikan_anime() -> None:
    payload = JikanAnimeResponse.model_validate(load_payload("myanimelist", "jikan_anime.json"))

    media = translate_jikan_media(payload.data)

    assert media.type is MediaType.ANIME
    assert media.mapping == "myanimelist:anime:1"
    assert media.title.romaji == "Cowboy Bebop"
    assert media.title.english == "Cowboy Bebop"
    assert media.title.native == "カウボーイビバップ"
    assert media.episodes == 26
    assert media.start_date == date(1998, 4, 3)
    assert media.finish_date == date(1999, 4, 24)
    # "Award Winning" has no canonical genre and is dropped.
    assert media.genres == frozenset({Genre.ACTION, Genre.SCI_FI})
    assert media.status is MediaStatus.FINISHED
    assert media.format is MediaFormat.TV
    assert media.duration == 1440
    assert media.rating is MediaRating.R
    assert media.is_adult is False


def test_translate_jikan_manga() -> None:
    payload = JikanMangaResponse.model_validate(load_payload("myanimelist", "jikan_manga.json"))

    media = translate_jikan_media(payload.data)

    assert media.type is MediaType.MANGA
    assert media.mapping == "myanimelist:manga:2"
    assert media.status is MediaStatus.IN_PROGRESS
    assert media.format is None
    assert media.chapters is None
    assert media.finish_date is None
    assert Genre.HORROR in media.genres


def test_unknown_anime_format_defaults_to_tv() -> None:
    anime = JikanAnime.model_validate({"mal_id": 9, "type": "CM", "titles": []})

    media = translate_jikan_media(anime)

    assert media.format is MediaFormat.TV
    assert media.title.romaji is None
    assert media.duration is None


def test_finish_before_start_is_dropped() -> None:
    anime = JikanAnime.model_validate(
        {
            "mal_id": 10,
            "aired": {"from": "2020-05-01T00:00:00+00:00", "to": "2019-01-01T00:00:00+00:00"},
        }
    )

    media = translate_jikan_media(anime)

    assert media.start_date == date(2020, 5, 1)
    assert media.finish_date is None


def test_explicit_rating_marks_adult() -> None:
    anime = JikanAnime.model_validate({"mal_id": 11, "rating": "Rx - Hentai"})

    assert translate_jikan_media(anime).is_adult is True


def test_translate_anime_list_item() -> None:
    rows = load_payload("myanimelist", "animelist_page1.json")["data"]

    candidate = translate_list_item(MalAnimeListItem.model_validate(rows[0]))

    media, entry = candidate.media, candidate.entry
    assert candidate.mapping == "myanimelist:anime:1"
    assert media.image_url == "https://cdn.myanimelist.net/images/anime/4/19644l.jpg"
    assert media.duration == 1440
    assert media.rating is MediaRating.R
    assert media.format is MediaFormat.TV
    assert entry.status is LibraryStatus.COMPLETED
    assert entry.score == 90
    assert entry.episode_progress == 26
    assert entry.restarts == 1
    assert entry.start_date == date(2020, 1, 2)
    assert entry.finish_date == date(2020, 2, 1)
    assert entry.notes == ""


def test_unscored_list_item_keeps_zero_score() -> None:
    rows = load_payload("myanimelist", "animelist_page1.json")["data"]

    entry = translate_list_item(MalAnimeListItem.model_validate(rows[1])).entry

    assert entry.score == 0
    assert not entry.is_scored
    assert entry.status is LibraryStatus.IN_PROGRESS


def test_translate_manga_list_item() -> None:
    rows = load_payload("myanimelist", "mangalist.json")["data"]

    candidate = translate_list_item(MalMangaListItem.model_validate(rows[0]))

    media, entry = candidate.media, candidate.entry
    assert media.type is MediaType.MANGA
    # The list API reports unknown totals as zero.
    assert media.chapters is None
    assert media.volumes is None
    assert media.is_adult is False
    assert entry.status is LibraryStatus.PAUSED
    assert entry.score == 100
    assert entry.chapter_progress == 364
    assert entry.volume_progress == 40
    assert entry.restarts == 2
    assert entry.notes == "waiting for the next volume"
