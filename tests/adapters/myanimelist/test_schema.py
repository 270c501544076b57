from __future__ import annotations

from datetime import date

import pytest
from pydantic import ValidationError

from kioku.adapters.myanimelist.schema import (
    JikanAnimeResponse,
    JikanMangaResponse,
    JikanUserResponse,
    MalAnimeListItem,
    MalListPage,
    MalMangaListItem,
)
from tests.helpers.library import load_payload


def test_jikan_anime_titles_and_images() -> None:
    anime = JikanAnimeResponse.model_validate(
        load_payload("myanimelist", "jikan_anime.json")
    ).data

    assert anime.mal_id == 1
    assert anime.title_of("Default") == "Cowboy Bebop"
    assert anime.title_of("Japanese") == "カウボーイビバップ"
    assert anime.title_of("Synonym") is None
    assert anime.images.best_url == "https://cdn.myanimelist.net/images/anime/4/19644l.webp"
    assert anime.aired.from_ == date(1998, 4, 3)
    assert anime.aired.to == date(1999, 4, 24)


def test_jikan_manga_without_end_date() -> None:
    manga = JikanMangaResponse.model_validate(load_payload("myanimelist", "jikan_manga.json")).data

    assert manga.published.from_ == date(1989, 8, 25)
    assert manga.published.to is None
    assert manga.chapters is None


def test_jikan_user_falls_back_to_jpg_image() -> None:
    payload = load_payload("myanimelist", "jikan_user.json")
    del payload["data"]["images"]["webp"]

    user = JikanUserResponse.model_validate(payload).data

    assert user.username == "Xinil"
    assert user.images.best_url == "https://cdn.myanimelist.net/images/userimages/4213.jpg"


def test_list_item_parses_partial_dates_and_blank_titles() -> None:
    page = MalListPage.model_validate(load_payload("myanimelist", "animelist_page1.json"))

    naruto = MalAnimeListItem.model_validate(page.data[1])
    assert naruto.node.start_date == date(2002, 10, 1)
    assert naruto.node.alternative_titles is not None
    assert naruto.node.alternative_titles.ja is None
    assert naruto.node.image_url == "https://cdn.myanimelist.net/images/anime/13/17405.jpg"
    assert naruto.list_status.comments is None
    assert page.paging.next is not None


def test_manga_list_page_without_next_link() -> None:
    page = MalListPage.model_validate(load_payload("myanimelist", "mangalist.json"))

    item = MalMangaListItem.model_validate(page.data[0])
    assert item.list_status.start_date == date(2015, 3, 1)
    assert item.list_status.num_times_reread == 2
    assert page.paging.next is None


def test_list_page_keeps_malformed_rows_raw() -> None:
    page = MalListPage.model_validate(
        {"data": [{"node": {"id": "not a number"}}], "paging": {}, "something_new": True}
    )

    assert len(page.data) == 1
    with pytest.raises(ValidationError):
        MalAnimeListItem.model_validate(page.data[0])


def test_impossible_calendar_date_is_rejected() -> None:
    row = {"node": {"id": 1, "title": "x"}, "list_status": {"finish_date": "2023-02-30"}}

    with pytest.raises(ValidationError):
        MalMangaListItem.model_validate(row)
