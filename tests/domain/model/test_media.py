from __future__ import annotations

from datetime import date

import pytest

from kioku.domain.model import (
    USERNAME_KEY,
    ExternalAccount,
    Genre,
    LibraryEntry,
    Media,
    MediaMapping,
    MediaTitle,
    MediaType,
    ProviderCode,
    UserData,
    make_mapping,
)


def test_make_mapping_formats_canonical_identifier() -> None:
    assert make_mapping(ProviderCode.MYANIMELIST, MediaType.ANIME, 42) == "myanimelist:anime:42"


def test_parse_mapping() -> None:
    mapping = MediaMapping.parse("myanimelist:manga:2")

    assert mapping == MediaMapping(ProviderCode.MYANIMELIST, MediaType.MANGA, "2")
    assert str(mapping) == "myanimelist:manga:2"


@pytest.mark.parametrize(
    "value",
    ["", "myanimelist:anime", "kitsu:anime:1", "myanimelist:novel:1", "a:b:c:d"],
)
def test_parse_rejects_malformed_mapping(value: str) -> None:
    with pytest.raises(ValueError, match="Malformed mapping"):
        MediaMapping.parse(value)


def test_native_id_cannot_contain_separator() -> None:
    with pytest.raises(ValueError, match="Invalid native id"):
        make_mapping(ProviderCode.MYANIMELIST, MediaType.ANIME, "1:2")


def test_media_rejects_negative_counts() -> None:
    with pytest.raises(ValueError, match="episodes"):
        Media(type=MediaType.ANIME, mapping="myanimelist:anime:1", episodes=-1)


def test_media_rejects_finish_before_start() -> None:
    with pytest.raises(ValueError, match="finish_date"):
        Media(
            type=MediaType.ANIME,
            mapping="myanimelist:anime:1",
            start_date=date(2020, 1, 2),
            finish_date=date(2020, 1, 1),
        )


def test_media_coerces_genres_to_frozenset() -> None:
    media = Media(
        type=MediaType.ANIME,
        mapping="myanimelist:anime:1",
        genres={Genre.ACTION},  # type: ignore[arg-type]
    )

    assert media.genres == frozenset({Genre.ACTION})


def test_preferred_title_falls_back() -> None:
    assert MediaTitle(romaji="Shingeki no Kyojin", english="Attack on Titan").preferred == (
        "Attack on Titan"
    )
    assert MediaTitle(native="進撃の巨人").preferred == "進撃の巨人"
    assert MediaTitle().preferred is None


@pytest.mark.parametrize("score", [-1, 101])
def test_library_entry_score_range(score: int) -> None:
    with pytest.raises(ValueError, match="score"):
        LibraryEntry(type=MediaType.ANIME, mapping="myanimelist:anime:1", score=score)


def test_library_entry_defaults() -> None:
    entry = LibraryEntry(type=MediaType.MANGA, mapping="myanimelist:manga:1")

    assert entry.score == 0
    assert not entry.is_scored
    assert entry.notes == ""
    assert not entry.favorite


def test_account_connection_state() -> None:
    linked = ExternalAccount(provider=ProviderCode.MYANIMELIST)
    pending = ExternalAccount(
        id=linked.id, provider=ProviderCode.MYANIMELIST, auth={USERNAME_KEY: "Xinil"}
    )
    connected = ExternalAccount(
        id=linked.id,
        provider=ProviderCode.MYANIMELIST,
        auth={USERNAME_KEY: "Xinil"},
        user=UserData(id="4213", name="Xinil"),
    )

    assert linked.username is None
    assert not linked.is_connected
    assert pending.username == "Xinil"
    assert not pending.is_connected
    assert connected.is_connected
    assert ExternalAccount(provider=ProviderCode.MYANIMELIST).id != linked.id
