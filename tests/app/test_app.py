from __future__ import annotations

import pytest

from kioku.app import KiokuApp
from kioku.domain.errors import UnsupportedCapabilityError
from kioku.domain.model import ImportMethod, MediaType, ProviderCode
from kioku.domain.ports.providers import ImportResult
from tests.helpers.library import FakeLocalStore, FakeProvider, make_entry, make_media, mapping_for


def _app(store: FakeLocalStore, provider: FakeProvider) -> KiokuApp:
    def provider_builder(code: ProviderCode, _store: object) -> FakeProvider:
        assert code is ProviderCode.MYANIMELIST
        return provider

    return KiokuApp(store_factory=lambda: store, provider_builder=provider_builder)  # type: ignore[arg-type]


def test_link_connect_and_import_with_default_method() -> None:
    store = FakeLocalStore()
    provider = FakeProvider(import_result=ImportResult(fetched=1, inserted=1))
    app = _app(store, provider)

    account = app.link_account("myanimelist")
    app.connect_account(account.id, "Xinil")
    result = app.import_library(account.id, MediaType.ANIME)

    assert result.inserted == 1
    assert provider.import_calls == [(MediaType.ANIME, ImportMethod.LATEST)]
    assert [item.id for item in app.list_accounts()] == [account.id]


def test_import_with_explicit_method() -> None:
    store = FakeLocalStore()
    provider = FakeProvider()
    app = _app(store, provider)
    account = app.link_account(ProviderCode.MYANIMELIST)
    app.connect_account(account.id, "Xinil")

    app.import_library(account.id, MediaType.ANIME, method=ImportMethod.OVERRIDE)

    assert provider.import_calls == [(MediaType.ANIME, ImportMethod.OVERRIDE)]


def test_link_unknown_provider() -> None:
    app = _app(FakeLocalStore(), FakeProvider())

    with pytest.raises(UnsupportedCapabilityError):
        app.link_account("anilist")


def test_get_media_refreshes_cached_copy() -> None:
    store = FakeLocalStore()
    store.media.upsert(make_media(1, title="Stale"))
    app = _app(store, FakeProvider(lookup=make_media(1, title="Fresh")))

    media, failed = app.get_media("myanimelist", MediaType.ANIME, "1")

    assert not failed
    assert media is not None
    cached = store.media.get(mapping_for(1))
    assert cached is not None
    assert cached.title.romaji == "Fresh"


def test_search_media_passes_options() -> None:
    provider = FakeProvider(search_results=[make_media(1)])
    app = _app(FakeLocalStore(), provider)

    results, failed = app.search_media(
        "myanimelist", MediaType.ANIME, "bebop", sort_by="score", limit=5
    )

    assert not failed
    assert len(results) == 1
    (options,) = provider.search_calls
    assert (options.query, options.sort_by, options.limit) == ("bebop", "score", 5)


def test_library_joins_media_and_filters_by_type() -> None:
    store = FakeLocalStore()
    store.media.upsert(make_media(1))
    store.library.upsert(make_entry(1))
    store.media.upsert(make_media(2, media_type=MediaType.MANGA))
    store.library.upsert(make_entry(2, media_type=MediaType.MANGA))
    app = _app(store, FakeProvider())

    rows = app.library(MediaType.MANGA)

    assert [row.entry.mapping for row in rows] == [mapping_for(2, MediaType.MANGA)]
    assert rows[0].media is not None
    assert len(app.library()) == 2
