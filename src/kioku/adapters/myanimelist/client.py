"""MyAnimeList provider adapter.

Search, detail and profile lookups go through the public Jikan v4 mirror; list
imports use the official v2 list endpoints, which only need the application's
client id and the username.
"""

from __future__ import annotations

import asyncio
from logging import getLogger
from typing import TYPE_CHECKING, Any, Final
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from kioku.adapters.http_resilience import ResilientClient
from kioku.config.myanimelist import get_myanimelist_config
from kioku.domain.errors import AuthFailure, TransportFailure
from kioku.domain.model import ImportMethod, MediaType, ProviderCode, UserData
from kioku.domain.ports.providers import (
    Capability,
    ImportResult,
    MediaLookup,
    ProviderConfig,
    SearchResult,
)
from kioku.domain.reconciliation import ReconciliationEngine

from .schema import (
    JikanAnimeResponse,
    JikanAnimeSearchResponse,
    JikanMangaResponse,
    JikanMangaSearchResponse,
    JikanUserResponse,
    MalAnimeListItem,
    MalListPage,
    MalMangaListItem,
)
from .translator import translate_jikan_media, translate_list_item

if TYPE_CHECKING:
    from collections.abc import Callable

    from kioku.config.http_resilience import ResilienceConfig
    from kioku.config.myanimelist import MyAnimeListConfig
    from kioku.domain.model import ExternalAccount, Media
    from kioku.domain.ports.providers import ProviderAdapter, SearchOptions
    from kioku.domain.ports.store import LocalStore
    from kioku.domain.reconciliation import ImportCandidate

log = getLogger(__name__)

MYANIMELIST_PROVIDER_CONFIG: Final = ProviderConfig(
    name="MyAnimeList",
    search=frozenset({MediaType.ANIME, MediaType.MANGA}),
    import_list=frozenset({MediaType.ANIME, MediaType.MANGA}),
)

# Jikan caps search pages at 25 results.
JIKAN_MAX_SEARCH_LIMIT = 25

_COMMON_LIST_FIELDS = (
    "list_status",
    "alternative_titles",
    "start_date",
    "end_date",
    "genres",
    "media_type",
    "status",
    "nsfw",
)
_LIST_FIELDS: Final[dict[MediaType, str]] = {
    MediaType.ANIME: ",".join(
        (*_COMMON_LIST_FIELDS, "num_episodes", "average_episode_duration", "rating")
    ),
    MediaType.MANGA: ",".join((*_COMMON_LIST_FIELDS, "num_chapters", "num_volumes")),
}

_AUTH_STATUS_CODES = frozenset({401, 403, 404})

_LIST_ITEM_MODELS: Final[dict[MediaType, type[MalAnimeListItem] | type[MalMangaListItem]]] = {
    MediaType.ANIME: MalAnimeListItem,
    MediaType.MANGA: MalMangaListItem,
}


def _segment(value: str) -> str:
    """Quote one URL path segment so user input cannot alter the path or query."""
    return quote(value, safe="")


def _search_failed() -> SearchResult:
    return SearchResult([], failed=True)


def _lookup_failed() -> MediaLookup:
    return MediaLookup(None, failed=True)


def _should_cache_payload(payload: object) -> bool:
    # Jikan answers upstream MyAnimeList outages with a 200 error envelope.
    return isinstance(payload, dict) and "data" in payload


def _default_client_factory(config: ResilienceConfig) -> ResilientClient:
    return ResilientClient(config)


def resolve_import_method(*, override: bool, method: ImportMethod | None) -> ImportMethod:
    if method is not None:
        return method
    return ImportMethod.OVERRIDE if override else ImportMethod.KEEP


class MyAnimeListProvider:
    """Provider adapter backed by Jikan (reads) and the MyAnimeList v2 list API."""

    def __init__(
        self,
        *,
        store: LocalStore,
        config: MyAnimeListConfig | None = None,
        client_factory: Callable[[ResilienceConfig], ResilientClient] | None = None,
    ) -> None:
        self._config = config or get_myanimelist_config(cache_predicate=_should_cache_payload)
        self._client_factory = client_factory or _default_client_factory
        self._engine = ReconciliationEngine(store)

    @property
    def code(self) -> ProviderCode:
        return ProviderCode.MYANIMELIST

    @property
    def config(self) -> ProviderConfig:
        return MYANIMELIST_PROVIDER_CONFIG

    # Public sync API -------------------------------------------------------

    def search(self, media_type: MediaType, options: SearchOptions) -> SearchResult:
        if not self._check_supported(Capability.SEARCH, media_type):
            return _search_failed()
        try:
            results = asyncio.run(self._search_async(media_type, options))
        except (httpx.HTTPError, ValidationError) as exc:
            log.warning("MyAnimeList %s search for %r failed: %s", media_type, options.query, exc)
            return _search_failed()
        return SearchResult(results, failed=False)

    def get_media(self, media_type: MediaType, *, media_id: str) -> MediaLookup:
        if not self._check_supported(Capability.SEARCH, media_type):
            return _lookup_failed()
        try:
            media = asyncio.run(self._get_media_async(media_type, media_id))
        except (httpx.HTTPError, ValidationError) as exc:
            log.warning("MyAnimeList %s %s lookup failed: %s", media_type, media_id, exc)
            return _lookup_failed()
        return MediaLookup(media, failed=False)

    def import_list(
        self,
        media_type: MediaType,
        account: ExternalAccount,
        *,
        override: bool = False,
        method: ImportMethod | None = None,
    ) -> ImportResult:
        result = ImportResult()
        if not self._check_supported(Capability.IMPORT, media_type):
            result.failed = True
            return result
        username = account.username
        if username is None:
            log.warning("Account %s has no MyAnimeList username; nothing to import", account.id)
            result.failed = True
            return result

        resolved = resolve_import_method(override=override, method=method)
        log.info("Importing %s list of %s with method=%s", media_type, username, resolved)
        try:
            asyncio.run(self._import_list_async(media_type, username, resolved, result))
        except (httpx.HTTPError, ValidationError) as exc:
            log.warning(
                "MyAnimeList %s list import for %s stopped after %s page(s): %s",
                media_type,
                username,
                result.pages,
                exc,
            )
            result.failed = True
        return result

    def get_user(self, account: ExternalAccount) -> UserData:
        username = account.username
        if username is None:
            raise AuthFailure("MyAnimeList account has no username")
        try:
            return asyncio.run(self._get_user_async(username))
        except httpx.HTTPStatusError as exc:
            status_code = exc.response.status_code
            if status_code in _AUTH_STATUS_CODES:
                raise AuthFailure(f"MyAnimeList rejected user {username!r}") from exc
            raise TransportFailure(
                f"MyAnimeList user lookup failed with HTTP {status_code}",
                status_code=status_code,
            ) from exc
        except httpx.HTTPError as exc:
            raise TransportFailure(f"MyAnimeList user lookup failed: {exc}") from exc
        except ValidationError as exc:
            raise TransportFailure("Unexpected MyAnimeList user payload") from exc

    # Async internals -------------------------------------------------------

    async def _search_async(self, media_type: MediaType, options: SearchOptions) -> list[Media]:
        params: dict[str, str | int] = {"q": options.query, **options.filters}
        if options.sort_by:
            params["order_by"] = options.sort_by
        if options.page:
            params["page"] = options.page
        if options.limit:
            params["limit"] = min(options.limit, JIKAN_MAX_SEARCH_LIMIT)

        async with self._client_factory(self._config.jikan) as client:
            payload = await self._get_json(client, str(media_type), params=params)

        if media_type is MediaType.ANIME:
            anime = JikanAnimeSearchResponse.model_validate(payload)
            return [translate_jikan_media(item) for item in anime.data]
        manga = JikanMangaSearchResponse.model_validate(payload)
        return [translate_jikan_media(item) for item in manga.data]

    async def _get_media_async(self, media_type: MediaType, media_id: str) -> Media:
        async with self._client_factory(self._config.jikan) as client:
            payload = await self._get_json(client, f"{media_type}/{_segment(media_id)}")

        if media_type is MediaType.ANIME:
            return translate_jikan_media(JikanAnimeResponse.model_validate(payload).data)
        return translate_jikan_media(JikanMangaResponse.model_validate(payload).data)

    async def _get_user_async(self, username: str) -> UserData:
        async with self._client_factory(self._config.jikan) as client:
            payload = await self._get_json(client, f"users/{_segment(username)}/full")

        user = JikanUserResponse.model_validate(payload).data
        return UserData(
            id=str(user.mal_id) if user.mal_id is not None else user.username,
            name=user.username,
            image_url=user.images.best_url,
        )

    async def _import_list_async(
        self,
        media_type: MediaType,
        username: str,
        method: ImportMethod,
        result: ImportResult,
    ) -> None:
        url: str | None = f"users/{_segment(username)}/{media_type}list"
        params: dict[str, str | int] | None = {
            "fields": _LIST_FIELDS[media_type],
            "limit": self._config.list_page_size,
            "nsfw": "true",
        }
        async with self._client_factory(self._config.api) as client:
            while url is not None:
                payload = await self._get_json(client, url, params=params)
                page = MalListPage.model_validate(payload)
                candidates = self._translate_rows(media_type, page.data, result)
                # Each page is committed before the next one is requested.
                result.absorb(self._engine.reconcile(candidates, method=method))
                result.pages += 1
                result.fetched += len(page.data)
                log.debug("Imported page %s (%s records)", result.pages, len(candidates))
                # The next link already carries every query parameter.
                url = page.paging.next
                params = None

    @staticmethod
    def _translate_rows(
        media_type: MediaType,
        rows: list[dict[str, Any]],
        result: ImportResult,
    ) -> list[ImportCandidate]:
        model = _LIST_ITEM_MODELS[media_type]
        candidates: list[ImportCandidate] = []
        for index, row in enumerate(rows):
            try:
                candidates.append(translate_list_item(model.model_validate(row)))
            except ValueError as exc:
                result.skipped += 1
                log.warning("Skipping malformed %s list row %s: %s", media_type, index, exc)
        return candidates

    @staticmethod
    async def _get_json(
        client: ResilientClient,
        url: str,
        *,
        params: dict[str, str | int] | None = None,
    ) -> object:
        response = await client.get(url, params=params)
        response.raise_for_status()
        try:
            return response.json()
        except ValueError as exc:
            raise httpx.DecodingError(
                f"Response from {response.url} is not JSON", request=response.request
            ) from exc

    def _check_supported(self, capability: Capability, media_type: MediaType) -> bool:
        if self.config.supports(capability, media_type):
            return True
        log.warning("MyAnimeList does not support %s for %s", capability, media_type)
        return False


if TYPE_CHECKING:
    _provider_check: type[ProviderAdapter] = MyAnimeListProvider
