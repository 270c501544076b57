"""Application orchestration entry points."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from kioku.adapters.registry import build_provider, get_registration
from kioku.adapters.sqlalchemy import is_started, open_store, startup
from kioku.config.sync import get_import_config
from kioku.domain import accounts
from kioku.domain.errors import UnsupportedCapabilityError
from kioku.domain.ports.providers import Capability, SearchOptions

if TYPE_CHECKING:
    from uuid import UUID

    from kioku.domain.model import (
        ExternalAccount,
        ImportMethod,
        LibraryEntry,
        Media,
        MediaType,
        ProviderCode,
    )
    from kioku.domain.ports.providers import (
        ImportResult,
        MediaLookup,
        ProviderAdapter,
        SearchResult,
    )
    from kioku.domain.ports.store import LocalStore

StoreFactory = Callable[[], "LocalStore"]
ProviderBuilder = Callable[["ProviderCode", "LocalStore"], "ProviderAdapter"]

log = getLogger(__name__)


@dataclass(frozen=True, slots=True)
class LibraryRow:
    entry: LibraryEntry
    media: Media | None


def _default_store() -> LocalStore:
    if not is_started():
        startup()
    return open_store()


def _default_provider(code: ProviderCode, store: LocalStore) -> ProviderAdapter:
    return build_provider(code, store=store)


@dataclass(slots=True)
class KiokuApp:
    """Wires the account services to a local store and the provider registry."""

    store_factory: StoreFactory = _default_store
    provider_builder: ProviderBuilder = _default_provider
    _store: LocalStore | None = field(default=None, init=False, repr=False)

    @property
    def store(self) -> LocalStore:
        if self._store is None:
            self._store = self.store_factory()
        return self._store

    def provider(self, code: ProviderCode | str) -> ProviderAdapter:
        registration = get_registration(code)
        return self.provider_builder(registration.code, self.store)

    # Accounts ----------------------------------------------------------------

    def list_accounts(self) -> list[ExternalAccount]:
        return accounts.list_accounts(self.store)

    def link_account(self, provider: ProviderCode | str) -> ExternalAccount:
        registration = get_registration(provider)
        return accounts.link_account(self.store, registration.code)

    def connect_account(self, account_id: UUID, username: str) -> ExternalAccount:
        account = accounts.find_account(self.store, account_id)
        return accounts.connect_account(
            self.store, self.provider(account.provider), account_id, username
        )

    def unlink_account(self, account_id: UUID) -> None:
        accounts.unlink_account(self.store, account_id)

    # Library -------------------------------------------------------------------

    def import_library(
        self,
        account_id: UUID,
        media_type: MediaType,
        *,
        method: ImportMethod | None = None,
    ) -> ImportResult:
        account = accounts.find_account(self.store, account_id)
        effective_method = method or get_import_config().default_method
        return accounts.import_account_library(
            self.store,
            self.provider(account.provider),
            account_id,
            media_type,
            effective_method,
        )

    def library(self, media_type: MediaType | None = None) -> list[LibraryRow]:
        rows: list[LibraryRow] = []
        for entry in self.store.library.all():
            if media_type is not None and entry.type is not media_type:
                continue
            rows.append(LibraryRow(entry=entry, media=self.store.media.get(entry.mapping)))
        return rows

    # Catalog -------------------------------------------------------------------

    def search_media(
        self,
        provider: ProviderCode | str,
        media_type: MediaType,
        query: str,
        *,
        sort_by: str | None = None,
        limit: int | None = None,
    ) -> SearchResult:
        adapter = self._provider_for(provider, media_type)
        return adapter.search(media_type, SearchOptions(query=query, sort_by=sort_by, limit=limit))

    def get_media(
        self,
        provider: ProviderCode | str,
        media_type: MediaType,
        media_id: str,
    ) -> MediaLookup:
        """Fetch one media record and refresh its cached copy."""

        adapter = self._provider_for(provider, media_type)
        lookup = adapter.get_media(media_type, media_id=media_id)
        if lookup.media is not None:
            self.store.media.upsert(lookup.media)
        return lookup

    def _provider_for(self, provider: ProviderCode | str, media_type: MediaType) -> ProviderAdapter:
        registration = get_registration(provider)
        if not registration.config.supports(Capability.SEARCH, media_type):
            raise UnsupportedCapabilityError(
                f"{registration.config.name} does not support searching {media_type}"
            )
        return self.provider_builder(registration.code, self.store)
