"""Uniform capability contract implemented by every provider adapter."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING, NamedTuple, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Mapping

    from kioku.domain.model import (
        ExternalAccount,
        ImportMethod,
        Media,
        MediaType,
        ProviderCode,
        UserData,
    )
    from kioku.domain.reconciliation import ReconciliationResult


class Capability(StrEnum):
    SEARCH = "search"
    IMPORT = "import"
    EXPORT = "export"


@dataclass(frozen=True, slots=True)
class ProviderConfig:
    """Declared capabilities of a provider, per media type."""

    name: str
    search: frozenset[MediaType] = frozenset()
    import_list: frozenset[MediaType] = frozenset()
    export_list: frozenset[MediaType] = frozenset()

    def media_types_for(self, capability: Capability) -> frozenset[MediaType]:
        match capability:
            case Capability.SEARCH:
                return self.search
            case Capability.IMPORT:
                return self.import_list
            case Capability.EXPORT:
                return self.export_list

    def supports(self, capability: Capability, media_type: MediaType) -> bool:
        return media_type in self.media_types_for(capability)

    @property
    def media_types(self) -> frozenset[MediaType]:
        """Every media type enabled for at least one capability."""

        return self.search | self.import_list | self.export_list


@dataclass(frozen=True, slots=True)
class SearchOptions:
    query: str
    sort_by: str | None = None
    page: int | None = None
    limit: int | None = None
    filters: Mapping[str, str] = field(default_factory=dict[str, str])


class SearchResult(NamedTuple):
    results: list[Media]
    failed: bool


class MediaLookup(NamedTuple):
    media: Media | None
    failed: bool


@dataclass(slots=True)
class ImportResult:
    """Outcome of one ``import_list`` invocation."""

    failed: bool = False
    fetched: int = 0
    skipped: int = 0
    pages: int = 0
    media_upserted: int = 0
    inserted: int = 0
    replaced: int = 0
    kept: int = 0

    def absorb(self, result: ReconciliationResult) -> None:
        self.media_upserted += result.media_upserted
        self.inserted += result.inserted
        self.replaced += result.replaced
        self.kept += result.kept

    @property
    def succeeded(self) -> bool:
        return not self.failed


@runtime_checkable
class ProviderAdapter(Protocol):
    """Search, fetch and import operations over one provider's API."""

    @property
    def code(self) -> ProviderCode: ...

    @property
    def config(self) -> ProviderConfig: ...

    def search(self, media_type: MediaType, options: SearchOptions) -> SearchResult:
        """Never raises; failures are reported as ``([], True)``."""
        ...

    def get_media(self, media_type: MediaType, *, media_id: str) -> MediaLookup:
        """Never raises; failures are reported as ``(None, True)``."""
        ...

    def import_list(
        self,
        media_type: MediaType,
        account: ExternalAccount,
        *,
        override: bool = False,
        method: ImportMethod | None = None,
    ) -> ImportResult: ...

    def get_user(self, account: ExternalAccount) -> UserData:
        """Raise ``AuthFailure``/``TransportFailure`` when the user cannot be fetched."""
        ...
