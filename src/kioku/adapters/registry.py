"""Provider registry: the closed set of integrations the application knows."""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import TYPE_CHECKING, Protocol

from kioku.domain.errors import UnsupportedCapabilityError
from kioku.domain.model import ProviderCode

from .myanimelist import MYANIMELIST_PROVIDER_CONFIG, MyAnimeListProvider

if TYPE_CHECKING:
    from collections.abc import Mapping

    from kioku.domain.ports.providers import ProviderAdapter, ProviderConfig
    from kioku.domain.ports.store import LocalStore


class ProviderFactory(Protocol):
    def __call__(self, *, store: LocalStore) -> ProviderAdapter: ...


@dataclass(frozen=True, slots=True)
class ProviderRegistration:
    code: ProviderCode
    config: ProviderConfig
    factory: ProviderFactory


def _build_myanimelist(*, store: LocalStore) -> ProviderAdapter:
    return MyAnimeListProvider(store=store)


PROVIDERS: Mapping[ProviderCode, ProviderRegistration] = MappingProxyType(
    {
        ProviderCode.MYANIMELIST: ProviderRegistration(
            code=ProviderCode.MYANIMELIST,
            config=MYANIMELIST_PROVIDER_CONFIG,
            factory=_build_myanimelist,
        ),
    }
)


def get_registration(code: ProviderCode | str) -> ProviderRegistration:
    try:
        return PROVIDERS[ProviderCode(code)]
    except (KeyError, ValueError) as exc:
        raise UnsupportedCapabilityError(f"Unknown provider: {code}") from exc


def build_provider(code: ProviderCode | str, *, store: LocalStore) -> ProviderAdapter:
    return get_registration(code).factory(store=store)
