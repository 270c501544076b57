"""Account linking and library import services.

Accounts go through three states: linked (no credential), connected (the
provider confirmed the credential and returned the user's profile) and
unlinked (deleted). Library data imported through an account is kept when the
account is unlinked.
"""

from __future__ import annotations

from dataclasses import replace
from logging import getLogger
from typing import TYPE_CHECKING

from kioku.domain.errors import AccountNotFoundError, UnsupportedCapabilityError
from kioku.domain.model import USERNAME_KEY, ExternalAccount
from kioku.domain.ports.providers import Capability

if TYPE_CHECKING:
    from uuid import UUID

    from kioku.domain.model import ImportMethod, MediaType, ProviderCode
    from kioku.domain.ports.providers import ImportResult, ProviderAdapter
    from kioku.domain.ports.store import LocalStore

log = getLogger(__name__)


def list_accounts(store: LocalStore) -> list[ExternalAccount]:
    return store.accounts.all()


def find_account(store: LocalStore, account_id: UUID) -> ExternalAccount:
    account = store.accounts.get(account_id)
    if account is None:
        raise AccountNotFoundError(f"No linked account with id {account_id}")
    return account


def display_name(account: ExternalAccount) -> str:
    if account.user is not None:
        return account.user.name
    return account.username or str(account.provider)


def link_account(store: LocalStore, provider: ProviderCode) -> ExternalAccount:
    account = ExternalAccount(provider=provider)
    store.accounts.insert_if_absent(account)
    log.info("Linked %s account %s", provider, account.id)
    return account


def unlink_account(store: LocalStore, account_id: UUID) -> None:
    account = find_account(store, account_id)
    store.accounts.delete(account.id)
    log.info("Unlinked %s account %s", account.provider, account.id)


def connect_account(
    store: LocalStore,
    provider: ProviderAdapter,
    account_id: UUID,
    username: str,
) -> ExternalAccount:
    """Store ``username`` as the credential and confirm it with the provider.

    On any failure the account is restored to its previous state and the error
    is re-raised.
    """

    username = username.strip()
    if not username:
        raise ValueError("Username must not be empty")

    previous = find_account(store, account_id)
    if previous.provider != provider.code:
        raise ValueError(
            f"Account {account_id} belongs to {previous.provider}, not {provider.code}"
        )

    pending = replace(previous, auth={**(previous.auth or {}), USERNAME_KEY: username})
    store.accounts.upsert(pending)
    try:
        user = provider.get_user(pending)
    except Exception:
        log.warning("Connecting account %s as %r failed; restoring credential", account_id, username)
        store.accounts.upsert(previous)
        raise

    connected = replace(pending, user=user)
    store.accounts.upsert(connected)
    log.info("Connected %s account %s as %s", provider.code, account_id, user.name)
    return connected


def import_account_library(
    store: LocalStore,
    provider: ProviderAdapter,
    account_id: UUID,
    media_type: MediaType,
    method: ImportMethod,
) -> ImportResult:
    account = find_account(store, account_id)
    if not account.is_connected:
        raise UnsupportedCapabilityError(f"Account {account_id} is not connected")
    if not provider.config.supports(Capability.IMPORT, media_type):
        raise UnsupportedCapabilityError(
            f"{provider.config.name} does not support importing {media_type} lists"
        )

    result = provider.import_list(media_type, account, method=method)
    if result.failed:
        log.warning(
            "Import of %s %s list for %s failed after %s page(s)",
            provider.config.name,
            media_type,
            display_name(account),
            result.pages,
        )
    else:
        log.info(
            "Imported %s %s records for %s: inserted=%s, replaced=%s, kept=%s",
            result.fetched,
            media_type,
            display_name(account),
            result.inserted,
            result.replaced,
            result.kept,
        )
    return result
