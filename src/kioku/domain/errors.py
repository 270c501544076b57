"""Errors raised across the provider boundary."""

from __future__ import annotations


class ProviderError(RuntimeError):
    """Base class for provider integration failures."""


class TransportFailure(ProviderError):
    """Network failure or non-2xx response from a provider API."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class AuthFailure(ProviderError):
    """The provider rejected (or was never given) the account credential."""


class UnsupportedCapabilityError(ProviderError):
    """A provider or media type was used for a capability it does not declare."""


class AccountNotFoundError(LookupError):
    """No linked account exists with the requested id."""
