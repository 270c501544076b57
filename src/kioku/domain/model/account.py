"""Linked provider identities."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING
from uuid import UUID, uuid4

if TYPE_CHECKING:
    from .enums import ProviderCode

USERNAME_KEY = "username"


def new_id() -> UUID:
    return uuid4()


@dataclass(frozen=True, slots=True)
class UserData:
    """Profile of the remote user behind an account."""

    id: str
    name: str
    image_url: str | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class ExternalAccount:
    """A provider identity linked by the user.

    ``auth`` is an opaque credential bag; it is ``None`` until the user connects
    the account, and ``user`` is only set once the provider has confirmed it.
    """

    provider: ProviderCode
    id: UUID = field(default_factory=new_id)
    auth: dict[str, str] | None = None
    user: UserData | None = None

    @property
    def username(self) -> str | None:
        if self.auth is None:
            return None
        return self.auth.get(USERNAME_KEY) or None

    @property
    def is_connected(self) -> bool:
        return self.auth is not None and self.user is not None
