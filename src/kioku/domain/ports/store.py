"""Port for the local persistent store.

The store is table-oriented: each table is keyed by the record's declared unique
key (``mapping`` for media and library entries, ``id`` for accounts) and every
call is atomic on its own. Atomicity across calls is not provided.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Hashable, Sequence
    from uuid import UUID

    from kioku.domain.model import ExternalAccount, LibraryEntry, MappingId, Media


class DuplicateKeyError(RuntimeError):
    """Raised by insert-only operations when a key already exists."""

    def __init__(self, table: str, keys: Sequence[Hashable]) -> None:
        joined = ", ".join(str(key) for key in keys)
        super().__init__(f"Duplicate key(s) in {table}: {joined}")
        self.table = table
        self.keys = tuple(keys)


@runtime_checkable
class RecordTable[TKey, TRecord](Protocol):
    """Minimal keyed table contract."""

    def upsert(self, record: TRecord) -> None: ...

    def upsert_all(self, records: Sequence[TRecord]) -> None: ...

    def insert_if_absent(self, record: TRecord) -> None:
        """Insert ``record``; raise ``DuplicateKeyError`` if its key exists."""
        ...

    def insert_all(self, records: Sequence[TRecord]) -> None:
        """Insert a batch; a single colliding key rejects the whole batch."""
        ...

    def get(self, key: TKey) -> TRecord | None: ...

    def delete(self, key: TKey) -> None: ...

    def all(self) -> list[TRecord]: ...


@runtime_checkable
class LocalStore(Protocol):
    """The three tables the core reads and writes."""

    @property
    def media(self) -> RecordTable[MappingId, Media]: ...

    @property
    def library(self) -> RecordTable[MappingId, LibraryEntry]: ...

    @property
    def accounts(self) -> RecordTable[UUID, ExternalAccount]: ...
