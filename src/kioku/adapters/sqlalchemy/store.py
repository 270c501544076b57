"""Local store tables backed by SQLAlchemy Core on SQLite."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

from sqlalchemy import delete, insert, select
from sqlalchemy.dialects.sqlite import insert as sqlite_insert

from kioku.domain.model import ExternalAccount, LibraryEntry, Media, MediaTitle, UserData
from kioku.domain.ports.store import DuplicateKeyError

from .mappings import external_account_table, library_table, media_table

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence
    from uuid import UUID

    from sqlalchemy import Column, Table
    from sqlalchemy.orm import Session, sessionmaker

    from kioku.domain.model import MappingId
    from kioku.domain.ports.store import LocalStore

type Row = dict[str, Any]


class SqlAlchemyRecordTable[TKey, TRecord](ABC):
    """Keyed table where every public call runs in its own transaction."""

    table: Table

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self.session_factory = session_factory

    @property
    def _key_column(self) -> Column[Any]:
        (column,) = self.table.primary_key.columns
        return column

    @abstractmethod
    def _key_of(self, record: TRecord) -> TKey: ...

    @abstractmethod
    def _to_row(self, record: TRecord) -> Row: ...

    @abstractmethod
    def _from_row(self, row: Mapping[str, Any]) -> TRecord: ...

    def upsert(self, record: TRecord) -> None:
        self.upsert_all([record])

    def upsert_all(self, records: Sequence[TRecord]) -> None:
        if not records:
            return
        # Last occurrence of a key wins.
        rows = list({self._key_of(record): self._to_row(record) for record in records}.values())
        stmt = sqlite_insert(self.table).values(rows)
        stmt = stmt.on_conflict_do_update(
            index_elements=[self._key_column],
            set_={
                column.name: stmt.excluded[column.name]
                for column in self.table.columns
                if not column.primary_key
            },
        )
        with self.session_factory.begin() as session:
            session.execute(stmt)

    def insert_if_absent(self, record: TRecord) -> None:
        stmt = (
            sqlite_insert(self.table)
            .values(self._to_row(record))
            .on_conflict_do_nothing(index_elements=[self._key_column])
        )
        with self.session_factory.begin() as session:
            result = session.execute(stmt)
            if result.rowcount == 0:  # pyright: ignore[reportAttributeAccessIssue]
                raise DuplicateKeyError(self.table.name, [self._key_of(record)])

    def insert_all(self, records: Sequence[TRecord]) -> None:
        if not records:
            return
        keys = [self._key_of(record) for record in records]
        seen: set[TKey] = set()
        repeated: list[TKey] = []
        for key in keys:
            if key in seen:
                repeated.append(key)
            seen.add(key)
        with self.session_factory.begin() as session:
            existing = session.execute(
                select(self._key_column).where(self._key_column.in_(list(seen)))
            ).scalars()
            collisions = [*repeated, *existing]
            if collisions:
                raise DuplicateKeyError(self.table.name, collisions)
            session.execute(insert(self.table), [self._to_row(record) for record in records])

    def get(self, key: TKey) -> TRecord | None:
        with self.session_factory() as session:
            row = (
                session.execute(select(self.table).where(self._key_column == key))
                .mappings()
                .one_or_none()
            )
        return self._from_row(row) if row is not None else None

    def delete(self, key: TKey) -> None:
        with self.session_factory.begin() as session:
            session.execute(delete(self.table).where(self._key_column == key))

    def all(self) -> list[TRecord]:
        with self.session_factory() as session:
            rows = session.execute(select(self.table).order_by(self._key_column)).mappings().all()
        return [self._from_row(row) for row in rows]


class SqlAlchemyMediaTable(SqlAlchemyRecordTable["MappingId", Media]):
    table = media_table

    def _key_of(self, record: Media) -> MappingId:
        return record.mapping

    def _to_row(self, record: Media) -> Row:
        return {
            "mapping": record.mapping,
            "type": record.type,
            "title_romaji": record.title.romaji,
            "title_english": record.title.english,
            "title_native": record.title.native,
            "image_url": record.image_url,
            "banner_url": record.banner_url,
            "episodes": record.episodes,
            "chapters": record.chapters,
            "volumes": record.volumes,
            "start_date": record.start_date,
            "finish_date": record.finish_date,
            "genres": record.genres,
            "status": record.status,
            "format": record.format,
            "duration": record.duration,
            "rating": record.rating,
            "is_adult": record.is_adult,
        }

    def _from_row(self, row: Mapping[str, Any]) -> Media:
        return Media(
            mapping=row["mapping"],
            type=row["type"],
            title=MediaTitle(
                romaji=row["title_romaji"],
                english=row["title_english"],
                native=row["title_native"],
            ),
            image_url=row["image_url"],
            banner_url=row["banner_url"],
            episodes=row["episodes"],
            chapters=row["chapters"],
            volumes=row["volumes"],
            start_date=row["start_date"],
            finish_date=row["finish_date"],
            genres=row["genres"],
            status=row["status"],
            format=row["format"],
            duration=row["duration"],
            rating=row["rating"],
            is_adult=row["is_adult"],
        )


class SqlAlchemyLibraryTable(SqlAlchemyRecordTable["MappingId", LibraryEntry]):
    table = library_table

    def _key_of(self, record: LibraryEntry) -> MappingId:
        return record.mapping

    def _to_row(self, record: LibraryEntry) -> Row:
        return {
            "mapping": record.mapping,
            "type": record.type,
            "favorite": record.favorite,
            "status": record.status,
            "score": record.score,
            "episode_progress": record.episode_progress,
            "chapter_progress": record.chapter_progress,
            "volume_progress": record.volume_progress,
            "restarts": record.restarts,
            "start_date": record.start_date,
            "finish_date": record.finish_date,
            "notes": record.notes,
        }

    def _from_row(self, row: Mapping[str, Any]) -> LibraryEntry:
        return LibraryEntry(**dict(row))


class SqlAlchemyAccountTable(SqlAlchemyRecordTable["UUID", ExternalAccount]):
    table = external_account_table

    def _key_of(self, record: ExternalAccount) -> UUID:
        return record.id

    def _to_row(self, record: ExternalAccount) -> Row:
        user = record.user
        return {
            "id": record.id,
            "provider": record.provider,
            "auth": dict(record.auth) if record.auth is not None else None,
            "user_id": user.id if user else None,
            "user_name": user.name if user else None,
            "user_image_url": user.image_url if user else None,
        }

    def _from_row(self, row: Mapping[str, Any]) -> ExternalAccount:
        user = None
        if row["user_id"] is not None:
            user = UserData(
                id=row["user_id"],
                name=row["user_name"],
                image_url=row["user_image_url"],
            )
        return ExternalAccount(
            id=row["id"],
            provider=row["provider"],
            auth=row["auth"],
            user=user,
        )


class SqlAlchemyLocalStore:
    """``LocalStore`` over one SQLAlchemy session factory."""

    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self._media = SqlAlchemyMediaTable(session_factory)
        self._library = SqlAlchemyLibraryTable(session_factory)
        self._accounts = SqlAlchemyAccountTable(session_factory)

    @property
    def media(self) -> SqlAlchemyMediaTable:
        return self._media

    @property
    def library(self) -> SqlAlchemyLibraryTable:
        return self._library

    @property
    def accounts(self) -> SqlAlchemyAccountTable:
        return self._accounts


if TYPE_CHECKING:
    _store_check: type[LocalStore] = SqlAlchemyLocalStore
