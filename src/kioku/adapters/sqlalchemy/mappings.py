"""SQLAlchemy table metadata for the local media library."""

from __future__ import annotations

import json
import logging
import uuid
from typing import TYPE_CHECKING, Any, cast

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    Date,
    Dialect,
    Enum,
    ForeignKey,
    Integer,
    MetaData,
    String,
    Table,
    Text,
    TypeDecorator,
    Uuid,
)

from kioku.domain.model import (
    Genre,
    LibraryStatus,
    MediaFormat,
    MediaRating,
    MediaStatus,
    MediaType,
    ProviderCode,
)

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

log = logging.getLogger(__name__)

UUIDColumnType = Uuid[uuid.UUID]


class GenreSetType(TypeDecorator[frozenset[Genre]]):
    """Stores a genre set as a sorted JSON array of genre values."""

    impl = String
    cache_ok = True

    def process_bind_param(self, value: frozenset[Genre] | None, dialect: Dialect) -> str | None:
        _ = dialect
        if value is None:
            return None
        return json.dumps(sorted(genre.value for genre in value))

    def process_result_value(self, value: str | None, dialect: Dialect) -> frozenset[Genre]:
        _ = dialect
        if value is None:
            return frozenset()
        loaded = json.loads(value)
        if not isinstance(loaded, list):
            return frozenset()
        items = cast(list[Any], loaded)
        return frozenset(Genre(item) for item in items if isinstance(item, str))


metadata = MetaData(
    naming_convention={
        "ix": "ix_%(column_0_label)s",
        "uq": "uq_%(table_name)s_%(column_0_label)s",
        "ck": "ck_%(table_name)s_%(constraint_name)s",
        "fk": "fk_%(table_name)s_%(column_0_label)s_%(referred_table_name)s",
        "pk": "pk_%(table_name)s",
    }
)

media_table = Table(
    "media",
    metadata,
    Column("mapping", String(255), primary_key=True),
    Column("type", Enum(MediaType, native_enum=False), nullable=False, index=True),
    Column("title_romaji", String(1024)),
    Column("title_english", String(1024)),
    Column("title_native", String(1024)),
    Column("image_url", String(2048)),
    Column("banner_url", String(2048)),
    Column("episodes", Integer),
    Column("chapters", Integer),
    Column("volumes", Integer),
    Column("start_date", Date),
    Column("finish_date", Date),
    Column("genres", GenreSetType(), nullable=False),
    Column("status", Enum(MediaStatus, native_enum=False)),
    Column("format", Enum(MediaFormat, native_enum=False)),
    Column("duration", Integer),
    Column("rating", Enum(MediaRating, native_enum=False)),
    Column("is_adult", Boolean, nullable=False, default=False),
)

library_table = Table(
    "library",
    metadata,
    Column("mapping", String(255), ForeignKey("media.mapping"), primary_key=True),
    Column("type", Enum(MediaType, native_enum=False), nullable=False, index=True),
    Column("favorite", Boolean, nullable=False, default=False),
    Column("status", Enum(LibraryStatus, native_enum=False), nullable=False),
    Column("score", Integer, nullable=False, default=0),
    Column("episode_progress", Integer, nullable=False, default=0),
    Column("chapter_progress", Integer, nullable=False, default=0),
    Column("volume_progress", Integer, nullable=False, default=0),
    Column("restarts", Integer, nullable=False, default=0),
    Column("start_date", Date),
    Column("finish_date", Date),
    Column("notes", Text, nullable=False, default=""),
)

external_account_table = Table(
    "external_account",
    metadata,
    Column("id", UUIDColumnType, primary_key=True),
    Column("provider", Enum(ProviderCode, native_enum=False), nullable=False),
    Column("auth", JSON(none_as_null=True)),
    Column("user_id", String(255)),
    Column("user_name", String(255)),
    Column("user_image_url", String(2048)),
)


def create_all_tables(engine: Engine) -> None:
    """Create database tables for the library metadata."""

    log.info("Creating all tables")
    metadata.create_all(engine)
