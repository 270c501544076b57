"""SQLAlchemy adapter package for kioku."""

from __future__ import annotations

from .database import (
    StartupError,
    configured_engine,
    is_started,
    open_store,
    shutdown,
    startup,
)
from .mappings import (
    create_all_tables,
    external_account_table,
    library_table,
    media_table,
    metadata,
)
from .store import (
    SqlAlchemyAccountTable,
    SqlAlchemyLibraryTable,
    SqlAlchemyLocalStore,
    SqlAlchemyMediaTable,
    SqlAlchemyRecordTable,
)

__all__ = [
    "SqlAlchemyAccountTable",
    "SqlAlchemyLibraryTable",
    "SqlAlchemyLocalStore",
    "SqlAlchemyMediaTable",
    "SqlAlchemyRecordTable",
    "StartupError",
    "configured_engine",
    "create_all_tables",
    "external_account_table",
    "is_started",
    "library_table",
    "media_table",
    "metadata",
    "open_store",
    "shutdown",
    "startup",
]
