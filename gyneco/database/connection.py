# gyneco/database/connection.py
"""
Record store connection primitives.

Everything that touches the physical SQLite file lives here: the declarative
``Base`` shared by all ORM models, the ISO-8601 timestamp column type, and the
``StoreHandle`` bundling the async engine with its session factory.
"""
from dataclasses import dataclass
from datetime import datetime, timezone

from sqlalchemy import String, event
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base
from sqlalchemy.types import TypeDecorator

Base = declarative_base()


class IsoDateTime(TypeDecorator):
    """UTC instant stored as ISO-8601 text.

    Values are normalized to UTC with microsecond precision before being
    written, so comparing the stored strings orders rows chronologically.
    Naive datetimes are taken to be UTC already.
    """

    impl = String
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        if isinstance(value, str):
            value = datetime.fromisoformat(value)
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc).isoformat(timespec="microseconds")

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        return datetime.fromisoformat(value)


@dataclass(frozen=True)
class StoreHandle:
    """The single open connection pool shared by every repository."""

    engine: AsyncEngine
    sessionmaker: async_sessionmaker[AsyncSession]

    def session(self) -> AsyncSession:
        return self.sessionmaker()


def _enable_foreign_keys(dbapi_connection, connection_record):
    # SQLite ships with FK enforcement off; cascades depend on it
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def create_store_engine(database_url: str, echo: bool = False) -> AsyncEngine:
    engine = create_async_engine(database_url, echo=echo)
    event.listen(engine.sync_engine, "connect", _enable_foreign_keys)
    return engine


def open_store(database_url: str, echo: bool = False) -> StoreHandle:
    engine = create_store_engine(database_url, echo=echo)
    return StoreHandle(
        engine=engine,
        sessionmaker=async_sessionmaker(engine, expire_on_commit=False),
    )
