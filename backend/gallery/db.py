"""Async SQLAlchemy engine + session factory."""
from __future__ import annotations

from sqlalchemy import Engine, event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase


def _on_sqlite_connect(dbapi_connection, connection_record) -> None:
    # Let SQLAlchemy own BEGIN/COMMIT; the driver would otherwise commit DDL
    # immediately.
    dbapi_connection.isolation_level = None
    # SQLite ignores ON DELETE CASCADE unless this is set per connection.
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def _on_sqlite_begin(conn) -> None:
    conn.exec_driver_sql("BEGIN")


def configure_sqlite(engine: Engine) -> None:
    """Transactional DDL and foreign key enforcement for a SQLite engine."""
    event.listen(engine, "connect", _on_sqlite_connect)
    event.listen(engine, "begin", _on_sqlite_begin)


def build_engine(url: str, **kwargs) -> AsyncEngine:
    """Create an async engine; SQLite engines get transactional DDL and foreign keys."""
    engine = create_async_engine(url, **kwargs)
    if engine.dialect.name == "sqlite":
        configure_sqlite(engine.sync_engine)
    return engine


def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


class Base(DeclarativeBase):
    """Declarative base used by all ORM models."""
