"""Alembic environment: runs revisions on the async engine, one transaction each."""
from __future__ import annotations

import asyncio
import logging
from logging.config import fileConfig

from alembic import context
from sqlalchemy import pool
from sqlalchemy.engine import Connection

from gallery.config import settings
from gallery.db import Base, build_engine
from gallery.schema.capabilities import StoreCapabilities
import gallery.models  # noqa: F401  (registers every table on Base.metadata)

config = context.config

# The CLI installs JSON logging itself and turns this off.
if config.config_file_name is not None and config.attributes.get("configure_logger", True):
    fileConfig(config.config_file_name, disable_existing_loggers=False)

logger = logging.getLogger("alembic.env")

target_metadata = Base.metadata


def _database_url() -> str:
    return config.get_main_option("sqlalchemy.url") or settings.DATABASE_URL


def do_run_migrations(connection: Connection) -> None:
    caps = StoreCapabilities.for_bind(connection)
    logger.info(
        "Migrating %s (check constraints: %s, transactional DDL: %s)",
        caps.dialect,
        caps.check_constraints,
        caps.transactional_ddl,
    )
    if not caps.transactional_ddl:
        logger.warning(
            "%s commits DDL implicitly; a failed revision leaves partial changes "
            "until it is re-run",
            caps.dialect,
        )

    context.configure(
        connection=connection,
        target_metadata=target_metadata,
        transaction_per_migration=True,
        compare_type=True,
    )

    with context.begin_transaction():
        context.run_migrations()


async def run_async_migrations() -> None:
    connectable = build_engine(_database_url(), poolclass=pool.NullPool)

    async with connectable.connect() as connection:
        await connection.run_sync(do_run_migrations)

    await connectable.dispose()


def run_migrations_online() -> None:
    asyncio.run(run_async_migrations())


if context.is_offline_mode():
    # Revisions inspect the live schema before every change.
    raise RuntimeError("Offline (--sql) mode is not supported for gallery migrations")

run_migrations_online()
