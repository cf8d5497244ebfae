"""Existence-guarded schema operations for Alembic revisions.

Each helper inspects the live bind before acting, so a revision built from
them can be re-run on an already-migrated (or already-reverted) database
without error. Helpers return what they changed; nothing here swallows
store errors.
"""
from __future__ import annotations

import logging
from typing import Any, Iterable, NamedTuple, Sequence

import sqlalchemy as sa
from alembic.operations import Operations

from gallery.metrics import SCHEMA_OPERATIONS_TOTAL
from gallery.schema.capabilities import StoreCapabilities

logger = logging.getLogger(__name__)

APP_SETTINGS_TABLE = "app_settings"

_app_settings = sa.table(
    APP_SETTINGS_TABLE,
    sa.column("setting_key", sa.String),
    sa.column("setting_value", sa.Text),
    sa.column("setting_type", sa.String),
)


class IndexSpec(NamedTuple):
    name: str
    columns: Sequence[str]
    unique: bool = False


def _record(operation: str, applied: bool) -> None:
    SCHEMA_OPERATIONS_TOTAL.labels(
        operation=operation,
        outcome="applied" if applied else "skipped",
    ).inc()


def has_table(op: Operations, name: str) -> bool:
    return sa.inspect(op.get_bind()).has_table(name)


def column_names(op: Operations, table: str) -> set[str]:
    inspector = sa.inspect(op.get_bind())
    if not inspector.has_table(table):
        return set()
    return {col["name"] for col in inspector.get_columns(table)}


def ensure_table(
    op: Operations,
    name: str,
    *elements: sa.schema.SchemaItem,
    indexes: Iterable[IndexSpec] = (),
    checks: Iterable[sa.CheckConstraint] = (),
    capabilities: StoreCapabilities | None = None,
) -> bool:
    """Create ``name`` with its indexes unless the table already exists.

    ``checks`` are only emitted when the store enforces CHECK constraints.
    """
    if has_table(op, name):
        logger.info("Table %s already present, skipping", name)
        _record("create_table", False)
        return False

    caps = capabilities or StoreCapabilities.for_bind(op.get_bind())
    checks = tuple(checks)
    if checks and not caps.check_constraints:
        logger.warning(
            "Store %s does not enforce CHECK constraints; creating %s without %d check(s)",
            caps.dialect,
            name,
            len(checks),
        )
        checks = ()

    op.create_table(name, *elements, *checks)
    for index in indexes:
        op.create_index(index.name, name, list(index.columns), unique=index.unique)

    logger.info("Created table %s", name)
    _record("create_table", True)
    return True


def ensure_columns(op: Operations, table: str, columns: Sequence[sa.Column]) -> list[str]:
    """Add every column of ``columns`` that ``table`` does not have yet."""
    existing = column_names(op, table)
    added: list[str] = []
    for column in columns:
        if column.name in existing:
            _record("add_column", False)
            continue
        op.add_column(table, column)
        added.append(column.name)
        _record("add_column", True)

    if added:
        logger.info("Added columns to %s: %s", table, ", ".join(added))
    return added


def drop_columns_if_present(op: Operations, table: str, names: Sequence[str]) -> list[str]:
    """Drop each named column that exists; a missing table is a no-op."""
    existing = column_names(op, table)
    dropped: list[str] = []
    for name in names:
        if name not in existing:
            _record("drop_column", False)
            continue
        op.drop_column(table, name)
        dropped.append(name)
        _record("drop_column", True)

    if dropped:
        logger.info("Dropped columns from %s: %s", table, ", ".join(dropped))
    return dropped


def drop_table_if_exists(op: Operations, name: str) -> bool:
    if not has_table(op, name):
        _record("drop_table", False)
        return False
    op.drop_table(name)
    logger.info("Dropped table %s", name)
    _record("drop_table", True)
    return True


def ensure_setting_rows(op: Operations, rows: Iterable[dict[str, Any]]) -> list[str]:
    """Insert ``app_settings`` rows whose ``setting_key`` is not present.

    Existing rows are left untouched, values included.
    """
    bind = op.get_bind()
    inserted: list[str] = []
    for row in rows:
        key = row["setting_key"]
        exists = bind.execute(
            sa.select(_app_settings.c.setting_key)
            .where(_app_settings.c.setting_key == key)
            .limit(1)
        ).first()
        if exists:
            _record("insert_setting", False)
            continue
        bind.execute(_app_settings.insert().values(**row))
        inserted.append(key)
        _record("insert_setting", True)

    if inserted:
        logger.info("Seeded app settings: %s", ", ".join(inserted))
    return inserted


def delete_setting_rows(op: Operations, setting_type: str) -> int:
    """Delete every ``app_settings`` row of ``setting_type``."""
    if not has_table(op, APP_SETTINGS_TABLE):
        _record("delete_settings", False)
        return 0
    result = op.get_bind().execute(
        _app_settings.delete().where(_app_settings.c.setting_type == setting_type)
    )
    deleted = max(result.rowcount or 0, 0)
    logger.info("Deleted %d app settings of type %s", deleted, setting_type)
    _record("delete_settings", deleted > 0)
    return deleted
