"""What the connected store can do, resolved from its dialect.

Migrations consult this before emitting DDL that only some engines accept,
so a step degrades on a less capable store instead of failing there.
"""
from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy.engine import Connection

from gallery.config import settings

# MySQL parses CHECK clauses since forever but only enforces them from 8.0.16.
_MYSQL_CHECK_MIN_VERSION = (8, 0, 16)
_MARIADB_CHECK_MIN_VERSION = (10, 2, 1)

_TRANSACTIONAL_DDL_DIALECTS = {"postgresql", "sqlite", "mssql"}
_CHECK_DIALECTS = {"postgresql", "sqlite", "mssql"}


@dataclass(frozen=True)
class StoreCapabilities:
    dialect: str
    check_constraints: bool
    transactional_ddl: bool

    @classmethod
    def detect(
        cls,
        dialect_name: str,
        server_version: tuple | None = None,
        *,
        is_mariadb: bool = False,
    ) -> "StoreCapabilities":
        """Capabilities for a dialect name and optional server version tuple."""
        name = (dialect_name or "").lower()
        if name == "mysql" and is_mariadb:
            name = "mariadb"

        if name in _CHECK_DIALECTS:
            check = True
        elif name == "mysql":
            check = _version_at_least(server_version, _MYSQL_CHECK_MIN_VERSION)
        elif name == "mariadb":
            check = _version_at_least(server_version, _MARIADB_CHECK_MIN_VERSION)
        else:
            check = False

        override = settings.SCHEMA_CHECK_CONSTRAINTS
        if override is not None:
            check = bool(override)

        return cls(
            dialect=name,
            check_constraints=check,
            transactional_ddl=name in _TRANSACTIONAL_DDL_DIALECTS,
        )

    @classmethod
    def for_bind(cls, bind: Connection) -> "StoreCapabilities":
        dialect = bind.dialect
        return cls.detect(
            dialect.name,
            getattr(dialect, "server_version_info", None),
            is_mariadb=bool(getattr(dialect, "is_mariadb", False)),
        )


def _version_at_least(version: tuple | None, minimum: tuple[int, ...]) -> bool:
    if not version:
        return False
    numeric = tuple(int(part) for part in version if isinstance(part, int))
    return numeric >= minimum
