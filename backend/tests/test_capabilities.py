from __future__ import annotations

import pytest

from gallery.config import settings
from gallery.schema.capabilities import StoreCapabilities


@pytest.mark.parametrize("dialect", ["postgresql", "sqlite", "mssql"])
def test_check_and_transactional_ddl_dialects(dialect: str) -> None:
    caps = StoreCapabilities.detect(dialect)
    assert caps.check_constraints is True
    assert caps.transactional_ddl is True


def test_mysql_enforces_checks_only_from_8_0_16() -> None:
    assert StoreCapabilities.detect("mysql", (8, 0, 15)).check_constraints is False
    assert StoreCapabilities.detect("mysql", (8, 0, 16)).check_constraints is True
    assert StoreCapabilities.detect("mysql", None).check_constraints is False
    assert StoreCapabilities.detect("mysql", (8, 0, 36)).transactional_ddl is False


def test_mariadb_is_told_apart_from_mysql() -> None:
    caps = StoreCapabilities.detect("mysql", (10, 6, 12), is_mariadb=True)
    assert caps.dialect == "mariadb"
    assert caps.check_constraints is True
    assert StoreCapabilities.detect("mariadb", (10, 1, 0)).check_constraints is False


def test_unknown_dialect_gets_no_capabilities() -> None:
    caps = StoreCapabilities.detect("oracle", (19, 0))
    assert caps == StoreCapabilities(dialect="oracle", check_constraints=False, transactional_ddl=False)


def test_setting_overrides_detected_check_support(monkeypatch) -> None:
    monkeypatch.setattr(settings, "SCHEMA_CHECK_CONSTRAINTS", False)
    assert StoreCapabilities.detect("postgresql").check_constraints is False

    monkeypatch.setattr(settings, "SCHEMA_CHECK_CONSTRAINTS", True)
    assert StoreCapabilities.detect("oracle").check_constraints is True


def test_for_bind_reads_connection_dialect(sync_engine) -> None:
    with sync_engine.connect() as conn:
        caps = StoreCapabilities.for_bind(conn)
    assert caps.dialect == "sqlite"
    assert caps.check_constraints is True
