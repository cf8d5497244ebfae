from __future__ import annotations

from pathlib import Path

import pytest
import sqlalchemy as sa
from alembic.config import Config

from gallery.cli import alembic_config
from gallery.db import configure_sqlite

BASELINE = "032_core_gallery_schema"
FEEDBACK = "033_add_gallery_feedback"


@pytest.fixture
def db_path(tmp_path: Path) -> Path:
    return tmp_path / "gallery.db"


@pytest.fixture
def async_url(db_path: Path) -> str:
    return f"sqlite+aiosqlite:///{db_path}"


@pytest.fixture
def alembic_cfg(async_url: str) -> Config:
    return alembic_config(async_url)


@pytest.fixture
def sync_engine(db_path: Path):
    engine = sa.create_engine(f"sqlite:///{db_path}")
    configure_sqlite(engine)
    yield engine
    engine.dispose()


def schema_snapshot(engine: sa.Engine) -> dict[str, list[str]]:
    """Table -> sorted column names, ignoring Alembic's own bookkeeping."""
    inspector = sa.inspect(engine)
    return {
        table: sorted(col["name"] for col in inspector.get_columns(table))
        for table in inspector.get_table_names()
        if table != "alembic_version"
    }


def settings_rows(engine: sa.Engine) -> list[tuple[str, str, str]]:
    with engine.connect() as conn:
        rows = conn.execute(
            sa.text(
                "SELECT setting_key, setting_value, setting_type FROM app_settings "
                "ORDER BY setting_key"
            )
        ).all()
    return [tuple(row) for row in rows]
