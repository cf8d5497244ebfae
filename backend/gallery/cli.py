"""Schema migration CLI, a thin wrapper over ``alembic.command``.

    gallery-migrate upgrade            # to head
    gallery-migrate downgrade          # one revision back
    gallery-migrate downgrade 032_core_gallery_schema
    gallery-migrate current
    gallery-migrate history
"""
from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Sequence

from alembic import command
from alembic.config import Config

from gallery.logging_config import setup_logging

logger = logging.getLogger(__name__)

BACKEND_ROOT = Path(__file__).resolve().parents[1]
DEFAULT_ALEMBIC_INI = BACKEND_ROOT / "alembic.ini"


def alembic_config(
    database_url: str | None = None,
    ini_path: Path | str | None = None,
    *,
    configure_logger: bool = False,
) -> Config:
    """Alembic config pointing at the gallery migrations.

    ``configure_logger`` lets env.py apply the ini logging sections; leave it
    off when logging is already set up.
    """
    path = Path(ini_path) if ini_path else DEFAULT_ALEMBIC_INI
    if path.exists():
        cfg = Config(str(path))
    else:
        cfg = Config()
        cfg.set_main_option("script_location", str(BACKEND_ROOT / "migrations"))
    if database_url:
        # ConfigParser interpolation would choke on a literal % in a password.
        cfg.set_main_option("sqlalchemy.url", database_url.replace("%", "%%"))
    cfg.attributes["configure_logger"] = configure_logger
    return cfg


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="gallery-migrate", description="Gallery schema migrations")
    parser.add_argument("--database-url", default=None, help="Override DATABASE_URL")
    parser.add_argument("--config", default=None, help="Path to alembic.ini")
    sub = parser.add_subparsers(dest="action", required=True)

    up = sub.add_parser("upgrade", help="Apply revisions up to REVISION (default: head)")
    up.add_argument("revision", nargs="?", default="head")

    down = sub.add_parser("downgrade", help="Revert down to REVISION (default: -1)")
    down.add_argument("revision", nargs="?", default="-1")

    sub.add_parser("current", help="Show the revision the database is at")
    sub.add_parser("history", help="List revisions")
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    args = _parse_args(argv)
    setup_logging()
    cfg = alembic_config(args.database_url, args.config)

    if args.action == "upgrade":
        logger.info("Upgrading schema", extra={"revision": args.revision})
        command.upgrade(cfg, args.revision)
    elif args.action == "downgrade":
        logger.info("Downgrading schema", extra={"revision": args.revision})
        command.downgrade(cfg, args.revision)
    elif args.action == "current":
        command.current(cfg, verbose=True)
    elif args.action == "history":
        command.history(cfg)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
