"""Bring the advisor schema to a revision, check it against the models, optionally seed the catalog.

Deploys run this before the API starts; it exits non-zero when the database never
answers, the upgrade fails, or tables the models expect are still missing.
Run from ``backend/`` as ``python -m scripts.run_migrations``.
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
import time
from pathlib import Path
from typing import List, Optional

from alembic import command
from alembic.config import Config
from sqlalchemy import create_engine, inspect, text
from sqlalchemy.exc import OperationalError, SQLAlchemyError
from sqlalchemy.orm import Session

from advisor.db import models  # noqa: F401
from advisor.db.base import Base
from advisor.logging_config import configure_logging
from advisor.seed import seed_catalog

LOGGER = logging.getLogger("advisor.migrations")
BACKEND_ROOT = Path(__file__).resolve().parent.parent


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    return float(raw) if raw else default


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--revision", default=os.getenv("ADVISOR_DB_MIGRATION_REVISION", "head"))
    parser.add_argument(
        "--timeout",
        type=float,
        default=_env_float("ADVISOR_DB_MIGRATION_TIMEOUT", 60),
        help="Seconds to keep retrying the first connection.",
    )
    parser.add_argument("--poll-interval", type=float, default=_env_float("ADVISOR_DB_MIGRATION_POLL_INTERVAL", 3))
    parser.add_argument("--config", default=str(BACKEND_ROOT / "alembic.ini"), help="Path to alembic.ini.")
    parser.add_argument(
        "--seed-catalog",
        action="store_true",
        help="Insert the built-in resource catalog when the resources table is empty.",
    )
    return parser.parse_args(argv)


def get_alembic_config(config_path: str) -> Config:
    config = Config(config_path)
    config.set_main_option("script_location", str(BACKEND_ROOT / "alembic"))
    return config


def resolve_database_url(config: Config) -> str:
    """Prefer ``sqlalchemy.url`` from the config; otherwise copy ``ADVISOR_DATABASE_URL`` into it."""
    url = config.get_main_option("sqlalchemy.url") or os.getenv("ADVISOR_DATABASE_URL")
    if not url:
        raise RuntimeError("ADVISOR_DATABASE_URL must be set before running migrations.")
    config.set_main_option("sqlalchemy.url", url)
    return url


def wait_for_database(database_url: str, *, timeout: float, poll_interval: float) -> int:
    """Return the number of connection attempts it took for ``SELECT 1`` to succeed.

    Only ``OperationalError`` is retried; other database errors fail at once.
    """
    engine = create_engine(database_url, future=True)
    deadline = time.monotonic() + timeout
    attempt = 0
    try:
        while True:
            attempt += 1
            try:
                with engine.connect() as connection:
                    connection.execute(text("SELECT 1"))
            except OperationalError as exc:
                if time.monotonic() >= deadline:
                    raise RuntimeError(f"Database unreachable after {attempt} attempt(s)") from exc
                LOGGER.warning("Database not ready (attempt %d): %s", attempt, exc.orig)
                time.sleep(poll_interval)
                continue
            except SQLAlchemyError as exc:
                raise RuntimeError(f"Database rejected the connection check: {exc}") from exc
            LOGGER.info("Database reachable after %d attempt(s)", attempt)
            return attempt
    finally:
        engine.dispose()


def missing_tables(database_url: str) -> List[str]:
    engine = create_engine(database_url, future=True)
    try:
        present = set(inspect(engine).get_table_names())
    finally:
        engine.dispose()
    return sorted(set(Base.metadata.tables) - present)


def seed_resources(database_url: str) -> int:
    engine = create_engine(database_url, future=True)
    try:
        with Session(engine) as session, session.begin():
            return len(seed_catalog(session))
    finally:
        engine.dispose()


def run_migrations(
    revision: str,
    *,
    timeout: float,
    poll_interval: float,
    config: Optional[Config] = None,
    seed: bool = False,
) -> None:
    config = config or get_alembic_config(str(BACKEND_ROOT / "alembic.ini"))
    database_url = resolve_database_url(config)
    wait_for_database(database_url, timeout=timeout, poll_interval=poll_interval)

    LOGGER.info("Upgrading schema to %s", revision)
    command.upgrade(config, revision)

    if revision == "head":
        missing = missing_tables(database_url)
        if missing:
            raise RuntimeError(f"Schema is missing tables after upgrade: {', '.join(missing)}")
    if seed:
        LOGGER.info("Catalog holds %d resources", seed_resources(database_url))


def main(argv: Optional[List[str]] = None) -> int:
    configure_logging(os.getenv("ADVISOR_DB_MIGRATION_LOG_LEVEL"))
    args = parse_args(argv)
    try:
        run_migrations(
            args.revision,
            timeout=args.timeout,
            poll_interval=args.poll_interval,
            config=get_alembic_config(args.config),
            seed=args.seed_catalog,
        )
    except Exception:  # noqa: BLE001
        LOGGER.exception("Migration run failed")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
