"""Seed the resource catalog and the demo account."""

from __future__ import annotations

import argparse
import logging
import sys
from datetime import timedelta
from typing import Optional

from advisor.db.base import Base
from advisor.db.session import get_engine, session_scope
from advisor.seed import DEMO_TOKEN, seed_catalog, seed_demo_user

LOGGER = logging.getLogger("advisor.seed")


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Seed the advisor database with demo data.")
    parser.add_argument("--catalog-only", action="store_true", help="Only seed the resource catalog.")
    parser.add_argument("--token", default=DEMO_TOKEN, help=f"Bearer token for the demo user (default: {DEMO_TOKEN}).")
    parser.add_argument(
        "--token-ttl-days",
        type=int,
        default=None,
        help="Expire the demo session after this many days (default: never).",
    )
    parser.add_argument(
        "--create-schema",
        action="store_true",
        help="Create missing tables from the ORM metadata before seeding.",
    )
    return parser.parse_args(argv)


def main(argv: Optional[list[str]] = None) -> int:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s [%(name)s] %(message)s")
    args = parse_args(argv)
    try:
        if args.create_schema:
            Base.metadata.create_all(get_engine())
        with session_scope() as session:
            if args.catalog_only:
                seed_catalog(session)
            else:
                ttl = timedelta(days=args.token_ttl_days) if args.token_ttl_days else None
                seed_demo_user(session, token=args.token, token_ttl=ttl)
    except Exception as exc:  # noqa: BLE001
        LOGGER.exception("Seeding failed: %s", exc)
        return 1
    LOGGER.info("Seeding complete.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
