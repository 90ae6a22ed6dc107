"""Utility script to create the advocates table and load the built-in dataset."""

from __future__ import annotations

import argparse
import logging
from collections.abc import Iterable

from sqlalchemy import func, select
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session

from advocate_directory.core.settings import settings
from advocate_directory.data import FALLBACK_ADVOCATES, AdvocateRecord
from advocate_directory.db.session import build_engine, create_tables, drop_tables
from advocate_directory.models import Advocate

logger = logging.getLogger(__name__)


def to_model(record: AdvocateRecord) -> Advocate:
    """Build an unsaved ORM row; the database assigns the id."""
    row = Advocate(
        first_name=record.first_name,
        last_name=record.last_name,
        city=record.city,
        degree=record.degree,
        specialties=list(record.specialties),
        years_of_experience=record.years_of_experience,
        phone_number=record.phone_number,
        profile_image_url=record.profile_image_url,
        bio=record.bio,
    )
    if record.created_at is not None:
        row.created_at = record.created_at
    return row


def seed_advocates(
    engine: Engine,
    records: Iterable[AdvocateRecord] = FALLBACK_ADVOCATES,
    *,
    reset: bool = False,
) -> int:
    """Insert ``records`` in order and return how many rows were written.

    An already populated table is left alone unless ``reset`` is set.
    """
    if reset:
        drop_tables(engine)
    create_tables(engine)

    with Session(engine) as session:
        existing = session.execute(select(func.count()).select_from(Advocate)).scalar_one()
        if existing:
            logger.info("advocates table already holds %d rows; skipping", existing)
            return 0
        rows = [to_model(record) for record in records]
        # One row per flush keeps ids in insertion order.
        for row in rows:
            session.add(row)
            session.flush()
        session.commit()
    return len(rows)


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Seed the advocates table")
    parser.add_argument(
        "--reset",
        action="store_true",
        help="Drop and recreate the tables before seeding.",
    )
    parser.add_argument(
        "--url",
        default=None,
        help="Override database URL (defaults to effective settings URL)",
    )
    args = parser.parse_args(argv)

    logging.basicConfig(level=settings.log_level.upper())
    url = args.url or settings.effective_database_url
    if not url:
        parser.error("DATABASE_URL is not configured; pass --url")

    engine = build_engine(url, echo=settings.sql_debug)
    try:
        inserted = seed_advocates(engine, reset=args.reset)
    finally:
        engine.dispose()
    print(f"[seed] inserted {inserted} advocates")


if __name__ == "__main__":
    main()
