"""Seed the local SQLite store from a Firebase Realtime Database JSON export.

The Firebase console's "Export JSON" produces either the whole database
(``{"schools": {...}, ...}``) or just the ``schools`` node.  Both shapes are
accepted.  Records are upserted by their Firebase key, so re-running the
script with a newer export updates schools in place.

Usage::

    python -m edubot.db.seed export.json --db ./data/schools.db
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any

from sqlalchemy import create_engine
from sqlalchemy.orm import Session

from edubot.db.models import Base, School

logger = logging.getLogger(__name__)

DEFAULT_DB_PATH = Path("./data/schools.db")


# ---------------------------------------------------------------------------
# Export parsing
# ---------------------------------------------------------------------------


def _schools_node(export: Any) -> dict[str, Any]:
    """Return the ``schools`` node of an export as a ``{key: record}`` dict."""
    if isinstance(export, dict) and "schools" in export:
        export = export["schools"]
    if export is None:
        return {}
    if isinstance(export, list):
        return {str(i): child for i, child in enumerate(export) if child is not None}
    if isinstance(export, dict):
        return export
    raise ValueError(f"Unsupported export shape: {type(export).__name__}")


def _number_or_none(value: Any) -> float | None:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return float(value)
    return None


def _bool_or_none(value: Any) -> bool | None:
    return value if isinstance(value, bool) else None


def _text_or_none(value: Any) -> str | None:
    return value if isinstance(value, str) else None


def record_to_school(key: str, record: dict[str, Any]) -> School:
    """Map one exported record onto a :class:`School` row.

    The full record is kept verbatim in ``data``.  The typed columns only
    take values of the right type; anything else is left NULL there.
    """
    return School(
        key=key,
        data=dict(record),
        name=_text_or_none(record.get("name")),
        classes=record.get("classes"),
        location=_text_or_none(record.get("location")),
        type=_text_or_none(record.get("type")),
        distence=_number_or_none(record.get("distence")),
        fee=_number_or_none(record.get("fee")),
        midday=_bool_or_none(record.get("midday")),
        girl_support=_bool_or_none(record.get("girlSupport")),
    )


# ---------------------------------------------------------------------------
# Database writes
# ---------------------------------------------------------------------------


def _ensure_database(db_path: Path) -> Session:
    """Create the database file and tables if needed and return a session."""
    db_path.parent.mkdir(parents=True, exist_ok=True)
    engine = create_engine(f"sqlite:///{db_path}")
    Base.metadata.create_all(engine)
    return Session(engine)


def upsert_schools(session: Session, node: dict[str, Any]) -> tuple[int, int]:
    """Insert or update every record in *node*.  Returns ``(inserted, updated)``."""
    inserted = 0
    updated = 0
    for key, record in node.items():
        if not isinstance(record, dict):
            logger.warning("Skipping non-object entry %r", key)
            continue
        incoming = record_to_school(str(key), record)
        existing = session.query(School).filter_by(key=incoming.key).one_or_none()
        if existing is None:
            session.add(incoming)
            inserted += 1
            continue
        for column in ("data", "name", "classes", "location", "type", "distence", "fee", "midday", "girl_support"):
            setattr(existing, column, getattr(incoming, column))
        updated += 1
    session.commit()
    return inserted, updated


# ---------------------------------------------------------------------------
# CLI
# ---------------------------------------------------------------------------


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog="python -m edubot.db.seed",
        description="Seed the local SQLite school store from a Firebase JSON export.",
    )
    parser.add_argument("export", type=Path, help="Path to the Firebase JSON export.")
    parser.add_argument(
        "--db",
        type=Path,
        default=DEFAULT_DB_PATH,
        help=f"Path to the SQLite database file (default: {DEFAULT_DB_PATH}).",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    """Entry point for the seed script."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    args = parse_args(argv)

    try:
        export = json.loads(args.export.read_text(encoding="utf-8"))
        node = _schools_node(export)
    except (OSError, ValueError) as exc:
        logger.error("Cannot read export %s: %s", args.export, exc)
        sys.exit(1)

    logger.info("Seeding %d school entries into %s", len(node), args.db)
    session = _ensure_database(args.db)
    try:
        inserted, updated = upsert_schools(session, node)
        total = session.query(School).count()
    finally:
        session.close()

    logger.info("Inserted: %d  Updated: %d  Total in DB: %d", inserted, updated, total)


if __name__ == "__main__":
    main()
