from __future__ import annotations

from functools import lru_cache
from typing import Annotated

from fastapi import Depends

from edubot.config import Settings, get_settings
from edubot.db.base import SchoolRepository
from edubot.db.firebase_repo import FirebaseSchoolRepository
from edubot.db.sqlite_repo import SQLiteSchoolRepository


@lru_cache
def _sqlite_repository(sqlite_path: str) -> SQLiteSchoolRepository:
    """Return one repository (and so one engine and pool) per database file."""
    return SQLiteSchoolRepository(sqlite_path)


def get_school_repository(settings: Annotated[Settings, Depends(get_settings)]) -> SchoolRepository:
    """Return the appropriate :class:`SchoolRepository` implementation.

    The backend is selected by the ``DB_BACKEND`` setting:

    * ``"firebase"`` (default) -- uses :class:`FirebaseSchoolRepository`
    * ``"sqlite"``             -- uses :class:`SQLiteSchoolRepository`

    The Firebase repository holds no connections, so a fresh one per request
    is fine.  The SQLite repository owns an engine and is shared.

    Raises:
        ValueError: If the requested backend is unknown.
    """
    backend = settings.DB_BACKEND.lower()

    if backend == "firebase":
        return FirebaseSchoolRepository(
            settings.FIREBASE_DATABASE_URL,
            auth_token=settings.FIREBASE_AUTH_TOKEN,
            timeout=settings.HTTP_TIMEOUT_SECONDS,
        )

    if backend == "sqlite":
        return _sqlite_repository(settings.SQLITE_PATH)

    raise ValueError(f"Unknown DB_BACKEND: {backend!r}. Supported values: 'firebase', 'sqlite'.")
