from __future__ import annotations

import logging
from typing import Any

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine

from edubot.db.base import SchoolRepository, UpstreamFetchError
from edubot.db.models import Base, School

logger = logging.getLogger(__name__)


class SQLiteSchoolRepository(SchoolRepository):
    """SQLite-backed implementation of :class:`SchoolRepository`.

    Uses *aiosqlite* via SQLAlchemy's async engine.  Intended for local
    development and tests; populate it with ``python -m edubot.db.seed``.
    """

    def __init__(self, sqlite_path: str = "./data/schools.db") -> None:
        url = f"sqlite+aiosqlite:///{sqlite_path}"
        self._engine = create_async_engine(url, echo=False)
        self._session_factory: async_sessionmaker[AsyncSession] = async_sessionmaker(
            self._engine, expire_on_commit=False
        )

    @property
    def engine(self) -> AsyncEngine:
        """Expose the underlying async engine (used by the application lifespan)."""
        return self._engine

    async def init_db(self) -> None:
        """Create all tables if they do not already exist."""
        async with self._engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def fetch_all_schools(self) -> list[dict[str, Any]]:
        try:
            async with self._session_factory() as session:
                result = await session.execute(select(School).order_by(School.id))
                schools = result.scalars().all()
        except SQLAlchemyError as exc:
            logger.error("Failed to read schools from SQLite: %s", exc)
            raise UpstreamFetchError(f"SQLite read failed: {exc}") from exc
        return [s.to_record() for s in schools]
