from __future__ import annotations

from typing import Any

from sqlalchemy import JSON, Boolean, Float, Integer, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Async-compatible declarative base for all ORM models."""


class School(Base):
    __tablename__ = "schools"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    key: Mapped[str | None] = mapped_column(String(64), unique=True, nullable=True)  # Firebase push id

    # The record exactly as exported; this is what the API serves.
    data: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)

    # Typed copies of the matching fields for ad-hoc SQL; NULL when the
    # upstream value is missing or of the wrong type.
    name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    classes: Mapped[Any | None] = mapped_column(JSON, nullable=True)  # scalar or list of grade labels
    location: Mapped[str | None] = mapped_column(Text, nullable=True)
    type: Mapped[str | None] = mapped_column(String(50), nullable=True)
    distence: Mapped[float | None] = mapped_column(Float, nullable=True)  # km, upstream spelling
    fee: Mapped[float | None] = mapped_column(Float, nullable=True)
    midday: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    girl_support: Mapped[bool | None] = mapped_column(Boolean, nullable=True)

    def to_record(self) -> dict[str, Any]:
        """Return the school exactly as it was exported."""
        return dict(self.data or {})

    def __repr__(self) -> str:
        return f"<School(id={self.id}, name={self.name!r}, location={self.location!r})>"
