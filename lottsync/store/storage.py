"""Persistence models for the draw document store.

Each canonical draw is one row addressed by its document path
``products/{productId}/draws/{id}``. The draw date is kept in a native
timezone-aware timestamp column; every other field lives in ``content``.
"""

from __future__ import annotations

import datetime as dt
import typing as typ

from sqlalchemy import JSON, Boolean, DateTime, Index, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy.types import TypeDecorator

from lottsync.common.time import utcnow

from .errors import TimezoneAwareRequiredError

if typ.TYPE_CHECKING:
    from sqlalchemy.engine import Dialect
    from sqlalchemy.ext.asyncio import AsyncEngine


class Base(DeclarativeBase):
    """Base declarative class for draw store models."""


class UTCDateTime(TypeDecorator[dt.datetime]):
    """DateTime wrapper that round-trips UTC tzinfo even on SQLite."""

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(
        self, value: dt.datetime | None, dialect: Dialect
    ) -> dt.datetime | None:
        """Force bound datetime values to UTC with tzinfo."""
        if value is None:
            return None
        if value.tzinfo is None:
            raise TimezoneAwareRequiredError.for_draw_date()
        return value.astimezone(dt.UTC)

    def process_result_value(
        self, value: dt.datetime | None, dialect: Dialect
    ) -> dt.datetime | None:
        """Ensure result datetimes are UTC and timezone aware."""
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=dt.UTC)
        return value.astimezone(dt.UTC)


class DrawDocument(Base):
    """Create-or-overwrite document holding one canonical draw."""

    __tablename__ = "draw_documents"
    __table_args__ = (Index("ix_draw_documents_product_date", "product_id", "date"),)

    path: Mapped[str] = mapped_column(String(255), primary_key=True)
    product_id: Mapped[str] = mapped_column(String(64))
    draw_id: Mapped[str] = mapped_column(String(64))
    date: Mapped[dt.datetime | None] = mapped_column(UTCDateTime(), default=None)
    has_date: Mapped[bool] = mapped_column(Boolean, default=True)
    content: Mapped[dict[str, typ.Any]] = mapped_column(JSON)
    updated_at: Mapped[dt.datetime] = mapped_column(
        UTCDateTime(), default=utcnow, onupdate=utcnow
    )

    def to_canonical(self) -> dict[str, typ.Any]:
        """Rebuild the canonical draw, with ``date`` as a datetime.

        Draws written without a ``date`` field read back without one.
        """
        if not self.has_date:
            return dict(self.content)
        return {**self.content, "date": self.date}


async def init_draw_storage(engine: AsyncEngine) -> None:
    """Create all tables registered with Base if they are absent."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
