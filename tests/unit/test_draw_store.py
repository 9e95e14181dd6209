"""Unit tests for the draw document store."""

from __future__ import annotations

import asyncio
import datetime as dt
import typing as typ

import pytest
from sqlalchemy import func, select, text
from sqlalchemy.exc import StatementError

from lottsync.store import (
    DocumentPathError,
    DrawDocument,
    DrawDocumentStore,
    DrawPersistError,
    TimezoneAwareRequiredError,
    draw_document_path,
)

if typ.TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

_DRAW_DATE = dt.datetime(2023, 5, 6, 9, 30, tzinfo=dt.UTC)


def _draw(draw_id: object, **extra: object) -> dict[str, typ.Any]:
    draw: dict[str, typ.Any] = {
        "id": draw_id,
        "date": _DRAW_DATE,
        "productId": "TattsLotto",
        "primaryNumbers": [3, 11, 19, 27, 35, 44],
    }
    draw.update(extra)
    return draw


async def _count_documents(session_factory: async_sessionmaker[AsyncSession]) -> int:
    async with session_factory() as session:
        return await session.scalar(select(func.count()).select_from(DrawDocument)) or 0


def test_draw_document_path() -> None:
    """Paths nest draws under their product."""
    assert draw_document_path(_draw(4321)) == "products/TattsLotto/draws/4321"


@pytest.mark.parametrize(
    "draw",
    [
        {"productId": "TattsLotto"},
        {"id": 1},
        {"id": "", "productId": "TattsLotto"},
        {"id": None, "productId": "TattsLotto"},
        {"id": 1, "productId": "Tatts/Lotto"},
        {"id": [1], "productId": "TattsLotto"},
    ],
)
def test_draw_document_path_rejects_unusable_draws(draw: dict[str, object]) -> None:
    """Draws missing a usable id or product cannot be addressed."""
    with pytest.raises(DocumentPathError):
        draw_document_path(draw)


def test_write_round_trips_native_timestamp(
    session_factory: async_sessionmaker[AsyncSession],
) -> None:
    """The stored date is a native UTC timestamp, not a string."""
    store = DrawDocumentStore(session_factory)

    async def _run() -> tuple[str, dict[str, typ.Any] | None, object]:
        path = await store.write(_draw(4321, winningRegion="NSW"))
        loaded = await store.get(path)
        async with session_factory() as session:
            raw_date = await session.scalar(
                text("SELECT date FROM draw_documents WHERE path = :path"),
                {"path": path},
            )
        return path, loaded, raw_date

    path, loaded, raw_date = asyncio.run(_run())

    assert path == "products/TattsLotto/draws/4321"
    assert loaded == _draw(4321, winningRegion="NSW")
    assert loaded is not None
    assert loaded["date"].tzinfo is not None
    assert not isinstance(raw_date, str) or raw_date.startswith("2023-05-06 09:30:00")


def test_write_overwrites_same_path(
    session_factory: async_sessionmaker[AsyncSession],
) -> None:
    """Writing a draw id twice replaces the earlier document."""
    store = DrawDocumentStore(session_factory)

    async def _run() -> tuple[dict[str, typ.Any] | None, int]:
        await store.write(_draw(1, jackpot=1000))
        path = await store.write(_draw(1, jackpot=2000))
        return await store.get(path), await _count_documents(session_factory)

    loaded, count = asyncio.run(_run())

    assert count == 1
    assert loaded is not None
    assert loaded["jackpot"] == 2000  # noqa: PLR2004


def test_write_all_persists_each_draw_concurrently(
    session_factory: async_sessionmaker[AsyncSession],
) -> None:
    """N distinct draws written concurrently give exactly N documents."""
    store = DrawDocumentStore(session_factory, max_concurrency=4)
    draws = [_draw(draw_id) for draw_id in range(4300, 4312)]

    async def _run() -> tuple[list[str], int]:
        paths = await store.write_all(draws)
        return paths, await _count_documents(session_factory)

    paths, count = asyncio.run(_run())

    assert count == len(draws)
    assert sorted(paths) == sorted(
        f"products/TattsLotto/draws/{draw_id}" for draw_id in range(4300, 4312)
    )


def test_write_all_with_no_draws(
    session_factory: async_sessionmaker[AsyncSession],
) -> None:
    """An empty batch writes nothing and succeeds."""
    store = DrawDocumentStore(session_factory)

    assert asyncio.run(store.write_all([])) == []


def test_write_all_reports_every_failure(
    session_factory: async_sessionmaker[AsyncSession],
) -> None:
    """Failed writes are collected while the valid draws still land."""
    store = DrawDocumentStore(session_factory)
    draws = [_draw(1), {"productId": "TattsLotto"}, _draw(2), {"id": 3}]

    with pytest.raises(DrawPersistError) as excinfo:
        asyncio.run(store.write_all(draws))

    assert len(excinfo.value.exceptions) == 2  # noqa: PLR2004
    assert all(isinstance(exc, DocumentPathError) for exc in excinfo.value.exceptions)
    assert asyncio.run(_count_documents(session_factory)) == 2  # noqa: PLR2004


def test_write_rejects_naive_date(
    session_factory: async_sessionmaker[AsyncSession],
) -> None:
    """Naive draw dates are refused at bind time."""
    store = DrawDocumentStore(session_factory)
    naive = _draw(1, date=dt.datetime(2023, 5, 6, 9, 30))  # noqa: DTZ001

    with pytest.raises(StatementError) as excinfo:
        asyncio.run(store.write(naive))
    assert isinstance(excinfo.value.__cause__, TimezoneAwareRequiredError)


def test_write_accepts_null_date(
    session_factory: async_sessionmaker[AsyncSession],
) -> None:
    """Draws whose date could not be parsed are stored with a null date."""
    store = DrawDocumentStore(session_factory)

    async def _run() -> dict[str, typ.Any] | None:
        path = await store.write(_draw(5, date=None))
        return await store.get(path)

    loaded = asyncio.run(_run())

    assert loaded is not None
    assert loaded["date"] is None


def test_write_without_date_reads_back_without_date(
    session_factory: async_sessionmaker[AsyncSession],
) -> None:
    """A draw that never had a date does not gain one on the way back."""
    store = DrawDocumentStore(session_factory)
    draw = _draw(6)
    del draw["date"]

    async def _run() -> dict[str, typ.Any] | None:
        path = await store.write(draw)
        return await store.get(path)

    loaded = asyncio.run(_run())

    assert loaded == draw
    assert "date" not in loaded


def test_get_missing_path_returns_none(
    session_factory: async_sessionmaker[AsyncSession],
) -> None:
    """Unknown paths read back as None."""
    store = DrawDocumentStore(session_factory)

    assert asyncio.run(store.get("products/TattsLotto/draws/0")) is None


def test_store_rejects_non_positive_concurrency(
    session_factory: async_sessionmaker[AsyncSession],
) -> None:
    """The write bound must allow at least one write."""
    with pytest.raises(ValueError, match="positive"):
        DrawDocumentStore(session_factory, max_concurrency=0)
