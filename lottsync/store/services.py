"""Services for writing canonical draws to the document store."""

from __future__ import annotations

import asyncio
import typing as typ

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from lottsync.logging import get_logger, log_debug, log_info
from lottsync.normalize import DRAW_DATE_FIELD, DRAW_ID_FIELD, PRODUCT_ID_FIELD

from .errors import DocumentPathError, DrawPersistError
from .storage import DrawDocument

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

    from lottsync.normalize import CanonicalDraw

DEFAULT_MAX_CONCURRENT_WRITES = 10

logger = get_logger(__name__)


def _path_segment(draw: CanonicalDraw, field: str) -> str:
    value = draw.get(field)
    if value is None or isinstance(value, bool | dict | list):
        raise DocumentPathError.missing(field)
    segment = str(value).strip()
    if not segment:
        raise DocumentPathError.missing(field)
    if "/" in segment:
        raise DocumentPathError.invalid_segment(field, segment)
    return segment


def _document_key(draw: CanonicalDraw) -> tuple[str, str]:
    return (_path_segment(draw, PRODUCT_ID_FIELD), _path_segment(draw, DRAW_ID_FIELD))


def draw_document_path(draw: CanonicalDraw) -> str:
    """Return ``products/{productId}/draws/{id}`` for a canonical draw.

    Raises
    ------
    DocumentPathError
        If ``productId`` or ``id`` is missing, empty, or contains ``/``.

    """
    product_id, draw_id = _document_key(draw)
    return f"products/{product_id}/draws/{draw_id}"


def _collect_results(gathered: list[str | BaseException]) -> list[str]:
    """Return written paths or raise every failure at once.

    Regular exceptions are wrapped in :class:`DrawPersistError`; anything else
    (``KeyboardInterrupt``, ``CancelledError``) is re-raised as-is.
    """
    paths: list[str] = []
    failures: list[Exception] = []
    for result in gathered:
        if isinstance(result, Exception):
            failures.append(result)
        elif isinstance(result, BaseException):
            raise result
        else:
            paths.append(result)

    if failures:
        raise DrawPersistError(failures)
    return paths


class DrawDocumentStore:
    """Create-or-overwrite store for canonical draws."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        *,
        max_concurrency: int = DEFAULT_MAX_CONCURRENT_WRITES,
    ) -> None:
        """Store the session factory and the bound on concurrent writes."""
        if max_concurrency < 1:
            msg = f"max_concurrency must be positive, got: {max_concurrency}"
            raise ValueError(msg)
        self._session_factory = session_factory
        self._max_concurrency = max_concurrency

    async def write(self, draw: CanonicalDraw) -> str:
        """Write one draw at its document path and return the path.

        Writing the same path again replaces the stored document.
        """
        path = draw_document_path(draw)

        async with self._session_factory() as session:
            await session.merge(self._build_document(path, draw))
            try:
                await session.commit()
            except IntegrityError:
                # a concurrent writer created the row first; overwrite it
                await session.rollback()
                await session.merge(self._build_document(path, draw))
                await session.commit()

        log_debug(logger, "Wrote draw document %s", path)
        return path

    async def write_all(self, draws: cabc.Sequence[CanonicalDraw]) -> list[str]:
        """Write every draw concurrently and return the written paths.

        Writes run as independent tasks; all of them are attempted even when
        some fail.

        Raises
        ------
        DrawPersistError
            If any write failed, carrying every underlying exception.

        """
        semaphore = asyncio.Semaphore(self._max_concurrency)

        async def bounded_write(draw: CanonicalDraw) -> str:
            async with semaphore:
                return await self.write(draw)

        gathered = await asyncio.gather(
            *(bounded_write(draw) for draw in draws), return_exceptions=True
        )
        paths = _collect_results(gathered)
        log_info(logger, "Persisted %d draw documents", len(paths))
        return paths

    async def get(self, path: str) -> CanonicalDraw | None:
        """Return the canonical draw stored at ``path``, if any."""
        async with self._session_factory() as session:
            document = await session.scalar(
                select(DrawDocument).where(DrawDocument.path == path)
            )
            return None if document is None else document.to_canonical()

    @staticmethod
    def _build_document(path: str, draw: CanonicalDraw) -> DrawDocument:
        product_id, draw_id = _document_key(draw)
        return DrawDocument(
            path=path,
            product_id=product_id,
            draw_id=draw_id,
            date=draw.get(DRAW_DATE_FIELD),
            has_date=DRAW_DATE_FIELD in draw,
            content={key: value for key, value in draw.items() if key != DRAW_DATE_FIELD},
        )
