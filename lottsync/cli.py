"""Fetch TattsLotto draws for a range of days and store them.

Usage: ``lottsync START [END]`` where both are ``YYYY-MM-DD`` days in the
configured local time zone; END defaults to START.
"""

from __future__ import annotations

import argparse
import asyncio
import os
import typing as typ

from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine

from lottsync.common.time import parse_day
from lottsync.config import SyncConfig
from lottsync.logging import (
    configure_logging,
    get_logger,
    log_exception,
    log_info,
    log_warning,
)
from lottsync.store import DrawDocumentStore, init_draw_storage
from lottsync.thelott import TheLottResultsClient

if typ.TYPE_CHECKING:
    import datetime as dt

    from lottsync.thelott import DrawSearchClient

logger = get_logger(__name__)


def _day_argument(value: str) -> dt.date:
    try:
        return parse_day(value)
    except ValueError as exc:
        msg = f"expected a YYYY-MM-DD day, got {value!r}"
        raise argparse.ArgumentTypeError(msg) from exc


async def sync_draws(
    config: SyncConfig,
    start_day: dt.date,
    end_day: dt.date | None = None,
    *,
    client: DrawSearchClient | None = None,
) -> list[str]:
    """Search for draws between two days and write each one to the store.

    The search happens before any write, so a failed search leaves the store
    untouched. Returns the document paths that were written. An injected
    ``client`` stays open; one built from ``config`` is closed on exit.
    """
    owns_client = client is None
    search_client: DrawSearchClient = (
        TheLottResultsClient(config.thelott, tz=config.timezone)
        if client is None
        else client
    )
    engine = create_async_engine(config.database_url)
    try:
        await init_draw_storage(engine)
        draws = await search_client.search_draws(start_day, end_day)
        store = DrawDocumentStore(
            async_sessionmaker(engine, expire_on_commit=False),
            max_concurrency=config.max_concurrent_writes,
        )
        return await store.write_all(draws)
    finally:
        if owns_client:
            await search_client.aclose()
        await engine.dispose()


def main(argv: list[str] | None = None) -> int:
    """Run one sync.

    Parameters
    ----------
    argv : list[str] | None, optional
        Command-line arguments. ``None`` defaults to ``sys.argv``.

    Returns
    -------
    int
        Exit code: 0 on success, 1 when the search or any write fails.

    """
    parser = argparse.ArgumentParser(prog="lottsync", description=__doc__)
    parser.add_argument("start", type=_day_argument, help="first day (YYYY-MM-DD)")
    parser.add_argument(
        "end",
        type=_day_argument,
        nargs="?",
        default=None,
        help="last day (YYYY-MM-DD); defaults to START",
    )
    args = parser.parse_args(argv)

    raw_level = os.environ.get("LOTTSYNC_LOG_LEVEL")
    normalized_level, invalid_level = configure_logging(raw_level)
    if invalid_level and raw_level:
        log_warning(
            logger,
            "Invalid LOTTSYNC_LOG_LEVEL %r, falling back to %s",
            raw_level,
            normalized_level,
        )

    try:
        config = SyncConfig.from_env()
        paths = asyncio.run(sync_draws(config, args.start, args.end))
    except Exception as exc:  # noqa: BLE001 - top-level boundary reports and exits
        log_exception(logger, f"Draw sync failed: {exc}", exc)
        return 1

    log_info(logger, "Draw sync complete: %d documents written", len(paths))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
