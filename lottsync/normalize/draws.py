"""Canonicalisation of camel-cased TheLott draw records."""

from __future__ import annotations

import datetime as dt
import typing as typ

from lottsync.common.time import parse_draw_timestamp
from lottsync.logging import get_logger, log_warning

from .fields import remove_field, rename_field

if typ.TYPE_CHECKING:
    import collections.abc as cabc

CanonicalDraw: typ.TypeAlias = dict[str, typ.Any]

DRAW_ID_FIELD = "id"
DRAW_DATE_FIELD = "date"
PRODUCT_ID_FIELD = "productId"

# (source field, canonical field) pairs applied in order.
_RENAMES: tuple[tuple[str, str], ...] = (
    ("drawNumber", DRAW_ID_FIELD),
    ("drawDate", DRAW_DATE_FIELD),
)
_DROPPED_FIELDS: tuple[str, ...] = ("ticketNumbers",)

logger = get_logger(__name__)


def normalize_draw(
    draw: dict[str, typ.Any], *, default_tz: dt.tzinfo = dt.UTC
) -> CanonicalDraw:
    """Turn one camel-cased draw record into a canonical draw, in place.

    ``drawNumber`` becomes ``id`` and ``drawDate`` becomes ``date``;
    ``ticketNumbers`` is dropped and ``date`` is coerced to an aware UTC
    datetime. Missing source fields are skipped rather than reported, and a
    date that cannot be parsed is stored as ``None`` with a warning.
    """
    for old_key, new_key in _RENAMES:
        rename_field(draw, old_key, new_key)
    for field in _DROPPED_FIELDS:
        remove_field(draw, field)

    if DRAW_DATE_FIELD in draw:
        raw_date = draw[DRAW_DATE_FIELD]
        timestamp = parse_draw_timestamp(raw_date, default_tz=default_tz)
        if timestamp is None:
            log_warning(
                logger,
                "Draw %s of %s has an unparseable date %r; storing null",
                draw.get(DRAW_ID_FIELD),
                draw.get(PRODUCT_ID_FIELD),
                raw_date,
            )
        draw[DRAW_DATE_FIELD] = timestamp
    return draw


def normalize_draws(
    draws: cabc.Iterable[dict[str, typ.Any]], *, default_tz: dt.tzinfo = dt.UTC
) -> list[CanonicalDraw]:
    """Apply :func:`normalize_draw` to every record."""
    return [normalize_draw(draw, default_tz=default_tz) for draw in draws]


__all__ = [
    "DRAW_DATE_FIELD",
    "DRAW_ID_FIELD",
    "PRODUCT_ID_FIELD",
    "CanonicalDraw",
    "normalize_draw",
    "normalize_draws",
]
