"""Calendar and timestamp helpers shared by the client and the normalizer."""

from __future__ import annotations

import contextlib
import datetime as dt
import os
import typing as typ
import zoneinfo
from pathlib import Path

_LOCALTIME_PATH = Path("/etc/localtime")


def utcnow() -> dt.datetime:
    """Return an aware UTC timestamp suitable for DB defaults."""
    return dt.datetime.now(dt.UTC)


def _zone_from_file(path: Path) -> dt.tzinfo | None:
    """Load a TZif file, preferring its IANA key when the path reveals one."""
    resolved = path.resolve()
    if "zoneinfo" in resolved.parts[:-1]:
        index = len(resolved.parts) - 1 - resolved.parts[::-1].index("zoneinfo")
        key = "/".join(resolved.parts[index + 1 :])
        with contextlib.suppress(zoneinfo.ZoneInfoNotFoundError, ValueError):
            return zoneinfo.ZoneInfo(key)
    try:
        with resolved.open("rb") as handle:
            return zoneinfo.ZoneInfo.from_file(handle, key=str(path))
    except (OSError, ValueError):
        return None


def local_timezone() -> dt.tzinfo:
    """Return the host's time zone, including its daylight-saving rules.

    ``TZ`` wins when it names an IANA zone or a TZif file; otherwise
    ``/etc/localtime`` is read. A POSIX rule string in ``TZ`` only yields the
    offset in force now. Hosts with no zone information use UTC.
    """
    name = os.environ.get("TZ", "").strip().removeprefix(":")
    if name:
        if name.startswith("/"):
            zone = _zone_from_file(Path(name))
            if zone is not None:
                return zone
        else:
            with contextlib.suppress(zoneinfo.ZoneInfoNotFoundError, ValueError):
                return zoneinfo.ZoneInfo(name)
        return dt.datetime.now().astimezone().tzinfo or dt.UTC

    if _LOCALTIME_PATH.exists():
        zone = _zone_from_file(_LOCALTIME_PATH)
        if zone is not None:
            return zone
    return dt.UTC


def start_of_day(day: dt.date, tz: dt.tzinfo) -> dt.datetime:
    """Return the first instant of ``day`` in ``tz``."""
    return dt.datetime.combine(day, dt.time.min, tzinfo=tz)


def end_of_day(day: dt.date, tz: dt.tzinfo) -> dt.datetime:
    """Return the last millisecond of ``day`` in ``tz``."""
    return dt.datetime.combine(day, dt.time(23, 59, 59, 999000), tzinfo=tz)


def format_wire_timestamp(value: dt.datetime) -> str:
    """Serialise an aware datetime as UTC ISO-8601 with milliseconds.

    Examples
    --------
    >>> format_wire_timestamp(dt.datetime(2023, 5, 1, tzinfo=dt.UTC))
    '2023-05-01T00:00:00.000Z'

    """
    if value.tzinfo is None:
        msg = "wire timestamps must be timezone-aware"
        raise ValueError(msg)
    text = value.astimezone(dt.UTC).isoformat(timespec="milliseconds")
    return text.replace("+00:00", "Z")


def parse_day(value: str) -> dt.date:
    """Parse a ``YYYY-MM-DD`` day, also accepting a full ISO timestamp.

    Raises
    ------
    ValueError
        If ``value`` is not an ISO-8601 date or datetime.

    """
    text = value.strip()
    try:
        return dt.date.fromisoformat(text)
    except ValueError:
        return dt.datetime.fromisoformat(text).date()


def parse_draw_timestamp(value: typ.Any, *, default_tz: dt.tzinfo) -> dt.datetime | None:  # noqa: ANN401
    """Coerce a draw date value into an aware UTC datetime.

    Strings with an offset (or a trailing ``Z``) keep it. Naive date-times are
    read in ``default_tz``; bare dates mean midnight UTC and numbers are epoch
    milliseconds. Values that cannot be parsed return ``None``.
    """
    match value:
        case dt.datetime():
            parsed = value
        case dt.date():
            parsed = dt.datetime.combine(value, dt.time.min, tzinfo=dt.UTC)
        case str():
            text = value.strip()
            if not text:
                return None
            try:
                if "T" not in text and " " not in text:
                    day = dt.date.fromisoformat(text)
                    parsed = dt.datetime.combine(day, dt.time.min, tzinfo=dt.UTC)
                else:
                    parsed = dt.datetime.fromisoformat(text.replace("Z", "+00:00"))
            except ValueError:
                return None
        case bool():
            return None
        case int() | float():
            # epoch milliseconds
            try:
                parsed = dt.datetime.fromtimestamp(value / 1000, tz=dt.UTC)
            except (OverflowError, OSError, ValueError):
                return None
        case _:
            return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=default_tz)
    return parsed.astimezone(dt.UTC)
