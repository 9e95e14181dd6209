"""Runtime configuration for a draw sync run.

Usage
-----
Create a configuration with defaults:

>>> config = SyncConfig()
>>> config.max_concurrent_writes
10

Or load from environment variables:

>>> import os
>>> os.environ["LOTTSYNC_MAX_CONCURRENT_WRITES"] = "4"
>>> SyncConfig.from_env().max_concurrent_writes
4

"""

from __future__ import annotations

import dataclasses as dc
import datetime as dt
import os
import zoneinfo

from lottsync.common.time import local_timezone
from lottsync.store import DEFAULT_MAX_CONCURRENT_WRITES
from lottsync.thelott import DEFAULT_BASE_URL, TheLottConfig

DEFAULT_DATABASE_URL = "sqlite+aiosqlite:///lottsync.db"
DEFAULT_TIMEOUT_S = 20.0


class ConfigError(ValueError):
    """Raised when an environment variable holds an unusable value."""


def _env(name: str) -> str:
    return os.environ.get(name, "").strip()


@dc.dataclass(frozen=True, slots=True)
class SyncConfig:
    """Settings for one ``lottsync`` invocation.

    Attributes
    ----------
    database_url
        SQLAlchemy async URL of the draw store.
    api_base_url
        Base URL of TheLott results service.
    timeout_s
        HTTP timeout for the search request, in seconds.
    timezone
        Zone that defines calendar days for the search window and naive draw
        dates. Defaults to the host's local zone.
    max_concurrent_writes
        Upper bound on draw writes in flight at once.

    """

    database_url: str = DEFAULT_DATABASE_URL
    api_base_url: str = DEFAULT_BASE_URL
    timeout_s: float = DEFAULT_TIMEOUT_S
    timezone: dt.tzinfo = dc.field(default_factory=local_timezone)
    max_concurrent_writes: int = DEFAULT_MAX_CONCURRENT_WRITES

    @property
    def thelott(self) -> TheLottConfig:
        """Client configuration derived from these settings."""
        return TheLottConfig(base_url=self.api_base_url, timeout_s=self.timeout_s)

    @staticmethod
    def _parse_positive_int(env_var: str, default: int) -> int:
        raw = _env(env_var)
        if not raw:
            return default
        try:
            value = int(raw)
        except ValueError as exc:
            msg = f"{env_var} must be an integer, got: {raw!r}"
            raise ConfigError(msg) from exc
        if value < 1:
            msg = f"{env_var} must be positive, got: {value}"
            raise ConfigError(msg)
        return value

    @staticmethod
    def _parse_positive_float(env_var: str, default: float) -> float:
        raw = _env(env_var)
        if not raw:
            return default
        try:
            value = float(raw)
        except ValueError as exc:
            msg = f"{env_var} must be a number, got: {raw!r}"
            raise ConfigError(msg) from exc
        if value <= 0:
            msg = f"{env_var} must be positive, got: {value}"
            raise ConfigError(msg)
        return value

    @staticmethod
    def _parse_timezone(env_var: str) -> dt.tzinfo:
        raw = _env(env_var)
        if not raw:
            return local_timezone()
        try:
            return zoneinfo.ZoneInfo(raw)
        except (zoneinfo.ZoneInfoNotFoundError, ValueError) as exc:
            msg = f"{env_var} must be an IANA time zone name, got: {raw!r}"
            raise ConfigError(msg) from exc

    @classmethod
    def from_env(cls) -> SyncConfig:
        """Create configuration from ``LOTTSYNC_*`` environment variables.

        Reads ``LOTTSYNC_DATABASE_URL``, ``LOTTSYNC_API_BASE_URL``,
        ``LOTTSYNC_TIMEOUT_S``, ``LOTTSYNC_TIMEZONE`` and
        ``LOTTSYNC_MAX_CONCURRENT_WRITES``; unset or blank variables keep their
        defaults. ``LOTTSYNC_LOG_LEVEL`` is read by the CLI before this runs.

        Raises
        ------
        ConfigError
            If a numeric variable is not positive or the zone is unknown.

        """
        return cls(
            database_url=_env("LOTTSYNC_DATABASE_URL") or DEFAULT_DATABASE_URL,
            api_base_url=_env("LOTTSYNC_API_BASE_URL") or DEFAULT_BASE_URL,
            timeout_s=cls._parse_positive_float("LOTTSYNC_TIMEOUT_S", DEFAULT_TIMEOUT_S),
            timezone=cls._parse_timezone("LOTTSYNC_TIMEZONE"),
            max_concurrent_writes=cls._parse_positive_int(
                "LOTTSYNC_MAX_CONCURRENT_WRITES", DEFAULT_MAX_CONCURRENT_WRITES
            ),
        )
