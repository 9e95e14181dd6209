"""Unit tests for sync configuration loading."""

from __future__ import annotations

import datetime as dt
import zoneinfo

import pytest

from lottsync.config import DEFAULT_DATABASE_URL, ConfigError, SyncConfig
from lottsync.thelott import DEFAULT_BASE_URL, build_search_request

_ENV_VARS = (
    "LOTTSYNC_DATABASE_URL",
    "LOTTSYNC_API_BASE_URL",
    "LOTTSYNC_TIMEOUT_S",
    "LOTTSYNC_TIMEZONE",
    "LOTTSYNC_MAX_CONCURRENT_WRITES",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)


class TestSyncConfigDefaults:
    """Tests for values used when nothing is configured."""

    def test_from_env_uses_defaults(self) -> None:
        """Unset variables keep their defaults."""
        config = SyncConfig.from_env()

        assert config.database_url == DEFAULT_DATABASE_URL
        assert config.api_base_url == DEFAULT_BASE_URL
        assert config.timeout_s == pytest.approx(20.0)
        assert config.max_concurrent_writes == 10  # noqa: PLR2004
        assert config.timezone is not None

    def test_blank_values_fall_back(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Whitespace-only variables count as unset."""
        monkeypatch.setenv("LOTTSYNC_DATABASE_URL", "  ")
        monkeypatch.setenv("LOTTSYNC_MAX_CONCURRENT_WRITES", "")

        config = SyncConfig.from_env()

        assert config.database_url == DEFAULT_DATABASE_URL
        assert config.max_concurrent_writes == 10  # noqa: PLR2004


def test_from_env_reads_every_variable(monkeypatch: pytest.MonkeyPatch) -> None:
    """Each LOTTSYNC_* variable reaches its field."""
    monkeypatch.setenv("LOTTSYNC_DATABASE_URL", "sqlite+aiosqlite:///draws.db")
    monkeypatch.setenv("LOTTSYNC_API_BASE_URL", "https://results.example.test")
    monkeypatch.setenv("LOTTSYNC_TIMEOUT_S", "5.5")
    monkeypatch.setenv("LOTTSYNC_TIMEZONE", "Australia/Sydney")
    monkeypatch.setenv("LOTTSYNC_MAX_CONCURRENT_WRITES", "3")

    config = SyncConfig.from_env()

    assert config.database_url == "sqlite+aiosqlite:///draws.db"
    assert config.api_base_url == "https://results.example.test"
    assert config.timeout_s == pytest.approx(5.5)
    assert config.timezone == zoneinfo.ZoneInfo("Australia/Sydney")
    assert config.max_concurrent_writes == 3  # noqa: PLR2004


def test_thelott_config_derives_from_settings() -> None:
    """The client configuration carries the base URL and timeout."""
    config = SyncConfig(api_base_url="https://results.example.test", timeout_s=7.0)

    client_config = config.thelott

    assert client_config.base_url == "https://results.example.test"
    assert client_config.timeout_s == pytest.approx(7.0)


@pytest.mark.parametrize(
    ("env_var", "raw", "message"),
    [
        ("LOTTSYNC_MAX_CONCURRENT_WRITES", "many", "must be an integer"),
        ("LOTTSYNC_MAX_CONCURRENT_WRITES", "0", "must be positive"),
        ("LOTTSYNC_TIMEOUT_S", "soon", "must be a number"),
        ("LOTTSYNC_TIMEOUT_S", "-1", "must be positive"),
        ("LOTTSYNC_TIMEZONE", "Mars/Olympus_Mons", "IANA time zone"),
    ],
)
def test_from_env_rejects_bad_values(
    monkeypatch: pytest.MonkeyPatch, env_var: str, raw: str, message: str
) -> None:
    """Unusable values raise ConfigError naming the variable."""
    monkeypatch.setenv(env_var, raw)

    with pytest.raises(ConfigError, match=message) as excinfo:
        SyncConfig.from_env()
    assert env_var in str(excinfo.value)


def test_explicit_timezone_is_kept() -> None:
    """A zone passed directly is used as-is."""
    zone = dt.timezone(dt.timedelta(hours=10))

    assert SyncConfig(timezone=zone).timezone is zone


def test_default_timezone_follows_host_dst_rules(monkeypatch: pytest.MonkeyPatch) -> None:
    """Without LOTTSYNC_TIMEZONE the host zone keeps its daylight-saving rules."""
    monkeypatch.setenv("TZ", "Australia/Melbourne")

    config = SyncConfig.from_env()
    request = build_search_request(dt.date(2023, 6, 1), tz=config.timezone)

    assert request["DateStart"] == "2023-05-31T14:00:00.000Z"
    assert request["DateEnd"] == "2023-06-01T13:59:59.999Z"
