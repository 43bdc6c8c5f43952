"""設定載入測試。"""

from __future__ import annotations

import pytest

from feed_dashboard.config.settings import (
    ConfigurationError,
    Settings,
    get_settings,
    require_source_credentials,
)
from feed_dashboard.feeds.identifiers import TABLE_SUFFIX
from feed_dashboard.feeds.timestamps import DISPLAY_TIMEZONE


def test_env_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("FEED_ROW_LIMIT", "50")
    monkeypatch.setenv("SOURCE_BACKEND", "DuckDB")
    get_settings.cache_clear()
    try:
        cfg = get_settings()
        assert cfg.feeds.row_limit == 50
        assert cfg.source_db.backend == "duckdb"
    finally:
        get_settings.cache_clear()


def test_suffix_and_timezone_are_not_configurable() -> None:
    cfg = Settings.model_validate(
        {"app": {"timezone": "UTC"}, "feeds": {"table_suffix": "_old_feed"}}
    )

    assert "timezone" not in cfg.app.model_dump()
    assert "table_suffix" not in cfg.feeds.model_dump()
    assert TABLE_SUFFIX == "_new_feed"
    assert DISPLAY_TIMEZONE == "America/Los_Angeles"


def test_mysql_requires_password() -> None:
    cfg = Settings.model_validate({"source_db": {"backend": "mysql", "password": ""}})
    with pytest.raises(ConfigurationError):
        require_source_credentials(cfg)

    require_source_credentials(Settings.model_validate({"source_db": {"backend": "duckdb"}}))
