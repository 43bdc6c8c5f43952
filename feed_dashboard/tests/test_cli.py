from __future__ import annotations

import pytest
from typer.testing import CliRunner

from feed_dashboard.cli import app
from feed_dashboard.config.settings import get_settings

runner = CliRunner()


def test_list_tables(feed_db_file: str) -> None:
    result = runner.invoke(app, ["list-tables", "--duckdb", feed_db_file])
    assert result.exit_code == 0, result.output
    assert "alice_new_feed" in result.output
    assert "inventory" not in result.output
    assert "共 3 張資料表" in result.output


def test_show_table(feed_db_file: str) -> None:
    result = runner.invoke(app, ["show-table", "alice_new_feed", "--limit", "1", "--duckdb", feed_db_file])
    assert result.exit_code == 0, result.output
    assert "時間欄位 created_at" in result.output
    assert "2024-06-15 00:30:00" in result.output
    assert "2024-06-14 11:00:00" not in result.output


def test_show_table_rejects_bad_name(feed_db_file: str) -> None:
    result = runner.invoke(app, ["show-table", "inventory", "--duckdb", feed_db_file])
    assert result.exit_code == 1


def test_summary(feed_db_file: str) -> None:
    result = runner.invoke(app, ["summary", "--range", "all", "--duckdb", feed_db_file])
    assert result.exit_code == 0, result.output
    assert "使用者：3，互動：5" in result.output
    assert "2024-06-15  2/3" in result.output
    assert "2024-06-10  1/3" in result.output


def test_summary_rejects_unknown_range(feed_db_file: str) -> None:
    result = runner.invoke(app, ["summary", "--range", "decade", "--duckdb", feed_db_file])
    assert result.exit_code != 0


def test_missing_password_exits(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SOURCE_BACKEND", "mysql")
    monkeypatch.setenv("DB_PASSWORD", "")
    get_settings.cache_clear()
    try:
        result = runner.invoke(app, ["list-tables"])
    finally:
        get_settings.cache_clear()
    assert result.exit_code == 1
