"""共用測試資料：記憶體 DuckDB 內的 feed 表。"""

from __future__ import annotations

import duckdb
import pytest

from feed_dashboard.sources.duckdb_source import DuckDBSource

FEED_TABLES_DDL = [
    # 無時區的 TIMESTAMP 視為 UTC
    "CREATE TABLE alice_new_feed (id INTEGER, action VARCHAR, created_at TIMESTAMP)",
    """
    INSERT INTO alice_new_feed VALUES
        (1, 'LISTIN', TIMESTAMP '2024-06-14 18:00:00'),
        (2, 'CHECKED', TIMESTAMP '2024-06-15 07:30:00'),
        (3, 'LISTIN', TIMESTAMP '2024-06-15 06:59:59')
    """,
    'CREATE TABLE bob_new_feed (id INTEGER, action VARCHAR, "createdAt" VARCHAR)',
    """
    INSERT INTO bob_new_feed VALUES
        (1, 'LISTOUT', '2024-06-15T12:00:00Z'),
        (2, NULL, '2024-06-10T12:00:00Z')
    """,
    "CREATE TABLE empty_new_feed (id INTEGER, note VARCHAR)",
    "CREATE TABLE inventory (id INTEGER)",
    "CREATE TABLE alice_new_feed_backup (id INTEGER)",
]


def build_feed_database(conn: duckdb.DuckDBPyConnection) -> duckdb.DuckDBPyConnection:
    for statement in FEED_TABLES_DDL:
        conn.execute(statement)
    return conn


@pytest.fixture
def feed_connection():
    conn = build_feed_database(duckdb.connect())
    yield conn
    conn.close()


@pytest.fixture
def feed_source(feed_connection) -> DuckDBSource:
    return DuckDBSource(connection=feed_connection)


@pytest.fixture
def feed_db_file(tmp_path) -> str:
    """寫入磁碟的 DuckDB 檔，供 CLI 以唯讀方式開啟。"""
    path = str(tmp_path / "feeds.duckdb")
    conn = build_feed_database(duckdb.connect(path))
    conn.close()
    return path
