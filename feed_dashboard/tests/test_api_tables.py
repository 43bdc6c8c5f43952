"""Feed 資料表 API 路由測試。"""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from feed_dashboard.backend.app.core.config import get_app_settings
from feed_dashboard.backend.app.db.source import get_feed_source
from feed_dashboard.backend.app.main import create_app
from feed_dashboard.config.settings import ConfigurationError, get_settings
from feed_dashboard.feeds.errors import SourceQueryError
from feed_dashboard.sources.base import FeedSource
from feed_dashboard.sources.duckdb_source import DuckDBSource


class BrokenSource(FeedSource):
    """模擬資料庫連線失敗。"""

    def discover_tables(self, suffix="_new_feed"):
        raise SourceQueryError("connection refused")

    def list_columns(self, table):
        raise SourceQueryError("connection refused")

    def fetch_rows(self, table, order_by=None, limit=1000):
        raise SourceQueryError("connection refused")

    def ping(self):
        return False


def _client(source: FeedSource) -> TestClient:
    app = create_app()
    app.dependency_overrides[get_feed_source] = lambda: source
    return TestClient(app)


@pytest.fixture
def client(feed_source) -> TestClient:
    return _client(feed_source)


def test_health(client: TestClient) -> None:
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_list_tables(client: TestClient) -> None:
    response = client.get("/api/tables")
    assert response.status_code == 200
    assert response.json() == {
        "success": True,
        "tables": ["alice_new_feed", "bob_new_feed", "empty_new_feed"],
        "count": 3,
    }


def test_read_table(client: TestClient) -> None:
    response = client.get("/api/tables/alice_new_feed")
    assert response.status_code == 200
    body = response.json()

    assert body["success"] is True
    assert body["tableName"] == "alice_new_feed"
    assert body["rowCount"] == 3
    assert body["message"] == "Successfully pulled 3 rows from alice_new_feed table"
    assert body["columns"] == ["id", "action", "created_at"]
    assert [row["id"] for row in body["data"]] == [2, 3, 1]
    assert body["data"][0]["_createdDate"] == "2024-06-15 00:30:00"
    assert "_createdDateUTC" in body["data"][0]


def test_read_empty_table(client: TestClient) -> None:
    body = client.get("/api/tables/empty_new_feed").json()
    assert body["rowCount"] == 0
    assert body["data"] == []
    assert body["columns"] == ["id", "note"]


@pytest.mark.parametrize("name", ["inventory", "bad%20name_new_feed", "alice_new_feed_backup"])
def test_invalid_table_name_is_400(client: TestClient, name: str) -> None:
    response = client.get(f"/api/tables/{name}")
    assert response.status_code == 400
    assert response.json() == {
        "success": False,
        "error": 'Invalid table name. Table must end with "_new_feed"',
        "data": [],
        "columns": [],
    }


def test_missing_table_is_404(client: TestClient) -> None:
    response = client.get("/api/tables/missing_new_feed")
    assert response.status_code == 404
    body = response.json()
    assert body["success"] is False
    assert body["error"] == 'Table "missing_new_feed" not found or has no columns'
    assert body["data"] == [] and body["columns"] == []


def test_source_failures_are_500() -> None:
    client = _client(BrokenSource())

    tables = client.get("/api/tables")
    assert tables.status_code == 500
    assert tables.json() == {"success": False, "error": "connection refused", "tables": []}

    table = client.get("/api/tables/alice_new_feed")
    assert table.status_code == 500
    assert table.json() == {"success": False, "error": "connection refused", "data": [], "columns": []}


def test_startup_fails_without_db_password(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SOURCE_BACKEND", "mysql")
    monkeypatch.setenv("DB_PASSWORD", "")
    get_settings.cache_clear()
    get_app_settings.cache_clear()
    try:
        with pytest.raises(ConfigurationError):
            with TestClient(create_app()):
                pass
    finally:
        get_settings.cache_clear()
        get_app_settings.cache_clear()


class UndecodableSource(FeedSource):
    """驅動程式層拋出非 FeedError 的例外（例如欄位編碼錯誤）。"""

    def discover_tables(self, suffix="_new_feed"):
        raise UnicodeDecodeError("utf-8", b"\xff", 0, 1, "invalid start byte")

    def list_columns(self, table):
        raise UnicodeDecodeError("utf-8", b"\xff", 0, 1, "invalid start byte")

    def fetch_rows(self, table, order_by=None, limit=1000):
        return []

    def ping(self):
        return True


def test_unexpected_source_errors_are_json_500() -> None:
    client = _client(UndecodableSource())

    tables = client.get("/api/tables")
    assert tables.status_code == 500
    body = tables.json()
    assert body["success"] is False
    assert body["tables"] == []
    assert "invalid start byte" in body["error"]

    table = client.get("/api/tables/alice_new_feed")
    assert table.status_code == 500
    body = table.json()
    assert body["success"] is False
    assert body["data"] == [] and body["columns"] == []


def test_errors_outside_the_controller_are_json_500() -> None:
    def broken_source():
        raise RuntimeError("pool exhausted")

    app = create_app()
    app.dependency_overrides[get_feed_source] = broken_source
    client = TestClient(app, raise_server_exceptions=False)

    table = client.get("/api/tables/alice_new_feed")
    assert table.status_code == 500
    assert table.json() == {"success": False, "error": "pool exhausted", "data": [], "columns": []}

    tables = client.get("/api/tables")
    assert tables.status_code == 500
    assert tables.json() == {"success": False, "error": "pool exhausted", "tables": []}


def test_binary_columns_are_returned_as_hex(feed_connection) -> None:
    feed_connection.execute("CREATE TABLE blob_new_feed (id BLOB, created_at TIMESTAMP)")
    feed_connection.execute("INSERT INTO blob_new_feed VALUES ('\\xFF\\x10'::BLOB, TIMESTAMP '2024-06-15 07:30:00')")
    client = _client(DuckDBSource(connection=feed_connection))

    response = client.get("/api/tables/blob_new_feed")
    assert response.status_code == 200
    body = response.json()
    assert body["rowCount"] == 1
    assert body["data"][0]["id"] == "ff10"
    assert body["data"][0]["_createdDate"] == "2024-06-15 00:30:00"
