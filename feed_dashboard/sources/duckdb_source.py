"""DuckDB 檔案資料來源（預設唯讀，供本機離線檢視 feed 快照）。"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence

import duckdb
from duckdb import DuckDBPyConnection

from feed_dashboard.config.settings import settings
from feed_dashboard.feeds.errors import SourceQueryError
from feed_dashboard.feeds.identifiers import TABLE_SUFFIX
from feed_dashboard.sources.base import DEFAULT_ROW_LIMIT, FeedSource
from feed_dashboard.utils.logging import get_logger

logger = get_logger(__name__)

DISCOVER_TABLES_SQL = """
    SELECT table_name
    FROM information_schema.tables
    WHERE table_catalog = current_database()
      AND table_schema = current_schema()
      AND right(table_name, ?) = ?
    ORDER BY table_name
"""

LIST_COLUMNS_SQL = """
    SELECT column_name
    FROM information_schema.columns
    WHERE table_catalog = current_database()
      AND table_schema = current_schema()
      AND table_name = ?
    ORDER BY ordinal_position
"""


def quote_ident(name: str) -> str:
    """一律以雙引號引用識別字，並 escape 內部的雙引號。"""
    if name is None:
        raise ValueError("Identifier cannot be None")
    return '"' + str(name).replace('"', '""') + '"'


class DuckDBSource(FeedSource):
    """封裝 DuckDB 讀取操作，便於單元測試。"""

    name = "duckdb"

    def __init__(
        self,
        db_path: str | None = None,
        read_only: bool = True,
        connection: DuckDBPyConnection | None = None,
    ) -> None:
        self.db_path = db_path or settings.source_db.duckdb_path
        self.read_only = read_only
        self._conn: DuckDBPyConnection | None = connection
        # 外部傳入的連線由呼叫端負責關閉
        self._owns_connection = connection is None

    # ------------------------------
    # 連線管理
    # ------------------------------
    def connect(self) -> DuckDBPyConnection:
        """建立連線並回傳，若已存在則直接使用。"""
        if self._conn is None:
            logger.info("開啟 DuckDB 連線：%s (read_only=%s)", self.db_path, self.read_only)
            try:
                self._conn = duckdb.connect(self.db_path, read_only=self.read_only)
            except duckdb.Error as e:
                raise SourceQueryError(str(e)) from e
        return self._conn

    def close(self) -> None:
        if self._conn is not None and self._owns_connection:
            logger.debug("關閉 DuckDB 連線")
            self._conn.close()
        self._conn = None

    # ------------------------------
    # 查詢
    # ------------------------------
    def _fetch_records(self, sql: str, parameters: Sequence[Any] | None = None) -> List[Dict[str, Any]]:
        # 每次查詢開新 cursor，多執行緒同時讀取時互不干擾
        cursor = self.connect().cursor()
        try:
            cursor.execute(sql, list(parameters or []))
            columns = [d[0] for d in cursor.description or []]
            return [dict(zip(columns, row)) for row in cursor.fetchall()]
        except duckdb.Error as e:
            logger.error("DuckDB 查詢失敗：%s", e)
            raise SourceQueryError(str(e)) from e
        finally:
            cursor.close()

    def discover_tables(self, suffix: str = TABLE_SUFFIX) -> List[str]:
        records = self._fetch_records(DISCOVER_TABLES_SQL, [len(suffix), suffix])
        return [r["table_name"] for r in records]

    def list_columns(self, table: str) -> List[str]:
        records = self._fetch_records(LIST_COLUMNS_SQL, [table])
        return [r["column_name"] for r in records]

    def fetch_rows(
        self, table: str, order_by: Optional[str] = None, limit: int = DEFAULT_ROW_LIMIT
    ) -> List[Dict[str, Any]]:
        sql = f"SELECT * FROM {quote_ident(table)}"
        if order_by:
            sql += f" ORDER BY {quote_ident(order_by)} DESC"
        sql += f" LIMIT {int(limit)}"
        return self._fetch_records(sql)

    def ping(self) -> bool:
        try:
            self._fetch_records("SELECT 1")
        except SourceQueryError:
            return False
        return True
