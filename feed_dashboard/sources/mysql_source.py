"""負責與 MySQL 溝通的資料來源模組。"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import create_engine, text
from sqlalchemy.dialects import mysql
from sqlalchemy.engine import URL, Engine
from sqlalchemy.exc import SQLAlchemyError

from feed_dashboard.config.settings import ConfigurationError, settings
from feed_dashboard.feeds.errors import SourceQueryError
from feed_dashboard.feeds.identifiers import TABLE_SUFFIX
from feed_dashboard.sources.base import DEFAULT_ROW_LIMIT, FeedSource
from feed_dashboard.utils.logging import get_logger

logger = get_logger(__name__)
# SQL 內容降為 debug 等級，避免在 info 等級露出
SQL_LOG_LEVEL = logging.DEBUG

_MYSQL_DIALECT = mysql.dialect()

# RIGHT() 比對結尾，避免 LIKE 把底線當成萬用字元
DISCOVER_TABLES_SQL = """
    SELECT TABLE_NAME AS table_name
    FROM information_schema.TABLES
    WHERE TABLE_SCHEMA = DATABASE()
      AND RIGHT(TABLE_NAME, :suffix_len) = :suffix
    ORDER BY TABLE_NAME
"""

LIST_COLUMNS_SQL = """
    SELECT COLUMN_NAME AS column_name
    FROM information_schema.COLUMNS
    WHERE TABLE_SCHEMA = DATABASE()
      AND TABLE_NAME = :table_name
    ORDER BY ORDINAL_POSITION
"""


def quote_identifier(name: str) -> str:
    """以 MySQL 識別字規則引用（反引號，內部反引號加倍）。"""
    return _MYSQL_DIALECT.identifier_preparer.quote_identifier(name)


def build_select_query(table: str, order_by: Optional[str] = None, limit: int = DEFAULT_ROW_LIMIT) -> str:
    """組出 ``SELECT * FROM `t` [ORDER BY `c` DESC] LIMIT n``。"""
    query = f"SELECT * FROM {quote_identifier(table)}"
    if order_by:
        query += f" ORDER BY {quote_identifier(order_by)} DESC"
    return f"{query} LIMIT {int(limit)}"


class MySQLSource(FeedSource):
    """封裝 MySQL 連線與查詢邏輯（唯讀）。"""

    name = "mysql"

    def __init__(
        self,
        host: Optional[str] = None,
        port: Optional[int] = None,
        database: Optional[str] = None,
        username: Optional[str] = None,
        password: Optional[str] = None,
        charset: Optional[str] = None,
        connect_timeout: Optional[int] = None,
        engine: Optional[Engine] = None,
    ) -> None:
        src = settings.source_db
        self.host = host or src.host
        self.port = port or src.port
        self.database = database or src.database
        self.username = username or src.username
        self.password = password or src.password
        self.charset = charset or src.charset
        self.connect_timeout = connect_timeout or src.connect_timeout
        self._engine: Optional[Engine] = engine

    @property
    def engine(self) -> Engine:
        """建立或回傳 SQLAlchemy Engine。"""
        if self._engine is not None:
            return self._engine

        if not self.password:
            raise ConfigurationError("DB_PASSWORD environment variable is required")

        url = URL.create(
            "mysql+pymysql",
            username=self.username,
            password=self.password,
            host=self.host,
            port=self.port,
            database=self.database,
            query={"charset": self.charset},
        )
        self._engine = create_engine(
            url,
            pool_pre_ping=True,        # 失效連線自檢
            pool_recycle=1800,         # 連線回收時間（秒）
            connect_args={"connect_timeout": int(self.connect_timeout)},
        )
        logger.info("建立 MySQL 連線引擎：%s@%s/%s", self.username, self.host, self.database)
        return self._engine

    def _fetch_records(self, query: str, params: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        logger.log(SQL_LOG_LEVEL, "執行 SQL：%s; params=%s", " ".join(query.split()), params)
        try:
            with self.engine.connect() as connection:
                result = connection.execute(text(query), params or {})
                return [dict(row) for row in result.mappings()]
        except SQLAlchemyError as e:
            logger.error("MySQL 查詢失敗：%s", e)
            raise SourceQueryError(str(e)) from e

    def discover_tables(self, suffix: str = TABLE_SUFFIX) -> List[str]:
        records = self._fetch_records(DISCOVER_TABLES_SQL, {"suffix_len": len(suffix), "suffix": suffix})
        return [r["table_name"] for r in records]

    def list_columns(self, table: str) -> List[str]:
        records = self._fetch_records(LIST_COLUMNS_SQL, {"table_name": table})
        return [r["column_name"] for r in records]

    def fetch_rows(
        self, table: str, order_by: Optional[str] = None, limit: int = DEFAULT_ROW_LIMIT
    ) -> List[Dict[str, Any]]:
        # 識別字已組進 SQL 字串，不會再被 text() 當成參數
        return self._fetch_records(build_select_query(table, order_by, limit))

    def ping(self) -> bool:
        try:
            self._fetch_records("SELECT 1")
        except SourceQueryError:
            return False
        return True

    def close(self) -> None:
        if self._engine is not None:
            logger.debug("釋放 MySQL 連線池")
            self._engine.dispose()
            self._engine = None
