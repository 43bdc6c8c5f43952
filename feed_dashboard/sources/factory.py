"""依設定建立資料來源。"""

from __future__ import annotations

from typing import Optional

from feed_dashboard.config.settings import Settings, get_settings, require_source_credentials
from feed_dashboard.sources.base import FeedSource
from feed_dashboard.sources.duckdb_source import DuckDBSource
from feed_dashboard.sources.mysql_source import MySQLSource


def create_source(cfg: Optional[Settings] = None) -> FeedSource:
    """backend=duckdb 時開唯讀 DuckDB 檔；其餘一律走 MySQL（缺密碼直接失敗）。"""
    cfg = cfg or get_settings()
    src = cfg.source_db
    if src.backend == "duckdb":
        return DuckDBSource(db_path=src.duckdb_path, read_only=True)
    if src.backend != "mysql":
        raise ValueError(f"不支援的資料來源：{src.backend}")
    require_source_credentials(cfg)
    return MySQLSource(
        host=src.host,
        port=src.port,
        database=src.database,
        username=src.username,
        password=src.password,
        charset=src.charset,
        connect_timeout=src.connect_timeout,
    )
