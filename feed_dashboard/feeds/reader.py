"""Feed 讀取流程：白名單檢查 → 欄位查詢 → 挑時間欄位 → 讀取 → 時間正規化。"""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional

from feed_dashboard.analytics.models import TableData
from feed_dashboard.config.settings import settings
from feed_dashboard.feeds.errors import TableNotFoundError
from feed_dashboard.feeds.identifiers import TABLE_SUFFIX, validate_table_name
from feed_dashboard.feeds.timestamps import normalize_rows, pick_timestamp_column
from feed_dashboard.sources.base import FeedSource
from feed_dashboard.utils.logging import get_logger

logger = get_logger(__name__)


def _json_safe_row(row: Mapping[str, Any]) -> Dict[str, Any]:
    """二進位欄位值（BLOB / VARBINARY）轉為十六進位字串，確保可輸出為 JSON。"""
    return {
        key: value.hex() if isinstance(value, (bytes, bytearray, memoryview)) else value
        for key, value in row.items()
    }


class FeedReader:
    """API 與 CLI 共用的讀取入口；資料來源由外部注入。"""

    def __init__(self, source: FeedSource, row_limit: Optional[int] = None) -> None:
        self.source = source
        self.row_limit = row_limit or settings.feeds.row_limit

    def list_tables(self) -> List[str]:
        logger.info("查詢以 %s 結尾的資料表", TABLE_SUFFIX)
        tables = self.source.discover_tables(TABLE_SUFFIX)
        logger.info("找到 %s 張資料表", len(tables))
        for idx, name in enumerate(tables, start=1):
            logger.debug("  %s. %s", idx, name)
        return tables

    def read_table(self, table_name: str) -> TableData:
        # 必須在組任何 SQL 之前檢查
        validate_table_name(table_name)

        columns = self.source.list_columns(table_name)
        if not columns:
            raise TableNotFoundError(f'Table "{table_name}" not found or has no columns')

        timestamp_column = pick_timestamp_column(columns)
        logger.info("讀取 %s（時間欄位：%s）", table_name, timestamp_column or "none")
        logger.debug("可用欄位：%s", ", ".join(columns))

        raw_rows = self.source.fetch_rows(table_name, timestamp_column, self.row_limit)
        rows = [_json_safe_row(row) for row in normalize_rows(raw_rows, timestamp_column)]
        logger.info("自 %s 取得 %s 筆資料", table_name, len(rows))

        return TableData(
            table_name=table_name,
            columns=columns,
            rows=rows,
            timestamp_column=timestamp_column,
        )
