"""Feed 資料來源抽象介面。

實作需保證：
- 表名、欄位名一律以識別字（identifier）方式引用，不得以字串值帶入。
- 查無資料回傳空 list，不視為錯誤。
- 底層連線 / 查詢錯誤包成 SourceQueryError。
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from feed_dashboard.feeds.identifiers import TABLE_SUFFIX

DEFAULT_ROW_LIMIT = 1000


class FeedSource(ABC):
    """所有資料來源的共同介面。"""

    name: str = "base-source"

    @abstractmethod
    def discover_tables(self, suffix: str = TABLE_SUFFIX) -> List[str]:
        """列出目前 schema 中名稱以 suffix 結尾的資料表（依名稱遞增）。"""

    @abstractmethod
    def list_columns(self, table: str) -> List[str]:
        """依欄位順序回傳欄位名；表不存在時回傳空 list。"""

    @abstractmethod
    def fetch_rows(
        self, table: str, order_by: Optional[str] = None, limit: int = DEFAULT_ROW_LIMIT
    ) -> List[Dict[str, Any]]:
        """讀取最多 limit 筆；有 order_by 時依該欄位遞減排序。"""

    @abstractmethod
    def ping(self) -> bool:
        """連線檢查。"""

    def close(self) -> None:
        """釋放連線資源（預設不需處理）。"""

    def __enter__(self) -> "FeedSource":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
