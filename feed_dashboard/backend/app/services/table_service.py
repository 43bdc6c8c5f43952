"""Feed 資料表服務層（薄服務層；主要轉呼叫 FeedReader）。"""

from __future__ import annotations

from typing import List

from feed_dashboard.analytics.models import TableData
from feed_dashboard.feeds.reader import FeedReader


class TableService:
    """處理資料表探索與讀取。"""

    def __init__(self, reader: FeedReader) -> None:
        self.reader = reader

    def discover_tables(self) -> List[str]:
        """所有以 _new_feed 結尾的資料表，依名稱排序。"""
        return self.reader.list_tables()

    def get_table(self, table_name: str) -> TableData:
        """
        讀取單一資料表：
          - 表名不合法 → InvalidTableNameError
          - 沒有欄位 → TableNotFoundError
          - 最多 1000 筆，依時間欄位遞減，並附上洛杉磯時間欄位
        """
        return self.reader.read_table(table_name)
