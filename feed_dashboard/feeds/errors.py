"""Feed 存取錯誤分類。

- InvalidTableNameError：表名未通過白名單，查詢前即拒絕（400）。
- TableNotFoundError：資料表沒有任何欄位，視為不存在（404）。
- SourceQueryError：連線、逾時或查詢失敗（500），保留底層訊息。

以上皆不自動重試。單筆資料的時間戳無法解析則不屬於此處，直接略過該筆。
"""

from __future__ import annotations


class FeedError(Exception):
    """所有 feed 相關錯誤的基底類別。"""

    status_code: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class InvalidTableNameError(FeedError):
    status_code = 400


class TableNotFoundError(FeedError):
    status_code = 404


class SourceQueryError(FeedError):
    status_code = 500
