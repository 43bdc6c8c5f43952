"""資料表控制器，負責整理 API 回應與錯誤轉換。"""

from __future__ import annotations

from feed_dashboard.backend.app.api.errors import FeedAPIError
from feed_dashboard.backend.app.schemas.tables import TableDataResponse, TableListResponse
from feed_dashboard.backend.app.services.table_service import TableService
from feed_dashboard.config.settings import ConfigurationError
from feed_dashboard.feeds.errors import FeedError
from feed_dashboard.utils.logging import get_logger

logger = get_logger(__name__)


class TableController:
    """將服務層結果轉為 Pydantic 模型；錯誤轉為 FeedAPIError。"""

    def __init__(self, service: TableService) -> None:
        self.service = service

    # -------------------------
    # 資料表探索
    # -------------------------
    def list_tables(self) -> TableListResponse:
        try:
            tables = self.service.discover_tables()
        except (FeedError, ConfigurationError) as exc:
            logger.error("探索資料表失敗：%s", exc)
            raise FeedAPIError(500, str(exc) or "Failed to discover tables", {"tables": []}) from exc
        except Exception as exc:
            logger.exception("探索資料表時發生未預期錯誤")
            raise FeedAPIError(500, str(exc) or "Failed to discover tables", {"tables": []}) from exc
        return TableListResponse(tables=tables, count=len(tables))

    # -------------------------
    # 單表資料
    # -------------------------
    def get_table(self, table_name: str) -> TableDataResponse:
        try:
            table = self.service.get_table(table_name)
        except FeedError as exc:
            if exc.status_code >= 500:
                logger.error("讀取 %s 失敗：%s", table_name, exc)
            else:
                logger.warning("拒絕讀取 %s：%s", table_name, exc)
            raise FeedAPIError(exc.status_code, exc.message, {"data": [], "columns": []}) from exc
        except ConfigurationError as exc:
            logger.error("讀取 %s 失敗：%s", table_name, exc)
            raise FeedAPIError(500, str(exc), {"data": [], "columns": []}) from exc
        except Exception as exc:
            logger.exception("讀取 %s 時發生未預期錯誤", table_name)
            raise FeedAPIError(500, str(exc) or "Internal server error", {"data": [], "columns": []}) from exc

        return TableDataResponse(
            table_name=table.table_name,
            message=f"Successfully pulled {table.row_count} rows from {table.table_name} table",
            data=table.rows,
            columns=table.columns,
            row_count=table.row_count,
        )
