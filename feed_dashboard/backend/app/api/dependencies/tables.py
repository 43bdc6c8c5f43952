"""FastAPI 依賴：資料表控制器。"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends

from feed_dashboard.backend.app.api.controllers.tables_controller import TableController
from feed_dashboard.backend.app.core.config import get_app_settings
from feed_dashboard.backend.app.db.source import get_feed_source
from feed_dashboard.backend.app.services.table_service import TableService
from feed_dashboard.config.settings import Settings
from feed_dashboard.feeds.reader import FeedReader
from feed_dashboard.sources.base import FeedSource


def get_feed_reader(
    source: Annotated[FeedSource, Depends(get_feed_source)],
    settings: Annotated[Settings, Depends(get_app_settings)],
) -> FeedReader:
    """
    產生 FeedReader。
    測試時覆寫 get_feed_source 即可換成 DuckDB 記憶體資料庫。
    """
    return FeedReader(source, row_limit=settings.feeds.row_limit)


def get_table_service(
    reader: Annotated[FeedReader, Depends(get_feed_reader)]
) -> TableService:
    return TableService(reader)


def get_table_controller(
    service: Annotated[TableService, Depends(get_table_service)]
) -> TableController:
    """建立並回傳 TableController。"""
    return TableController(service)
