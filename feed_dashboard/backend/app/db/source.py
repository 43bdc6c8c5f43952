"""資料來源 FastAPI 依賴注入模組（唯讀）。"""

from __future__ import annotations

from functools import lru_cache
from typing import Generator

from feed_dashboard.backend.app.core.config import get_app_settings
from feed_dashboard.sources.base import FeedSource
from feed_dashboard.sources.factory import create_source


@lru_cache
def _shared_source() -> FeedSource:
    # MySQL 引擎自帶連線池，整個程序共用一個即可
    return create_source(get_app_settings())


def get_feed_source() -> Generator[FeedSource, None, None]:
    """
    提供資料來源給 API。
    - mysql：共用同一個 Engine（連線池），請求結束不關閉。
    - duckdb：每個請求一條唯讀連線，用完關閉，避免多執行緒共享單一連線。
    """
    settings = get_app_settings()
    if settings.source_db.backend != "duckdb":
        yield _shared_source()
        return

    source = create_source(settings)
    try:
        yield source
    finally:
        source.close()
