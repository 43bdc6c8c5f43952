"""FastAPI 服務入口。"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from feed_dashboard.backend.app.api.errors import (
    FeedAPIError,
    feed_api_error_handler,
    unhandled_error_handler,
)
from feed_dashboard.backend.app.api.routes.tables import router as tables_router
from feed_dashboard.backend.app.core.config import get_app_settings
from feed_dashboard.config.settings import require_source_credentials
from feed_dashboard.utils.logging import get_logger

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    settings = get_app_settings()
    # 缺少資料庫密碼時直接啟動失敗
    require_source_credentials(settings)
    logger.info(
        "Dashboard API 啟動（來源：%s，路徑前綴：%s）",
        settings.source_db.backend,
        settings.api.prefix,
    )
    yield
    logger.info("Dashboard API 關閉")


def create_app() -> FastAPI:
    """建立 FastAPI 實例，註冊中介層、錯誤處理與路由。"""
    settings = get_app_settings()

    app = FastAPI(
        title=settings.app.name,
        version="0.1.0",
        docs_url=settings.api.docs_url,
        openapi_url=settings.api.openapi_url,
        lifespan=lifespan,
    )

    # CORS 全開；前端由任意來源呼叫
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(FeedAPIError, feed_api_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    # tables/... 掛在 settings.api.prefix 之下
    app.include_router(tables_router, prefix=settings.api.prefix)

    @app.get("/health", tags=["system"])
    def health_check() -> Dict[str, str]:
        """健康檢查端點。"""
        return {"status": "ok"}

    return app


app = create_app()
