"""API 錯誤與對應的 JSON 回應。"""

from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi import Request
from fastapi.responses import JSONResponse

from feed_dashboard.backend.app.schemas.tables import ErrorResponse
from feed_dashboard.utils.logging import get_logger

logger = get_logger(__name__)


class FeedAPIError(Exception):
    """帶 HTTP 狀態碼的 API 錯誤；empty 為該端點原本應回傳的空集合欄位。"""

    def __init__(self, status_code: int, message: str, empty: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.message = message
        self.empty = empty or {}


async def feed_api_error_handler(request: Request, exc: FeedAPIError) -> JSONResponse:
    body = ErrorResponse(error=exc.message, **exc.empty)
    return JSONResponse(status_code=exc.status_code, content=body.model_dump())


def _empty_fields(request: Request) -> Dict[str, Any]:
    if "table_name" in request.path_params:
        return {"data": [], "columns": []}
    if request.url.path.rstrip("/").endswith("/tables"):
        return {"tables": []}
    return {}


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """未預期錯誤（含回應序列化失敗）一律回 500 JSON，格式與 FeedAPIError 相同。"""
    logger.exception("未處理的錯誤：%s %s", request.method, request.url.path)
    body = ErrorResponse(error=str(exc) or "Internal server error", **_empty_fields(request))
    return JSONResponse(status_code=500, content=body.model_dump())
