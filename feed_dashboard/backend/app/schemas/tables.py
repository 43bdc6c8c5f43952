"""Feed 資料表 API 回應模型（欄位名沿用 camelCase 對外格式）。"""

from __future__ import annotations

from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, Field


class TableListResponse(BaseModel):
    """GET /tables 回應。"""
    success: bool = True
    tables: List[str]
    count: int


class TableDataResponse(BaseModel):
    """GET /tables/{tableName} 回應。"""
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    table_name: str = Field(alias="tableName")
    message: str
    data: List[Dict[str, Any]]
    columns: List[str]
    row_count: int = Field(alias="rowCount")


class ErrorResponse(BaseModel):
    """錯誤回應；另附該端點原本的空集合欄位（tables 或 data/columns）。"""
    model_config = ConfigDict(extra="allow")

    success: bool = False
    error: str
