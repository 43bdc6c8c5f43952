"""Feed 資料表 API 路由（唯讀）。"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from feed_dashboard.backend.app.api.controllers.tables_controller import TableController
from feed_dashboard.backend.app.api.dependencies.tables import get_table_controller
from feed_dashboard.backend.app.schemas.tables import (
    ErrorResponse,
    TableDataResponse,
    TableListResponse,
)

router = APIRouter(
    prefix="/tables",
    tags=["tables"],
    responses={500: {"model": ErrorResponse, "description": "資料來源錯誤"}},
)


@router.get(
    "",
    response_model=TableListResponse,
    summary="列出 feed 資料表",
    description="回傳所有名稱以 _new_feed 結尾的資料表，依名稱排序。",
)
def list_tables(controller: TableController = Depends(get_table_controller)) -> TableListResponse:
    return controller.list_tables()


@router.get(
    "/{table_name}",
    response_model=TableDataResponse,
    response_model_by_alias=True,
    summary="讀取單一 feed 資料表",
    description="最多回傳 1000 筆，依時間欄位由新到舊排序；時間轉為洛杉磯時區字串。",
    responses={
        400: {"model": ErrorResponse, "description": "表名不合法"},
        404: {"model": ErrorResponse, "description": "資料表不存在或沒有欄位"},
    },
)
def read_table(
    table_name: str,
    controller: TableController = Depends(get_table_controller),
) -> TableDataResponse:
    return controller.get_table(table_name)
