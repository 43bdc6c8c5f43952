"""儀表板主要 Pipeline：探索 feed 表、並行讀取、組出統計。"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from typing import Callable, List, Optional, Sequence

from feed_dashboard.analytics.models import DashboardSnapshot, FeedStatus, TableFetchResult
from feed_dashboard.analytics.user_stats import build_dashboard
from feed_dashboard.config.settings import settings
from feed_dashboard.feeds.reader import FeedReader
from feed_dashboard.pipelines.base import BasePipeline
from feed_dashboard.utils.logging import get_logger

logger = get_logger(__name__)

TableFetcher = Callable[[str], TableFetchResult]


def _guarded(fetcher: TableFetcher, table_name: str) -> TableFetchResult:
    # 單表失敗只影響該表卡片
    try:
        return fetcher(table_name)
    except Exception as exc:
        logger.error("讀取 %s 失敗：%s", table_name, exc)
        return TableFetchResult(
            table_name=table_name,
            status=FeedStatus.ERROR,
            message=str(exc) or "Failed to fetch data",
        )


def fetch_concurrently(
    table_names: Sequence[str], fetcher: TableFetcher, max_workers: Optional[int] = None
) -> List[TableFetchResult]:
    """並行讀取多張表，結果依 table_names 順序回傳；全部完成才返回。"""
    if not table_names:
        return []
    workers = max(1, min(max_workers or settings.feeds.fetch_workers, len(table_names)))
    with ThreadPoolExecutor(max_workers=workers) as pool:
        results = list(pool.map(lambda name: _guarded(fetcher, name), table_names))

    for idx, result in enumerate(results, start=1):
        logger.info("  %s. %s: %s, %s 筆", idx, result.table_name, result.status.value, len(result.data))
    return results


class DashboardPipeline(BasePipeline[List[TableFetchResult], DashboardSnapshot]):
    """直接連資料來源產生儀表板統計（CLI 使用）。"""

    name = "dashboard-pipeline"

    def __init__(self, reader: FeedReader, max_workers: Optional[int] = None) -> None:
        self.reader = reader
        self.max_workers = max_workers

    def _fetch_one(self, table_name: str) -> TableFetchResult:
        table = self.reader.read_table(table_name)
        return TableFetchResult(
            table_name=table_name,
            status=FeedStatus.SUCCESS,
            message=f"Successfully pulled {table.row_count} rows from {table_name} table",
            data=table.rows,
            columns=table.columns,
        )

    def extract(self) -> List[TableFetchResult]:
        table_names = self.reader.list_tables()
        if not table_names:
            logger.warning("沒有找到任何 feed 資料表")
            return []
        return fetch_concurrently(table_names, self._fetch_one, self.max_workers)

    def transform(self, raw_items: List[TableFetchResult]) -> DashboardSnapshot:
        snapshot = build_dashboard(raw_items)
        logger.info("建立 %s 位使用者統計", len(snapshot.user_stats))
        return snapshot
