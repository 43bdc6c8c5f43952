"""活動量依日分桶。

輸入為正規化後的資料列（dict），依時間範圍過濾後以洛杉磯日曆日分組，
計算每日總量與各 action 數量。單筆時間無法解析時略過該筆，不影響整體。
"""

from __future__ import annotations

from collections import Counter, defaultdict
from datetime import datetime
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional

import pandas as pd

from feed_dashboard.analytics.models import ActivityEvent, DailyBucket
from feed_dashboard.analytics.windows import RecencyWindow, WindowLike, window_start
from feed_dashboard.feeds.timestamps import NORMALIZED_DATE_FIELD, day_key, resolve_timestamp, to_bucket_time
from feed_dashboard.utils.logging import get_logger

logger = get_logger(__name__)

UNKNOWN_ACTION = "UNKNOWN"


def action_of(row: Mapping[str, Any]) -> str:
    action = row.get("action")
    return str(action) if action else UNKNOWN_ACTION


def iter_events(
    rows: Iterable[Mapping[str, Any]],
    date_field: str = NORMALIZED_DATE_FIELD,
    owner_id: Optional[str] = None,
) -> Iterator[ActivityEvent]:
    """將資料列轉為 ActivityEvent；找不到或無法解析時間的列直接略過。"""
    for row in rows:
        found = resolve_timestamp(row, date_field)
        if found is None:
            continue
        occurred_at = to_bucket_time(found[1])
        if occurred_at is None:
            logger.debug("略過無法解析的時間值：%s=%r (owner=%s)", found[0], found[1], owner_id)
            continue
        yield ActivityEvent(
            occurred_at=occurred_at,
            action=action_of(row),
            owner_id=owner_id,
            extras=dict(row),
        )


def group_activities_by_date(
    rows: Iterable[Mapping[str, Any]],
    date_field: str = NORMALIZED_DATE_FIELD,
    window: WindowLike = RecencyWindow.ALL,
    now: Optional[datetime] = None,
) -> List[DailyBucket]:
    """依日分桶，回傳依日期遞增排序的 DailyBucket 清單。"""
    start = window_start(window, now)
    totals: Dict[str, int] = defaultdict(int)
    actions: Dict[str, Counter] = defaultdict(Counter)

    for event in iter_events(rows, date_field):
        if start is not None and event.occurred_at < start:
            continue
        key = day_key(event.occurred_at)
        totals[key] += 1
        actions[key][event.action] += 1

    # YYYY-MM-DD 字串排序即時間排序
    return [
        DailyBucket(date=key, count=totals[key], actions=dict(actions[key]))
        for key in sorted(totals)
    ]


def count_actions(rows: Iterable[Mapping[str, Any]]) -> Dict[str, int]:
    """不分日的 action 統計（使用者卡片用）。"""
    return dict(Counter(action_of(row) for row in rows))


def buckets_to_frame(buckets: List[DailyBucket]) -> pd.DataFrame:
    """攤平成圖表用 DataFrame：date, count，以及每個 action 一欄（缺值補 0）。"""
    if not buckets:
        return pd.DataFrame(columns=["date", "count"])
    all_actions = sorted({action for bucket in buckets for action in bucket.actions})
    records = []
    for bucket in buckets:
        record: Dict[str, Any] = {"date": bucket.date, "count": bucket.count}
        for action in all_actions:
            record[action] = bucket.actions.get(action, 0)
        records.append(record)
    return pd.DataFrame.from_records(records, columns=["date", "count", *all_actions])
