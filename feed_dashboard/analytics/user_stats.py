"""使用者卡片與整體統計。"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Mapping

from feed_dashboard.analytics.aggregation import count_actions
from feed_dashboard.analytics.daily_active import round_half_up
from feed_dashboard.analytics.models import (
    ActiveUserEntry,
    DashboardSnapshot,
    FeedStatus,
    OverallStats,
    TableFetchResult,
    UserStats,
)
from feed_dashboard.feeds.identifiers import extract_user_id
from feed_dashboard.feeds.timestamps import NORMALIZED_DATE_FIELD, resolve_timestamp

RECENT_ACTIVITY_LIMIT = 10
MOST_ACTIVE_LIMIT = 5


def _activity_dates(rows: Iterable[Mapping[str, Any]]) -> List[str]:
    dates = []
    for row in rows:
        found = resolve_timestamp(row, NORMALIZED_DATE_FIELD)
        if found is None:
            continue
        text = str(found[1])
        if text and text != "N/A":
            dates.append(text)
    return sorted(dates)


def build_user_stats(result: TableFetchResult) -> UserStats:
    """單一 feed 表 → 使用者卡片統計；錯誤或空表也會產生一張卡片。"""
    data = list(result.data or [])
    succeeded = result.status == FeedStatus.SUCCESS
    dates = _activity_dates(data)
    return UserStats(
        user_id=extract_user_id(result.table_name),
        table_name=result.table_name,
        total_interactions=len(data),
        first_activity=dates[0] if dates else None,
        last_activity=dates[-1] if dates else None,
        action_breakdown=count_actions(data) if succeeded and data else {},
        # 讀取時已依時間遞減排序，前 10 筆即最新活動
        recent_activities=data[:RECENT_ACTIVITY_LIMIT],
        all_activities=data,
        status=result.status,
        error_message=None if succeeded else result.message,
    )


def sort_user_stats(stats: Iterable[UserStats]) -> List[UserStats]:
    """成功的排前面並依互動數遞減；其餘維持原順序。"""
    def _key(item: UserStats):
        if item.status == FeedStatus.SUCCESS:
            return (0, -item.total_interactions)
        return (1, 0)

    return sorted(stats, key=_key)


def card_status(stats: UserStats) -> str:
    """卡片徽章：error / empty / active。"""
    if stats.status == FeedStatus.ERROR:
        return "error"
    if stats.total_interactions == 0:
        return "empty"
    return "active"


def compute_overall_stats(stats: List[UserStats]) -> OverallStats:
    total_users = len(stats)
    total_interactions = sum(s.total_interactions for s in stats)
    return OverallStats(
        total_users=total_users,
        total_interactions=total_interactions,
        avg_per_user=round_half_up(total_interactions / total_users) if total_users else 0,
        most_active=[
            ActiveUserEntry(user_id=s.user_id, total_interactions=s.total_interactions)
            for s in stats[:MOST_ACTIVE_LIMIT]
        ],
    )


def collect_activities(results: Iterable[TableFetchResult]) -> List[Dict[str, Any]]:
    """整體用量圖：合併所有讀取成功的資料列。"""
    rows: List[Dict[str, Any]] = []
    for result in results:
        if result.status == FeedStatus.SUCCESS:
            rows.extend(result.data or [])
    return rows


def build_dashboard(results: List[TableFetchResult]) -> DashboardSnapshot:
    """將所有單表結果組成儀表板所需的統計。"""
    stats = sort_user_stats(build_user_stats(r) for r in results)
    return DashboardSnapshot(
        user_stats=stats,
        overall=compute_overall_stats(stats),
        all_activities=collect_activities(results),
    )
