"""每日活躍使用者（DAU）。

同一使用者同一天不論有幾筆活動只算一次；只有讀取成功的 feed 會被計入，
total_users 亦只計讀取成功的使用者。
"""

from __future__ import annotations

import math
from collections import defaultdict
from datetime import datetime
from typing import Dict, Iterable, List, Optional, Sequence, Set, Tuple, Union

from feed_dashboard.analytics.aggregation import iter_events
from feed_dashboard.analytics.models import (
    DailyActiveSummary,
    DailyActiveUserBucket,
    FeedStatus,
    UserFeed,
    UserStats,
)
from feed_dashboard.analytics.windows import DEFAULT_WINDOW, WindowLike, window_start
from feed_dashboard.feeds.timestamps import NORMALIZED_DATE_FIELD, day_key

FeedLike = Union[UserFeed, UserStats, Tuple[str, str, Sequence[dict]]]


def round_half_up(value: float) -> int:
    """四捨五入到整數（0.5 一律進位）。"""
    return int(math.floor(value + 0.5))


def _coerce_feed(feed: FeedLike) -> UserFeed:
    if isinstance(feed, UserFeed):
        return feed
    if isinstance(feed, UserStats):
        return UserFeed(user_id=feed.user_id, status=feed.status, activities=feed.all_activities)
    user_id, status, activities = feed
    return UserFeed(user_id=user_id, status=FeedStatus(status), activities=list(activities or []))


def compute_daily_active_users(
    feeds: Iterable[FeedLike],
    window: WindowLike = DEFAULT_WINDOW,
    now: Optional[datetime] = None,
    date_field: str = NORMALIZED_DATE_FIELD,
) -> List[DailyActiveUserBucket]:
    """回傳依日期遞增排序的 DAU 序列。"""
    start = window_start(window, now)
    successful = [f for f in (_coerce_feed(f) for f in feeds) if f.status == FeedStatus.SUCCESS]
    total_users = len(successful)

    day_users: Dict[str, Set[str]] = defaultdict(set)
    for feed in successful:
        for event in iter_events(feed.activities, date_field, owner_id=feed.user_id):
            if start is not None and event.occurred_at < start:
                continue
            day_users[day_key(event.occurred_at)].add(feed.user_id)

    return [
        DailyActiveUserBucket(date=key, active_users=len(day_users[key]), total_users=total_users)
        for key in sorted(day_users)
    ]


def summarize_daily_active(buckets: List[DailyActiveUserBucket], total_users: int) -> DailyActiveSummary:
    """平均 / 峰值 DAU 與活躍比例。"""
    if not buckets:
        return DailyActiveSummary(total_users=total_users)

    average = round_half_up(sum(b.active_users for b in buckets) / len(buckets))
    engagement = round_half_up(average / total_users * 100) if total_users > 0 else 0
    return DailyActiveSummary(
        average_dau=average,
        peak_dau=max(b.active_users for b in buckets),
        total_users=total_users,
        days_tracked=len(buckets),
        engagement_rate=engagement,
    )
