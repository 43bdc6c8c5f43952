"""DashboardPipeline 與並行讀取測試。"""

from __future__ import annotations

import threading
import time

from feed_dashboard.analytics.models import FeedStatus, TableFetchResult
from feed_dashboard.feeds.reader import FeedReader
from feed_dashboard.pipelines.dashboard_pipeline import DashboardPipeline, fetch_concurrently


def _fetcher(name: str) -> TableFetchResult:
    if name.startswith("bad"):
        raise RuntimeError(f"cannot read {name}")
    # 讓後面的表先完成，確認回傳仍依輸入順序
    time.sleep(0.01 * (5 - len(name) % 5))
    return TableFetchResult(table_name=name, status=FeedStatus.SUCCESS, data=[{"id": 1}])


def test_fetch_concurrently_keeps_input_order_and_isolates_failures() -> None:
    names = ["a_new_feed", "bad_new_feed", "ccc_new_feed", "dd_new_feed"]
    results = fetch_concurrently(names, _fetcher, max_workers=4)

    assert [r.table_name for r in results] == names
    assert [r.status for r in results] == [
        FeedStatus.SUCCESS,
        FeedStatus.ERROR,
        FeedStatus.SUCCESS,
        FeedStatus.SUCCESS,
    ]
    assert results[1].message == "cannot read bad_new_feed"
    assert results[1].data == []


def test_fetch_concurrently_uses_several_threads() -> None:
    seen = set()
    lock = threading.Lock()

    def fetcher(name: str) -> TableFetchResult:
        with lock:
            seen.add(threading.get_ident())
        time.sleep(0.05)
        return TableFetchResult(table_name=name, status=FeedStatus.SUCCESS)

    fetch_concurrently([f"u{i}_new_feed" for i in range(4)], fetcher, max_workers=4)
    assert len(seen) > 1


def test_fetch_concurrently_with_no_tables() -> None:
    assert fetch_concurrently([], _fetcher) == []


def test_dashboard_pipeline_builds_snapshot(feed_source) -> None:
    snapshot = DashboardPipeline(FeedReader(feed_source), max_workers=1).run()

    assert [s.user_id for s in snapshot.user_stats] == ["alice", "bob", "empty"]
    assert [s.total_interactions for s in snapshot.user_stats] == [3, 2, 0]
    assert snapshot.overall.total_users == 3
    assert snapshot.overall.total_interactions == 5
    assert snapshot.overall.avg_per_user == 2
    assert len(snapshot.all_activities) == 5

    alice = snapshot.user_stats[0]
    assert alice.action_breakdown == {"CHECKED": 1, "LISTIN": 2}
    assert alice.first_activity == "2024-06-14 11:00:00"
    assert alice.last_activity == "2024-06-15 00:30:00"
