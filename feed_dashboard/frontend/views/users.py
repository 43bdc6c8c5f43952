from __future__ import annotations

from typing import List

import pandas as pd
import streamlit as st

from feed_dashboard.analytics.labels import action_description
from feed_dashboard.analytics.models import OverallStats, UserStats
from feed_dashboard.analytics.user_stats import card_status
from feed_dashboard.frontend.dashboard_shared import CHART_TOOLTIPS, info_badge
from feed_dashboard.frontend.views.usage_chart import render_usage_chart

_BADGES = {"active": "🟢 活躍", "empty": "⚪ 無資料", "error": "🔴 錯誤"}


def render_overall(overall: OverallStats) -> None:
    """整體統計 + 最活躍使用者。"""

    cols = st.columns(3, gap="large")
    cols[0].metric("使用者總數", f"{overall.total_users} 人")
    cols[1].metric("互動總數", f"{overall.total_interactions:,} 次")
    cols[2].metric("平均每人", f"{overall.avg_per_user} 次")

    st.markdown(info_badge("最活躍使用者", CHART_TOOLTIPS.get("most_active")), unsafe_allow_html=True)
    if not overall.most_active:
        st.info("目前沒有使用者資料。")
        return
    ranking = pd.DataFrame(
        [
            {"排名": idx, "使用者": entry.user_id, "互動次數": entry.total_interactions}
            for idx, entry in enumerate(overall.most_active, start=1)
        ]
    )
    st.dataframe(ranking, hide_index=True, use_container_width=True)


def _render_card(stats: UserStats) -> None:
    status = card_status(stats)
    with st.expander(f"{stats.user_id}　{_BADGES[status]}", expanded=False):
        if status == "error":
            st.error(stats.error_message or "讀取失敗")
            return

        cols = st.columns(3)
        cols[0].metric("互動次數", stats.total_interactions)
        cols[1].metric("第一筆活動", stats.first_activity or "無資料")
        cols[2].metric("最近活動", stats.last_activity or "無資料")

        if status == "empty":
            st.info("此使用者目前沒有任何活動。")
            return

        breakdown = pd.DataFrame(
            [
                {"動作": action, "說明": action_description(action), "次數": count}
                for action, count in sorted(stats.action_breakdown.items(), key=lambda kv: -kv[1])
            ]
        )
        st.markdown("**動作分布**")
        st.dataframe(breakdown, hide_index=True, use_container_width=True)

        st.markdown("**最近 10 筆活動**")
        st.dataframe(pd.DataFrame(stats.recent_activities), hide_index=True, use_container_width=True)

        render_usage_chart(
            stats.all_activities,
            key=f"user_{stats.table_name}",
            title="每日活動",
            tooltip=CHART_TOOLTIPS.get("user_usage"),
            height=260,
        )


def render_user_cards(user_stats: List[UserStats]) -> None:
    """每位使用者一張卡片；讀取失敗的表也會顯示錯誤卡片。"""

    if not user_stats:
        st.info("沒有找到任何 _new_feed 資料表。")
        return
    for stats in user_stats:
        _render_card(stats)
