from __future__ import annotations

from typing import List

import pandas as pd
import plotly.express as px
import streamlit as st

from feed_dashboard.analytics.daily_active import compute_daily_active_users, summarize_daily_active
from feed_dashboard.analytics.labels import dau_bar_color
from feed_dashboard.analytics.models import FeedStatus, UserStats
from feed_dashboard.analytics.windows import DEFAULT_WINDOW, RecencyWindow, window_label
from feed_dashboard.frontend.dashboard_shared import CHART_TOOLTIPS, PLOTLY_CONFIG, info_badge

_WINDOW_OPTIONS = list(RecencyWindow)


def render_daily_active(user_stats: List[UserStats]) -> None:
    """呈現每日活躍使用者（DAU）與活躍比例。"""

    st.markdown(
        info_badge("每日活躍使用者", CHART_TOOLTIPS.get("daily_active"), font_size="20px"),
        unsafe_allow_html=True,
    )
    window = st.selectbox(
        "時間範圍",
        _WINDOW_OPTIONS,
        index=_WINDOW_OPTIONS.index(DEFAULT_WINDOW),
        format_func=window_label,
        key="dau_window",
    )

    buckets = compute_daily_active_users(user_stats, window=window)
    total_users = sum(1 for s in user_stats if s.status == FeedStatus.SUCCESS)
    summary = summarize_daily_active(buckets, total_users)

    cols = st.columns(4, gap="large")
    cols[0].metric("平均每日活躍", f"{summary.average_dau} 人")
    cols[1].metric("單日最高", f"{summary.peak_dau} 人")
    cols[2].metric("使用者總數", f"{summary.total_users} 人")
    cols[3].metric("統計天數", f"{summary.days_tracked} 天")

    if not buckets:
        st.info(f"{window_label(window)}沒有活躍資料。")
        return

    df = pd.DataFrame([b.model_dump() for b in buckets])
    df["date"] = pd.to_datetime(df["date"])
    fig = px.bar(
        df,
        x="date",
        y="active_users",
        labels={"date": "日期", "active_users": "活躍人數"},
        hover_data={"total_users": True},
    )
    fig.update_traces(marker_color=[dau_bar_color(v, summary.peak_dau) for v in df["active_users"]])
    fig.update_layout(title=None, height=320, margin=dict(l=10, r=10, t=10, b=10))
    st.plotly_chart(fig, use_container_width=True, config=PLOTLY_CONFIG)

    st.markdown(
        info_badge(f"活躍比例：{summary.engagement_rate}%", CHART_TOOLTIPS.get("engagement")),
        unsafe_allow_html=True,
    )
    st.progress(min(summary.engagement_rate, 100) / 100)
