from __future__ import annotations

from typing import Any, Dict, List

import pandas as pd
import plotly.express as px
import streamlit as st

from feed_dashboard.analytics.aggregation import buckets_to_frame, group_activities_by_date
from feed_dashboard.analytics.labels import action_color, action_description
from feed_dashboard.analytics.windows import DEFAULT_WINDOW, RecencyWindow, window_label
from feed_dashboard.frontend.dashboard_shared import PLOTLY_CONFIG, info_badge

_CHART_STYLES = {"line": "折線圖", "bar": "長條圖"}
_WINDOW_OPTIONS = list(RecencyWindow)


def _melt_actions(frame: pd.DataFrame) -> pd.DataFrame:
    """每個 action 一欄 → 長表（date, action, count），供堆疊長條圖使用。"""
    action_cols = [c for c in frame.columns if c not in ("date", "count")]
    long_df = frame.melt(id_vars="date", value_vars=action_cols, var_name="action", value_name="actions")
    long_df["action_label"] = long_df["action"].map(action_description)
    return long_df


def render_usage_chart(
    rows: List[Dict[str, Any]],
    *,
    key: str,
    title: str,
    tooltip: str | None = None,
    height: int = 320,
) -> None:
    """每日活動量圖，可切換折線 / 長條與時間範圍。"""

    st.markdown(info_badge(title, tooltip, font_size="18px"), unsafe_allow_html=True)

    controls = st.columns([1, 1, 2])
    with controls[0]:
        style = st.radio(
            "圖表類型",
            list(_CHART_STYLES),
            format_func=_CHART_STYLES.get,
            horizontal=True,
            key=f"{key}_style",
        )
    with controls[1]:
        window = st.selectbox(
            "時間範圍",
            _WINDOW_OPTIONS,
            index=_WINDOW_OPTIONS.index(DEFAULT_WINDOW),
            format_func=window_label,
            key=f"{key}_window",
        )

    buckets = group_activities_by_date(rows, window=window)
    if not buckets:
        st.info(f"{window_label(window)}沒有活動資料。")
        return

    frame = buckets_to_frame(buckets)
    frame["date"] = pd.to_datetime(frame["date"])

    if style == "line":
        fig = px.line(
            frame,
            x="date",
            y="count",
            markers=True,
            labels={"date": "日期", "count": "活動次數"},
        )
        fig.update_traces(line_color="#3b82f6")
    else:
        long_df = _melt_actions(frame)
        color_map = {label: action_color(action) for action, label in
                     long_df[["action", "action_label"]].drop_duplicates().itertuples(index=False)}
        fig = px.bar(
            long_df,
            x="date",
            y="actions",
            color="action_label",
            color_discrete_map=color_map,
            labels={"date": "日期", "actions": "活動次數", "action_label": "動作"},
        )
        fig.update_layout(barmode="stack")

    fig.update_layout(title=None, height=height, margin=dict(l=10, r=10, t=10, b=10))
    st.plotly_chart(fig, use_container_width=True, config=PLOTLY_CONFIG)
    st.caption(f"{window_label(window)}：共 {int(frame['count'].sum())} 筆活動、{len(frame)} 天")
