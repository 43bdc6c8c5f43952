"""
Streamlit 使用者活動儀表板 (Main Entry Point)。

1. 由 FastAPI 取得所有 _new_feed 資料表並行讀取。
2. 整體統計與整體每日活動量。
3. 每日活躍使用者（DAU）。
4. 每位使用者的活動卡片。
"""

from __future__ import annotations

from datetime import datetime

import streamlit as st

from feed_dashboard.analytics.user_stats import build_dashboard
from feed_dashboard.frontend.dashboard_shared import (
    API_BASE,
    CHART_TOOLTIPS,
    load_dashboard_results,
    setup_page,
)
from feed_dashboard.frontend.views.daily_active import render_daily_active
from feed_dashboard.frontend.views.usage_chart import render_usage_chart
from feed_dashboard.frontend.views.users import render_overall, render_user_cards

# =============================================================================
# 頁面初始化
# =============================================================================
setup_page()

st.title("使用者活動儀表板")
st.caption(f"資料來源：{API_BASE}（時間以洛杉磯時區顯示）")

if st.button("重新整理", type="primary"):
    st.session_state.pop("dashboard_results", None)

# =============================================================================
# 載入資料（全部表讀完才繪製）
# =============================================================================
if "dashboard_results" not in st.session_state:
    with st.spinner("讀取資料表中..."):
        try:
            st.session_state["dashboard_results"] = load_dashboard_results()
            st.session_state["loaded_at"] = datetime.now()
        except Exception as exc:  # pragma: no cover
            st.error(f"取得資料表清單失敗：{exc}")
            st.stop()

snapshot = build_dashboard(st.session_state["dashboard_results"])

# =============================================================================
# 分頁組裝
# =============================================================================
overview_tab, dau_tab, users_tab = st.tabs(["整體概況", "每日活躍", "使用者"])

with overview_tab:
    render_overall(snapshot.overall)
    render_usage_chart(
        snapshot.all_activities,
        key="overall",
        title="整體每日活動量",
        tooltip=CHART_TOOLTIPS.get("overall_usage"),
    )
with dau_tab:
    render_daily_active(snapshot.user_stats)
with users_tab:
    render_user_cards(snapshot.user_stats)

st.caption(f"最後更新：{st.session_state.get('loaded_at', datetime.now()):%Y-%m-%d %H:%M:%S}")
