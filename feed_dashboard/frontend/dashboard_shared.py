from __future__ import annotations

import html
import os
from typing import Any, List
from urllib.parse import quote

import requests
import streamlit as st

from feed_dashboard.analytics.models import FeedStatus, TableFetchResult
from feed_dashboard.pipelines.dashboard_pipeline import fetch_concurrently

API_BASE = os.getenv("DASHBOARD_API", "http://localhost:8000/api")

_APP_PAGE_TITLE = "使用者活動儀表板"
_APP_PAGE_ICON = ":bar_chart:"
_GLOBAL_STYLE = """
<style>
div[data-testid="stToolbar"] {display: none !important;}
div[data-testid="stDecoration"] {display: none !important;}
button[kind="header"] {display: none !important;}
.stApp > header {background: transparent;}
.block-container {
    max-width: 100% !important;
    padding-left: 2rem;
    padding-right: 2rem;
}
</style>
"""

CHART_TOOLTIPS = {
    "overall_usage": "所有使用者的活動依洛杉磯時間分日加總，可切換折線或長條圖。",
    "user_usage": "此使用者每日的活動次數，長條圖依動作類型堆疊。",
    "daily_active": "當日至少有一筆活動的使用者人數；同一人同一天只算一次。",
    "engagement": "平均每日活躍人數 ÷ 讀取成功的使用者總數。",
    "most_active": "依互動次數排名前 5 的使用者。",
}

PLOTLY_CONFIG = {"modeBarButtonsToKeep": ["toImage", "pan2d", "toggleFullscreen"], "displaylogo": False}


def setup_page(page_title: str | None = None) -> None:
    """Set global Streamlit configuration and styles."""

    st.set_page_config(
        page_title=page_title or _APP_PAGE_TITLE,
        page_icon=_APP_PAGE_ICON,
        layout="wide",
        initial_sidebar_state="collapsed",
    )
    st.markdown(_GLOBAL_STYLE, unsafe_allow_html=True)


def _request_json(url: str) -> Any:
    response = requests.get(url, timeout=30)
    try:
        payload = response.json()
    except ValueError:
        response.raise_for_status()
        raise
    if not response.ok or not payload.get("success", False):
        raise RuntimeError(payload.get("error") or f"HTTP {response.status_code}")
    return payload


def fetch_table_list() -> List[str]:
    """GET /tables；每次重新抓取，不做快取。"""

    return list(_request_json(f"{API_BASE}/tables").get("tables", []))


def fetch_table(table_name: str) -> TableFetchResult:
    """GET /tables/{name}；失敗時回傳 error 狀態而不是拋出。"""

    try:
        payload = _request_json(f"{API_BASE}/tables/{quote(table_name, safe='')}")
    except (requests.RequestException, RuntimeError) as exc:
        return TableFetchResult(
            table_name=table_name,
            status=FeedStatus.ERROR,
            message=str(exc) or "Failed to fetch data",
        )
    return TableFetchResult(
        table_name=table_name,
        status=FeedStatus.SUCCESS,
        message=payload.get("message", ""),
        data=payload.get("data", []),
        columns=payload.get("columns", []),
    )


def load_dashboard_results() -> List[TableFetchResult]:
    """探索所有 feed 表並行讀取；全部完成後才回傳。"""

    tables = fetch_table_list()
    return fetch_concurrently(tables, fetch_table)


def info_badge(title: str, tooltip: str | None = None, *, font_size: str = "16px") -> str:
    """Render a heading with tooltip (ℹ️)."""

    safe_title = html.escape(title)
    if not tooltip:
        return f"<div style='font-size:{font_size}; font-weight:600;'>{safe_title}</div>"
    safe_tip = html.escape(tooltip)
    return (
        f"<div style='display:flex;align-items:center;gap:6px;font-size:{font_size};font-weight:600;'>"
        f"{safe_title}<span style='cursor:help;' title='{safe_tip}'>ℹ️</span></div>"
    )


__all__ = [
    "API_BASE",
    "CHART_TOOLTIPS",
    "PLOTLY_CONFIG",
    "fetch_table",
    "fetch_table_list",
    "info_badge",
    "load_dashboard_results",
    "setup_page",
]
