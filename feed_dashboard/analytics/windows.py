"""時間範圍選擇（近一週 / 近一個月 / ... / 全部）。"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Dict, Optional, Union

import pandas as pd

from feed_dashboard.feeds.timestamps import DISPLAY_TIMEZONE


class RecencyWindow(str, Enum):
    WEEK = "week"
    MONTH = "month"
    THREE_MONTHS = "3months"
    SIX_MONTHS = "6months"
    YEAR = "year"
    ALL = "all"


WindowLike = Union[RecencyWindow, str]

# 以當地日曆推算（月份遇到月底會夾到該月最後一天）
_WINDOW_OFFSETS: Dict[RecencyWindow, pd.DateOffset] = {
    RecencyWindow.WEEK: pd.DateOffset(days=7),
    RecencyWindow.MONTH: pd.DateOffset(months=1),
    RecencyWindow.THREE_MONTHS: pd.DateOffset(months=3),
    RecencyWindow.SIX_MONTHS: pd.DateOffset(months=6),
    RecencyWindow.YEAR: pd.DateOffset(years=1),
}

WINDOW_LABELS: Dict[RecencyWindow, str] = {
    RecencyWindow.WEEK: "近一週",
    RecencyWindow.MONTH: "近一個月",
    RecencyWindow.THREE_MONTHS: "近三個月",
    RecencyWindow.SIX_MONTHS: "近六個月",
    RecencyWindow.YEAR: "近一年",
    RecencyWindow.ALL: "全部期間",
}

DEFAULT_WINDOW = RecencyWindow.MONTH


def coerce_window(window: WindowLike) -> RecencyWindow:
    """字串轉為 RecencyWindow；不認得的值拋出 ValueError。"""
    if isinstance(window, RecencyWindow):
        return window
    return RecencyWindow(str(window))


def current_time(now: Optional[datetime] = None) -> pd.Timestamp:
    """以洛杉磯時區表示的「現在」；now 無時區時視為洛杉磯當地時間。"""
    if now is None:
        return pd.Timestamp.now(tz=DISPLAY_TIMEZONE)
    ts = pd.Timestamp(now)
    if ts.tzinfo is None:
        return ts.tz_localize(DISPLAY_TIMEZONE, ambiguous=False, nonexistent="shift_forward")
    return ts.tz_convert(DISPLAY_TIMEZONE)


def window_start(window: WindowLike, now: Optional[datetime] = None) -> Optional[pd.Timestamp]:
    """回傳時間範圍的起點；``all`` 沒有下限，回傳 None。"""
    selected = coerce_window(window)
    if selected is RecencyWindow.ALL:
        return None
    local_now = current_time(now).tz_localize(None)
    start = local_now - _WINDOW_OFFSETS[selected]
    return start.tz_localize(DISPLAY_TIMEZONE, ambiguous=False, nonexistent="shift_forward")


def window_label(window: WindowLike) -> str:
    return WINDOW_LABELS[coerce_window(window)]
