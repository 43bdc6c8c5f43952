"""action 顯示名稱與顏色對照表。未定義的 action 顯示原字串、灰色。"""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping

from feed_dashboard.analytics.daily_active import round_half_up

ACTION_DESCRIPTIONS: Mapping[str, str] = MappingProxyType(
    {
        "LISTIN": "新增品項",
        "LISTOUT": "移除品項",
        "LISTUPDATE": "品項名稱變更",
        "LISTSTORE": "品項商店更新",
        "CHECKED": "勾選品項",
        "UNCHECKED": "取消勾選",
    }
)

ACTION_COLORS: Mapping[str, str] = MappingProxyType(
    {
        "LISTIN": "#10b981",      # green
        "LISTOUT": "#ef4444",     # red
        "LISTUPDATE": "#3b82f6",  # blue
        "LISTSTORE": "#8b5cf6",   # purple
        "CHECKED": "#f59e0b",     # amber
        "UNCHECKED": "#6b7280",   # gray
    }
)

DEFAULT_ACTION_COLOR = "#6b7280"
EMPTY_BAR_COLOR = "#e0e0e0"


def action_description(action: str) -> str:
    return ACTION_DESCRIPTIONS.get((action or "").upper(), action)


def action_color(action: str) -> str:
    return ACTION_COLORS.get((action or "").upper(), DEFAULT_ACTION_COLOR)


def dau_bar_color(active_users: int, peak: int) -> str:
    """DAU 長條顏色：越活躍越亮（亮青 rgb(0,212,255) → 深藍 rgb(0,17,22)），0.5 一律進位。"""
    if peak <= 0:
        return EMPTY_BAR_COLOR
    intensity = active_users / peak
    g = round_half_up(212 - 195 * (1 - intensity))
    b = round_half_up(255 - 233 * (1 - intensity))
    return f"rgb(0, {g}, {b})"
