"""分析層資料模型（每次載入即時計算，不落地）。"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class FeedStatus(str, Enum):
    SUCCESS = "success"
    PENDING = "pending"
    ERROR = "error"


# =========================
# 來源資料
# =========================

class TableData(BaseModel):
    """單一 feed 表讀取結果（已做時間正規化）。"""
    table_name: str
    columns: List[str]
    rows: List[Dict[str, Any]] = Field(default_factory=list)
    timestamp_column: Optional[str] = None

    @property
    def row_count(self) -> int:
        return len(self.rows)


class TableFetchResult(BaseModel):
    """儀表板層的單表結果；失敗時 status=error，data 為空。"""
    table_name: str
    status: FeedStatus
    message: str = ""
    data: List[Dict[str, Any]] = Field(default_factory=list)
    columns: List[str] = Field(default_factory=list)


class ActivityEvent(BaseModel):
    """單筆活動紀錄；occurred_at 為帶洛杉磯時區的時間。"""
    model_config = ConfigDict(frozen=True)

    occurred_at: datetime
    action: str
    owner_id: Optional[str] = None
    extras: Dict[str, Any] = Field(default_factory=dict)


class UserFeed(BaseModel):
    """DAU 計算的輸入：(使用者, 狀態, 活動列表)。"""
    user_id: str
    status: FeedStatus
    activities: List[Dict[str, Any]] = Field(default_factory=list)


# =========================
# 彙總結果
# =========================

class DailyBucket(BaseModel):
    """單日活動量；actions 各值加總恆等於 count。"""
    date: str
    count: int = 0
    actions: Dict[str, int] = Field(default_factory=dict)


class DailyActiveUserBucket(BaseModel):
    date: str
    active_users: int
    total_users: int


class DailyActiveSummary(BaseModel):
    average_dau: int = 0
    peak_dau: int = 0
    total_users: int = 0
    days_tracked: int = 0
    engagement_rate: int = 0   # 百分比（整數）


class UserStats(BaseModel):
    """使用者卡片所需統計。"""
    user_id: str
    table_name: str
    total_interactions: int = 0
    first_activity: Optional[str] = None
    last_activity: Optional[str] = None
    action_breakdown: Dict[str, int] = Field(default_factory=dict)
    recent_activities: List[Dict[str, Any]] = Field(default_factory=list)
    all_activities: List[Dict[str, Any]] = Field(default_factory=list)
    status: FeedStatus = FeedStatus.SUCCESS
    error_message: Optional[str] = None


class ActiveUserEntry(BaseModel):
    user_id: str
    total_interactions: int


class OverallStats(BaseModel):
    total_users: int = 0
    total_interactions: int = 0
    avg_per_user: int = 0
    most_active: List[ActiveUserEntry] = Field(default_factory=list)


class DashboardSnapshot(BaseModel):
    """一次載入的完整結果，供前端與 CLI 使用。"""
    user_stats: List[UserStats] = Field(default_factory=list)
    overall: OverallStats = Field(default_factory=OverallStats)
    all_activities: List[Dict[str, Any]] = Field(default_factory=list)
