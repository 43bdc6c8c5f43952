"""時間欄位解析與洛杉磯時間正規化。

各 feed 表的建立時間欄位拼法不一，統一依 ``DATE_FIELD_CANDIDATES`` 的順序尋找；
此順序是對外約定，請勿任意調整。

時區規則：
- 正規化（``normalize_row``）：無時區的原始值視為 UTC，轉為洛杉磯當地時間字串。
- 分桶（``to_bucket_time``）：無時區的值視為洛杉磯當地時間（正規化後的
  ``_createdDate`` 即為洛杉磯牆上時間），有時區的值則換算到洛杉磯。
"""

from __future__ import annotations

import math
from datetime import date, datetime
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

import pandas as pd

DISPLAY_TIMEZONE = "America/Los_Angeles"
DISPLAY_FORMAT = "%Y-%m-%d %H:%M:%S"
DAY_KEY_FORMAT = "%Y-%m-%d"

DATE_FIELD_CANDIDATES: Tuple[str, ...] = (
    "_createdDate",
    "created_at",
    "_createddate",
    "createdDate",
    "createdAt",
)

NORMALIZED_DATE_FIELD = "_createdDate"
RAW_DATE_FIELD = "_createdDateUTC"
ORIGINAL_FIELD_PREFIX = "_original_"


def pick_timestamp_column(columns: Iterable[str]) -> Optional[str]:
    """依候選順序（不分大小寫）挑出排序用的時間欄位，回傳表中實際的欄位名。"""
    by_lower: Dict[str, str] = {}
    for column in columns:
        by_lower.setdefault(column.lower(), column)
    for candidate in DATE_FIELD_CANDIDATES:
        match = by_lower.get(candidate.lower())
        if match is not None:
            return match
    return None


def _has_value(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, str) and value == "":
        return False
    if isinstance(value, float) and math.isnan(value):
        return False
    return True


def resolve_timestamp(
    row: Mapping[str, Any], preferred_field: Optional[str] = None
) -> Optional[Tuple[str, Any]]:
    """回傳 (欄位名, 原始值)；先看 preferred_field，再依候選清單逐一尋找。"""
    fields: List[str] = []
    if preferred_field:
        fields.append(preferred_field)
    fields.extend(f for f in DATE_FIELD_CANDIDATES if f != preferred_field)

    for field in fields:
        value = row.get(field)
        if _has_value(value):
            return field, value
    return None


def parse_timestamp(value: Any) -> Optional[pd.Timestamp]:
    """盡力解析各種時間表示法；無法解析時回傳 None，不拋例外。

    支援字串、datetime / date、pd.Timestamp，數值視為 epoch 毫秒。
    字串必須以數字開頭；"now"、"today" 之類的相對字詞視為無法解析。
    """
    if not _has_value(value) or isinstance(value, bool):
        return None
    try:
        if isinstance(value, (int, float)):
            ts = pd.Timestamp(value, unit="ms")
        elif isinstance(value, str):
            text = value.strip()
            if not text[:1].isdigit():
                return None
            ts = pd.Timestamp(text)
        elif isinstance(value, (datetime, date, pd.Timestamp)):
            ts = pd.Timestamp(value)
        else:
            return None
    except (ValueError, TypeError, OverflowError):
        return None
    if pd.isna(ts):
        return None
    return ts


def to_display_time(value: Any) -> Optional[str]:
    """將原始時間轉為洛杉磯當地時間字串（YYYY-MM-DD HH:MM:SS，24 小時制）。"""
    ts = parse_timestamp(value)
    if ts is None:
        return None
    if ts.tzinfo is None:
        ts = ts.tz_localize("UTC")
    return ts.tz_convert(DISPLAY_TIMEZONE).strftime(DISPLAY_FORMAT)


def to_bucket_time(value: Any) -> Optional[pd.Timestamp]:
    """解析為帶洛杉磯時區的 Timestamp，供分桶與時間範圍比較使用。"""
    ts = parse_timestamp(value)
    if ts is None:
        return None
    try:
        if ts.tzinfo is None:
            # 夏令時間重疊的一小時取標準時間；不存在的時間往後推
            return ts.tz_localize(DISPLAY_TIMEZONE, ambiguous=False, nonexistent="shift_forward")
        return ts.tz_convert(DISPLAY_TIMEZONE)
    except (ValueError, OverflowError):
        return None


def day_key(ts: pd.Timestamp) -> str:
    """分桶用日期鍵 YYYY-MM-DD（字串排序即時間排序）。"""
    return ts.strftime(DAY_KEY_FORMAT)


def normalize_row(row: Mapping[str, Any], timestamp_column: Optional[str] = None) -> Dict[str, Any]:
    """回傳附加正規化時間欄位的新 dict，原 row 不變動。

    找不到（或無法解析）時間值時，三個衍生欄位都不會出現。
    """
    processed = dict(row)
    found = resolve_timestamp(row, timestamp_column)
    if found is None:
        return processed

    field, value = found
    display = to_display_time(value)
    if display is None:
        return processed

    processed[NORMALIZED_DATE_FIELD] = display
    processed[RAW_DATE_FIELD] = value
    if field != NORMALIZED_DATE_FIELD:
        processed[f"{ORIGINAL_FIELD_PREFIX}{field}"] = value
    return processed


def normalize_rows(
    rows: Iterable[Mapping[str, Any]], timestamp_column: Optional[str] = None
) -> List[Dict[str, Any]]:
    return [normalize_row(row, timestamp_column) for row in rows]
