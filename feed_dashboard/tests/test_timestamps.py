"""時間欄位挑選、解析與洛杉磯時間正規化測試。"""

from __future__ import annotations

from datetime import date, datetime, timedelta

import pytest

from feed_dashboard.feeds.timestamps import (
    NORMALIZED_DATE_FIELD,
    RAW_DATE_FIELD,
    day_key,
    normalize_row,
    normalize_rows,
    parse_timestamp,
    pick_timestamp_column,
    resolve_timestamp,
    to_bucket_time,
    to_display_time,
)


# -------------------------
# 欄位挑選
# -------------------------
def test_pick_follows_candidate_order_not_column_order() -> None:
    assert pick_timestamp_column(["id", "createdAt", "created_at"]) == "created_at"


def test_pick_is_case_insensitive_and_keeps_table_spelling() -> None:
    assert pick_timestamp_column(["id", "CREATED_AT"]) == "CREATED_AT"
    assert pick_timestamp_column(["_CreatedDate", "created_at"]) == "_CreatedDate"


def test_pick_returns_none_without_candidates() -> None:
    assert pick_timestamp_column(["id", "note"]) is None
    assert pick_timestamp_column([]) is None


# -------------------------
# 取值與解析
# -------------------------
def test_resolve_prefers_given_field_then_candidates() -> None:
    row = {"createdAt": "2024-01-01", "created_at": "2024-02-02"}
    assert resolve_timestamp(row) == ("created_at", "2024-02-02")
    assert resolve_timestamp(row, "createdAt") == ("createdAt", "2024-01-01")


def test_resolve_skips_empty_values() -> None:
    row = {"_createdDate": "", "created_at": None, "createdDate": "2024-03-03"}
    assert resolve_timestamp(row) == ("createdDate", "2024-03-03")
    assert resolve_timestamp({"id": 1}) is None


def test_parse_accepts_common_shapes() -> None:
    assert parse_timestamp("2024-06-15 07:30:00") == parse_timestamp(datetime(2024, 6, 15, 7, 30))
    assert parse_timestamp(1718436600000).to_pydatetime() == datetime(2024, 6, 15, 7, 30)
    assert parse_timestamp(date(2024, 6, 15)).day == 15
    assert parse_timestamp(" 2024-06-15T07:30:00Z ").tzinfo is not None


@pytest.mark.parametrize(
    "value", ["not-a-date", "", None, True, object(), float("nan"), "now", "today", " now "]
)
def test_parse_returns_none_for_garbage(value) -> None:
    assert parse_timestamp(value) is None


# -------------------------
# 洛杉磯時間
# -------------------------
def test_display_time_reads_naive_values_as_utc() -> None:
    # 夏令時間 UTC-7
    assert to_display_time(datetime(2024, 6, 15, 7, 30)) == "2024-06-15 00:30:00"
    assert to_display_time(datetime(2024, 6, 15, 6, 59, 59)) == "2024-06-14 23:59:59"
    # 標準時間 UTC-8
    assert to_display_time("2024-01-10T08:00:00Z") == "2024-01-10 00:00:00"


def test_display_time_converts_aware_values() -> None:
    assert to_display_time("2024-06-15T12:00:00+09:00") == "2024-06-14 20:00:00"
    assert to_display_time("garbage") is None


def test_bucket_time_reads_naive_values_as_la_wall_time() -> None:
    ts = to_bucket_time("2024-06-14 23:59:59")
    assert day_key(ts) == "2024-06-14"
    assert ts.utcoffset() == timedelta(hours=-7)


def test_bucket_time_handles_dst_transitions() -> None:
    # 2024-03-10 02:30 不存在，往後推到 03:00
    spring = to_bucket_time("2024-03-10 02:30:00")
    assert day_key(spring) == "2024-03-10"
    assert spring.hour == 3
    # 2024-11-03 01:30 重複出現，取標準時間
    fall = to_bucket_time("2024-11-03 01:30:00")
    assert fall.utcoffset() == timedelta(hours=-8)


# -------------------------
# 資料列正規化
# -------------------------
def test_normalize_row_adds_derived_fields_without_mutating_input() -> None:
    raw = datetime(2024, 6, 15, 7, 30)
    row = {"id": 1, "created_at": raw}
    out = normalize_row(row, "created_at")

    assert row == {"id": 1, "created_at": raw}
    assert out[NORMALIZED_DATE_FIELD] == "2024-06-15 00:30:00"
    assert out[RAW_DATE_FIELD] == raw
    assert out["_original_created_at"] == raw
    assert out["created_at"] == raw


def test_normalize_row_without_original_when_source_is_created_date() -> None:
    out = normalize_row({"_createdDate": "2024-06-15T07:30:00Z"}, "_createdDate")
    assert out[NORMALIZED_DATE_FIELD] == "2024-06-15 00:30:00"
    assert out[RAW_DATE_FIELD] == "2024-06-15T07:30:00Z"
    assert not any(key.startswith("_original_") for key in out)


def test_normalize_row_falls_back_to_candidates() -> None:
    out = normalize_row({"createdAt": "2024-01-10T08:00:00Z"}, None)
    assert out[NORMALIZED_DATE_FIELD] == "2024-01-10 00:00:00"
    assert "_original_createdAt" in out


@pytest.mark.parametrize("row", [{"id": 1}, {"id": 2, "created_at": "not-a-date"}])
def test_normalize_row_leaves_untimed_rows_alone(row) -> None:
    assert normalize_row(row, "created_at") == row


def test_normalize_rows_keeps_order() -> None:
    rows = [{"id": i, "created_at": f"2024-06-1{i}T12:00:00Z"} for i in (3, 2, 1)]
    assert [r["id"] for r in normalize_rows(rows, "created_at")] == [3, 2, 1]
