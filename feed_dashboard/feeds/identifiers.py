"""資料表名稱白名單檢查。

表名會被組進動態 SQL，因此必須在任何查詢之前通過這裡的檢查。
允許 UUID 形式的表名，例如 ``247942d3-73d6-44c4-9311-ccffe1acc5bf_new_feed``。
"""

from __future__ import annotations

import re

from feed_dashboard.feeds.errors import InvalidTableNameError

TABLE_SUFFIX = "_new_feed"
TABLE_NAME_PATTERN = re.compile(r"[A-Za-z0-9_-]+" + re.escape(TABLE_SUFFIX), re.ASCII)

INVALID_TABLE_NAME_MESSAGE = f'Invalid table name. Table must end with "{TABLE_SUFFIX}"'


def is_valid_table_name(name: object) -> bool:
    """只允許英數、底線、連字號，且必須以 ``_new_feed`` 結尾。"""
    if not isinstance(name, str):
        return False
    return TABLE_NAME_PATTERN.fullmatch(name) is not None


def validate_table_name(name: object) -> str:
    """通過檢查則原樣回傳，否則拋出 InvalidTableNameError。"""
    if not is_valid_table_name(name):
        raise InvalidTableNameError(INVALID_TABLE_NAME_MESSAGE)
    return name  # type: ignore[return-value]


def extract_user_id(table_name: str) -> str:
    """由表名取出使用者 ID（``_new_feed`` 之前的部分）。"""
    return table_name.replace(TABLE_SUFFIX, "", 1)
