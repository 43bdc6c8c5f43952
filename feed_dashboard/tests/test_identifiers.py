"""資料表名稱白名單測試。"""

from __future__ import annotations

import pytest

from feed_dashboard.feeds.errors import InvalidTableNameError
from feed_dashboard.feeds.identifiers import (
    INVALID_TABLE_NAME_MESSAGE,
    extract_user_id,
    is_valid_table_name,
    validate_table_name,
)


@pytest.mark.parametrize(
    "name",
    [
        "alice_new_feed",
        "247942d3-73d6-44c4-9311-ccffe1acc5bf_new_feed",
        "user_42_new_feed",
        "__new_feed",
    ],
)
def test_accepts_feed_table_names(name: str) -> None:
    assert is_valid_table_name(name)
    assert validate_table_name(name) == name


@pytest.mark.parametrize(
    "name",
    [
        "",
        "_new_feed",
        "alice",
        "alice_new_feed2",
        "alice_NEW_FEED",
        "alice new_feed",
        "alice_new_feed; DROP TABLE users",
        "alice`_new_feed",
        'alice"_new_feed',
        "ålice_new_feed",
        "alice_new_feed\n",
    ],
)
def test_rejects_everything_else(name: str) -> None:
    assert not is_valid_table_name(name)
    with pytest.raises(InvalidTableNameError) as excinfo:
        validate_table_name(name)
    assert excinfo.value.status_code == 400
    assert excinfo.value.message == INVALID_TABLE_NAME_MESSAGE


def test_non_string_input_is_invalid() -> None:
    assert not is_valid_table_name(None)
    assert not is_valid_table_name(123)


def test_extract_user_id_strips_first_suffix_only() -> None:
    assert extract_user_id("alice_new_feed") == "alice"
    assert extract_user_id("a_new_feed_b_new_feed") == "a_b_new_feed"
