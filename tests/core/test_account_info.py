"""Account Info — inventory aggregation over purchase rows.

Tests:
    - Repeated purchases of one item collapse into one line with summed quantity
    - First-seen order is preserved
    - Empty history yields an empty inventory
"""

from merchshop.core.account_info import (
    AccountInfo, InventoryLine, summarize_inventory,
)


def test_repeated_items_are_summed():
    lines = summarize_inventory([("cup", 1), ("cup", 2), ("book", 1)])
    assert lines == [InventoryLine("cup", 3), InventoryLine("book", 1)]


def test_first_seen_order_is_kept():
    lines = summarize_inventory([("pen", 1), ("hoody", 1), ("pen", 4)])
    assert [line.item_name for line in lines] == ["pen", "hoody"]


def test_empty_history_has_no_inventory():
    assert summarize_inventory([]) == []


def test_account_info_defaults_to_empty_collections():
    info = AccountInfo(balance=1000)
    assert info.inventory == []
    assert info.sent == []
    assert info.received == []
