"""Account Info — pure read-model shapes and inventory aggregation.

Invariants:
    - Inventory is grouped by item name; quantities of repeated purchases are summed
    - Output order is first-seen order of the input rows
    - Sent and received histories are never merged into one list

Design Decisions:
    - Pure function over (item_name, quantity) pairs: no ORM import, testable without a DB
"""

from collections.abc import Iterable
from dataclasses import dataclass, field


@dataclass(frozen=True)
class InventoryLine:
    item_name: str
    quantity: int


@dataclass(frozen=True)
class CoinOperation:
    """One transfer as seen by one side; counterparty is the other username."""
    counterparty: str
    amount: int


@dataclass
class AccountInfo:
    balance: int
    inventory: list[InventoryLine] = field(default_factory=list)
    sent: list[CoinOperation] = field(default_factory=list)
    received: list[CoinOperation] = field(default_factory=list)


def summarize_inventory(
    purchases: Iterable[tuple[str, int]],
) -> list[InventoryLine]:
    """Group (item_name, quantity) pairs by item name, summing quantities."""
    totals: dict[str, int] = {}
    for item_name, quantity in purchases:
        totals[item_name] = totals.get(item_name, 0) + quantity
    return [InventoryLine(name, qty) for name, qty in totals.items()]
