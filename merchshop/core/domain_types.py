"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - AccountId wraps the integer primary key of accounts
    - Coins are whole integers; no fractional amounts exist anywhere
    - IsolationLevel values are the literal names SQLAlchemy passes to the driver

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON without custom encoders
"""

from enum import Enum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

AccountId = NewType("AccountId", int)
ItemName = NewType("ItemName", str)


# ─── Value Types ─────────────────────────────────────────────────

Coins = NewType("Coins", int)           # >= 0 for balances, > 0 for prices/amounts

# Largest value a BIGINT balance column can hold
MAX_COINS = Coins(2**63 - 1)


# ─── Enums ───────────────────────────────────────────────────────

class IsolationLevel(str, Enum):
    """Transaction isolation levels used by units of work."""
    SERIALIZABLE = "SERIALIZABLE"


class TransferDirection(str, Enum):
    """Which side of a transfer the viewing account is on."""
    SENT = "sent"
    RECEIVED = "received"
