"""Domain Types — NewType wrappers and enum values."""

from merchshop.core.domain_types import (
    MAX_COINS, AccountId, Coins, IsolationLevel, ItemName, TransferDirection,
)


def test_identity_types_wrap_primitives():
    assert AccountId(7) == 7
    assert ItemName("cup") == "cup"
    assert Coins(80) == 80


def test_isolation_level_is_driver_literal():
    assert IsolationLevel.SERIALIZABLE.value == "SERIALIZABLE"


def test_transfer_direction_serializes_to_string():
    assert TransferDirection.SENT == "sent"
    assert TransferDirection.RECEIVED == "received"
    assert set(TransferDirection) == {TransferDirection.SENT, TransferDirection.RECEIVED}


def test_max_coins_is_bigint_upper_bound():
    assert MAX_COINS == 9_223_372_036_854_775_807
