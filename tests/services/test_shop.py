"""Shop Operations — data-free checks run before the store is touched."""

import pytest

from merchshop.core.errors import InvalidAmountError, InvalidQuantityError
from merchshop.services.shop import buy_item, send_coins


class _UnusedStore:
    """Stands in for the manager and runner; any use fails the test."""

    def session(self):
        raise AssertionError("store must not be touched")

    async def run(self, operation):
        raise AssertionError("store must not be touched")


@pytest.mark.parametrize("amount", [0, -5])
async def test_send_non_positive_amount_skips_receiver_lookup(amount):
    store = _UnusedStore()
    with pytest.raises(InvalidAmountError):
        await send_coins(store, store, 1, "nobody", amount)


async def test_buy_non_positive_quantity_skips_unit_of_work():
    with pytest.raises(InvalidQuantityError):
        await buy_item(_UnusedStore(), 1, "cup", 0)
