"""Purchase Engine — debit the buyer and record the purchase in one unit of work.

Invariants:
    - Item lookup and quantity validation happen before the account row is touched
    - Debit and Purchase insert share one unit of work: both persist or neither does
    - total_price == price x quantity, fixed at purchase time
    - A total beyond the BIGINT range is rejected as insufficient funds before
      any bind parameter reaches the driver
    - A zero-row debit is disambiguated on the failure path only:
      AccountNotFoundError when the account is missing, InsufficientFundsError otherwise

Design Decisions:
    - Engine receives the session from the unit-of-work runner and never commits
      (ADR: commit/rollback/retry owned by services/unit_of_work.py)
"""

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from merchshop.core.domain_types import MAX_COINS, AccountId, Coins, ItemName
from merchshop.core.errors import (
    AccountNotFoundError, InsufficientFundsError, InvalidQuantityError,
    ItemNotFoundError,
)
from merchshop.models.merchandise import Merchandise
from merchshop.models.purchase import Purchase
from merchshop.services.balance_mutator import account_exists, apply_delta

logger = logging.getLogger(__name__)


async def purchase(
    db: AsyncSession, account_id: AccountId, quantity: int, item_name: ItemName,
) -> Purchase:
    """Buy `quantity` units of `item_name` for `account_id`."""
    price = await db.scalar(
        select(Merchandise.price).where(Merchandise.name == item_name),
    )
    if price is None:
        raise ItemNotFoundError(item_name)

    if quantity <= 0:
        raise InvalidQuantityError(quantity)

    total_price = Coins(price * quantity)
    if total_price > MAX_COINS:
        # No balance column can hold this much, so no debit can cover it
        raise InsufficientFundsError(account_id, total_price)

    if not await apply_delta(db, account_id, -total_price):
        if not await account_exists(db, account_id):
            raise AccountNotFoundError(account_id)
        logger.info(
            "Purchase rejected: insufficient funds",
            extra={"account_id": account_id, "item_name": item_name, "amount": total_price},
        )
        raise InsufficientFundsError(account_id, total_price)

    record = await _record_purchase(db, account_id, item_name, quantity, total_price)
    logger.info(
        "Purchase recorded",
        extra={
            "account_id": account_id, "item_name": item_name,
            "quantity": quantity, "amount": total_price,
        },
    )
    return record


async def _record_purchase(
    db: AsyncSession,
    account_id: AccountId,
    item_name: ItemName,
    quantity: int,
    total_price: Coins,
) -> Purchase:
    record = Purchase(
        account_id=account_id,
        item_name=item_name,
        quantity=quantity,
        total_price=total_price,
    )
    db.add(record)
    await db.flush()
    return record
