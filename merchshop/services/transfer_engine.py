"""Transfer Engine — move coins between two accounts in one unit of work.

Invariants:
    - Self-transfers, non-positive amounts and amounts beyond the BIGINT range are
      rejected before any statement runs
    - Sender is debited before the receiver is credited; both plus the Transfer
      insert commit together or not at all
    - A credit that matches no row fails the whole unit (no coins vanish)
    - Conservation: a committed transfer of A lowers the sender by exactly A and
      raises the receiver by exactly A

Design Decisions:
    - Debit-before-credit keeps the failure path a plain rollback; double-spend
      protection comes from SERIALIZABLE isolation plus the conditional debit,
      not from the ordering
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from merchshop.core.domain_types import MAX_COINS, AccountId, Coins
from merchshop.core.errors import (
    AccountNotFoundError, InsufficientFundsError, InvalidAmountError,
    SelfTransferError,
)
from merchshop.models.transfer import Transfer
from merchshop.services.balance_mutator import account_exists, apply_delta

logger = logging.getLogger(__name__)


def validate_transfer(sender_id: AccountId, receiver_id: AccountId, amount: Coins) -> None:
    """Pure input checks; raise before the store is touched."""
    if sender_id == receiver_id:
        raise SelfTransferError(sender_id)
    if amount <= 0:
        raise InvalidAmountError(amount)


async def transfer(
    db: AsyncSession, sender_id: AccountId, receiver_id: AccountId, amount: Coins,
) -> Transfer:
    """Send `amount` coins from `sender_id` to `receiver_id`."""
    validate_transfer(sender_id, receiver_id, amount)
    if amount > MAX_COINS:
        raise InsufficientFundsError(sender_id, amount)

    if not await apply_delta(db, sender_id, -amount):
        if not await account_exists(db, sender_id):
            raise AccountNotFoundError(sender_id)
        logger.info(
            "Transfer rejected: insufficient funds",
            extra={"account_id": sender_id, "amount": amount},
        )
        raise InsufficientFundsError(sender_id, amount)

    if not await apply_delta(db, receiver_id, amount):
        # Caller rolls back the unit of work, restoring the sender's debit
        raise AccountNotFoundError(receiver_id)

    record = Transfer(sender_id=sender_id, receiver_id=receiver_id, amount=amount)
    db.add(record)
    await db.flush()

    logger.info(
        f"Transfer recorded to account {receiver_id}",
        extra={"account_id": sender_id, "amount": amount},
    )
    return record
