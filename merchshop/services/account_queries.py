"""Query Services — read-only views over balances, inventory, history and catalog.

Invariants:
    - Never writes; runs on a default (read-committed) session
    - Sent and received histories come from two direction-filtered queries over
      transfers and are never merged
    - Sent entries name the receiver, received entries name the sender
    - Inventory quantities are summed per item name (core/account_info.py)
"""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased

from merchshop.core.account_info import (
    AccountInfo, CoinOperation, InventoryLine, summarize_inventory,
)
from merchshop.core.domain_types import AccountId, TransferDirection
from merchshop.core.errors import AccountNotFoundError
from merchshop.models.account import Account
from merchshop.models.merchandise import Merchandise
from merchshop.models.purchase import Purchase
from merchshop.models.transfer import Transfer
from merchshop.services.balance_mutator import get_balance


async def get_account_info(db: AsyncSession, account_id: AccountId) -> AccountInfo:
    """Balance, grouped inventory and split transfer history for one account."""
    balance = await get_balance(db, account_id)
    if balance is None:
        raise AccountNotFoundError(account_id)

    return AccountInfo(
        balance=balance,
        inventory=await get_inventory(db, account_id),
        sent=await get_transfer_history(db, account_id, TransferDirection.SENT),
        received=await get_transfer_history(
            db, account_id, TransferDirection.RECEIVED,
        ),
    )


async def get_inventory(db: AsyncSession, account_id: AccountId) -> list[InventoryLine]:
    result = await db.execute(
        select(Purchase.item_name, Purchase.quantity)
        .where(Purchase.account_id == account_id)
        .order_by(Purchase.created_at, Purchase.id),
    )
    return summarize_inventory(result.tuples().all())


async def get_transfer_history(
    db: AsyncSession, account_id: AccountId, direction: TransferDirection,
) -> list[CoinOperation]:
    """Transfers on one side of `account_id`, labelled with the counterparty."""
    if direction is TransferDirection.SENT:
        own_column, other_column = Transfer.sender_id, Transfer.receiver_id
    else:
        own_column, other_column = Transfer.receiver_id, Transfer.sender_id

    counterparty = aliased(Account)
    result = await db.execute(
        select(counterparty.username, Transfer.amount)
        .join(counterparty, counterparty.id == other_column)
        .where(own_column == account_id)
        .order_by(Transfer.created_at, Transfer.id),
    )
    return [CoinOperation(name, amount) for name, amount in result.tuples()]


async def get_account_by_username(db: AsyncSession, username: str) -> Account:
    account = await db.scalar(select(Account).where(Account.username == username))
    if account is None:
        raise AccountNotFoundError(username)
    return account


async def list_merchandise(db: AsyncSession) -> list[Merchandise]:
    result = await db.execute(select(Merchandise).order_by(Merchandise.name))
    return list(result.scalars().all())
