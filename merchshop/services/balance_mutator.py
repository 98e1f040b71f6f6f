"""Balance Mutator — the atomic conditional balance update.

Invariants:
    - One UPDATE statement per call; the non-negativity check lives in its WHERE
      clause, so two concurrent debits can never both see a sufficient balance
    - Debits add "balance >= amount" to the predicate; credits only match on id
    - Never commits: runs inside the caller's unit of work so it composes with
      the history insert
    - Zero matched rows is a reported outcome (False), not an exception

Design Decisions:
    - Conditional update instead of SELECT ... FOR UPDATE or in-process locks:
      mutual exclusion is delegated entirely to the store's row-level
      serialization under SERIALIZABLE isolation
    - synchronize_session=False: identity-map objects are not refreshed; readers
      select the balance column explicitly
"""

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from merchshop.core.domain_types import AccountId
from merchshop.models.account import Account


async def apply_delta(db: AsyncSession, account_id: AccountId, delta: int) -> bool:
    """Add a signed delta to the balance iff the result stays non-negative.

    Returns True when exactly one row matched. False means the debit would
    overdraw the account, or the account does not exist.
    """
    if delta == 0:
        raise ValueError("delta must be non-zero")

    stmt = (
        update(Account)
        .where(Account.id == account_id)
        .values(balance=Account.balance + delta)
        .execution_options(synchronize_session=False)
    )
    if delta < 0:
        stmt = stmt.where(Account.balance >= -delta)

    result = await db.execute(stmt)
    return result.rowcount == 1


async def account_exists(db: AsyncSession, account_id: AccountId) -> bool:
    """Existence probe used to tell a missing account from an overdraft."""
    found = await db.scalar(select(Account.id).where(Account.id == account_id))
    return found is not None


async def get_balance(db: AsyncSession, account_id: AccountId) -> int | None:
    return await db.scalar(
        select(Account.balance).where(Account.id == account_id),
    )
