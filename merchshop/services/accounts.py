"""Accounts — sign-in-or-register with a fixed starting balance.

Invariants:
    - An unknown username is registered on first sign-in with starting_balance coins
    - Registration is the only place coins enter the system
    - A lost unique-username race re-reads the winning row instead of failing
    - Wrong password -> AuthenticationError; the stored hash is never returned

Design Decisions:
    - bcrypt runs in a worker thread (asyncio.to_thread) so hashing never blocks
      the event loop
    - Commits its own short transaction: registration is not part of any
      balance-mutating unit of work
"""

import asyncio
import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from merchshop.core.errors import AuthenticationError
from merchshop.infrastructure.security import hash_password, verify_password
from merchshop.models.account import Account

logger = logging.getLogger(__name__)


async def sign_in(
    db: AsyncSession, username: str, password: str, starting_balance: int,
) -> Account:
    """Return the account for valid credentials, registering it if new."""
    account = await _get_by_username(db, username)
    if account is None:
        account = await _register(db, username, password, starting_balance)

    if not await asyncio.to_thread(verify_password, password, account.password_hash):
        logger.info("Sign-in rejected", extra={"account_id": account.id})
        raise AuthenticationError("Invalid username or password")
    return account


async def _get_by_username(db: AsyncSession, username: str) -> Account | None:
    return await db.scalar(select(Account).where(Account.username == username))


async def _register(
    db: AsyncSession, username: str, password: str, starting_balance: int,
) -> Account:
    password_hash = await asyncio.to_thread(hash_password, password)
    account = Account(
        username=username, password_hash=password_hash, balance=starting_balance,
    )
    db.add(account)
    try:
        await db.commit()
    except IntegrityError:
        # Concurrent sign-in registered the same username first
        await db.rollback()
        existing = await _get_by_username(db, username)
        if existing is None:
            raise
        return existing

    await db.refresh(account)
    logger.info("Account registered", extra={"account_id": account.id})
    return account
