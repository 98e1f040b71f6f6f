"""Accounts — sign-in-or-register.

Invariants:
    - First sign-in registers the username with the starting balance
    - Later sign-ins with the same password return the same account
    - Wrong password is rejected without touching the balance
"""

import pytest

from merchshop.core.errors import AuthenticationError
from merchshop.models.account import Account
from merchshop.services.accounts import sign_in


async def test_first_sign_in_registers_with_starting_balance(test_db, ledger):
    account = await sign_in(test_db, "dave", "pw", starting_balance=1000)

    assert account.id is not None
    assert account.password_hash != "pw"
    assert await ledger.balance(account.id) == 1000
    assert await ledger.count(Account) == 1


async def test_second_sign_in_returns_same_account(test_db, ledger):
    first = await sign_in(test_db, "dave", "pw", starting_balance=1000)
    second = await sign_in(test_db, "dave", "pw", starting_balance=1000)

    assert first.id == second.id
    assert await ledger.count(Account) == 1


async def test_wrong_password_rejected(test_db, ledger):
    account = await sign_in(test_db, "dave", "pw", starting_balance=1000)

    with pytest.raises(AuthenticationError):
        await sign_in(test_db, "dave", "not-pw", starting_balance=1000)

    assert await ledger.balance(account.id) == 1000
