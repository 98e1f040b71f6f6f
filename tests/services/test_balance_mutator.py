"""Balance Mutator — conditional debit/credit against the accounts table.

Invariants:
    - Debit applies only when balance >= amount; otherwise zero rows, balance untouched
    - Credit applies to any existing account
    - Unknown account matches zero rows for debit and credit alike
    - Nothing is committed by apply_delta itself
"""

import pytest

from merchshop.services.balance_mutator import account_exists, apply_delta, get_balance


async def test_debit_within_balance_succeeds(test_db, seed):
    assert await apply_delta(test_db, seed["alice"], -400) is True
    assert await get_balance(test_db, seed["alice"]) == 600


async def test_debit_of_entire_balance_reaches_zero(test_db, seed):
    assert await apply_delta(test_db, seed["carol"], -100) is True
    assert await get_balance(test_db, seed["carol"]) == 0


async def test_overdraft_matches_no_row_and_keeps_balance(test_db, seed):
    assert await apply_delta(test_db, seed["carol"], -101) is False
    assert await get_balance(test_db, seed["carol"]) == 100


async def test_credit_has_no_lower_bound_check(test_db, seed):
    assert await apply_delta(test_db, seed["carol"], 5000) is True
    assert await get_balance(test_db, seed["carol"]) == 5100


async def test_unknown_account_matches_no_row(test_db, seed):
    assert await apply_delta(test_db, 9999, -1) is False
    assert await apply_delta(test_db, 9999, 1) is False
    assert await account_exists(test_db, 9999) is False


async def test_zero_delta_is_rejected(test_db, seed):
    with pytest.raises(ValueError):
        await apply_delta(test_db, seed["alice"], 0)


async def test_mutation_is_not_committed_by_itself(test_db, seed, ledger):
    await apply_delta(test_db, seed["alice"], -250)
    await test_db.rollback()
    assert await ledger.balance(seed["alice"]) == 1000
