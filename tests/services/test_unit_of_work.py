"""Unit-of-Work Runner — bounded conflict retry and request deadline.

Invariants:
    - TransientConflictError is retried up to max_retries, each in a fresh unit
    - Business errors propagate on the first attempt
    - Exhausted retries re-raise the conflict
    - Exceeding the deadline raises RequestTimeoutError, and the real store
      keeps no trace of the interrupted debit
"""

import asyncio
from contextlib import asynccontextmanager

import pytest

from merchshop.config import Settings
from merchshop.core.errors import (
    InsufficientFundsError, RequestTimeoutError, TransientConflictError,
)
from merchshop.services.balance_mutator import apply_delta
from merchshop.services.unit_of_work import UnitOfWorkRunner


class FakeManager:
    """Counts opened units of work; yields a fresh token per attempt."""

    def __init__(self):
        self.opened = 0
        self.committed = 0

    @asynccontextmanager
    async def unit_of_work(self):
        self.opened += 1
        yield f"session-{self.opened}"
        self.committed += 1


def make_runner(manager, **kwargs) -> UnitOfWorkRunner:
    params = {"max_retries": 3, "base_delay_ms": 1, "max_delay_ms": 2, "timeout_seconds": 5}
    params.update(kwargs)
    return UnitOfWorkRunner(manager, **params)


async def test_success_commits_once():
    manager = FakeManager()

    async def op(db):
        return db

    assert await make_runner(manager).run(op) == "session-1"
    assert manager.opened == manager.committed == 1


async def test_conflict_retried_in_fresh_unit_until_success():
    manager = FakeManager()
    seen = []

    async def op(db):
        seen.append(db)
        if len(seen) < 3:
            raise TransientConflictError("conflict", "transaction")
        return "done"

    assert await make_runner(manager).run(op) == "done"
    assert seen == ["session-1", "session-2", "session-3"]
    assert manager.committed == 1


async def test_conflict_exhaustion_reraises():
    manager = FakeManager()

    async def op(db):
        raise TransientConflictError("conflict", "transaction")

    with pytest.raises(TransientConflictError) as exc_info:
        await make_runner(manager, max_retries=2).run(op)

    assert manager.opened == 3
    assert manager.committed == 0
    assert exc_info.value.http_status == 409
    assert exc_info.value.context.retry_after_ms is not None
    assert exc_info.value.to_response()["error"]["context"]["retry_after_ms"] >= 0


async def test_business_error_not_retried():
    manager = FakeManager()

    async def op(db):
        raise InsufficientFundsError(1, 80)

    with pytest.raises(InsufficientFundsError):
        await make_runner(manager).run(op)

    assert manager.opened == 1


async def test_deadline_exceeded_raises_timeout():
    manager = FakeManager()

    async def op(db):
        await asyncio.sleep(1)

    with pytest.raises(RequestTimeoutError):
        await make_runner(manager, timeout_seconds=0.05).run(op)

    assert manager.committed == 0


def test_backoff_grows_and_is_capped():
    runner = UnitOfWorkRunner(FakeManager(), base_delay_ms=100, max_delay_ms=1000)
    for _ in range(20):
        assert 75 <= runner._backoff(0) <= 125
        assert 150 <= runner._backoff(1) <= 250
        assert runner._backoff(10) <= 1250


def test_from_settings_uses_configured_policy():
    settings = Settings(
        conflict_max_retries=7, conflict_base_delay_ms=5,
        conflict_max_delay_ms=50, request_timeout_seconds=2.5,
    )
    runner = UnitOfWorkRunner.from_settings(FakeManager(), settings)
    assert (runner.max_retries, runner.base_delay_ms, runner.max_delay_ms) == (7, 5, 50)
    assert runner.timeout_seconds == 2.5


async def test_deadline_rolls_back_debit_in_real_store(manager, seed, ledger):
    runner = UnitOfWorkRunner(manager, timeout_seconds=0.05)

    async def slow_debit(db):
        assert await apply_delta(db, seed["alice"], -500)
        await asyncio.sleep(1)

    with pytest.raises(RequestTimeoutError):
        await runner.run(slow_debit)

    assert await ledger.balance(seed["alice"]) == 1000
