"""Unit-of-Work Runner — serializable transactions with bounded conflict retry.

Invariants:
    - Each attempt runs in a fresh SERIALIZABLE unit of work (never a reused session)
    - Only TransientConflictError is retried; business errors and other
      infrastructure errors propagate on the first occurrence
    - Retries are bounded (max_retries), exponential backoff with ±25% jitter
    - A conflict that outlives the retries is re-raised with retry_after_ms set
    - The whole run, retries included, is bounded by the request deadline; on
      timeout or cancellation the open unit of work rolls back

Design Decisions:
    - Retry lives here rather than in the engines: engines stay single-attempt
      and side-effect free on failure (ADR: single responsibility)
    - asyncio.wait_for cancels the in-flight attempt, so the session manager's
      rollback path runs before RequestTimeoutError is raised
"""

import asyncio
import logging
import random
from collections.abc import Awaitable, Callable
from typing import TypeVar

from sqlalchemy.ext.asyncio import AsyncSession

from merchshop.config import Settings
from merchshop.core.errors import RequestTimeoutError, TransientConflictError
from merchshop.infrastructure.database import DatabaseSessionManager

logger = logging.getLogger(__name__)

T = TypeVar("T")


class UnitOfWorkRunner:
    """Runs an operation inside a serializable unit of work, retrying conflicts."""

    def __init__(
        self,
        manager: DatabaseSessionManager,
        max_retries: int = 3,
        base_delay_ms: int = 25,
        max_delay_ms: int = 1000,
        timeout_seconds: float | None = 10.0,
    ):
        self.manager = manager
        self.max_retries = max_retries
        self.base_delay_ms = base_delay_ms
        self.max_delay_ms = max_delay_ms
        self.timeout_seconds = timeout_seconds

    @classmethod
    def from_settings(
        cls, manager: DatabaseSessionManager, settings: Settings,
    ) -> "UnitOfWorkRunner":
        return cls(
            manager,
            max_retries=settings.conflict_max_retries,
            base_delay_ms=settings.conflict_base_delay_ms,
            max_delay_ms=settings.conflict_max_delay_ms,
            timeout_seconds=settings.request_timeout_seconds,
        )

    async def run(self, operation: Callable[[AsyncSession], Awaitable[T]]) -> T:
        """Execute `operation(db)` and commit, retrying serialization conflicts."""
        if self.timeout_seconds is None:
            return await self._run_with_retry(operation)
        try:
            return await asyncio.wait_for(
                self._run_with_retry(operation), timeout=self.timeout_seconds,
            )
        except asyncio.TimeoutError:
            logger.error(f"Unit of work exceeded {self.timeout_seconds}s deadline")
            raise RequestTimeoutError(self.timeout_seconds)

    async def _run_with_retry(
        self, operation: Callable[[AsyncSession], Awaitable[T]],
    ) -> T:
        attempt = 0
        while True:
            try:
                async with self.manager.unit_of_work() as db:
                    return await operation(db)
            except TransientConflictError as e:
                if attempt >= self.max_retries:
                    logger.error(
                        f"Conflict persisted after {self.max_retries} retries",
                        extra={"attempt": attempt + 1, "error_code": e.code},
                    )
                    # Client hint for resubmitting the whole request
                    e.context.retry_after_ms = self._backoff(attempt)
                    raise
                delay = self._backoff(attempt)
                logger.warning(
                    f"Serialization conflict, retry after {delay}ms",
                    extra={"attempt": attempt + 1, "delay_ms": delay},
                )
                await asyncio.sleep(delay / 1000)
                attempt += 1

    def _backoff(self, attempt: int) -> int:
        """Exponential backoff with ±25% jitter."""
        delay = min(self.max_delay_ms, (2 ** attempt) * self.base_delay_ms)
        return int(delay * random.uniform(0.75, 1.25))  # nosec B311
