"""Ledger Store Access — async engine, sessions, serializable units of work.

Invariants:
    - A session that exits with an exception is rolled back before the error leaves
    - A unit of work pins its isolation level before its first statement and
      commits only when its body completes
    - Driver failures leave this module as MerchShopError subclasses only:
      serialization abort / deadlock -> TransientConflictError (retryable),
      other operational failure -> StoreUnavailableError,
      constraint violation and the rest -> DatabaseError

Design Decisions:
    - One DatabaseSessionManager per process, created in the FastAPI lifespan
    - expire_on_commit=False: committed Purchase/Transfer rows stay readable
    - SQLite reports write contention as "database is locked"; it is treated as
      a serialization failure so tests exercise the same retry path as PostgreSQL
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy import text
from sqlalchemy.exc import DBAPIError, IntegrityError, OperationalError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from merchshop.core.domain_types import IsolationLevel
from merchshop.core.errors import (
    DatabaseError, MerchShopError, StoreUnavailableError, TransientConflictError,
)

logger = logging.getLogger(__name__)

# serialization_failure, deadlock_detected
_CONFLICT_SQLSTATES = frozenset({"40001", "40P01"})


def is_serialization_failure(exc: DBAPIError) -> bool:
    """True when the driver aborted the transaction because of a concurrent writer."""
    orig = exc.orig
    sqlstate = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    if sqlstate in _CONFLICT_SQLSTATES:
        return True
    return "database is locked" in str(orig).lower()


def translate_store_error(exc: SQLAlchemyError) -> DatabaseError:
    if isinstance(exc, DBAPIError) and is_serialization_failure(exc):
        logger.warning(f"Serialization conflict: {exc.orig}")
        return TransientConflictError("Concurrent update conflict", "transaction")
    if isinstance(exc, IntegrityError):
        logger.error(f"Constraint violated: {exc.orig}")
        return DatabaseError("Integrity constraint violated", "commit")
    if isinstance(exc, OperationalError):
        logger.error(f"Ledger store unreachable: {exc.orig}")
        return StoreUnavailableError("Connection or operational error", "execute")
    logger.error(f"Ledger store error: {exc}")
    return DatabaseError("Database operation failed", "query")


class DatabaseSessionManager:
    """Owns the engine; hands out plain sessions and serializable units of work."""

    def __init__(
        self, database_url: str, pool_size: int = 20, max_overflow: int = 10,
    ):
        pool_options = {}
        if not database_url.startswith("sqlite"):
            pool_options = {
                "pool_size": pool_size,
                "max_overflow": max_overflow,
                "pool_pre_ping": True,
                "pool_recycle": 3600,
            }
        self.engine = create_async_engine(database_url, **pool_options)
        self._session_factory = async_sessionmaker(
            self.engine, class_=AsyncSession, expire_on_commit=False,
        )

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        session = self._session_factory()
        try:
            yield session
        except MerchShopError:
            await session.rollback()
            raise
        except SQLAlchemyError as e:
            await session.rollback()
            raise translate_store_error(e) from e
        finally:
            await session.close()

    @asynccontextmanager
    async def unit_of_work(
        self, isolation_level: IsolationLevel = IsolationLevel.SERIALIZABLE,
    ) -> AsyncGenerator[AsyncSession, None]:
        """All-or-nothing session: commits on clean exit, rolls back otherwise."""
        async with self.session() as session:
            await session.connection(
                execution_options={"isolation_level": isolation_level.value},
            )
            yield session
            await session.commit()

    async def health_check(self) -> bool:
        try:
            async with self.session() as db:
                await db.execute(text("SELECT 1"))
        except Exception as e:
            logger.error(f"Ledger store health check failed: {e}")
            return False
        return True


db_manager: DatabaseSessionManager | None = None


def init_db(database_url: str, **kwargs) -> None:
    global db_manager
    db_manager = DatabaseSessionManager(database_url, **kwargs)


def get_db_manager() -> DatabaseSessionManager:
    """FastAPI dependency for routes that open their own units of work."""
    if db_manager is None:
        raise RuntimeError("Database not initialized")
    return db_manager


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency: a read session bound to the request."""
    async with get_db_manager().session() as session:
        yield session
