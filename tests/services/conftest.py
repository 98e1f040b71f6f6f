"""Service test fixtures — async DB, seeded ledger, unit-of-work runner, API client.

Invariants:
    - Every test gets a fresh in-memory SQLite database with CHECK constraints active
    - get_db / get_db_manager dependencies overridden to use the test DB
    - db_manager patched so the readiness probe sees the test engine
    - Seeded catalog and accounts mirror the scenarios the engines are tested against
    - file_store: file-backed SQLite for tests that need concurrent writers

Design Decisions:
    - SQLite in-memory: fast, no external dependency; SERIALIZABLE maps to SQLite's
      native serialized writes, which is enough for single-connection tests
    - Fake DatabaseSessionManager built with __new__: reuses the real session()
      and unit_of_work() code paths against the test engine
"""

import pytest
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)
from httpx import ASGITransport, AsyncClient

import merchshop.models  # noqa: F401
import merchshop.infrastructure.database as db_module
from merchshop.db.base import Base
from merchshop.infrastructure.database import (
    DatabaseSessionManager, get_db, get_db_manager,
)
from merchshop.main import app
from merchshop.models.account import Account
from merchshop.models.merchandise import Merchandise
from merchshop.services.unit_of_work import UnitOfWorkRunner

CATALOG = {
    "t-shirt": 80,
    "cup": 20,
    "powerbank": 200,
    "hoody": 300,
    "pink-hoody": 500,
}


def make_manager(engine, session_factory) -> DatabaseSessionManager:
    manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    manager.engine = engine
    manager._session_factory = session_factory
    return manager


async def seed_ledger(session_factory, balances: dict[str, int]) -> dict[str, int]:
    """Insert the catalog and one account per username; returns username -> id."""
    async with session_factory() as session:
        session.add_all(
            Merchandise(name=name, price=price) for name, price in CATALOG.items()
        )
        accounts = {
            username: Account(username=username, password_hash="x", balance=balance)
            for username, balance in balances.items()
        }
        session.add_all(accounts.values())
        await session.commit()
        return {username: account.id for username, account in accounts.items()}


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture
def manager(test_engine, test_session_factory):
    return make_manager(test_engine, test_session_factory)


@pytest.fixture
def runner(manager):
    return UnitOfWorkRunner(
        manager, max_retries=3, base_delay_ms=1, max_delay_ms=5, timeout_seconds=5,
    )


@pytest.fixture
async def seed(test_session_factory):
    """alice=1000, bob=500, carol=100 plus the catalog."""
    return await seed_ledger(
        test_session_factory, {"alice": 1000, "bob": 500, "carol": 100},
    )


@pytest.fixture
def ledger(test_session_factory):
    """Read helpers that always use a fresh session (no identity-map staleness)."""

    class _Ledger:
        async def balance(self, account_id: int) -> int | None:
            async with test_session_factory() as s:
                return await s.scalar(
                    select(Account.balance).where(Account.id == account_id),
                )

        async def count(self, model) -> int:
            async with test_session_factory() as s:
                return await s.scalar(select(func.count()).select_from(model))

        async def rows(self, model) -> list:
            async with test_session_factory() as s:
                return list((await s.execute(select(model))).scalars().all())

    return _Ledger()


@pytest.fixture
async def client(test_engine, test_session_factory, manager):
    """FastAPI test client with DB dependencies overridden."""
    async def override_get_db():
        async with manager.session() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_db_manager] = lambda: manager

    original_manager = db_module.db_manager
    db_module.db_manager = manager

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    db_module.db_manager = original_manager


@pytest.fixture
async def file_store(tmp_path):
    """File-backed SQLite ledger: one connection per unit of work, real write contention."""
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'ledger.db'}",
        connect_args={"timeout": 15},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    class _FileStore:
        session_factory = factory
        runner = UnitOfWorkRunner(
            make_manager(engine, factory),
            max_retries=10, base_delay_ms=5, max_delay_ms=50, timeout_seconds=30,
        )

        async def seed(self, balances: dict[str, int]) -> dict[str, int]:
            return await seed_ledger(factory, balances)

        async def balance(self, account_id: int) -> int | None:
            async with factory() as s:
                return await s.scalar(
                    select(Account.balance).where(Account.id == account_id),
                )

    yield _FileStore()
    await engine.dispose()
