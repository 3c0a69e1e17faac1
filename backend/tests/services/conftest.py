"""Service test fixtures: async DB, store, cache, service + FastAPI test client.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - Every test gets its own TransactionCache driven by a fake clock
    - get_transaction_service dependency overridden to use the test service
    - db_manager patched so the readiness probe sees the test engine

Design Decisions:
    - SQLite in-memory with StaticPool: every session shares the one connection
      that holds the schema
    - CountingStore wraps the real SQL store, so tests assert store round-trips
      against real persistence instead of a hand-written fake
    - GatedStore pauses one store call after it returns, so tests interleave a
      mutation between a read and its cache fill deterministically
"""

import asyncio
from collections import Counter

import pytest
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import StaticPool
from httpx import ASGITransport, AsyncClient

from txn_records.config import Settings
from txn_records.db.base import Base
from txn_records.infrastructure.database import DatabaseSessionManager
from txn_records.infrastructure.transaction_cache import TransactionCache
from txn_records.infrastructure.transaction_store import SqlTransactionStore
from txn_records.services.transaction_service import (
    TransactionService, get_transaction_service,
)
import txn_records.infrastructure.database as db_module
import txn_records.models  # noqa: F401
from txn_records.main import app


class FakeClock:
    """Monotonic clock that only moves when told to."""

    def __init__(self, start: float = 1_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class CountingStore:
    """Delegates to a real store and counts calls per method name."""

    def __init__(self, inner):
        self._inner = inner
        self.calls: Counter[str] = Counter()

    def __getattr__(self, name):
        target = getattr(self._inner, name)

        async def counted(*args, **kwargs):
            self.calls[name] += 1
            return await target(*args, **kwargs)

        return counted


class GatedStore:
    """Delegates to a real store; the first call to `method` holds its result
    until `release` is set, after signalling `reached`."""

    def __init__(self, inner, method: str):
        self._inner = inner
        self._method = method
        self._held = False
        self.reached = asyncio.Event()
        self.release = asyncio.Event()

    def __getattr__(self, name):
        target = getattr(self._inner, name)
        if name != self._method or self._held:
            return target

        async def gated(*args, **kwargs):
            self._held = True
            result = await target(*args, **kwargs)
            self.reached.set()
            await self.release.wait()
            return result

        return gated


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False, poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
def test_db_manager(test_engine):
    return DatabaseSessionManager.from_engine(test_engine)


@pytest.fixture
def sql_store(test_db_manager):
    return SqlTransactionStore(test_db_manager)


@pytest.fixture
def store(sql_store):
    return CountingStore(sql_store)


@pytest.fixture
def gated_store(sql_store):
    """Factory: a store whose first call to the named method is gated."""
    return lambda method: GatedStore(sql_store, method)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def cache(clock):
    return TransactionCache.from_settings(
        Settings(
            cache_point_max_entries=1000,
            cache_point_ttl_seconds=1800,
            cache_page_max_entries=1000,
            cache_page_ttl_seconds=1800,
        ),
        clock=clock,
    )


@pytest.fixture
def service(store, cache):
    return TransactionService(store, cache)


@pytest.fixture
async def client(service, test_db_manager):
    """FastAPI test client with the service dependency overridden."""
    app.dependency_overrides[get_transaction_service] = lambda: service

    original_manager = db_module.db_manager
    db_module.db_manager = test_db_manager

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    db_module.db_manager = original_manager
