"""
Pytest configuration and fixtures for holdings data-access tests.

This module provides:
- A controllable clock for expiry and staleness tests
- In-memory SQLite database fixtures
- Factory helpers for holdings and snapshots
- Deterministic remote source doubles (succeeding, failing, gated)
- An in-memory cache store double implementing the CacheStore protocol
"""

import asyncio
from datetime import datetime, timedelta
from typing import Callable, Optional

import pytest
from sqlalchemy import create_engine, StaticPool
from sqlalchemy.orm import sessionmaker

from holdings.config.settings import Settings, reset_settings
from holdings.core.exceptions import CacheReadError, CacheWriteError, NoInternetConnectionError
from holdings.core.timezone import UTC
from holdings.domain.models import CacheEntry, HoldingRecord, HoldingSnapshot
from holdings.repositories.sqlalchemy.database import Base
# Import ORM models to register them with Base before creating tables
from holdings.repositories.sqlalchemy import orm_models  # noqa: F401
from holdings.repositories.sqlalchemy import SqlAlchemyCacheStore
from holdings.services import DataOrchestrator


TEST_CACHE_KEY = "test_cache"


# =============================================================================
# TIME HELPERS
# =============================================================================


def utc_datetime(
    year: int,
    month: int,
    day: int,
    hour: int = 10,
    minute: int = 0,
    second: int = 0,
) -> datetime:
    """Create an aware UTC datetime."""
    return UTC.localize(datetime(year, month, day, hour, minute, second))


class FakeClock:
    """Clock whose current time only moves when told to."""

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now = self.now + timedelta(seconds=seconds)


@pytest.fixture
def fixed_now() -> datetime:
    """Fixed 'now' timestamp for deterministic tests."""
    return utc_datetime(2024, 6, 15, 14, 30, 0)


@pytest.fixture
def clock(fixed_now) -> FakeClock:
    """Provide a controllable clock starting at fixed_now."""
    return FakeClock(fixed_now)


# =============================================================================
# HOLDING FACTORIES
# =============================================================================


def make_holding(
    symbol: str = "AAPL",
    quantity: int = 100,
    last_traded_price: float = 150.0,
    average_price: float = 140.0,
    previous_close: float = 145.0,
) -> HoldingRecord:
    """Create a HoldingRecord with sensible defaults."""
    return HoldingRecord(
        symbol=symbol,
        quantity=quantity,
        last_traded_price=last_traded_price,
        average_price=average_price,
        previous_close=previous_close,
    )


@pytest.fixture
def sample_snapshot() -> HoldingSnapshot:
    """Three holdings in a fixed display order."""
    return HoldingSnapshot.of([
        make_holding("AAPL", 100, 150.0, 140.0, 145.0),
        make_holding("MSFT", 10, 378.25, 300.0, 376.80),
        make_holding("TSLA", 5, 248.75, 260.0, 250.10),
    ])


@pytest.fixture
def other_snapshot() -> HoldingSnapshot:
    """A different snapshot used to detect replacement."""
    return HoldingSnapshot.of([
        make_holding("INFY", 45, 1401.55, 1201.0, 1399.0),
    ])


# =============================================================================
# DATABASE FIXTURES
# =============================================================================


@pytest.fixture(scope="function")
def test_engine():
    """Create test database engine with shared in-memory SQLite."""
    reset_settings()

    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(test_engine) -> sessionmaker:
    """Create test session factory."""
    return sessionmaker(
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
        bind=test_engine,
    )


@pytest.fixture
def cache_store(session_factory, clock) -> SqlAlchemyCacheStore:
    """Provide SQLAlchemy cache store on the in-memory database."""
    return SqlAlchemyCacheStore(session_factory=session_factory, clock=clock)


# =============================================================================
# REMOTE SOURCE DOUBLES
# =============================================================================


class RecordingSource:
    """Source returning a fixed snapshot and counting calls."""

    def __init__(self, snapshot: HoldingSnapshot):
        self.snapshot = snapshot
        self.call_count = 0

    async def fetch_holdings(self) -> HoldingSnapshot:
        self.call_count += 1
        return self.snapshot


class FailingSource:
    """Source that always raises."""

    def __init__(self, error: Optional[Exception] = None):
        self.error = error or NoInternetConnectionError()
        self.call_count = 0

    async def fetch_holdings(self) -> HoldingSnapshot:
        self.call_count += 1
        raise self.error


class GatedSource:
    """
    Source that blocks until released, tracking concurrency.

    started is set when a call enters; release() lets every call finish.
    """

    def __init__(self, snapshot: HoldingSnapshot):
        self.snapshot = snapshot
        self.call_count = 0
        self.in_flight = 0
        self.max_in_flight = 0
        self.started = asyncio.Event()
        self._gate = asyncio.Event()

    def release(self) -> None:
        self._gate.set()

    async def fetch_holdings(self) -> HoldingSnapshot:
        self.call_count += 1
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        self.started.set()
        try:
            await self._gate.wait()
            return self.snapshot
        finally:
            self.in_flight -= 1


class SequenceSource:
    """Source replaying a list of outcomes; exceptions are raised."""

    def __init__(self, outcomes: list):
        self._outcomes = list(outcomes)
        self.call_count = 0

    async def fetch_holdings(self) -> HoldingSnapshot:
        self.call_count += 1
        outcome = self._outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


# =============================================================================
# CACHE STORE DOUBLES
# =============================================================================


class InMemoryCacheStore:
    """Dictionary-backed CacheStore with the same validity rules."""

    def __init__(self, clock: Callable[[], datetime]):
        self._clock = clock
        self.entries: dict[str, CacheEntry] = {}
        self.write_count = 0
        self.clear_count = 0

    def is_valid(self, key: str) -> bool:
        entry = self.entries.get(key)
        return entry is not None and entry.is_cache_valid(self._clock())

    def read(self, key: str) -> Optional[HoldingSnapshot]:
        return self.entries[key].holdings if self.is_valid(key) else None

    def read_stale(self, key: str) -> Optional[HoldingSnapshot]:
        entry = self.entries.get(key)
        return entry.holdings if entry else None

    def write(self, key: str, snapshot: HoldingSnapshot, expiry_interval_seconds: float) -> None:
        self.write_count += 1
        self.entries[key] = CacheEntry(
            key=key,
            created_at=self._clock(),
            expiry_interval_seconds=expiry_interval_seconds,
            is_valid=True,
            holdings=snapshot,
        )

    def invalidate(self, key: str) -> None:
        entry = self.entries.get(key)
        if entry:
            self.entries[key] = CacheEntry(
                key=entry.key,
                created_at=entry.created_at,
                expiry_interval_seconds=entry.expiry_interval_seconds,
                is_valid=False,
                holdings=entry.holdings,
            )

    def clear(self, key: str) -> None:
        self.clear_count += 1
        self.entries.pop(key, None)

    def cleanup(self) -> int:
        now = self._clock()
        doomed = [k for k, e in self.entries.items() if not e.is_valid or e.is_past_retention(now)]
        for key in doomed:
            del self.entries[key]
        return len(doomed)

    def cache_age(self, key: str) -> float:
        entry = self.entries.get(key)
        return entry.age_seconds(self._clock()) if self.is_valid(key) else float("inf")

    def has_cached_data(self, key: str) -> bool:
        snapshot = self.read(key)
        return snapshot is not None and not snapshot.is_empty


class BrokenCacheStore(InMemoryCacheStore):
    """In-memory store whose persistence operations fail."""

    def __init__(self, clock, fail_reads: bool = True, fail_writes: bool = True):
        super().__init__(clock)
        self.fail_reads = fail_reads
        self.fail_writes = fail_writes

    def read_stale(self, key: str) -> Optional[HoldingSnapshot]:
        if self.fail_reads:
            raise CacheReadError(key, "database is locked")
        return super().read_stale(key)

    def write(self, key: str, snapshot: HoldingSnapshot, expiry_interval_seconds: float) -> None:
        if self.fail_writes:
            raise CacheWriteError(key, "disk I/O error")
        super().write(key, snapshot, expiry_interval_seconds)

    def clear(self, key: str) -> None:
        if self.fail_writes:
            raise CacheWriteError(key, "disk I/O error")
        super().clear(key)


@pytest.fixture
def memory_store(clock) -> InMemoryCacheStore:
    """Provide an in-memory cache store."""
    return InMemoryCacheStore(clock)


# =============================================================================
# SERVICE FIXTURES
# =============================================================================


def make_orchestrator(source, store, clock, **kwargs) -> DataOrchestrator:
    """Build an orchestrator on the test cache key with a 300s expiry."""
    kwargs.setdefault("cache_key", TEST_CACHE_KEY)
    kwargs.setdefault("expiry_interval_seconds", 300.0)
    return DataOrchestrator(source=source, store=store, clock=clock, **kwargs)


@pytest.fixture
def test_settings() -> Settings:
    """Settings pointing at an in-memory database and the test cache key."""
    return Settings(
        database_url="sqlite://",
        cache_key=TEST_CACHE_KEY,
        holdings_provider="stub",
    )
