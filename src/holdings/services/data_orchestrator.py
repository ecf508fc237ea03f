"""Cache-aware orchestration of network and cache holdings sources."""

import asyncio
import logging
from datetime import datetime
from typing import Callable, Optional, TypeVar

from holdings.config.settings import DEFAULT_CACHE_KEY
from holdings.core.exceptions import (
    AllSourcesFailedError,
    CacheError,
    NoDataAvailableError,
)
from holdings.core.timezone import now_utc
from holdings.domain.models import DataSource, HoldingSnapshot
from holdings.domain.views import TaggedSnapshot
from holdings.providers.holdings_source import HoldingsSource
from holdings.repositories.protocols import CacheStore
from holdings.services.serial_queue import SerialTaskQueue

DEFAULT_EXPIRY_SECONDS = 300.0

T = TypeVar("T")


class DataOrchestrator:
    """
    Serves the freshest available holdings: valid cache, then network,
    then whatever the cache still holds.

    Every call is processed on the orchestrator's own serial queue, one at
    a time and in call order, so cache writes never interleave. Each call
    returns data from exactly one source.

    The public methods enqueue when called, not when awaited, and return
    futures. Store calls run in a worker thread so a slow transaction does
    not hold up the event loop.
    """

    def __init__(
        self,
        source: HoldingsSource,
        store: CacheStore,
        cache_key: str = DEFAULT_CACHE_KEY,
        expiry_interval_seconds: float = DEFAULT_EXPIRY_SECONDS,
        detailed_errors: bool = False,
        clock: Callable[[], datetime] = now_utc,
        logger: Optional[logging.Logger] = None,
    ):
        self._source = source
        self._store = store
        self._cache_key = cache_key
        self._expiry = expiry_interval_seconds
        self._detailed_errors = detailed_errors
        self._clock = clock
        self._logger = logger or logging.getLogger(__name__)
        self._queue = SerialTaskQueue(name=f"orchestrator:{cache_key}", logger=self._logger)

    @property
    def cache_key(self) -> str:
        return self._cache_key

    def fetch(self) -> "asyncio.Future[TaggedSnapshot]":
        """
        Fetch holdings, skipping the network while the cache is valid.

        The future fails with NoDataAvailableError (or AllSourcesFailedError
        when detailed errors are enabled) if no source yields data.
        """
        return self._queue.submit(self._fetch)

    def force_refresh(self) -> "asyncio.Future[TaggedSnapshot]":
        """Fetch from the network regardless of cache validity."""
        return self._queue.submit(self._force_refresh)

    def clear_cache(self) -> "asyncio.Future[None]":
        """Queue removal of the cached snapshot; callers need not await it."""
        return self._queue.submit(self._clear_cache)

    async def aclose(self) -> None:
        """Stop the orchestrator's queue worker."""
        await self._queue.aclose()

    # Queue jobs

    async def _fetch(self) -> TaggedSnapshot:
        self._logger.info("Starting holdings fetch")

        if await self._in_thread(self._store.is_valid, self._cache_key):
            snapshot = await self._in_thread(self._store.read, self._cache_key)
            if snapshot is not None:
                self._logger.info("Using valid cache (skipping network)")
                return self._tag(snapshot, DataSource.CACHE)
            self._logger.warning("Cache reported valid but returned no data; trying network")

        return await self._network_with_fallback()

    async def _force_refresh(self) -> TaggedSnapshot:
        self._logger.info("Force refresh requested")
        return await self._network_with_fallback()

    async def _clear_cache(self) -> None:
        try:
            await self._in_thread(self._store.clear, self._cache_key)
        except CacheError as exc:
            self._logger.error("Cache clear failed: %s", exc)
            return
        self._logger.info("Cache cleared")

    # Steps

    async def _network_with_fallback(self) -> TaggedSnapshot:
        try:
            snapshot = await self._source.fetch_holdings()
        except Exception as exc:
            self._logger.warning("Network fetch failed - %s", exc)
            return await self._fallback_to_cache(exc)

        self._logger.info("Network fetch successful (%d holdings)", len(snapshot))
        try:
            await self._in_thread(self._store.write, self._cache_key, snapshot, self._expiry)
        except CacheError as exc:
            self._logger.warning("Could not cache network result: %s", exc)
        return self._tag(snapshot, DataSource.NETWORK)

    async def _fallback_to_cache(self, network_error: Exception) -> TaggedSnapshot:
        cache_error: Optional[CacheError] = None
        try:
            snapshot = await self._in_thread(self._store.read_stale, self._cache_key)
        except CacheError as exc:
            self._logger.warning("Cache fallback failed - %s", exc)
            cache_error = exc
            snapshot = None

        if snapshot is not None:
            self._logger.info("Network unavailable, using cached data")
            return self._tag(snapshot, DataSource.CACHE)

        self._logger.error("No fallback data available")
        if self._detailed_errors and cache_error is not None:
            raise AllSourcesFailedError([network_error, cache_error]) from network_error
        raise NoDataAvailableError(network_error) from network_error

    @staticmethod
    async def _in_thread(func: Callable[..., T], *args) -> T:
        """Run a blocking store call off the event loop."""
        return await asyncio.to_thread(func, *args)

    def _tag(self, snapshot: HoldingSnapshot, source: DataSource) -> TaggedSnapshot:
        return TaggedSnapshot(holdings=snapshot, source=source, fetched_at=self._clock())
