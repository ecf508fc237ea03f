"""Headless presentation state for the holdings screen."""

import asyncio
import logging
import threading
from datetime import datetime
from typing import Awaitable, Callable, Optional, Protocol

from holdings.core.exceptions import OrchestrationError
from holdings.core.timezone import now_utc
from holdings.domain.models import DataSource, HoldingRecord
from holdings.domain.views import (
    STALENESS_WINDOW_SECONDS,
    PortfolioTotals,
    TaggedSnapshot,
    compute_totals,
)
from holdings.repositories.protocols import HoldingsRepository


class PortfolioViewListener(Protocol):
    """Receives state change notifications from the view model."""

    def did_start_loading(self) -> None: ...

    def did_finish_loading(self) -> None: ...

    def did_update_holdings(self) -> None: ...

    def did_encounter_error(self, error: Exception) -> None: ...


class PortfolioViewModel:
    """
    Owns the holdings shown on screen and the loading guard.

    A request made while another is loading is dropped, not queued; this is
    separate from the orchestrator's own serialization.
    """

    def __init__(
        self,
        repository: HoldingsRepository,
        listener: Optional[PortfolioViewListener] = None,
        stale_after_seconds: float = STALENESS_WINDOW_SECONDS,
        clock: Callable[[], datetime] = now_utc,
        logger: Optional[logging.Logger] = None,
    ):
        self._repository = repository
        self.listener = listener
        self._stale_after = stale_after_seconds
        self._clock = clock
        self._logger = logger or logging.getLogger(__name__)

        self._holdings: list[HoldingRecord] = []
        self._current_source = DataSource.NETWORK
        self._is_data_stale = False
        self._is_expanded = False
        self._last_error: Optional[Exception] = None

        self._loading_lock = threading.Lock()
        self._is_loading = False

    # State

    @property
    def holdings(self) -> list[HoldingRecord]:
        return list(self._holdings)

    @property
    def current_source(self) -> DataSource:
        return self._current_source

    @property
    def is_data_stale(self) -> bool:
        return self._is_data_stale

    @property
    def is_expanded(self) -> bool:
        return self._is_expanded

    @property
    def last_error(self) -> Optional[Exception]:
        return self._last_error

    @property
    def is_loading(self) -> bool:
        with self._loading_lock:
            return self._is_loading

    # Aggregates, recomputed on every access

    @property
    def totals(self) -> PortfolioTotals:
        return compute_totals(self._holdings)

    @property
    def total_current_value(self) -> float:
        return self.totals.total_current_value

    @property
    def total_investment(self) -> float:
        return self.totals.total_investment

    @property
    def total_pnl(self) -> float:
        return self.totals.total_pnl

    @property
    def todays_total_pnl(self) -> float:
        return self.totals.todays_total_pnl

    @property
    def data_source_description(self) -> str:
        return describe_source(self._current_source, self._is_data_stale)

    # Actions

    def toggle_expanded(self) -> None:
        self._is_expanded = not self._is_expanded

    async def fetch_holdings(self) -> Optional[TaggedSnapshot]:
        """Load holdings; returns None if dropped or if no data was available."""
        return await self._load(self._repository.fetch, "Fetch")

    async def force_refresh(self) -> Optional[TaggedSnapshot]:
        """Reload holdings from the network first."""
        return await self._load(self._repository.force_refresh, "Force refresh")

    def clear_cache(self) -> "asyncio.Future[None]":
        future = self._repository.clear_cache()
        self._logger.info("Cache clear requested")
        return future

    # Helpers

    def _try_begin_loading(self) -> bool:
        """Compare-and-set the loading flag; False if already loading."""
        with self._loading_lock:
            if self._is_loading:
                return False
            self._is_loading = True
            return True

    def _finish_loading(self) -> None:
        with self._loading_lock:
            self._is_loading = False
        if self.listener is not None:
            self.listener.did_finish_loading()
        self._logger.debug("Loading finished")

    async def _load(
        self,
        operation: Callable[[], Awaitable[TaggedSnapshot]],
        label: str,
    ) -> Optional[TaggedSnapshot]:
        if not self._try_begin_loading():
            self._logger.info("%s already in progress, ignoring duplicate request", label)
            return None

        if self.listener is not None:
            self.listener.did_start_loading()
        self._logger.debug("Loading started")

        try:
            result = await operation()
        except OrchestrationError as exc:
            self._finish_loading()
            self._handle_error(exc)
            return None
        except BaseException:
            self._finish_loading()
            raise

        self._update_state(result)
        self._finish_loading()
        if self.listener is not None:
            self.listener.did_update_holdings()
        self._logger.info("%s completed from %s", label, result.source.value)
        return result

    def _update_state(self, result: TaggedSnapshot) -> None:
        self._holdings = list(result.holdings)
        self._current_source = result.source
        self._is_data_stale = result.is_stale_at(self._clock(), self._stale_after)
        self._last_error = None

    def _handle_error(self, error: OrchestrationError) -> None:
        self._last_error = error
        if self.listener is not None:
            self.listener.did_encounter_error(error)
        self._logger.warning("Error occurred - %s", error)


def describe_source(source: DataSource, is_stale: bool) -> str:
    """Human-readable label for where the shown data came from."""
    if source == DataSource.NETWORK:
        return "Live Data (Stale)" if is_stale else "Live Data"
    if source == DataSource.CACHE:
        return "Cached Data (Stale)" if is_stale else "Cached Data"
    return "Demo Data"
