"""View models handed to the presentation layer."""

from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, Optional

from holdings.core.timezone import now_utc, seconds_between
from holdings.domain.models import DataSource, HoldingRecord, HoldingSnapshot

STALENESS_WINDOW_SECONDS = 300.0


@dataclass(frozen=True)
class TaggedSnapshot:
    """
    Snapshot plus the source it came from.

    Read-only view; never persisted.
    """

    holdings: HoldingSnapshot
    source: DataSource
    fetched_at: datetime

    def is_stale_at(self, now: datetime, window_seconds: float = STALENESS_WINDOW_SECONDS) -> bool:
        return seconds_between(self.fetched_at, now) > window_seconds

    @property
    def is_stale(self) -> bool:
        """True once the result is older than the freshness window."""
        return self.is_stale_at(now_utc())


@dataclass(frozen=True)
class PortfolioTotals:
    """Portfolio-level aggregates of holding derived values."""

    total_current_value: float = 0.0
    total_investment: float = 0.0
    todays_total_pnl: float = 0.0

    @property
    def total_pnl(self) -> float:
        return self.total_current_value - self.total_investment


def compute_totals(holdings: Optional[Iterable[HoldingRecord]]) -> PortfolioTotals:
    """Sum derived values over holdings. Pure; callers recompute on each access."""
    current = 0.0
    investment = 0.0
    todays = 0.0
    for holding in holdings or ():
        current += holding.current_value
        investment += holding.total_investment
        todays += holding.todays_pnl
    return PortfolioTotals(
        total_current_value=current,
        total_investment=investment,
        todays_total_pnl=todays,
    )
