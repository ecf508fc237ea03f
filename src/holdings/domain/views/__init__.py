"""View models for service outputs."""

from holdings.domain.views.portfolio import (
    STALENESS_WINDOW_SECONDS,
    TaggedSnapshot,
    PortfolioTotals,
    compute_totals,
)

__all__ = [
    "STALENESS_WINDOW_SECONDS",
    "TaggedSnapshot",
    "PortfolioTotals",
    "compute_totals",
]
