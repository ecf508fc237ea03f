"""Pydantic schemas for holdings API."""

from datetime import datetime

from pydantic import BaseModel

from holdings.core.formatting import format_currency, format_pnl
from holdings.domain.models import DataSource, HoldingRecord
from holdings.domain.views import PortfolioTotals, TaggedSnapshot, compute_totals
from holdings.services import describe_source


class HoldingItem(BaseModel):
    """A single holding with derived values and display strings."""

    symbol: str
    quantity: int
    last_traded_price: float
    average_price: float
    previous_close: float
    current_value: float
    total_investment: float
    pnl: float
    todays_pnl: float
    ltp_display: str
    pnl_display: str

    @classmethod
    def from_domain(cls, holding: HoldingRecord) -> "HoldingItem":
        return cls(
            symbol=holding.symbol,
            quantity=holding.quantity,
            last_traded_price=holding.last_traded_price,
            average_price=holding.average_price,
            previous_close=holding.previous_close,
            current_value=holding.current_value,
            total_investment=holding.total_investment,
            pnl=holding.pnl,
            todays_pnl=holding.todays_pnl,
            ltp_display=format_currency(holding.last_traded_price),
            pnl_display=format_pnl(holding.pnl),
        )


class PortfolioTotalsSchema(BaseModel):
    """Portfolio-level aggregates."""

    total_current_value: float
    total_investment: float
    total_pnl: float
    todays_total_pnl: float
    total_pnl_display: str
    todays_total_pnl_display: str

    @classmethod
    def from_domain(cls, totals: PortfolioTotals) -> "PortfolioTotalsSchema":
        return cls(
            total_current_value=totals.total_current_value,
            total_investment=totals.total_investment,
            total_pnl=totals.total_pnl,
            todays_total_pnl=totals.todays_total_pnl,
            total_pnl_display=format_pnl(totals.total_pnl),
            todays_total_pnl_display=format_pnl(totals.todays_total_pnl),
        )


class HoldingsResponse(BaseModel):
    """Tagged holdings snapshot as served to clients."""

    holdings: list[HoldingItem]
    source: DataSource
    source_description: str
    fetched_at: datetime
    is_stale: bool
    totals: PortfolioTotalsSchema

    @classmethod
    def from_snapshot(cls, result: TaggedSnapshot, is_stale: bool) -> "HoldingsResponse":
        return cls(
            holdings=[HoldingItem.from_domain(h) for h in result.holdings],
            source=result.source,
            source_description=describe_source(result.source, is_stale),
            fetched_at=result.fetched_at,
            is_stale=is_stale,
            totals=PortfolioTotalsSchema.from_domain(compute_totals(result.holdings)),
        )
