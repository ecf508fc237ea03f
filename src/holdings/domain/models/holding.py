"""Holding and snapshot domain models."""

from dataclasses import dataclass, field
from typing import Iterable, Iterator

from holdings.core.exceptions import ValidationError


@dataclass(frozen=True)
class HoldingRecord:
    """
    One stock holding as reported by the broker.

    Only the four stored fields are kept; every derived value is
    recomputed on access.
    """

    symbol: str
    quantity: int
    last_traded_price: float
    average_price: float
    previous_close: float

    def __post_init__(self) -> None:
        if not self.symbol:
            raise ValidationError("Holding symbol must not be empty")

    @property
    def current_value(self) -> float:
        """Market value at the last traded price."""
        return self.quantity * self.last_traded_price

    @property
    def total_investment(self) -> float:
        """Cost basis at the average purchase price."""
        return self.quantity * self.average_price

    @property
    def pnl(self) -> float:
        """Unrealized profit/loss."""
        return self.current_value - self.total_investment

    @property
    def todays_pnl(self) -> float:
        """
        Today's profit/loss.

        Formula: quantity × (previous_close − last_traded_price)
        """
        return self.quantity * (self.previous_close - self.last_traded_price)


@dataclass(frozen=True)
class HoldingSnapshot:
    """Ordered, immutable collection of holdings. Order is display order."""

    holdings: tuple[HoldingRecord, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        if not isinstance(self.holdings, tuple):
            object.__setattr__(self, "holdings", tuple(self.holdings))

    @classmethod
    def of(cls, holdings: Iterable[HoldingRecord]) -> "HoldingSnapshot":
        return cls(holdings=tuple(holdings))

    def __iter__(self) -> Iterator[HoldingRecord]:
        return iter(self.holdings)

    def __len__(self) -> int:
        return len(self.holdings)

    @property
    def is_empty(self) -> bool:
        return not self.holdings
