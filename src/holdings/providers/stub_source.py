"""Stub holdings source for offline/testing use."""

from typing import Optional

from holdings.domain.models import HoldingRecord, HoldingSnapshot


# Deterministic holdings: symbol -> (quantity, ltp, avg price, close)
_STUB_HOLDINGS: dict[str, tuple[int, float, float, float]] = {
    "MAHABANK": (990, 38.05, 35.0, 40.0),
    "ICICI": (100, 118.25, 110.0, 105.0),
    "SBI": (150, 550.05, 501.0, 590.0),
    "TATA STEEL": (200, 137.0, 110.65, 100.05),
    "INFOSYS": (45, 1401.55, 1201.0, 1399.0),
    "HDFC": (220, 2497.05, 2500.0, 2500.0),
}


class StubHoldingsSource:
    """Stub source returning a fixed snapshot; counts calls for diagnostics."""

    def __init__(self, holdings: Optional[dict[str, tuple[int, float, float, float]]] = None):
        self._holdings = holdings if holdings is not None else _STUB_HOLDINGS
        self.call_count = 0

    async def fetch_holdings(self) -> HoldingSnapshot:
        """Return the stub snapshot in insertion order."""
        self.call_count += 1
        return HoldingSnapshot.of(
            HoldingRecord(
                symbol=symbol,
                quantity=quantity,
                last_traded_price=ltp,
                average_price=avg_price,
                previous_close=close,
            )
            for symbol, (quantity, ltp, avg_price, close) in self._holdings.items()
        )
