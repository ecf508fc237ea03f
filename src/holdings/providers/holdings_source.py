"""Remote holdings source protocol."""

from typing import Protocol

from holdings.domain.models import HoldingSnapshot


class HoldingsSource(Protocol):
    """
    Protocol for remote holdings sources.

    Implementations perform one request per call and raise a
    TransportError subclass on any failure.
    """

    async def fetch_holdings(self) -> HoldingSnapshot:
        """Fetch and decode the current holdings."""
        ...
