"""Holdings source providers module."""

from holdings.providers.holdings_source import HoldingsSource
from holdings.providers.http_source import HttpHoldingsSource
from holdings.providers.stub_source import StubHoldingsSource

__all__ = [
    "HoldingsSource",
    "HttpHoldingsSource",
    "StubHoldingsSource",
]
