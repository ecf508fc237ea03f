"""Holdings repository protocol consumed by the presentation layer."""

import asyncio
from typing import Protocol

from holdings.domain.views import TaggedSnapshot


class HoldingsRepository(Protocol):
    """
    Interface for serving the freshest available holdings.

    Each method is queued at call time and returns a future, so call order
    is processing order whether or not the caller awaits right away.
    """

    def fetch(self) -> "asyncio.Future[TaggedSnapshot]":
        """Serve valid cache, else network, else stale cache."""
        ...

    def force_refresh(self) -> "asyncio.Future[TaggedSnapshot]":
        """Serve network, else stale cache."""
        ...

    def clear_cache(self) -> "asyncio.Future[None]":
        """Schedule removal of the cached snapshot without waiting for it."""
        ...
