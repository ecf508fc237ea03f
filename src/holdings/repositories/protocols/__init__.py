"""Repository protocol definitions (interfaces)."""

from holdings.repositories.protocols.cache_store import CacheStore
from holdings.repositories.protocols.holdings_repository import HoldingsRepository

__all__ = [
    "CacheStore",
    "HoldingsRepository",
]
