"""Repository layer - data access abstractions and implementations."""

from holdings.repositories.protocols import CacheStore, HoldingsRepository

__all__ = [
    "CacheStore",
    "HoldingsRepository",
]
