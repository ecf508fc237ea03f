"""Domain models package."""

from holdings.domain.models.enums import DataSource
from holdings.domain.models.holding import HoldingRecord, HoldingSnapshot
from holdings.domain.models.cache import CacheEntry, RETENTION_CEILING_SECONDS

__all__ = [
    "DataSource",
    "HoldingRecord",
    "HoldingSnapshot",
    "CacheEntry",
    "RETENTION_CEILING_SECONDS",
]
