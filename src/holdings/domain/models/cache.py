"""Cache entry model for persisted holdings snapshots."""

from dataclasses import dataclass
from datetime import datetime

from holdings.core.timezone import seconds_between
from holdings.domain.models.holding import HoldingSnapshot

# Entries older than this are purged by cleanup regardless of their own expiry.
RETENTION_CEILING_SECONDS = 24 * 60 * 60


@dataclass(frozen=True)
class CacheEntry:
    """
    Keyed, time-stamped wrapper around one snapshot.

    IMPORTANT: an entry whose age reaches its expiry interval is never
    valid, whatever its is_valid flag says.
    """

    key: str
    created_at: datetime
    expiry_interval_seconds: float
    is_valid: bool
    holdings: HoldingSnapshot

    def age_seconds(self, now: datetime) -> float:
        """Wall-clock age of the entry."""
        return seconds_between(self.created_at, now)

    def is_cache_valid(self, now: datetime) -> bool:
        """Return True if flagged valid and younger than its expiry interval."""
        return self.is_valid and self.age_seconds(now) < self.expiry_interval_seconds

    def is_past_retention(self, now: datetime, retention_seconds: float = RETENTION_CEILING_SECONDS) -> bool:
        """Return True if cleanup should purge the entry on age alone."""
        return self.age_seconds(now) > retention_seconds
