"""Cache store protocol for persisted holdings snapshots."""

from typing import Protocol, Optional

from holdings.domain.models import HoldingSnapshot


class CacheStore(Protocol):
    """Interface for the keyed, time-stamped snapshot cache."""

    def is_valid(self, key: str) -> bool:
        """Return True if the current entry for key is flagged valid and unexpired."""
        ...

    def read(self, key: str) -> Optional[HoldingSnapshot]:
        """Return the current valid entry's holdings, or None. Never raises."""
        ...

    def read_stale(self, key: str) -> Optional[HoldingSnapshot]:
        """Return the current entry's holdings whatever its validity. Raises CacheReadError."""
        ...

    def write(self, key: str, snapshot: HoldingSnapshot, expiry_interval_seconds: float) -> None:
        """Atomically replace the current entry for key. Raises CacheWriteError."""
        ...

    def invalidate(self, key: str) -> None:
        """Flag the current entry invalid without deleting it."""
        ...

    def clear(self, key: str) -> None:
        """Delete every entry for key."""
        ...

    def cleanup(self) -> int:
        """Purge invalid and over-retention entries across all keys."""
        ...

    def cache_age(self, key: str) -> float:
        """Age in seconds of the current valid entry, or infinity."""
        ...

    def has_cached_data(self, key: str) -> bool:
        """Return True if a valid entry with at least one holding exists."""
        ...
