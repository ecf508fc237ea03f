"""SQLAlchemy implementation of CacheStore."""

import logging
import math
import threading
from datetime import datetime, timedelta
from typing import Callable, Optional

from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from holdings.core.exceptions import CacheReadError, CacheWriteError
from holdings.core.timezone import now_utc, to_naive_utc, to_utc
from holdings.domain.models import (
    CacheEntry,
    HoldingRecord,
    HoldingSnapshot,
    RETENTION_CEILING_SECONDS,
)
from holdings.repositories.sqlalchemy.orm_models import CacheSessionORM, CachedHoldingORM


class SqlAlchemyCacheStore:
    """
    SQLAlchemy-backed snapshot cache.

    Every operation opens its own session and runs under a store-wide lock,
    so a reader sees either the entry before a write or the entry after it.
    """

    def __init__(
        self,
        session_factory: sessionmaker,
        clock: Callable[[], datetime] = now_utc,
        retention_seconds: float = RETENTION_CEILING_SECONDS,
        logger: Optional[logging.Logger] = None,
    ):
        self._session_factory = session_factory
        self._clock = clock
        self._retention_seconds = retention_seconds
        self._logger = logger or logging.getLogger(__name__)
        self._lock = threading.RLock()

    # Validity and reads

    def is_valid(self, key: str) -> bool:
        """Return True if the current entry for key is flagged valid and unexpired."""
        try:
            entry = self.get_entry(key, include_holdings=False)
        except CacheReadError as exc:
            self._logger.warning("Cache validity check failed: %s", exc)
            return False
        valid = entry is not None and entry.is_cache_valid(self._clock())
        self._logger.debug("Cache validity check for %s: %s", key, valid)
        return valid

    def read(self, key: str) -> Optional[HoldingSnapshot]:
        """Return the current valid entry's holdings; failures read as a miss."""
        try:
            entry = self.get_entry(key)
        except CacheReadError as exc:
            self._logger.warning("Cache read degraded to miss: %s", exc)
            return None

        if entry is None or not entry.is_cache_valid(self._clock()):
            self._logger.debug("No valid cache entry for %s", key)
            return None

        self._logger.debug("Retrieved %d cached holdings for %s", len(entry.holdings), key)
        return entry.holdings

    def read_stale(self, key: str) -> Optional[HoldingSnapshot]:
        """Return the current entry's holdings even if expired or invalidated."""
        entry = self.get_entry(key)
        if entry is None:
            return None
        return entry.holdings

    def get_entry(self, key: str, include_holdings: bool = True) -> Optional[CacheEntry]:
        """
        Load the current (most recently created) entry for key.

        Raises CacheReadError on persistence failure.
        """
        with self._lock:
            db = self._session_factory()
            try:
                orm_session = self._current_session(db, key)
                if orm_session is None:
                    return None
                return self._to_domain(orm_session, include_holdings)
            except SQLAlchemyError as exc:
                raise CacheReadError(key, str(exc)) from exc
            finally:
                db.close()

    # Writes

    def write(self, key: str, snapshot: HoldingSnapshot, expiry_interval_seconds: float) -> None:
        """
        Replace the current entry for key with snapshot.

        Holdings are swapped wholesale and created_at/is_valid reset in one
        transaction. Raises CacheWriteError after rolling back on failure.
        """
        with self._lock:
            db = self._session_factory()
            try:
                orm_session = self._current_session(db, key)
                if orm_session is None:
                    orm_session = CacheSessionORM(cache_key=key)
                    db.add(orm_session)
                    self._logger.debug("Created new cache session for %s", key)

                orm_session.holdings = [
                    self._holding_to_orm(holding, position)
                    for position, holding in enumerate(snapshot)
                ]
                orm_session.created_at = to_naive_utc(self._clock())
                orm_session.expiry_interval = float(expiry_interval_seconds)
                orm_session.is_valid = True

                db.commit()
            except SQLAlchemyError as exc:
                db.rollback()
                self._logger.error("Error caching data for %s: %s", key, exc)
                raise CacheWriteError(key, str(exc)) from exc
            finally:
                db.close()

            self._logger.info("Cached %d holdings under %s", len(snapshot), key)
            self.cleanup()

    def invalidate(self, key: str) -> None:
        """Flag the current entry invalid; its rows stay until cleanup."""
        with self._lock:
            db = self._session_factory()
            try:
                orm_session = self._current_session(db, key)
                if orm_session is None:
                    return
                orm_session.is_valid = False
                db.commit()
            except SQLAlchemyError as exc:
                db.rollback()
                raise CacheWriteError(key, str(exc)) from exc
            finally:
                db.close()
        self._logger.info("Invalidated cache %s", key)

    def clear(self, key: str) -> None:
        """Delete every entry for key together with its holding rows."""
        with self._lock:
            db = self._session_factory()
            try:
                session_ids = [
                    row.id
                    for row in db.query(CacheSessionORM.id).filter(CacheSessionORM.cache_key == key)
                ]
                self._delete_sessions(db, session_ids)
                db.commit()
            except SQLAlchemyError as exc:
                db.rollback()
                self._logger.error("Error clearing cache %s: %s", key, exc)
                raise CacheWriteError(key, str(exc)) from exc
            finally:
                db.close()
        self._logger.info("Cleared cache %s", key)

    def cleanup(self) -> int:
        """
        Purge entries flagged invalid or older than the retention ceiling.

        Applies across all keys. Failures are logged and reported as zero
        removed entries.
        """
        cutoff = to_naive_utc(self._clock() - timedelta(seconds=self._retention_seconds))
        with self._lock:
            db = self._session_factory()
            try:
                session_ids = [
                    row.id
                    for row in db.query(CacheSessionORM.id).filter(
                        or_(
                            CacheSessionORM.is_valid == False,  # noqa: E712
                            CacheSessionORM.created_at < cutoff,
                        )
                    )
                ]
                if not session_ids:
                    return 0
                self._delete_sessions(db, session_ids)
                db.commit()
            except SQLAlchemyError as exc:
                db.rollback()
                self._logger.error("Error during cache cleanup: %s", exc)
                return 0
            finally:
                db.close()

        self._logger.info("Cleaned up %d stale cache sessions", len(session_ids))
        return len(session_ids)

    # Diagnostics

    def cache_age(self, key: str) -> float:
        """Age in seconds of the current valid entry, or infinity."""
        try:
            entry = self.get_entry(key, include_holdings=False)
        except CacheReadError as exc:
            self._logger.warning("Error getting cache age: %s", exc)
            return math.inf
        now = self._clock()
        if entry is None or not entry.is_cache_valid(now):
            return math.inf
        return entry.age_seconds(now)

    def has_cached_data(self, key: str) -> bool:
        """Return True if a valid entry holds at least one holding."""
        snapshot = self.read(key)
        return snapshot is not None and not snapshot.is_empty

    # Helpers

    @staticmethod
    def _current_session(db: Session, key: str) -> Optional[CacheSessionORM]:
        return (
            db.query(CacheSessionORM)
            .filter(CacheSessionORM.cache_key == key)
            .order_by(CacheSessionORM.created_at.desc(), CacheSessionORM.id.desc())
            .first()
        )

    @staticmethod
    def _delete_sessions(db: Session, session_ids: list[int]) -> None:
        """Delete sessions and their holding rows in the caller's transaction."""
        if not session_ids:
            return
        db.query(CachedHoldingORM).filter(
            CachedHoldingORM.session_id.in_(session_ids)
        ).delete(synchronize_session=False)
        db.query(CacheSessionORM).filter(
            CacheSessionORM.id.in_(session_ids)
        ).delete(synchronize_session=False)

    def _to_domain(self, orm: CacheSessionORM, include_holdings: bool = True) -> CacheEntry:
        """Convert ORM session to domain model."""
        holdings: list[HoldingRecord] = []
        if include_holdings:
            for row in orm.holdings:
                if not row.symbol:
                    self._logger.warning("Skipping cached holding with invalid symbol")
                    continue
                holdings.append(self._holding_to_domain(row))
        return CacheEntry(
            key=orm.cache_key,
            created_at=to_utc(orm.created_at),
            expiry_interval_seconds=orm.expiry_interval,
            is_valid=bool(orm.is_valid),
            holdings=HoldingSnapshot.of(holdings),
        )

    @staticmethod
    def _holding_to_domain(orm: CachedHoldingORM) -> HoldingRecord:
        """Convert ORM holding row to domain model."""
        return HoldingRecord(
            symbol=orm.symbol,
            quantity=int(orm.quantity),
            last_traded_price=float(orm.ltp),
            average_price=float(orm.average_price),
            previous_close=float(orm.close),
        )

    @staticmethod
    def _holding_to_orm(holding: HoldingRecord, position: int) -> CachedHoldingORM:
        """Convert domain holding to ORM row."""
        return CachedHoldingORM(
            position=position,
            symbol=holding.symbol,
            quantity=holding.quantity,
            ltp=holding.last_traded_price,
            average_price=holding.average_price,
            close=holding.previous_close,
        )
