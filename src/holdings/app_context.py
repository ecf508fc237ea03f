"""Application context: explicit wiring of store, source and services.

All collaborators are built here from one Settings instance and handed to
constructors; nothing below this module reaches for global state.
"""

import logging
from datetime import datetime
from typing import Callable, Optional

from sqlalchemy import Engine
from sqlalchemy.orm import sessionmaker

from holdings.config.settings import Settings, get_settings
from holdings.core.timezone import now_utc
from holdings.providers import HoldingsSource, HttpHoldingsSource, StubHoldingsSource
from holdings.repositories.protocols import CacheStore
from holdings.repositories.sqlalchemy import (
    SqlAlchemyCacheStore,
    create_engine_for_url,
    create_session_factory,
    init_db,
)
from holdings.services import DataOrchestrator, PortfolioViewModel


class AppContext:
    """
    Application context providing in-process access to all services.

    Collaborators are created lazily; any of them may be passed in to
    substitute a test double.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        source: Optional[HoldingsSource] = None,
        store: Optional[CacheStore] = None,
        clock: Callable[[], datetime] = now_utc,
        logger: Optional[logging.Logger] = None,
    ):
        self._settings = settings or get_settings()
        self._source = source
        self._store = store
        self._clock = clock
        self._logger = logger or logging.getLogger("holdings")

        self._engine: Optional[Engine] = None
        self._session_factory: Optional[sessionmaker] = None
        self._orchestrator: Optional[DataOrchestrator] = None

    @property
    def settings(self) -> Settings:
        return self._settings

    def now(self) -> datetime:
        """Current time according to the context clock."""
        return self._clock()

    def _get_engine(self) -> Engine:
        if self._engine is None:
            self._engine = create_engine_for_url(self._settings.get_database_url())
            init_db(self._engine)
        return self._engine

    def _get_session_factory(self) -> sessionmaker:
        if self._session_factory is None:
            self._session_factory = create_session_factory(self._get_engine())
        return self._session_factory

    @property
    def store(self) -> CacheStore:
        """Get the cache store."""
        if self._store is None:
            self._store = SqlAlchemyCacheStore(
                session_factory=self._get_session_factory(),
                clock=self._clock,
                retention_seconds=self._settings.cache_retention_hours * 3600,
                logger=self._logger.getChild("cache"),
            )
        return self._store

    @property
    def source(self) -> HoldingsSource:
        """Get the remote holdings source selected by settings."""
        if self._source is None:
            if self._settings.holdings_provider == "stub":
                self._source = StubHoldingsSource()
            else:
                self._source = HttpHoldingsSource(
                    url=self._settings.holdings_url,
                    timeout_seconds=self._settings.request_timeout_seconds,
                    logger=self._logger.getChild("network"),
                )
        return self._source

    @property
    def orchestrator(self) -> DataOrchestrator:
        """Get the DataOrchestrator instance."""
        if self._orchestrator is None:
            self._orchestrator = DataOrchestrator(
                source=self.source,
                store=self.store,
                cache_key=self._settings.cache_key,
                expiry_interval_seconds=self._settings.cache_expiry_seconds,
                detailed_errors=self._settings.detailed_errors,
                clock=self._clock,
                logger=self._logger.getChild("orchestrator"),
            )
        return self._orchestrator

    def create_view_model(self, listener=None) -> PortfolioViewModel:
        """Create a view model bound to this context's orchestrator."""
        return PortfolioViewModel(
            repository=self.orchestrator,
            listener=listener,
            stale_after_seconds=self._settings.stale_after_seconds,
            clock=self._clock,
            logger=self._logger.getChild("view_model"),
        )

    async def aclose(self) -> None:
        """Clean up resources."""
        if self._orchestrator is not None:
            await self._orchestrator.aclose()
        if self._engine is not None:
            self._engine.dispose()
            self._engine = None
            self._session_factory = None
