"""Unit tests for AppContext wiring and the stub source."""

import asyncio

from holdings.app_context import AppContext
from holdings.config.settings import Settings
from holdings.domain.models import DataSource
from holdings.providers import HttpHoldingsSource, StubHoldingsSource
from holdings.repositories.sqlalchemy import SqlAlchemyCacheStore


class TestAppContext:
    """Tests for AppContext."""

    def test_stub_provider_selected_by_settings(self, test_settings):
        context = AppContext(settings=test_settings)

        assert isinstance(context.source, StubHoldingsSource)

    def test_http_provider_selected_by_settings(self):
        settings = Settings(database_url="sqlite://", holdings_provider="http", holdings_url="https://example.test/h")
        context = AppContext(settings=settings)

        assert isinstance(context.source, HttpHoldingsSource)

    def test_default_store_is_sqlalchemy(self, test_settings):
        context = AppContext(settings=test_settings)

        assert isinstance(context.store, SqlAlchemyCacheStore)
        asyncio.run(context.aclose())

    def test_orchestrator_is_shared(self, test_settings):
        context = AppContext(settings=test_settings)

        assert context.orchestrator is context.orchestrator
        assert context.orchestrator.cache_key == test_settings.cache_key

    def test_end_to_end_fetch_with_stub_and_sqlite(self, test_settings, clock):
        """
        GIVEN a context wired to the stub source and an in-memory database
        WHEN I fetch twice
        THEN the first result comes from the network and the second from cache
        """
        context = AppContext(settings=test_settings, clock=clock)

        async def scenario():
            first = await context.orchestrator.fetch()
            second = await context.orchestrator.fetch()
            await context.aclose()
            return first, second

        first, second = asyncio.run(scenario())

        assert first.source == DataSource.NETWORK
        assert second.source == DataSource.CACHE
        assert second.holdings == first.holdings
        assert context.source.call_count == 1

    def test_view_model_uses_context_settings(self, test_settings, clock):
        context = AppContext(settings=test_settings, clock=clock)

        view_model = context.create_view_model()
        result = asyncio.run(view_model.fetch_holdings())

        assert result is not None
        assert len(view_model.holdings) == 6
        assert view_model.data_source_description == "Live Data"


class TestStubHoldingsSource:
    """Tests for StubHoldingsSource."""

    def test_returns_deterministic_snapshot(self):
        source = StubHoldingsSource()

        first = asyncio.run(source.fetch_holdings())
        second = asyncio.run(source.fetch_holdings())

        assert first == second
        assert first.holdings[0].symbol == "MAHABANK"
        assert source.call_count == 2

    def test_custom_holdings(self):
        source = StubHoldingsSource({"XYZ": (1, 10.0, 8.0, 9.0)})

        snapshot = asyncio.run(source.fetch_holdings())

        assert [h.symbol for h in snapshot] == ["XYZ"]
        assert snapshot.holdings[0].pnl == 2.0
