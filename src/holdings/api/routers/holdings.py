"""Holdings API: fetch, force refresh and cache clearing."""

import asyncio
import logging

from fastapi import APIRouter, Depends, status

from holdings.api.deps import get_app_context, get_orchestrator
from holdings.api.schemas import HoldingsResponse
from holdings.app_context import AppContext
from holdings.domain.views import TaggedSnapshot
from holdings.services import DataOrchestrator

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/holdings", tags=["holdings"])


def _to_response(result: TaggedSnapshot, context: AppContext) -> HoldingsResponse:
    settings = context.settings
    return HoldingsResponse.from_snapshot(
        result,
        is_stale=result.is_stale_at(context.now(), settings.stale_after_seconds),
    )


def _log_clear_outcome(future: "asyncio.Future[None]") -> None:
    """Surface failures of a cache clear nobody awaits."""
    if future.cancelled():
        logger.warning("Cache clear was cancelled before it ran")
        return
    exc = future.exception()
    if exc is not None:
        logger.error("Cache clear failed: %s", exc, exc_info=exc)


@router.get("", response_model=HoldingsResponse)
async def get_holdings(
    orchestrator: DataOrchestrator = Depends(get_orchestrator),
    context: AppContext = Depends(get_app_context),
) -> HoldingsResponse:
    """
    Return holdings from the freshest available source.

    Valid cache is served without a network call; otherwise the network is
    tried and, if it fails, whatever the cache still holds.
    """
    result = await orchestrator.fetch()
    return _to_response(result, context)


@router.post("/refresh", response_model=HoldingsResponse)
async def refresh_holdings(
    orchestrator: DataOrchestrator = Depends(get_orchestrator),
    context: AppContext = Depends(get_app_context),
) -> HoldingsResponse:
    """Fetch from the network regardless of cache validity."""
    result = await orchestrator.force_refresh()
    return _to_response(result, context)


@router.delete("/cache", status_code=status.HTTP_202_ACCEPTED)
async def clear_holdings_cache(
    orchestrator: DataOrchestrator = Depends(get_orchestrator),
) -> dict[str, str]:
    """Queue removal of the cached snapshot."""
    orchestrator.clear_cache().add_done_callback(_log_clear_outcome)
    return {"status": "accepted"}
