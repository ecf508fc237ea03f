"""API routers package."""

from holdings.api.routers.holdings import router as holdings_router

__all__ = [
    "holdings_router",
]
