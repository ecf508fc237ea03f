"""Pydantic schemas for API request/response models."""

from holdings.api.schemas.holdings import (
    HoldingItem,
    PortfolioTotalsSchema,
    HoldingsResponse,
)

__all__ = [
    "HoldingItem",
    "PortfolioTotalsSchema",
    "HoldingsResponse",
]
