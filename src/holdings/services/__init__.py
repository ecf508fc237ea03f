"""Service layer - orchestration and presentation state."""

from holdings.services.serial_queue import SerialTaskQueue
from holdings.services.data_orchestrator import DataOrchestrator
from holdings.services.portfolio_view_model import (
    PortfolioViewModel,
    PortfolioViewListener,
    describe_source,
)

__all__ = [
    "SerialTaskQueue",
    "DataOrchestrator",
    "PortfolioViewModel",
    "PortfolioViewListener",
    "describe_source",
]
