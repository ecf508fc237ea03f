"""Dependency injection for FastAPI."""

from fastapi import Depends, Request

from holdings.app_context import AppContext
from holdings.services import DataOrchestrator


def get_app_context(request: Request) -> AppContext:
    """Provide the AppContext attached to the running application."""
    return request.app.state.context


def get_orchestrator(context: AppContext = Depends(get_app_context)) -> DataOrchestrator:
    """Provide the DataOrchestrator instance."""
    return context.orchestrator
