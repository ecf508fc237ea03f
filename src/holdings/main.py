"""FastAPI application entry point."""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from holdings.app_context import AppContext
from holdings.config.logging_config import setup_logging
from holdings.api.routers import holdings_router
from holdings.core.exceptions import AppError, OrchestrationError


def create_app(context: Optional[AppContext] = None) -> FastAPI:
    """Build the application around an AppContext (a fresh one by default)."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan handler."""
        # Startup
        setup_logging(app.state.context.settings)
        yield
        # Shutdown
        await app.state.context.aclose()

    context = context or AppContext()
    settings = context.settings

    app = FastAPI(
        title=settings.app_name,
        description="Cache-aware access to portfolio holdings",
        version=settings.app_version,
        lifespan=lifespan,
    )
    app.state.context = context

    app.include_router(holdings_router)

    @app.exception_handler(OrchestrationError)
    async def orchestration_error_handler(request: Request, exc: OrchestrationError) -> JSONResponse:
        """No source yielded data; the client should offer a retry."""
        return JSONResponse(
            status_code=503,
            content={"error": exc.code, "message": exc.message},
        )

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
        """Global handler for application errors."""
        return JSONResponse(
            status_code=400,
            content={"error": exc.code, "message": exc.message},
        )

    @app.get("/health")
    def health_check() -> dict[str, str]:
        """Health check endpoint."""
        return {"status": "healthy"}

    @app.get("/")
    def root() -> dict[str, str]:
        """Root endpoint with API info."""
        return {
            "app": settings.app_name,
            "version": settings.app_version,
            "docs": "/docs",
        }

    return app


app = create_app()
