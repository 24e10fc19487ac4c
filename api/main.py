"""
FastAPI Application
===================

Main FastAPI application for the SQL playground gateway.
"""

import os
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from api import __version__
from api.middleware.telemetry import TelemetryMiddleware
from api.routes.health import router as health_router
from api.routes.query import router as query_router
from api.schemas import ErrorResponse
from observability.logging_config import get_logger, setup_logging
from observability.metrics import metrics_endpoint, setup_metrics
from observability.tracing import setup_tracing
from sql_playground.config import PlaygroundSettings, get_settings
from sql_playground.playground import QueryPlayground


def create_app(
    settings: PlaygroundSettings | None = None,
    playground: QueryPlayground | None = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: Configuration (default: loaded from the environment)
        playground: Pre-built playground (default: built from settings at startup)
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator:
        """Application lifespan handler."""
        setup_logging()
        logger = get_logger(__name__)
        logger.info(
            "starting_sql_playground_api",
            version=__version__,
            clickhouse_url=settings.clickhouse_url,
            audit_store=settings.audit_store,
        )

        app.state.settings = settings
        app.state.playground = playground or QueryPlayground.from_settings(settings)

        yield

        logger.info("shutting_down_sql_playground_api")
        await app.state.playground.aclose()

    app = FastAPI(
        title="SQL Playground Gateway",
        description=(
            "Safety gateway and execution audit pipeline for ad-hoc "
            "analytical SQL. Only single read-only SELECT statements are executed."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    app.add_middleware(TelemetryMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(health_router)
    app.include_router(query_router)

    setup_metrics(app, version=__version__, environment=os.getenv("ENVIRONMENT", "development"))
    app.add_route("/metrics", metrics_endpoint)
    setup_tracing(app, version=__version__)

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Handle uncaught exceptions."""
        get_logger(__name__).error("unhandled_exception", exc_info=exc)
        request_id = getattr(request.state, "request_id", None)
        return JSONResponse(
            status_code=500,
            content=ErrorResponse(
                error="InternalServerError",
                message="An unexpected error occurred",
                request_id=request_id,
            ).model_dump(),
        )

    return app


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "api.main:create_app",
        factory=True,
        host="0.0.0.0",
        port=8000,
        reload=True,
    )
