"""
Prometheus Metrics
==================

Application metrics for monitoring and alerting.
"""

import time
from typing import Callable

from fastapi import FastAPI, Request, Response
from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Gauge,
    Histogram,
    Info,
    generate_latest,
    multiprocess,
)

QUERY_PATH = "/api/v1/query"

# Custom registry for this application
REGISTRY = CollectorRegistry()

APP_INFO = Info(
    "sql_playground",
    "SQL playground gateway information",
    registry=REGISTRY,
)

# Query metrics
QUERIES_TOTAL = Counter(
    "sql_playground_queries_total",
    "Total number of query attempts by audit status",
    ["status"],  # success, failure, timeout, cancelled
    registry=REGISTRY,
)

QUERY_DURATION = Histogram(
    "sql_playground_query_duration_seconds",
    "End-to-end query attempt duration in seconds",
    buckets=[0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0, 60.0, 120.0],
    registry=REGISTRY,
)

VALIDATION_REJECTIONS = Counter(
    "sql_playground_validation_rejections_total",
    "Queries rejected by the safety validator, by check",
    ["check"],
    registry=REGISTRY,
)

# HTTP metrics
HTTP_REQUESTS_TOTAL = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status"],
    registry=REGISTRY,
)

HTTP_REQUEST_DURATION = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "endpoint"],
    buckets=[0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0],
    registry=REGISTRY,
)

ACTIVE_QUERIES = Gauge(
    "sql_playground_active_queries",
    "Number of queries currently being processed",
    registry=REGISTRY,
)


def setup_metrics(app: FastAPI, version: str = "0.1.0", environment: str = "development") -> None:
    """
    Set up Prometheus metrics for the FastAPI application.

    Args:
        app: FastAPI application instance
        version: Application version reported in the info metric
        environment: Deployment environment reported in the info metric
    """
    APP_INFO.info({
        "version": version,
        "environment": environment,
    })

    @app.middleware("http")
    async def metrics_middleware(request: Request, call_next: Callable) -> Response:
        """Middleware to track HTTP metrics."""
        start_time = time.perf_counter()

        is_query_endpoint = request.url.path == QUERY_PATH
        if is_query_endpoint:
            ACTIVE_QUERIES.inc()

        try:
            response = await call_next(request)
            duration = time.perf_counter() - start_time

            HTTP_REQUESTS_TOTAL.labels(
                method=request.method,
                endpoint=request.url.path,
                status=response.status_code,
            ).inc()

            HTTP_REQUEST_DURATION.labels(
                method=request.method,
                endpoint=request.url.path,
            ).observe(duration)

            return response
        finally:
            if is_query_endpoint:
                ACTIVE_QUERIES.dec()


def track_query_metrics(
    status: str,
    duration_seconds: float,
    rejected_by: str | None = None,
) -> None:
    """
    Track metrics for a completed query attempt.

    Args:
        status: Audit status of the attempt
        duration_seconds: Total processing time
        rejected_by: Name of the validation check that rejected the query
    """
    QUERIES_TOTAL.labels(status=status).inc()
    QUERY_DURATION.observe(duration_seconds)

    if rejected_by:
        VALIDATION_REJECTIONS.labels(check=rejected_by).inc()


async def metrics_endpoint(request: Request) -> Response:
    """
    Prometheus metrics endpoint.

    Returns metrics in Prometheus text format.
    """
    # Multiprocess mode when running under gunicorn
    try:
        registry = CollectorRegistry()
        multiprocess.MultiProcessCollector(registry)
        metrics = generate_latest(registry)
    except ValueError:
        metrics = generate_latest(REGISTRY)

    return Response(
        content=metrics,
        media_type=CONTENT_TYPE_LATEST,
    )
