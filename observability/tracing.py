"""
OpenTelemetry Tracing
=====================

Distributed tracing for request flow visualization.
"""

import os
from typing import Optional

import structlog
from fastapi import FastAPI
from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.sdk.resources import SERVICE_NAME, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor

logger = structlog.get_logger(__name__)


def setup_tracing(
    app: FastAPI,
    service_name: str = "sql-playground-gateway",
    otlp_endpoint: Optional[str] = None,
    version: str = "0.1.0",
) -> None:
    """
    Set up OpenTelemetry tracing for the application.

    Spans are exported only when an OTLP endpoint is configured; otherwise the
    provider still records spans for in-process consumers.

    Args:
        app: FastAPI application instance
        service_name: Name of the service for traces
        otlp_endpoint: OTLP collector endpoint (default: OTEL_EXPORTER_OTLP_ENDPOINT env)
        version: Service version attached to the resource
    """
    endpoint = otlp_endpoint or os.getenv("OTEL_EXPORTER_OTLP_ENDPOINT", "disabled")

    resource = Resource.create({
        SERVICE_NAME: service_name,
        "service.version": version,
        "deployment.environment": os.getenv("ENVIRONMENT", "development"),
    })

    provider = TracerProvider(resource=resource)

    if endpoint and endpoint != "disabled":
        try:
            otlp_exporter = OTLPSpanExporter(endpoint=endpoint, insecure=True)
            provider.add_span_processor(BatchSpanProcessor(otlp_exporter))
        except Exception:
            logger.warning("otlp_exporter_setup_failed", endpoint=endpoint, exc_info=True)

    trace.set_tracer_provider(provider)

    FastAPIInstrumentor.instrument_app(app)

