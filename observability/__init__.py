"""
Observability Module
====================

Metrics, tracing, and structured logging for the playground gateway.
"""

from observability.metrics import metrics_endpoint, setup_metrics, track_query_metrics
from observability.tracing import setup_tracing
from observability.logging_config import bind_context, get_logger, setup_logging

__all__ = [
    "metrics_endpoint",
    "setup_metrics",
    "track_query_metrics",
    "setup_tracing",
    "bind_context",
    "get_logger",
    "setup_logging",
]
