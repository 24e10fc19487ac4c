"""
Execution Module
================

ClickHouse execution gateway and error classification.
"""

from sql_playground.execution.classifier import classify
from sql_playground.execution.gateway import (
    ExecutionGateway,
    is_timeout_message,
    parse_compact_payload,
)

__all__ = [
    "ExecutionGateway",
    "classify",
    "is_timeout_message",
    "parse_compact_payload",
]
