"""
SQL Playground Gateway
======================

Safety gateway and execution audit pipeline for ad-hoc analytical SQL.
"""

from sql_playground.models import (
    ActorContext,
    AuditRecord,
    AuditStatus,
    CheckResult,
    CheckStatus,
    ClassifiedError,
    ColumnInfo,
    ExecutionFailure,
    ExecutionOutcome,
    ExecutionStatistics,
    ExecutionSuccess,
    ExecutionTimeout,
    QueryAttempt,
    QueryLimits,
    QueryResult,
    ValidationOutcome,
)
from sql_playground.config import PlaygroundSettings, get_settings
from sql_playground.normalizer import matching_text, normalize, sanitize, strip_comments
from sql_playground.validation import SafetyValidator
from sql_playground.execution import ExecutionGateway, classify
from sql_playground.audit import (
    AuditRecorder,
    AuditStore,
    ClickHouseAuditStore,
    InMemoryAuditStore,
    JsonlAuditStore,
    query_fingerprint,
)
from sql_playground.playground import QueryPlayground
from sql_playground.examples import ExampleQuery, get_example_queries

__version__ = "0.1.0"

__all__ = [
    # Models
    "ActorContext",
    "AuditRecord",
    "AuditStatus",
    "CheckResult",
    "CheckStatus",
    "ClassifiedError",
    "ColumnInfo",
    "ExecutionFailure",
    "ExecutionOutcome",
    "ExecutionStatistics",
    "ExecutionSuccess",
    "ExecutionTimeout",
    "QueryAttempt",
    "QueryLimits",
    "QueryResult",
    "ValidationOutcome",
    # Configuration
    "PlaygroundSettings",
    "get_settings",
    # Normalization and validation
    "matching_text",
    "normalize",
    "sanitize",
    "strip_comments",
    "SafetyValidator",
    # Execution
    "ExecutionGateway",
    "classify",
    # Audit
    "AuditRecorder",
    "AuditStore",
    "ClickHouseAuditStore",
    "InMemoryAuditStore",
    "JsonlAuditStore",
    "query_fingerprint",
    # Entry point
    "QueryPlayground",
    "ExampleQuery",
    "get_example_queries",
]
