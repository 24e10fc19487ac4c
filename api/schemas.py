"""
API Schemas
===========

Pydantic models for API request/response validation.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class QueryRequest(BaseModel):
    """Request body for ad-hoc query execution."""

    query: str = Field(
        ...,
        description="SQL to validate and execute; only a single SELECT is accepted",
        examples=["SELECT event_name, count(*) FROM app_events GROUP BY event_name"],
    )
    max_rows: int | None = Field(
        default=None,
        ge=1,
        description="Row ceiling for this query (clamped to the configured limit)",
    )
    timeout_seconds: int | None = Field(
        default=None,
        ge=1,
        description="Execution timeout for this query (clamped to the configured limit)",
    )


class ValidateRequest(BaseModel):
    """Request body for validation without execution."""

    query: str = Field(..., description="SQL to check")


class QueryStatusEnum(str, Enum):
    """Audit status of a query attempt."""

    SUCCESS = "success"
    FAILURE = "failure"
    TIMEOUT = "timeout"
    CANCELLED = "cancelled"


class ColumnResponse(BaseModel):
    name: str
    type: str


class StatisticsResponse(BaseModel):
    elapsed_seconds: float
    rows_read: int
    bytes_read: int


class ErrorDetail(BaseModel):
    """Classified database error."""

    code: int | None = Field(None, description="Numeric ClickHouse error code, when present")
    category: str | None = Field(None, description="Exception category, when present")
    message: str = Field(..., description="Full raw error text")


class QueryResponse(BaseModel):
    """Response body for an executed query."""

    status: QueryStatusEnum = Field(..., description="Outcome of the attempt")
    sanitized_query: str = Field(..., description="The SQL that was sent to the database")
    columns: list[ColumnResponse] = Field(default_factory=list)
    rows: list[dict[str, Any]] = Field(default_factory=list)
    row_count: int = Field(0, description="Rows returned by the database")
    statistics: StatisticsResponse | None = None
    error: ErrorDetail | None = Field(None, description="Classified error on failure or timeout")
    max_rows: int = Field(..., description="Row ceiling applied to this query")
    timeout_seconds: int = Field(..., description="Timeout applied to this query")
    request_id: str = Field(..., description="Unique request identifier")
    processing_time_ms: float = Field(..., description="Processing time in milliseconds")


class CheckResponse(BaseModel):
    """Single validation check result."""

    check_name: str
    status: str
    message: str
    details: dict[str, Any] = Field(default_factory=dict)


class ValidationResponse(BaseModel):
    """Response body for validation-only requests."""

    accepted: bool
    sanitized_query: str | None = None
    reason: str | None = None
    rule: str | None = None
    checks: list[CheckResponse] = Field(default_factory=list)


class ExampleQueryResponse(BaseModel):
    name: str
    description: str
    query: str


class HealthStatus(str, Enum):
    """Health check status values."""

    HEALTHY = "healthy"
    DEGRADED = "degraded"
    UNHEALTHY = "unhealthy"


class HealthResponse(BaseModel):
    """Health check response."""

    status: HealthStatus = Field(..., description="Overall health status")
    version: str = Field(..., description="API version")
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    checks: dict[str, bool] = Field(
        default_factory=dict,
        description="Individual component health checks",
    )


class ReadinessResponse(BaseModel):
    """Readiness check response."""

    ready: bool = Field(..., description="Whether the service is ready to handle requests")
    checks: dict[str, bool] = Field(
        default_factory=dict,
        description="Individual readiness checks",
    )


class ErrorResponse(BaseModel):
    """Standard error response."""

    error: str = Field(..., description="Error type")
    message: str = Field(..., description="Error message")
    request_id: str | None = Field(None, description="Request ID if available")
    details: dict[str, Any] | None = Field(None, description="Additional error details")
