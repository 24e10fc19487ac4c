"""
Data Models
===========

Core data structures for the SQL playground gateway.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Optional, Union


class CheckStatus(Enum):
    """Status of a single validation check."""

    PASSED = "passed"
    FAILED = "failed"


class AuditStatus(str, Enum):
    """Outcome recorded in the audit trail for one execution attempt."""

    SUCCESS = "success"
    FAILURE = "failure"
    TIMEOUT = "timeout"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class CheckResult:
    """Result of a single validation check."""

    check_name: str
    status: CheckStatus
    message: str
    details: dict = field(default_factory=dict)


@dataclass(frozen=True)
class ValidationOutcome:
    """
    Verdict of the safety validator.

    Exactly one of ``rejection_reason`` / ``sanitized_text`` is set.
    """

    is_accepted: bool
    rejection_reason: Optional[str] = None
    sanitized_text: Optional[str] = None
    rule: Optional[str] = None
    checks: tuple[CheckResult, ...] = ()

    def __post_init__(self) -> None:
        if self.is_accepted and (self.sanitized_text is None or self.rejection_reason is not None):
            raise ValueError("Accepted outcome requires sanitized_text and no rejection_reason")
        if not self.is_accepted and (self.rejection_reason is None or self.sanitized_text is not None):
            raise ValueError("Rejected outcome requires rejection_reason and no sanitized_text")

    @classmethod
    def accepted(cls, sanitized_text: str, checks: tuple[CheckResult, ...] = ()) -> "ValidationOutcome":
        return cls(is_accepted=True, sanitized_text=sanitized_text, checks=checks)

    @classmethod
    def rejected(
        cls, reason: str, rule: str, checks: tuple[CheckResult, ...] = ()
    ) -> "ValidationOutcome":
        return cls(is_accepted=False, rejection_reason=reason, rule=rule, checks=checks)


@dataclass(frozen=True)
class ColumnInfo:
    """Column metadata reported by the database."""

    name: str
    type: str


@dataclass(frozen=True)
class ExecutionStatistics:
    """Server-side counters for a completed execution."""

    elapsed_seconds: float
    rows_read: int = 0
    bytes_read: int = 0


@dataclass(frozen=True)
class QueryResult:
    """Tabular result of a successful execution."""

    columns: tuple[ColumnInfo, ...]
    rows: tuple[dict[str, Any], ...]
    row_count: int
    statistics: Optional[ExecutionStatistics] = None


@dataclass(frozen=True)
class ExecutionSuccess:
    result: QueryResult


@dataclass(frozen=True)
class ExecutionFailure:
    raw_message: str


@dataclass(frozen=True)
class ExecutionTimeout:
    raw_message: str


ExecutionOutcome = Union[ExecutionSuccess, ExecutionFailure, ExecutionTimeout]


@dataclass(frozen=True)
class ClassifiedError:
    """Structured view of a raw database error message."""

    message: str
    code: Optional[int] = None
    category: Optional[str] = None


@dataclass(frozen=True)
class ActorContext:
    """Identity and request metadata used only for audit attribution."""

    user_id: str
    user_email: str
    user_name: str
    client_ip: Optional[str] = None
    user_agent: Optional[str] = None
    session_id: Optional[str] = None


@dataclass(frozen=True)
class QueryLimits:
    """Resource bounds declared to the database for one execution."""

    max_rows: int = 10_000
    timeout_seconds: int = 120

    def __post_init__(self) -> None:
        if self.max_rows <= 0:
            raise ValueError("max_rows must be positive")
        if self.timeout_seconds <= 0:
            raise ValueError("timeout_seconds must be positive")


@dataclass(frozen=True)
class QueryAttempt:
    """Everything that happened during one validate-and-execute call."""

    query_text: str
    validation: ValidationOutcome
    actor: ActorContext
    limits: QueryLimits
    executed_at: datetime
    outcome: Optional[ExecutionOutcome] = None
    error: Optional[ClassifiedError] = None
    cancelled: bool = False

    @property
    def status(self) -> AuditStatus:
        if self.cancelled:
            return AuditStatus.CANCELLED
        if isinstance(self.outcome, ExecutionSuccess):
            return AuditStatus.SUCCESS
        if isinstance(self.outcome, ExecutionTimeout):
            return AuditStatus.TIMEOUT
        return AuditStatus.FAILURE

    @property
    def result(self) -> Optional[QueryResult]:
        if isinstance(self.outcome, ExecutionSuccess):
            return self.outcome.result
        return None


@dataclass(frozen=True)
class AuditRecord:
    """Immutable audit trail entry; one per execution attempt."""

    user_id: str
    user_email: str
    user_name: str
    original_query_text: str
    sanitized_query_text: str
    query_fingerprint: str
    status: AuditStatus
    max_rows_limit: int
    timeout_seconds: int
    executed_at: datetime
    recorded_at: datetime
    error_message: Optional[str] = None
    error_code: Optional[int] = None
    error_category: Optional[str] = None
    rows_returned: Optional[int] = None
    column_count: Optional[int] = None
    estimated_result_size_bytes: Optional[int] = None
    elapsed_seconds: Optional[float] = None
    rows_read: Optional[int] = None
    bytes_read: Optional[int] = None
    client_ip: Optional[str] = None
    user_agent: Optional[str] = None
    session_id: Optional[str] = None
