"""
Query Playground
================

Entry point that wires validation, execution, classification and auditing
into a single call.
"""

import asyncio
from datetime import datetime, timezone
from typing import Callable

import structlog

from sql_playground.audit.clickhouse import ClickHouseAuditStore
from sql_playground.audit.jsonl import JsonlAuditStore
from sql_playground.audit.recorder import AuditRecorder
from sql_playground.audit.store import AuditStore, InMemoryAuditStore
from sql_playground.config import PlaygroundSettings
from sql_playground.execution.classifier import classify
from sql_playground.execution.gateway import ExecutionGateway
from sql_playground.models import (
    ActorContext,
    ClassifiedError,
    ExecutionSuccess,
    QueryAttempt,
    QueryLimits,
)
from sql_playground.validation.validator import SafetyValidator

logger = structlog.get_logger(__name__)

VALIDATION_REJECTED = "validation_rejected"
CANCELLED_MESSAGE = "Query cancelled before completion"


def build_audit_store(settings: PlaygroundSettings) -> AuditStore:
    """Create the audit store selected by ``settings.audit_store``."""
    if settings.audit_store == "memory":
        return InMemoryAuditStore()
    if settings.audit_store == "jsonl":
        return JsonlAuditStore(settings.audit_jsonl_path)
    return ClickHouseAuditStore(settings)


class QueryPlayground:
    """
    Orchestrates one ad-hoc query attempt.

    The flow:
    1. Validate the raw text (rejections never reach the database)
    2. Execute the sanitized text under the requested limits
    3. Classify failures and timeouts
    4. Hand the attempt to the audit recorder without waiting for it
    """

    def __init__(
        self,
        validator: SafetyValidator,
        gateway: ExecutionGateway,
        recorder: AuditRecorder,
        default_limits: QueryLimits | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        """
        Initialize the playground.

        Args:
            validator: Admission gate for raw query text
            gateway: ClickHouse execution gateway
            recorder: Audit trail writer
            default_limits: Limits used when a call does not pass its own
            clock: Source of ``executed_at`` timestamps
        """
        self.validator = validator
        self.gateway = gateway
        self.recorder = recorder
        self.default_limits = default_limits or QueryLimits()
        self.clock = clock or (lambda: datetime.now(timezone.utc))

    @classmethod
    def from_settings(cls, settings: PlaygroundSettings) -> "QueryPlayground":
        """Build a playground with every collaborator configured from settings."""
        return cls(
            validator=SafetyValidator(max_query_bytes=settings.max_query_bytes),
            gateway=ExecutionGateway(settings),
            recorder=AuditRecorder(
                build_audit_store(settings),
                timeout_seconds=settings.audit_timeout_seconds,
            ),
            default_limits=settings.default_limits,
        )

    async def validate_and_execute(
        self,
        raw_text: str,
        actor: ActorContext,
        limits: QueryLimits | None = None,
    ) -> QueryAttempt:
        """
        Main entry point: validate, run and audit one query.

        Args:
            raw_text: Query exactly as the user typed it
            actor: Identity and request metadata for audit attribution
            limits: Row ceiling and timeout (defaults to the configured limits)

        Returns:
            QueryAttempt with the validation outcome, the execution outcome
            (None when rejected) and the classified error, if any
        """
        limits = limits or self.default_limits
        executed_at = self.clock()
        log = logger.bind(user_id=actor.user_id, session_id=actor.session_id)

        validation = self.validator.validate(raw_text)

        if not validation.is_accepted:
            attempt = QueryAttempt(
                query_text=raw_text,
                validation=validation,
                actor=actor,
                limits=limits,
                executed_at=executed_at,
                error=ClassifiedError(
                    message=validation.rejection_reason,
                    category=VALIDATION_REJECTED,
                ),
            )
            log.info("query_rejected", rule=validation.rule)
            self.recorder.submit(attempt)
            return attempt

        try:
            outcome = await self.gateway.execute(
                validation.sanitized_text,
                limits,
                attribution=actor.user_email,
            )
        except asyncio.CancelledError:
            log.warning("query_cancelled")
            self.recorder.submit(
                QueryAttempt(
                    query_text=raw_text,
                    validation=validation,
                    actor=actor,
                    limits=limits,
                    executed_at=executed_at,
                    error=ClassifiedError(message=CANCELLED_MESSAGE),
                    cancelled=True,
                )
            )
            raise

        error = None
        if not isinstance(outcome, ExecutionSuccess):
            error = classify(outcome.raw_message)

        attempt = QueryAttempt(
            query_text=raw_text,
            validation=validation,
            actor=actor,
            limits=limits,
            executed_at=executed_at,
            outcome=outcome,
            error=error,
        )
        log.info(
            "query_attempt_completed",
            status=attempt.status.value,
            error_code=error.code if error else None,
        )
        self.recorder.submit(attempt)
        return attempt

    async def aclose(self) -> None:
        """Flush pending audit writes and close HTTP clients."""
        await self.recorder.aclose()
        await self.gateway.aclose()
