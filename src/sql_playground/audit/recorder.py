"""
Audit Recorder
==============

Builds one immutable audit record per execution attempt and persists it in a
detached task. Persistence is best-effort and at-most-once: a failing or slow
audit store is logged locally and never reaches the user's query workflow.
"""

import asyncio
import json
from datetime import datetime, timezone
from typing import Callable

import structlog

from sql_playground.audit.fingerprint import query_fingerprint
from sql_playground.audit.store import AuditStore
from sql_playground.models import AuditRecord, QueryAttempt, QueryResult

logger = structlog.get_logger(__name__)

DEFAULT_AUDIT_TIMEOUT_SECONDS = 5.0


def estimate_result_size(result: QueryResult) -> int:
    """Rough result size: bytes of the rows serialized as JSON."""
    try:
        return len(json.dumps(list(result.rows), default=str).encode("utf-8"))
    except (TypeError, ValueError):
        return 0


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AuditRecorder:
    """
    Fire-and-forget audit trail writer.

    ``submit`` schedules ``record`` as a background task and returns at once;
    the task keeps a strong reference in ``_pending`` until it finishes so it
    is not garbage collected mid-flight.
    """

    def __init__(
        self,
        store: AuditStore,
        timeout_seconds: float = DEFAULT_AUDIT_TIMEOUT_SECONDS,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        """
        Initialize the recorder.

        Args:
            store: Persistence collaborator receiving finished records
            timeout_seconds: Bound on a single insert, independent of query timeouts
            clock: Source of ``recorded_at`` timestamps
        """
        self.store = store
        self.timeout_seconds = timeout_seconds
        self.clock = clock
        self._pending: set[asyncio.Task] = set()

    @property
    def pending(self) -> int:
        return len(self._pending)

    def build_record(self, attempt: QueryAttempt) -> AuditRecord:
        """Assemble the audit record; metrics unavailable on this path stay None."""
        actor = attempt.actor
        error = attempt.error
        result = attempt.result
        stats = result.statistics if result else None

        return AuditRecord(
            user_id=actor.user_id,
            user_email=actor.user_email,
            user_name=actor.user_name,
            original_query_text=attempt.query_text,
            sanitized_query_text=attempt.validation.sanitized_text or attempt.query_text,
            query_fingerprint=query_fingerprint(attempt.query_text),
            status=attempt.status,
            error_message=error.message if error else None,
            error_code=error.code if error else None,
            error_category=error.category if error else None,
            rows_returned=result.row_count if result else None,
            column_count=len(result.columns) if result else None,
            estimated_result_size_bytes=estimate_result_size(result) if result else None,
            elapsed_seconds=stats.elapsed_seconds if stats else None,
            rows_read=stats.rows_read if stats else None,
            bytes_read=stats.bytes_read if stats else None,
            max_rows_limit=attempt.limits.max_rows,
            timeout_seconds=attempt.limits.timeout_seconds,
            client_ip=actor.client_ip,
            user_agent=actor.user_agent,
            session_id=actor.session_id,
            executed_at=attempt.executed_at,
            recorded_at=self.clock(),
        )

    async def record(self, attempt: QueryAttempt) -> None:
        """
        Build and persist the record for one attempt.

        Never raises on build or persistence failure; the error is logged and
        the record is dropped.
        """
        log = logger.bind(user_id=attempt.actor.user_id, status=attempt.status.value)
        try:
            record = self.build_record(attempt)
            await asyncio.wait_for(self.store.insert(record), timeout=self.timeout_seconds)
        except asyncio.TimeoutError:
            log.warning("audit_write_timed_out", timeout_seconds=self.timeout_seconds)
        except Exception:
            log.warning("audit_write_failed", exc_info=True)
        else:
            log.debug("audit_record_written", query_fingerprint=record.query_fingerprint)

    def submit(self, attempt: QueryAttempt) -> asyncio.Task:
        """Schedule ``record`` without waiting for it. Must be called on a running loop."""
        task = asyncio.get_running_loop().create_task(self.record(attempt))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    async def drain(self) -> None:
        """Wait for every outstanding audit write to finish."""
        if self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    async def aclose(self) -> None:
        await self.drain()
        await self.store.aclose()
