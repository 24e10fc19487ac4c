"""
Execution Gateway
=================

Runs validated SQL against the ClickHouse HTTP interface under the declared
timeout and row ceiling, and reports what happened as a typed outcome.
"""

import time
from typing import Any

import httpx
import structlog
from opentelemetry import trace

from sql_playground.config import PlaygroundSettings
from sql_playground.models import (
    ColumnInfo,
    ExecutionFailure,
    ExecutionOutcome,
    ExecutionStatistics,
    ExecutionSuccess,
    ExecutionTimeout,
    QueryLimits,
    QueryResult,
)

logger = structlog.get_logger(__name__)
tracer = trace.get_tracer(__name__)

FAILURE_PREFIX = "ClickHouse query failed: "
_TIMEOUT_MARKERS = ("timeout", "max_execution_time")


def is_timeout_message(message: str) -> bool:
    """Textual timeout heuristic; there is no distinct wire signal."""
    lowered = message.lower()
    return any(marker in lowered for marker in _TIMEOUT_MARKERS)


def failure_outcome(message: str) -> ExecutionOutcome:
    raw = f"{FAILURE_PREFIX}{message}"
    if is_timeout_message(raw):
        return ExecutionTimeout(raw_message=raw)
    return ExecutionFailure(raw_message=raw)


def parse_compact_payload(payload: dict[str, Any]) -> QueryResult:
    """Map a ClickHouse JSONCompact body to a QueryResult."""
    columns = tuple(
        ColumnInfo(name=col["name"], type=col["type"]) for col in payload.get("meta") or []
    )
    names = [col.name for col in columns]
    rows = tuple(dict(zip(names, row)) for row in payload.get("data") or [])

    statistics = None
    stats = payload.get("statistics")
    if stats:
        statistics = ExecutionStatistics(
            elapsed_seconds=float(stats.get("elapsed", 0.0)),
            rows_read=int(stats.get("rows_read", 0)),
            bytes_read=int(stats.get("bytes_read", 0)),
        )

    return QueryResult(
        columns=columns,
        rows=rows,
        row_count=int(payload.get("rows", len(rows))),
        statistics=statistics,
    )


class ExecutionGateway:
    """
    Sends sanitized SQL to ClickHouse and returns an ExecutionOutcome.

    The gateway trusts its input: it never re-validates the text, and it never
    retries. Limits are declared to the server as query settings; no
    client-side truncation happens here.
    """

    def __init__(
        self,
        settings: PlaygroundSettings,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """
        Initialize the gateway.

        Args:
            settings: Connection details and overflow policy
            client: Optional pre-built HTTP client (tests inject a mock transport)
        """
        self.settings = settings
        self._owns_client = client is None
        self.client = client or httpx.AsyncClient()

    def build_params(self, limits: QueryLimits) -> dict[str, str]:
        return {
            "database": self.settings.clickhouse_database,
            "default_format": "JSONCompact",
            "max_execution_time": str(limits.timeout_seconds),
            "max_result_rows": str(limits.max_rows),
            "result_overflow_mode": self.settings.result_overflow_mode,
        }

    @staticmethod
    def build_body(sanitized_text: str, attribution: str | None = None) -> str:
        """Drop a single trailing semicolon and prepend the attribution comment."""
        body = sanitized_text.strip()
        if body.endswith(";"):
            body = body[:-1].rstrip()
        if attribution:
            # The comment must stay on one line or it would end up in the statement
            single_line = " ".join(attribution.split())
            body = f"-- Query executed by: {single_line}\n{body}"
        return body

    async def execute(
        self,
        sanitized_text: str,
        limits: QueryLimits,
        attribution: str | None = None,
    ) -> ExecutionOutcome:
        """
        Execute one query.

        Args:
            sanitized_text: Output of the safety validator
            limits: Row ceiling and timeout declared for this execution
            attribution: Actor email written as a leading SQL comment

        Returns:
            ExecutionSuccess, ExecutionFailure or ExecutionTimeout
        """
        start = time.perf_counter()
        with tracer.start_as_current_span("clickhouse.execute") as span:
            span.set_attribute("db.system", "clickhouse")
            span.set_attribute("playground.max_rows", limits.max_rows)
            span.set_attribute("playground.timeout_seconds", limits.timeout_seconds)

            outcome = await self._send(sanitized_text, limits, attribution)

            span.set_attribute("playground.outcome", type(outcome).__name__)

        duration_ms = round((time.perf_counter() - start) * 1000, 2)
        if isinstance(outcome, ExecutionSuccess):
            logger.info(
                "query_executed",
                row_count=outcome.result.row_count,
                duration_ms=duration_ms,
            )
        else:
            logger.warning(
                "query_execution_failed",
                outcome=type(outcome).__name__,
                duration_ms=duration_ms,
            )
        return outcome

    async def _send(
        self,
        sanitized_text: str,
        limits: QueryLimits,
        attribution: str | None,
    ) -> ExecutionOutcome:
        try:
            response = await self.client.post(
                self.settings.clickhouse_url.rstrip("/") + "/",
                params=self.build_params(limits),
                content=self.build_body(sanitized_text, attribution).encode("utf-8"),
                headers={"Content-Type": "text/plain; charset=utf-8"},
                auth=self.settings.clickhouse_auth,
                timeout=float(limits.timeout_seconds),
            )
        except httpx.TimeoutException as exc:
            return ExecutionTimeout(
                raw_message=(
                    f"{FAILURE_PREFIX}Query timeout after {limits.timeout_seconds}s"
                    f"{': ' + str(exc) if str(exc) else ''}"
                )
            )
        except httpx.HTTPError as exc:
            return failure_outcome(str(exc) or type(exc).__name__)

        if response.is_error:
            return failure_outcome(response.text or f"HTTP {response.status_code}")

        try:
            return ExecutionSuccess(result=parse_compact_payload(response.json()))
        except (ValueError, KeyError, TypeError, AttributeError):
            # ClickHouse appends exception text to a partially streamed body
            return failure_outcome(response.text)

    async def aclose(self) -> None:
        if self._owns_client:
            await self.client.aclose()
