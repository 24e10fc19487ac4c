"""
Pytest Fixtures
===============

Shared fixtures for SQL playground gateway tests.
"""

from datetime import datetime, timezone
from typing import Any, Callable

import httpx
import pytest

from sql_playground.audit.recorder import AuditRecorder
from sql_playground.audit.store import InMemoryAuditStore
from sql_playground.config import PlaygroundSettings
from sql_playground.execution.gateway import ExecutionGateway
from sql_playground.models import ActorContext, AuditStatus, QueryLimits
from sql_playground.playground import QueryPlayground
from sql_playground.validation.validator import SafetyValidator

FIXED_NOW = datetime(2024, 5, 1, 12, 30, 0, tzinfo=timezone.utc)


def compact_payload(
    columns: list[tuple[str, str]],
    rows: list[list[Any]],
    statistics: dict | None = None,
) -> dict:
    """Build a ClickHouse JSONCompact response body."""
    payload: dict[str, Any] = {
        "meta": [{"name": name, "type": type_} for name, type_ in columns],
        "data": rows,
        "rows": len(rows),
    }
    if statistics is not None:
        payload["statistics"] = statistics
    return payload


class FakeClickHouse:
    """
    Stand-in for the ClickHouse HTTP interface.

    Records every request and answers with the configured handler, which may
    return an httpx.Response, raise an httpx exception, or be a coroutine.
    """

    def __init__(self, handler: Callable | None = None) -> None:
        self.requests: list[httpx.Request] = []
        self.handler = handler or self.ok_handler(
            compact_payload(
                [("1", "UInt8")],
                [[1]],
                {"elapsed": 0.0012, "rows_read": 1, "bytes_read": 1},
            )
        )

    @staticmethod
    def ok_handler(payload: dict) -> Callable:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json=payload)

        return handler

    @staticmethod
    def error_handler(body: str, status_code: int = 500) -> Callable:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(status_code, text=body)

        return handler

    def _dispatch(self, request: httpx.Request):
        self.requests.append(request)
        return self.handler(request)

    @property
    def calls(self) -> int:
        return len(self.requests)

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self._dispatch))


@pytest.fixture
def settings() -> PlaygroundSettings:
    """Settings with an in-memory audit store and default limits."""
    return PlaygroundSettings(
        clickhouse_url="http://clickhouse.test:8123",
        clickhouse_database="analytics",
        audit_store="memory",
    )


@pytest.fixture
def validator() -> SafetyValidator:
    return SafetyValidator()


@pytest.fixture
def clickhouse() -> FakeClickHouse:
    return FakeClickHouse()


@pytest.fixture
def gateway(settings: PlaygroundSettings, clickhouse: FakeClickHouse) -> ExecutionGateway:
    return ExecutionGateway(settings, client=clickhouse.client())


@pytest.fixture
def audit_store() -> InMemoryAuditStore:
    return InMemoryAuditStore()


@pytest.fixture
def recorder(audit_store: InMemoryAuditStore) -> AuditRecorder:
    return AuditRecorder(audit_store, timeout_seconds=1.0, clock=lambda: FIXED_NOW)


@pytest.fixture
def limits() -> QueryLimits:
    return QueryLimits(max_rows=10_000, timeout_seconds=120)


@pytest.fixture
def actor() -> ActorContext:
    return ActorContext(
        user_id="u-42",
        user_email="analyst@example.com",
        user_name="Ana Lyst",
        client_ip="10.0.0.7",
        user_agent="pytest-agent/1.0",
        session_id="sess-1",
    )


@pytest.fixture
def playground(
    validator: SafetyValidator,
    gateway: ExecutionGateway,
    recorder: AuditRecorder,
    limits: QueryLimits,
) -> QueryPlayground:
    return QueryPlayground(
        validator=validator,
        gateway=gateway,
        recorder=recorder,
        default_limits=limits,
        clock=lambda: FIXED_NOW,
    )


def request_body(request: httpx.Request) -> str:
    return request.content.decode("utf-8")


def assert_single_record(store: InMemoryAuditStore, status: AuditStatus):
    """Helper assertion: exactly one audit record with the given status."""
    assert len(store.records) == 1, f"Expected one audit record, got {len(store.records)}"
    record = store.records[0]
    assert record.status == status, f"Expected {status}, got {record.status}"
    return record
