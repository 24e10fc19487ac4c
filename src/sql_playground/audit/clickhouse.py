"""
ClickHouse Audit Store
======================

Appends audit records to a ClickHouse table with one INSERT per record.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable

import httpx

from sql_playground.config import PlaygroundSettings
from sql_playground.audit.store import AuditStore
from sql_playground.models import AuditRecord

NULL = "NULL"


def _elapsed_ms(record: AuditRecord) -> float | None:
    if record.elapsed_seconds is None:
        return None
    return round(record.elapsed_seconds * 1000, 3)


# Table column -> value taken from the record, in insert order
COLUMNS: list[tuple[str, Callable[[AuditRecord], Any]]] = [
    ("user_id", lambda r: r.user_id),
    ("user_email", lambda r: r.user_email),
    ("user_name", lambda r: r.user_name),
    ("query_text", lambda r: r.original_query_text),
    ("query_hash", lambda r: r.query_fingerprint),
    ("sanitized_query", lambda r: r.sanitized_query_text),
    ("status", lambda r: r.status),
    ("error_message", lambda r: r.error_message),
    ("error_code", lambda r: r.error_code),
    ("error_type", lambda r: r.error_category),
    ("rows_returned", lambda r: r.rows_returned),
    ("columns_count", lambda r: r.column_count),
    ("result_size_bytes", lambda r: r.estimated_result_size_bytes),
    ("execution_time_ms", _elapsed_ms),
    ("rows_read", lambda r: r.rows_read),
    ("bytes_read", lambda r: r.bytes_read),
    ("max_rows_limit", lambda r: r.max_rows_limit),
    ("timeout_seconds", lambda r: r.timeout_seconds),
    ("client_ip", lambda r: r.client_ip),
    ("user_agent", lambda r: r.user_agent),
    ("session_id", lambda r: r.session_id),
    ("executed_at", lambda r: r.executed_at),
    ("created_at", lambda r: r.recorded_at),
]

AUDIT_TABLE_DDL = """
CREATE TABLE IF NOT EXISTS {database}.{table} (
    user_id String,
    user_email String,
    user_name String,
    query_text String,
    query_hash String,
    sanitized_query String,
    status LowCardinality(String),
    error_message Nullable(String),
    error_code Nullable(Int32),
    error_type Nullable(String),
    rows_returned Nullable(UInt64),
    columns_count Nullable(UInt32),
    result_size_bytes Nullable(UInt64),
    execution_time_ms Nullable(Float64),
    rows_read Nullable(UInt64),
    bytes_read Nullable(UInt64),
    max_rows_limit UInt32,
    timeout_seconds UInt32,
    client_ip Nullable(String),
    user_agent Nullable(String),
    session_id Nullable(String),
    executed_at DateTime64(3, 'UTC'),
    created_at DateTime64(3, 'UTC')
)
ENGINE = MergeTree
ORDER BY (executed_at, user_id)
"""


def escape_string(value: str) -> str:
    """Escape a value for a single-quoted ClickHouse string literal."""
    return value.replace("\\", "\\\\").replace("'", "''")


def format_datetime(value: datetime) -> str:
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc)
    return value.strftime("%Y-%m-%d %H:%M:%S.%f")[:-3]


def render_value(value: Any) -> str:
    """Render a Python value as a ClickHouse literal; None becomes NULL."""
    if value is None:
        return NULL
    if isinstance(value, Enum):
        value = value.value
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, (int, float)):
        return repr(value)
    if isinstance(value, datetime):
        return f"'{format_datetime(value)}'"
    return f"'{escape_string(str(value))}'"


def build_insert(record: AuditRecord, database: str, table: str) -> str:
    """Build the single-row INSERT statement for one record."""
    columns = ", ".join(name for name, _ in COLUMNS)
    values = ", ".join(render_value(getter(record)) for _, getter in COLUMNS)
    return f"INSERT INTO {database}.{table} ({columns}) VALUES ({values})"


class ClickHouseAuditStore(AuditStore):
    """Writes records to ``<audit_database>.<audit_table>`` over HTTP."""

    def __init__(
        self,
        settings: PlaygroundSettings,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """
        Initialize the store.

        Args:
            settings: Connection details, audit table location and timeout
            client: Optional pre-built HTTP client
        """
        self.settings = settings
        self.database = settings.audit_database
        self.table = settings.audit_table
        self._owns_client = client is None
        self.client = client or httpx.AsyncClient()

    async def _post(self, statement: str) -> None:
        response = await self.client.post(
            self.settings.clickhouse_url.rstrip("/") + "/",
            params={"database": self.database},
            content=statement.encode("utf-8", errors="surrogatepass"),
            headers={"Content-Type": "text/plain; charset=utf-8"},
            auth=self.settings.clickhouse_auth,
            timeout=self.settings.audit_timeout_seconds,
        )
        response.raise_for_status()

    async def insert(self, record: AuditRecord) -> None:
        await self._post(build_insert(record, self.database, self.table))

    async def ensure_table(self) -> None:
        """Create the audit table when it does not exist yet."""
        await self._post(AUDIT_TABLE_DDL.format(database=self.database, table=self.table))

    async def aclose(self) -> None:
        if self._owns_client:
            await self.client.aclose()
