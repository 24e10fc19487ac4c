"""
Audit Module
============

Execution audit trail: record building, fingerprinting and persistence.
"""

from sql_playground.audit.clickhouse import ClickHouseAuditStore, build_insert
from sql_playground.audit.fingerprint import query_fingerprint
from sql_playground.audit.jsonl import JsonlAuditStore
from sql_playground.audit.recorder import AuditRecorder
from sql_playground.audit.store import AuditStore, InMemoryAuditStore

__all__ = [
    "AuditRecorder",
    "AuditStore",
    "ClickHouseAuditStore",
    "InMemoryAuditStore",
    "JsonlAuditStore",
    "build_insert",
    "query_fingerprint",
]
