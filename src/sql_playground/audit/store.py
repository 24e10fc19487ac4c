"""
Audit Store Interface
=====================

Abstract persistence collaborator for audit records, plus an in-memory
implementation for tests and demos.
"""

from abc import ABC, abstractmethod

from sql_playground.models import AuditRecord


class AuditStore(ABC):
    """Append-only destination for audit records."""

    @abstractmethod
    async def insert(self, record: AuditRecord) -> None:
        """
        Persist a single audit record.

        Args:
            record: The record to append

        Raises:
            Any exception on failure; the recorder is responsible for absorbing it.
        """
        pass

    async def aclose(self) -> None:
        """Release any resources held by the store."""


class InMemoryAuditStore(AuditStore):
    """Keeps records in a list. Not durable."""

    def __init__(self) -> None:
        self.records: list[AuditRecord] = []

    async def insert(self, record: AuditRecord) -> None:
        self.records.append(record)

    def reset(self) -> None:
        self.records = []
