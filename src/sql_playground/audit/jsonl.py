"""
JSON Lines Audit Store
======================

Appends one JSON object per audit record to a local file. Intended for local
development where no ClickHouse audit table is available.
"""

import asyncio
import json
from dataclasses import asdict
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any

from sql_playground.audit.store import AuditStore
from sql_playground.models import AuditRecord


def record_to_dict(record: AuditRecord) -> dict[str, Any]:
    """Convert a record to JSON-serializable primitives."""
    data = asdict(record)
    for key, value in data.items():
        if isinstance(value, datetime):
            data[key] = value.isoformat()
        elif isinstance(value, Enum):
            data[key] = value.value
    return data


class JsonlAuditStore(AuditStore):
    """Append-only JSON Lines file."""

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)
        self._lock = asyncio.Lock()

    def _append(self, line: str) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "a", encoding="utf-8") as f:
            f.write(line + "\n")

    async def insert(self, record: AuditRecord) -> None:
        line = json.dumps(record_to_dict(record))
        async with self._lock:
            await asyncio.to_thread(self._append, line)
