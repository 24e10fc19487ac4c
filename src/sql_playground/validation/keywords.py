"""
Deny-List Check
===============

Rejects any query mentioning a mutating or privileged keyword as a whole word.

The match is purely lexical: string literals, nested sub-selects and quoted
identifiers are all scanned. ``inserted_at`` passes, ``'drop'`` does not.
"""

import re

from sql_playground.models import CheckResult
from sql_playground.validation.base import Check, QueryText

DENY_LIST_KEYWORDS = (
    "insert",
    "update",
    "delete",
    "drop",
    "alter",
    "create",
    "truncate",
    "replace",
    "merge",
    "grant",
    "revoke",
    "execute",
    "exec",
    "call",
    "system",
)


class DenyListCheck(Check):
    """Ensures no deny-listed keyword appears anywhere in the query."""

    def __init__(self, keywords: tuple[str, ...] = DENY_LIST_KEYWORDS) -> None:
        self.patterns = [
            (keyword, re.compile(rf"\b{re.escape(keyword)}\b", re.IGNORECASE | re.ASCII))
            for keyword in keywords
        ]

    @property
    def name(self) -> str:
        return "DenyListCheck"

    def check(self, query: QueryText) -> CheckResult:
        for keyword, pattern in self.patterns:
            if pattern.search(query.matching):
                return self.failed(
                    f"Dangerous keyword '{keyword.upper()}' detected. "
                    "Only SELECT queries are allowed.",
                    keyword=keyword,
                )
        return self.passed("No dangerous keywords detected")
