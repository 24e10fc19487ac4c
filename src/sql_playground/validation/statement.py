"""
Statement Shape Checks
======================

Single-statement guard and the SELECT-only gate.
"""

import re

from sql_playground.models import CheckResult
from sql_playground.validation.base import Check, QueryText

_LEADING_SELECT = re.compile(r"select\b")


class SingleStatementCheck(Check):
    """Allows at most one semicolon, and only as the final character."""

    @property
    def name(self) -> str:
        return "SingleStatementCheck"

    def check(self, query: QueryText) -> CheckResult:
        text = query.matching
        semicolons = text.count(";")

        if semicolons > 1 or (semicolons == 1 and not text.endswith(";")):
            return self.failed(
                "Multiple statements are not allowed. "
                "Only single SELECT queries are permitted.",
                semicolon_count=semicolons,
            )
        return self.passed("Single statement")


class SelectOnlyCheck(Check):
    """Requires the first token of the query to be SELECT."""

    @property
    def name(self) -> str:
        return "SelectOnlyCheck"

    def check(self, query: QueryText) -> CheckResult:
        if not _LEADING_SELECT.match(query.matching):
            return self.failed(
                "Only SELECT queries are allowed. INSERT, UPDATE, DELETE, DROP, "
                "ALTER, CREATE, and other modification statements are not permitted."
            )
        return self.passed("Query starts with SELECT")
