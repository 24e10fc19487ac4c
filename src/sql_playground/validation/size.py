"""
Input Checks
============

Reject empty, unencodable and oversized submissions before any normalization happens.
"""

from sql_playground.models import CheckResult
from sql_playground.validation.base import Check, QueryText

DEFAULT_MAX_QUERY_BYTES = 1_048_576


def _format_size(num_bytes: int) -> str:
    for unit, factor in (("MB", 1024 * 1024), ("KB", 1024)):
        if num_bytes >= factor and num_bytes % factor == 0:
            return f"{num_bytes // factor}{unit}"
    return f"{num_bytes} bytes"


class EmptyQueryCheck(Check):
    """Rejects empty or whitespace-only input."""

    @property
    def name(self) -> str:
        return "EmptyQueryCheck"

    def check(self, query: QueryText) -> CheckResult:
        if not query.raw or not query.raw.strip():
            return self.failed("Query cannot be empty")
        return self.passed("Query is not empty")


class TextEncodingCheck(Check):
    """Rejects text with no UTF-8 encoding, such as lone surrogates."""

    @property
    def name(self) -> str:
        return "TextEncodingCheck"

    def check(self, query: QueryText) -> CheckResult:
        try:
            query.raw.encode("utf-8")
        except UnicodeEncodeError as exc:
            return self.failed(
                "Query contains characters that cannot be encoded as UTF-8",
                position=exc.start,
            )
        return self.passed("Query is valid UTF-8")


class QuerySizeCheck(Check):
    """Rejects input whose UTF-8 encoding exceeds the configured ceiling."""

    def __init__(self, max_bytes: int = DEFAULT_MAX_QUERY_BYTES) -> None:
        self.max_bytes = max_bytes

    @property
    def name(self) -> str:
        return "QuerySizeCheck"

    def check(self, query: QueryText) -> CheckResult:
        size = len(query.raw.encode("utf-8", errors="surrogatepass"))
        if size > self.max_bytes:
            return self.failed(
                f"Query exceeds maximum size of {_format_size(self.max_bytes)}",
                size_bytes=size,
                max_bytes=self.max_bytes,
            )
        return self.passed("Query size is within limits")
