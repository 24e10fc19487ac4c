"""
Base Check Classes
==================

Abstract base class for validation checks and the chain that runs them.
"""

from abc import ABC, abstractmethod
from functools import cached_property

from sql_playground.models import CheckResult, CheckStatus
from sql_playground.normalizer import matching_text


class QueryText:
    """
    Raw query text with its lazily computed matching form.

    Size checks run before anything is normalized, so an oversized input is
    rejected without ever being scanned by the comment regexes.
    """

    def __init__(self, raw: str) -> None:
        self.raw = raw

    @cached_property
    def matching(self) -> str:
        return matching_text(self.raw)


class Check(ABC):
    """Base class for all validation checks."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Unique name for this check."""
        pass

    @abstractmethod
    def check(self, query: QueryText) -> CheckResult:
        """
        Check the query against this rule.

        Args:
            query: The submitted query text

        Returns:
            CheckResult indicating pass/fail with a user-facing message
        """
        pass

    def passed(self, message: str) -> CheckResult:
        return CheckResult(check_name=self.name, status=CheckStatus.PASSED, message=message)

    def failed(self, message: str, **details) -> CheckResult:
        return CheckResult(
            check_name=self.name,
            status=CheckStatus.FAILED,
            message=message,
            details=details,
        )


class CheckChain:
    """Runs checks in sequence, stopping at the first failure."""

    def __init__(self, checks: list[Check]) -> None:
        self.checks = checks

    def run(self, query: QueryText) -> tuple[bool, list[CheckResult]]:
        """
        Run all checks. Returns (all_passed, results).

        Args:
            query: The submitted query text

        Returns:
            Tuple of (success, list of check results up to the first failure)
        """
        results = []

        for rule in self.checks:
            result = rule.check(query)
            results.append(result)

            if result.status == CheckStatus.FAILED:
                return False, results

        return True, results
