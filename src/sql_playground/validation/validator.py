"""
Safety Validator
================

Admission gate for user-submitted SQL. Only single, read-only SELECT
statements get through; everything else is rejected with the reason of the
first check that failed.
"""

from sql_playground.models import CheckStatus, ValidationOutcome
from sql_playground.normalizer import sanitize
from sql_playground.validation.base import CheckChain, QueryText
from sql_playground.validation.keywords import DENY_LIST_KEYWORDS, DenyListCheck
from sql_playground.validation.size import (
    DEFAULT_MAX_QUERY_BYTES,
    EmptyQueryCheck,
    QuerySizeCheck,
    TextEncodingCheck,
)
from sql_playground.validation.statement import SelectOnlyCheck, SingleStatementCheck


class SafetyValidator:
    """
    Lexical safety gate in front of the execution gateway.

    Checks, in order:
    1. Input is not empty
    2. Input can be encoded as UTF-8
    3. Input fits the byte ceiling
    4. At most one statement (a single trailing semicolon is tolerated)
    5. The statement starts with SELECT
    6. No deny-listed keyword appears as a whole word anywhere
    """

    def __init__(
        self,
        max_query_bytes: int = DEFAULT_MAX_QUERY_BYTES,
        deny_list: tuple[str, ...] = DENY_LIST_KEYWORDS,
    ) -> None:
        self.chain = CheckChain(
            [
                EmptyQueryCheck(),
                TextEncodingCheck(),
                QuerySizeCheck(max_query_bytes),
                SingleStatementCheck(),
                SelectOnlyCheck(),
                DenyListCheck(deny_list),
            ]
        )

    def validate(self, raw_text: str) -> ValidationOutcome:
        """
        Decide whether a query may be executed.

        Args:
            raw_text: Query exactly as the user submitted it

        Returns:
            ValidationOutcome carrying the sanitized text when accepted, or the
            reason and the name of the failing check when rejected
        """
        passed, results = self.chain.run(QueryText(raw_text))

        if not passed:
            failed = next(r for r in results if r.status == CheckStatus.FAILED)
            return ValidationOutcome.rejected(
                reason=failed.message,
                rule=failed.check_name,
                checks=tuple(results),
            )

        return ValidationOutcome.accepted(sanitize(raw_text), checks=tuple(results))

    def is_valid_select_query(self, raw_text: str) -> bool:
        """Return True when the query would be accepted."""
        return self.validate(raw_text).is_accepted
