"""
Unit Tests for the Safety Validator
===================================

Tests for each check in the chain and for the validator as a whole.
"""

import pytest

from sql_playground.examples import get_example_queries
from sql_playground.models import CheckStatus
from sql_playground.validation import (
    DENY_LIST_KEYWORDS,
    DenyListCheck,
    EmptyQueryCheck,
    QuerySizeCheck,
    QueryText,
    SafetyValidator,
    SelectOnlyCheck,
    SingleStatementCheck,
    TextEncodingCheck,
)

MULTI_STATEMENT_REASON = (
    "Multiple statements are not allowed. Only single SELECT queries are permitted."
)


class TestEmptyQueryCheck:
    """Tests for EmptyQueryCheck."""

    @pytest.mark.parametrize("text", ["", "   ", "\n\t  \n"])
    def test_blank_input_fails(self, text: str) -> None:
        result = EmptyQueryCheck().check(QueryText(text))
        assert result.status == CheckStatus.FAILED
        assert result.message == "Query cannot be empty"

    def test_non_blank_passes(self) -> None:
        assert EmptyQueryCheck().check(QueryText("SELECT 1")).status == CheckStatus.PASSED


class TestTextEncodingCheck:
    """Tests for TextEncodingCheck."""

    def test_lone_surrogate_fails(self) -> None:
        result = TextEncodingCheck().check(QueryText("SELECT '\ud800'"))
        assert result.status == CheckStatus.FAILED
        assert result.message == "Query contains characters that cannot be encoded as UTF-8"
        assert result.details["position"] == 8

    def test_non_ascii_passes(self) -> None:
        query = QueryText("SELECT 'caf\u00e9 \U0001F600'")
        assert TextEncodingCheck().check(query).status == CheckStatus.PASSED


class TestQuerySizeCheck:
    """Tests for QuerySizeCheck."""

    def test_at_ceiling_passes(self) -> None:
        text = "SELECT '" + "x" * (1_048_576 - 9) + "'"
        assert len(text) == 1_048_576
        assert QuerySizeCheck().check(QueryText(text)).status == CheckStatus.PASSED

    def test_over_ceiling_fails(self) -> None:
        text = "SELECT 1 " + "x" * 1_048_576
        result = QuerySizeCheck().check(QueryText(text))
        assert result.status == CheckStatus.FAILED
        assert result.message == "Query exceeds maximum size of 1MB"
        assert result.details["max_bytes"] == 1_048_576

    def test_counts_encoded_bytes(self) -> None:
        """Multi-byte characters count by their UTF-8 size."""
        check = QuerySizeCheck(max_bytes=12)
        assert check.check(QueryText("SELECT 'é'")).status == CheckStatus.PASSED
        assert check.check(QueryText("SELECT 'éé'")).status == CheckStatus.FAILED

    def test_lone_surrogate_does_not_raise(self) -> None:
        assert QuerySizeCheck(max_bytes=9).check(QueryText("SELECT \ud800")).status == CheckStatus.FAILED

    def test_oversized_input_is_never_normalized(self) -> None:
        query = QueryText("SELECT 1 " + "x" * 100)
        QuerySizeCheck(max_bytes=10).check(query)
        assert "matching" not in query.__dict__


class TestSingleStatementCheck:
    """Tests for SingleStatementCheck."""

    @pytest.mark.parametrize("text", ["SELECT 1", "SELECT 1;", "SELECT 1 ;  ", "SELECT 1; -- done"])
    def test_single_statement_passes(self, text: str) -> None:
        assert SingleStatementCheck().check(QueryText(text)).status == CheckStatus.PASSED

    @pytest.mark.parametrize(
        "text",
        [
            "SELECT 1; SELECT 2",
            "SELECT 1;;",
            "SELECT ';' FROM t",
            "SELECT 1; SELECT 2;",
        ],
    )
    def test_multiple_statements_fail(self, text: str) -> None:
        result = SingleStatementCheck().check(QueryText(text))
        assert result.status == CheckStatus.FAILED
        assert result.message == MULTI_STATEMENT_REASON


class TestSelectOnlyCheck:
    """Tests for SelectOnlyCheck."""

    @pytest.mark.parametrize("text", ["SELECT 1", "select * from t", "  SeLeCt(1)", "/* c */ SELECT 1"])
    def test_select_passes(self, text: str) -> None:
        assert SelectOnlyCheck().check(QueryText(text)).status == CheckStatus.PASSED

    @pytest.mark.parametrize(
        "text",
        [
            "WITH x AS (SELECT 1) SELECT * FROM x",
            "SHOW TABLES",
            "DESCRIBE t",
            "selection FROM t",
            "(SELECT 1)",
        ],
    )
    def test_non_select_fails(self, text: str) -> None:
        result = SelectOnlyCheck().check(QueryText(text))
        assert result.status == CheckStatus.FAILED
        assert result.message.startswith("Only SELECT queries are allowed.")


class TestDenyListCheck:
    """Tests for DenyListCheck."""

    @pytest.mark.parametrize("keyword", DENY_LIST_KEYWORDS)
    def test_each_keyword_detected(self, keyword: str) -> None:
        result = DenyListCheck().check(QueryText(f"select a from t where {keyword} = 1"))
        assert result.status == CheckStatus.FAILED
        assert f"'{keyword.upper()}'" in result.message
        assert result.details["keyword"] == keyword

    @pytest.mark.parametrize(
        "text",
        [
            "SELECT inserted_at FROM t",
            "SELECT call_count, updated_by FROM t",
            "SELECT dropped FROM t",
            "SELECT created_at, systems FROM t",
        ],
    )
    def test_substrings_inside_identifiers_pass(self, text: str) -> None:
        assert DenyListCheck().check(QueryText(text)).status == CheckStatus.PASSED

    def test_keyword_inside_string_literal_fails(self) -> None:
        """Literals are not exempt: the check is lexical."""
        result = DenyListCheck().check(QueryText("SELECT * FROM t WHERE note = 'please drop me'"))
        assert result.status == CheckStatus.FAILED
        assert "'DROP'" in result.message

    def test_first_keyword_in_list_order_reported(self) -> None:
        result = DenyListCheck().check(QueryText("SELECT drop, insert FROM t"))
        assert result.details["keyword"] == "insert"


class TestSafetyValidator:
    """Tests for the full validation chain."""

    def test_accepts_simple_select(self, validator: SafetyValidator) -> None:
        outcome = validator.validate("SELECT 1")
        assert outcome.is_accepted is True
        assert outcome.sanitized_text == "SELECT 1"
        assert outcome.rejection_reason is None
        assert outcome.rule is None

    def test_rejects_empty(self, validator: SafetyValidator) -> None:
        outcome = validator.validate("   ")
        assert outcome.is_accepted is False
        assert outcome.rejection_reason == "Query cannot be empty"
        assert outcome.sanitized_text is None
        assert outcome.rule == "EmptyQueryCheck"

    def test_rejects_oversized(self) -> None:
        outcome = SafetyValidator(max_query_bytes=64).validate("SELECT " + "1" * 100)
        assert outcome.rule == "QuerySizeCheck"
        assert outcome.rejection_reason == "Query exceeds maximum size of 64 bytes"

    def test_rejects_lone_surrogate(self, validator: SafetyValidator) -> None:
        outcome = validator.validate("SELECT '\ud800'")
        assert outcome.is_accepted is False
        assert outcome.rule == "TextEncodingCheck"
        assert outcome.sanitized_text is None

    def test_multi_statement_reported_before_keyword(self, validator: SafetyValidator) -> None:
        outcome = validator.validate("SELECT * FROM t; DROP TABLE t;")
        assert outcome.is_accepted is False
        assert outcome.rule == "SingleStatementCheck"
        assert outcome.rejection_reason == MULTI_STATEMENT_REASON

    def test_rejects_non_select(self, validator: SafetyValidator) -> None:
        outcome = validator.validate("DELETE FROM t WHERE id = 1")
        assert outcome.rule == "SelectOnlyCheck"

    def test_rejects_keyword_in_nested_clause(self, validator: SafetyValidator) -> None:
        outcome = validator.validate("SELECT * FROM (DELETE FROM t)")
        assert outcome.rule == "DenyListCheck"
        assert "'DELETE'" in outcome.rejection_reason

    def test_keyword_inside_comment_is_ignored(self, validator: SafetyValidator) -> None:
        """Keywords inside comments are removed before matching, so they are harmless."""
        outcome = validator.validate("SELECT a FROM t -- drop table t")
        assert outcome.is_accepted is True
        assert outcome.sanitized_text == "SELECT a FROM t"

    def test_leading_comment_and_identifier_substring(self, validator: SafetyValidator) -> None:
        outcome = validator.validate("  -- comment\nSELECT inserted_at FROM t")
        assert outcome.is_accepted is True
        assert outcome.sanitized_text == "SELECT inserted_at FROM t"

    def test_trailing_semicolon_kept_in_sanitized_text(self, validator: SafetyValidator) -> None:
        outcome = validator.validate("SELECT 1;")
        assert outcome.is_accepted is True
        assert outcome.sanitized_text == "SELECT 1;"

    def test_check_results_stop_at_first_failure(self, validator: SafetyValidator) -> None:
        outcome = validator.validate("UPDATE t SET a = 1")
        names = [c.check_name for c in outcome.checks]
        assert names == [
            "EmptyQueryCheck",
            "TextEncodingCheck",
            "QuerySizeCheck",
            "SingleStatementCheck",
            "SelectOnlyCheck",
        ]
        assert outcome.checks[-1].status == CheckStatus.FAILED

    def test_is_valid_select_query(self, validator: SafetyValidator) -> None:
        assert validator.is_valid_select_query("SELECT 1") is True
        assert validator.is_valid_select_query("DROP TABLE t") is False

    @pytest.mark.parametrize("example", get_example_queries(), ids=lambda e: e.name)
    def test_example_queries_are_accepted(self, validator: SafetyValidator, example) -> None:
        outcome = validator.validate(example.query)
        assert outcome.is_accepted, outcome.rejection_reason
        assert not outcome.sanitized_text.startswith("--")
