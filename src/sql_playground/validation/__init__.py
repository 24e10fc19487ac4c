"""
Validation Module
=================

Lexical admission checks for user-submitted SQL.
"""

from sql_playground.validation.base import Check, CheckChain, QueryText
from sql_playground.validation.keywords import DENY_LIST_KEYWORDS, DenyListCheck
from sql_playground.validation.size import (
    DEFAULT_MAX_QUERY_BYTES,
    EmptyQueryCheck,
    QuerySizeCheck,
    TextEncodingCheck,
)
from sql_playground.validation.statement import SelectOnlyCheck, SingleStatementCheck
from sql_playground.validation.validator import SafetyValidator

__all__ = [
    "Check",
    "CheckChain",
    "QueryText",
    "DENY_LIST_KEYWORDS",
    "DEFAULT_MAX_QUERY_BYTES",
    "DenyListCheck",
    "EmptyQueryCheck",
    "QuerySizeCheck",
    "SelectOnlyCheck",
    "SingleStatementCheck",
    "TextEncodingCheck",
    "SafetyValidator",
]
