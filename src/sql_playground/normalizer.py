"""
Query Normalizer
================

Comment stripping and whitespace canonicalization shared by every stage.

Two representations come out of here:

- the *matching text* (``matching_text``): comment-free, single-spaced and
  lower-cased; only ever used for keyword and prefix checks.
- the *sanitized text* (``sanitize``): comment-free with blank lines dropped,
  original casing and line breaks kept; this is what gets executed and shown.
"""

import re

_LINE_COMMENT = re.compile(r"--[^\n]*")
_BLOCK_COMMENT = re.compile(r"/\*[\s\S]*?\*/")
_WHITESPACE = re.compile(r"\s+")


def strip_comments(text: str) -> str:
    """Remove ``--`` line comments, then non-nested ``/* */`` block comments."""
    result = _LINE_COMMENT.sub("", text)
    return _BLOCK_COMMENT.sub("", result)


def normalize(text: str) -> str:
    """Strip comments, collapse whitespace runs to a single space and trim."""
    return _WHITESPACE.sub(" ", strip_comments(text)).strip()


def matching_text(text: str) -> str:
    """Lower-cased canonical form used for keyword matching."""
    return normalize(text).lower()


def sanitize(text: str) -> str:
    """Strip comments and blank lines, trimming each remaining line."""
    lines = (line.strip() for line in strip_comments(text).split("\n"))
    return "\n".join(line for line in lines if line)
