"""
Error Classifier
================

Best-effort extraction of structured fields from ClickHouse error text,
e.g. ``Code: 158. DB::Exception: Unknown identifier ...``.
"""

import re

from sql_playground.models import ClassifiedError

_CODE = re.compile(r"Code:\s*(\d+)")
_EXCEPTION = re.compile(r"DB::Exception:\s*([^.]+)")


def classify(raw_message: str) -> ClassifiedError:
    """
    Map a raw failure message to a ClassifiedError.

    Never raises. Fields whose pattern does not match are left as None;
    ``message`` is always the full raw text.
    """
    code_match = _CODE.search(raw_message)
    exception_match = _EXCEPTION.search(raw_message)

    category = None
    if exception_match:
        category = exception_match.group(1).split(":")[0].strip() or None

    return ClassifiedError(
        message=raw_message,
        code=int(code_match.group(1)) if code_match else None,
        category=category,
    )
