"""Field extraction from flat JSON objects without a general parser.

The contents API returns flat objects whose interesting values are strings,
``null`` or integers. Extraction looks for the first ``"field":`` (optional
whitespace before the colon) and reads what follows:

* string fields: the first quoted string after the colon, raw (escape
  sequences are kept as written; an escaped quote does not end the string);
* integer fields: an optional minus sign and digits directly after the colon.
"""

from __future__ import annotations

import re
from enum import Enum
from functools import lru_cache


class FieldState(str, Enum):
    """How a field appears in an object."""

    absent = "absent"
    null = "null"
    value = "value"


@lru_cache(maxsize=64)
def _key_pattern(field: str) -> re.Pattern[str]:
    return re.compile(r'"%s"\s*:' % re.escape(field))


def _value_start(text: str, field: str) -> int | None:
    match = _key_pattern(field).search(text)
    return match.end() if match else None


def _quoted_after(text: str, start: int) -> str | None:
    """Return the first quoted string at or after *start*, or None."""
    open_quote = text.find('"', start)
    if open_quote == -1:
        return None
    escaped = False
    for i in range(open_quote + 1, len(text)):
        ch = text[i]
        if escaped:
            escaped = False
        elif ch == "\\":
            escaped = True
        elif ch == '"':
            return text[open_quote + 1 : i]
    return None


def field_state(text: str, field: str) -> FieldState:
    """Report whether *field* is absent, an explicit ``null``, or has a value."""
    start = _value_start(text, field)
    if start is None:
        return FieldState.absent
    if text[start:].lstrip().startswith("null"):
        return FieldState.null
    return FieldState.value


def extract_field(text: str, field: str) -> str:
    """Return the string value of *field*, or ``""`` when it cannot be found.

    An empty result is not an error; callers decide whether it is fatal.
    """
    start = _value_start(text, field)
    if start is None:
        return ""
    return _quoted_after(text, start) or ""


def extract_optional_field(text: str, field: str) -> str | None:
    """Like extract_field, but absent, ``null`` and empty values all give None."""
    state = field_state(text, field)
    if state is not FieldState.value:
        return None
    return extract_field(text, field) or None


def extract_int_field(text: str, field: str, default: int = 0) -> int:
    """Return the integer value of *field*, or *default* when absent or not numeric."""
    start = _value_start(text, field)
    if start is None:
        return default
    match = re.match(r"\s*(-?\d+)", text[start:])
    return int(match.group(1)) if match else default
