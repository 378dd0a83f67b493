"""JSON syntax validation with error position recovery."""

from __future__ import annotations

import json
import logging
import re
from typing import Any

from reqlint.models.diagnostics import SyntaxDiagnosis

logger = logging.getLogger(__name__)

# Fallbacks for parsers that only report an offset inside their message text:
# "... at position 12" (first digit run after "position") and the stdlib's "(char 12)".
_POSITION_RE = re.compile(r"position\D*?(\d+)", re.IGNORECASE)
_CHAR_RE = re.compile(r"\(char (\d+)\)")


class _NonStandardConstant(ValueError):
    """``NaN``/``Infinity`` literals: accepted by Python's decoder, not by JSON."""

    def __init__(self, constant: str) -> None:
        super().__init__(f"Unexpected token '{constant}': not a valid JSON value")
        self.constant = constant


def _reject_constant(name: str) -> Any:
    raise _NonStandardConstant(name)


def offset_from_message(message: str) -> int | None:
    """Extract a character offset from a parser error message, if it names one."""
    match = _POSITION_RE.search(message) or _CHAR_RE.search(message)
    if match is None:
        return None
    return int(match.group(1))


def line_column(text: str, offset: int) -> tuple[int, int]:
    """Return the 1-based ``(line, column)`` of *offset* in *text*."""
    line = text.count("\n", 0, offset) + 1
    column = offset - text.rfind("\n", 0, offset)
    return line, column


def _find_bare_token(text: str, token: str) -> int | None:
    """Offset of the first occurrence of *token* outside string literals."""
    in_string = False
    escaped = False
    for i, ch in enumerate(text):
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
        elif ch == '"':
            in_string = True
        elif text.startswith(token, i):
            return i
    return None


def _past_trailing_comma(text: str, offset: int) -> int:
    """Move an offset that points at a trailing comma to the closing bracket.

    Newer stdlib decoders report ``{"id": 1,}`` at the comma, older ones at
    the ``}``; the bracket is the token that makes the text invalid.
    """
    if offset >= len(text) or text[offset] != ",":
        return offset
    after = offset + 1
    while after < len(text) and text[after] in " \t\n\r":
        after += 1
    if after < len(text) and text[after] in "}]":
        return after
    return offset


def _failure(text: str, message: str, offset: int | None) -> SyntaxDiagnosis:
    if offset is None or offset < 0 or offset > len(text):
        return SyntaxDiagnosis(valid=False, error_message=message)
    line, column = line_column(text, offset)
    return SyntaxDiagnosis(
        valid=False,
        error_message=message,
        offset=offset,
        line=line,
        column=column,
    )


def parse_json(text: str) -> tuple[SyntaxDiagnosis, Any]:
    """Parse *text* as JSON, returning ``(diagnosis, value)``.

    Empty or whitespace-only text is valid and yields ``None``.  On failure
    the value is ``None`` and the diagnosis carries the parser message plus,
    when it can be recovered, the offset with its derived line and column.
    Never raises.
    """
    if not text or not text.strip():
        return SyntaxDiagnosis(valid=True), None

    try:
        value = json.loads(text, parse_constant=_reject_constant)
    except json.JSONDecodeError as exc:
        offset = exc.pos
        if "trailing comma" in exc.msg:
            offset = _past_trailing_comma(text, offset)
        return _failure(text, str(exc), offset), None
    except _NonStandardConstant as exc:
        offset = _find_bare_token(text, exc.constant)
        return _failure(text, str(exc), offset), None
    except (ValueError, RecursionError) as exc:
        message = str(exc) or type(exc).__name__
        logger.debug("JSON parse failed without native offset: %s", message)
        return _failure(text, message, offset_from_message(message)), None

    return SyntaxDiagnosis(valid=True), value


def validate_syntax(text: str) -> SyntaxDiagnosis:
    """Check whether *text* is syntactically valid JSON."""
    diagnosis, _value = parse_json(text)
    return diagnosis
