"""Exceptions raised by the service layer (never by the validation engine)."""

from __future__ import annotations


class ReqlintError(Exception):
    """Base class for reqlint service-layer errors."""


class SpecSafetyError(ReqlintError):
    """Raised when a specification document violates safety constraints.

    Distinct from parse errors: these indicate oversized or potentially
    malicious input (YAML anchors, excessive nesting, too many nodes).
    """


class SpecParseError(ReqlintError):
    """Raised when specification text cannot be parsed into an API document."""

    def __init__(self, message: str, line: int | None = None, column: int | None = None) -> None:
        super().__init__(message)
        self.line = line
        self.column = column


class SpecLoadError(ReqlintError):
    """Raised by the spec store when a document could not be loaded."""

    def __init__(self, messages: list[str]) -> None:
        super().__init__("; ".join(messages))
        self.messages = messages
