"""Structured diagnosis models: syntax failures, highlight ranges, schema errors."""

from __future__ import annotations

from pydantic import BaseModel, Field, computed_field, model_validator


class SyntaxDiagnosis(BaseModel):
    """Outcome of parsing candidate payload text as JSON.

    ``offset`` is a 0-based character index; ``line`` and ``column`` are
    1-based and derived from it.  A valid diagnosis carries no message and
    no position; an invalid one always carries a message and either all
    three positional fields or none of them.
    """

    valid: bool
    error_message: str | None = None
    offset: int | None = None
    line: int | None = None
    column: int | None = None

    @model_validator(mode="after")
    def _check_consistency(self) -> SyntaxDiagnosis:
        position = (self.offset, self.line, self.column)
        if self.valid:
            if self.error_message is not None or any(p is not None for p in position):
                raise ValueError("a valid diagnosis cannot carry an error or a position")
        else:
            if self.error_message is None:
                raise ValueError("an invalid diagnosis needs an error message")
            if any(p is None for p in position) and any(p is not None for p in position):
                raise ValueError("offset, line and column must be set together")
        return self

    @property
    def has_position(self) -> bool:
        return self.offset is not None


class HighlightRange(BaseModel):
    """Half-open character interval ``[start, end)`` into the source text."""

    start: int = Field(ge=0)
    end: int = Field(ge=1)

    @model_validator(mode="after")
    def _check_order(self) -> HighlightRange:
        if self.end <= self.start:
            raise ValueError(f"empty or inverted range [{self.start}, {self.end})")
        return self

    def __len__(self) -> int:
        return self.end - self.start


class SchemaError(BaseModel):
    """A single schema violation, located by a dot/bracket path into the data."""

    path: str
    message: str


class ValidationOutcome(BaseModel):
    """Top-level result of validating one payload text."""

    syntax: SyntaxDiagnosis
    ranges: list[HighlightRange] = []
    schema_errors: list[SchemaError] = []
    schema_checked: bool = False

    @computed_field  # type: ignore[prop-decorator]
    @property
    def valid(self) -> bool:
        return self.syntax.valid and not self.schema_errors
