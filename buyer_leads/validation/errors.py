"""Validation outcomes.

These are plain values, not exceptions: invalid input is an expected
result of validation and is returned to the caller.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class ValidationError:
    """A problem with one field, identified by its external column name."""

    path: str
    message: str

    def __str__(self) -> str:
        return f"{self.path}: {self.message}"


@dataclass(frozen=True)
class FieldError(ValidationError):
    """A single field failed a structural constraint."""


@dataclass(frozen=True)
class CrossFieldError(ValidationError):
    """A rule relating two fields failed; ``path`` names the responsible field."""


@dataclass(frozen=True)
class HeaderError(ValidationError):
    """A CSV header lacks required columns."""

    missing_columns: tuple[str, ...] = ()


@dataclass
class RowError:
    """All validation errors of one CSV data row (header is line 0)."""

    row: int
    errors: list[ValidationError] = field(default_factory=list)

    @property
    def messages(self) -> list[str]:
        return [str(e) for e in self.errors]


@dataclass
class ValidationResult(Generic[T]):
    """Either a validated value or a non-empty list of errors."""

    value: T | None = None
    errors: list[ValidationError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors

    def errors_for(self, path: str) -> list[ValidationError]:
        return [e for e in self.errors if e.path == path]

    def messages(self) -> list[str]:
        return [str(e) for e in self.errors]
