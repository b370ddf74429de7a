"""Contains the errors and warnings raised while profiling."""
from __future__ import annotations


class InputShapeError(ValueError):
    """Raised when the input table is not rectangular or is malformed."""


class ConfigurationError(ValueError):
    """Raised when profiler options fail validation."""

    def __init__(self, message: str, errors: list[str] | None = None) -> None:
        super().__init__(message)
        self.errors = errors or []


class DegenerateColumnWarning(RuntimeWarning):
    """Issued when a statistic of a column is undefined or too large for a float."""
