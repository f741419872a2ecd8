"""Exception types raised by the equation tracer and its collaborators."""

from __future__ import annotations

__all__ = ["EvaluationError", "ClassificationFailure", "EquationParseError"]


class EvaluationError(ArithmeticError):
    """Raised when a scalar function is undefined at a point.

    The tracer absorbs this locally: the offending sample is skipped.
    """


class ClassificationFailure(RuntimeError):
    """Raised when no sample point yields finite partial derivatives."""


class EquationParseError(ValueError):
    """Raised when equation text cannot be split or compiled."""
