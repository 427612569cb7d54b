"""Custom exception hierarchy for clauseQL.

All public errors inherit from ClauseQLError so callers can catch the base
class for any clauseQL-specific failure.  Every error aborts the current
build; no partially compiled SQL is ever returned alongside one.
"""
from __future__ import annotations


class ClauseQLError(Exception):
    """Base exception for all clauseQL errors."""


class ParseError(ClauseQLError):
    """Raised when input cannot be parsed as a valid QuerySpec.

    Args:
        message: Human-readable description.
        raw: The raw string that failed to parse.
    """

    def __init__(self, message: str, raw: str | None = None) -> None:
        super().__init__(message)
        self.raw = raw


class CompilationError(ClauseQLError):
    """Raised when SQL compilation fails.

    Args:
        message: Human-readable description.
        clause: The clause being compiled when the error occurred.
    """

    def __init__(self, message: str, clause: str | None = None) -> None:
        super().__init__(message)
        self.clause = clause


class UnknownOperatorError(CompilationError):
    """Raised when an operator-form condition starts with an unknown token."""

    def __init__(self, operator: object) -> None:
        super().__init__(f"Found unknown operator in query: {operator!r}")
        self.operator = operator


class OperandCountError(CompilationError):
    """Raised when an operator receives the wrong number of operands.

    Args:
        operator: The operator token (e.g. ``'BETWEEN'``).
        expected: Number of operands the operator requires.
        received: Number of operands actually supplied.
    """

    _WORDS = {1: "one", 2: "two", 3: "three"}

    def __init__(self, operator: str, expected: int, received: int) -> None:
        word = self._WORDS.get(expected, str(expected))
        super().__init__(
            f"Operator '{operator}' requires {word} operands, got {received}."
        )
        self.operator = operator
        self.expected = expected
        self.received = received


class MalformedJoinError(CompilationError):
    """Raised when a join entry lacks a join type and a table."""

    def __init__(self, join: object) -> None:
        super().__init__(
            "A join clause must be specified as a sequence of join type, "
            f"join table, and optionally join condition; got {join!r}.",
            clause="JOIN",
        )
        self.join = join


class UnsupportedByDialectError(CompilationError):
    """Raised for statements a dialect intentionally does not implement.

    Args:
        dialect: The dialect name (e.g. ``'postgres'``).
        feature: Short description of the missing capability.
    """

    def __init__(self, dialect: str, feature: str) -> None:
        super().__init__(f"{dialect} does not support {feature}.")
        self.dialect = dialect
        self.feature = feature
