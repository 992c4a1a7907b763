"""Errors raised while turning flat variables into a nested tree."""

from __future__ import annotations


class ParseError(ValueError):
    """Base class for all variable parsing errors.

    ``key`` holds the variable key that triggered the error once the
    orchestrator has attached it; errors raised by the lower-level helpers
    start without one.
    """

    def __init__(self, message: str, *, key: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.key = key

    def __str__(self) -> str:
        if self.key is None:
            return self.message
        return f"{self.message} (variable: {self.key})"


class MalformedPathError(ParseError):
    """A key path would address a root-level array."""


class ShapeConflictError(ParseError):
    """An object is expected where an array lives, or the other way around."""


class InvalidScalarError(ParseError):
    """A numeric-looking value has no finite representation."""


class PrefixMismatchError(ParseError):
    """A key that passed the prefix filter does not carry the prefix."""
