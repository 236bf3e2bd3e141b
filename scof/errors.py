"""Exception hierarchy shared by the codec, the fraction type and the score."""

from __future__ import annotations

from typing import Any


class ScofError(Exception):
    """Base class for every recoverable scof failure."""


class MalformedMarking(ScofError, ValueError):
    """
    Marking (or duration) text that does not match the grammar.

    Attributes:
        text:  The full text that was being parsed.
        start: Index of the first offending character.
        end:   Index one past the last offending character.
    """

    def __init__(self, text: str, start: int, end: int, reason: str) -> None:
        self.text = text
        self.start = start
        self.end = max(end, start)
        self.reason = reason
        super().__init__(f"{reason} in {text!r} at [{self.start}:{self.end}]")

    @property
    def offending(self) -> str:
        """The character run that could not be parsed."""
        return self.text[self.start:self.end]


class OutOfRangeError(ScofError, IndexError):
    """A cursor addresses a measure, channel or marking that does not exist."""

    def __init__(self, cursor: Any, message: str = "no marking at cursor") -> None:
        self.cursor = cursor
        super().__init__(f"{message}: {cursor!r}")


class ArithmeticDegenerate(ScofError, ArithmeticError):
    """A fraction operation would produce a zero or unrepresentable value."""


class FractionOverflowError(ArithmeticDegenerate):
    """A reduced result does not fit the 8-bit numerator/denominator."""


class NegativeFractionError(ArithmeticDegenerate):
    """Subtraction would go below zero in an unsigned fraction."""
