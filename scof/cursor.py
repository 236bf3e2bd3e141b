"""Cursor: a value-type address of one marking in a score."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from scof.score import Score


@dataclass
class Cursor:
    """
    Address of a marking: (measure, channel, marking) within movement 0.

    A cursor holds no reference to the score it points into.  After the score
    changes shape the cursor may be stale, so every score operation re-checks
    the address it is given.

    Attributes:
        measure: Measure (bar) index.
        chan:    Channel index within the measure.
        marking: Marking index within the channel.
    """

    measure: int = 0
    chan: int = 0
    marking: int = 0

    def copy(self) -> Cursor:
        return replace(self)

    def left(self, score: Score) -> None:
        """
        Move to the previous marking, crossing into the previous measure's last
        marking when needed.  At the very first marking this does nothing.
        """
        if self.marking > 0:
            self.marking -= 1
        elif self.measure > 0:
            self.measure -= 1
            length = score.marking_len(self)
            self.marking = length - 1 if length > 0 else 0

    def right(self, score: Score) -> None:
        """
        Move to the next marking, or to marking 0 of the next measure once the
        current measure has ended.

        The next measure is not checked for existence; callers must.
        """
        if self.marking + 1 < score.marking_len(self):
            self.marking += 1
        else:
            self.measure += 1
            self.marking = 0

    def right_unchecked(self) -> None:
        """Move one marking right without consulting the score."""
        self.marking += 1
