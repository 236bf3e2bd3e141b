"""
Duration: note-length denomination, tuplet ratio and augmentation dots.

Tuplets
-------
A tuplet ``num:den`` plays *num* notes in the time normally taken by *den*,
so a 3:2 triplet scales each note by 2/3.  The numerator should exceed the
denominator; 5:2 is better written 5:4 in 4/4.  For a 5/4 time signature,
write 6:5 for a sextuplet.

Text form
---------
One case-sensitive letter per denomination, shortest to longest::

    O  128th         T  eighth        W  whole
    X  64th          Q  quarter       V  double whole (breve)
    Y  32nd          U  half          L  quadruple whole (longa)
    S  16th

followed by one ``.`` per augmentation dot, e.g. ``Q..`` is a double-dotted
quarter note.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from scof.errors import MalformedMarking
from scof.fraction import Fraction

DOT = "."


class Denomination(Enum):
    """
    Base note length before tuplet and augmentation adjustment.

    Each member carries its text letter, the maximum number of augmentation
    dots it may take, and its length as a fraction of a whole note.
    """

    #: 128th note: no augmentation allowed
    DEN128 = ("O", 0, (1, 128))
    #: 64th note: 0 or 1 dots
    DEN64 = ("X", 1, (1, 64))
    #: 32nd note: up to 2 dots
    DEN32 = ("Y", 2, (1, 32))
    #: 16th note: up to 3 dots
    DEN16 = ("S", 3, (1, 16))
    #: eighth note: up to 4 dots
    DEN8 = ("T", 4, (1, 8))
    #: quarter note: up to 4 dots
    DEN4 = ("Q", 4, (1, 4))
    #: half note: up to 3 dots
    DEN2 = ("U", 3, (1, 2))
    #: whole note: up to 2 dots
    NUM1 = ("W", 2, (1, 1))
    #: double whole note: 0 or 1 dots
    NUM2 = ("V", 1, (2, 1))
    #: quadruple whole note: no augmentation allowed
    NUM4 = ("L", 0, (4, 1))

    def __init__(self, letter: str, max_dots: int, base: tuple[int, int]) -> None:
        self.letter = letter
        self.max_dots = max_dots
        self.base = Fraction(*base)

    @classmethod
    def from_letter(cls, letter: str) -> Denomination | None:
        return _BY_LETTER.get(letter)

    @classmethod
    def from_index(cls, index: int) -> Denomination:
        """Denomination by position, 0 (128th) through 9 (longa).

        Raises:
            IndexError: If *index* is outside 0..9.
        """
        if not 0 <= index < len(_ORDERED):
            raise IndexError(f"denomination index {index} outside 0..{len(_ORDERED) - 1}")
        return _ORDERED[index]

    @property
    def index(self) -> int:
        return _ORDERED.index(self)


_ORDERED: list[Denomination] = list(Denomination)
_BY_LETTER: dict[str, Denomination] = {d.letter: d for d in Denomination}


def max_dots(denomination: Denomination) -> int:
    """Legal augmentation-dot maximum for *denomination*."""
    return denomination.max_dots


@dataclass
class Duration:
    """
    A note duration.

    Attributes:
        denomination: Base note length.
        tuplet_num:   Tuplet numerator (notes played), 1..255.
        tuplet_den:   Tuplet denominator (notes replaced), 1..255.
        dots:         Augmentation dots, 0..``max_dots(denomination)``.
    """

    denomination: Denomination
    tuplet_num: int = 1
    tuplet_den: int = 1
    dots: int = 0

    def __post_init__(self) -> None:
        for name in ("tuplet_num", "tuplet_den"):
            value = getattr(self, name)
            if not 1 <= value <= 255:
                raise ValueError(f"{name} must be within 1..255, got {value}")
        limit = max_dots(self.denomination)
        if not 0 <= self.dots <= limit:
            raise ValueError(
                f"{self.denomination.name} allows 0..{limit} augmentation dots, got {self.dots}"
            )

    @classmethod
    def from_index(cls, index: int) -> Duration:
        return cls(Denomination.from_index(index))

    @property
    def can_augment(self) -> bool:
        return self.dots < max_dots(self.denomination)

    def augment(self) -> None:
        """Add one augmentation dot, saturating at the denomination maximum."""
        self.dots = min(self.dots + 1, max_dots(self.denomination))

    def diminish(self) -> None:
        """Remove one augmentation dot, saturating at zero."""
        self.dots = max(self.dots - 1, 0)

    def to_fraction(self) -> Fraction:
        """
        Length as a fraction of a whole note.

        The base length is scaled by the tuplet ratio (den/num) and by the
        augmentation factor ``(2**(d+1) - 1) / 2**d`` for *d* dots.
        """
        length = self.denomination.base * Fraction(self.tuplet_den, self.tuplet_num)
        if self.dots:
            length = length * Fraction(2 ** (self.dots + 1) - 1, 2 ** self.dots)
        return length

    @classmethod
    def parse(cls, text: str) -> Duration:
        """
        Parse the letter-plus-dots text form.

        Raises:
            MalformedMarking: On an empty string, an unknown letter, a
                non-dot suffix character, or more dots than allowed.
        """
        if not text:
            raise MalformedMarking(text, 0, 0, "empty duration")

        denomination = Denomination.from_letter(text[0])
        if denomination is None:
            raise MalformedMarking(text, 0, 1, f"unknown duration letter {text[0]!r}")

        duration = cls(denomination)
        for i, char in enumerate(text[1:], start=1):
            if char != DOT:
                raise MalformedMarking(text, i, len(text), f"unexpected {char!r} after duration")
            if not duration.can_augment:
                raise MalformedMarking(
                    text, i, len(text),
                    f"{denomination.name} allows at most {max_dots(denomination)} dots",
                )
            duration.augment()
        return duration

    def __str__(self) -> str:
        return self.denomination.letter + DOT * self.dots
