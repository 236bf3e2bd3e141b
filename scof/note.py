"""
Note: the one marking with a text encoding, and its codec.

Grammar, left to right::

    marking       := duration pitch-or-rest articulation*
                   | "R" articulation*          (whole rest)
    duration      := [digits "/"] digits      e.g. "8", "3/8"
    pitch-or-rest := "R" | letter [accidental] octave
    letter        := "A" .. "G"
    accidental    := "bb" | "db" | "b" | "d" | "n" | "t" | "#" | "t#" | "x"
    octave        := "-" | "0" .. "9"          ("-" is octave -1)
    articulation  := "^" | ">" | "." | "'" | "_"

The duration is a fraction of a whole note: ``4C4`` is a quarter-note middle
C, ``3/8R`` a dotted-quarter rest.  A rest without a duration is a whole
rest, so ``R`` reads as ``1R`` and ``R.`` as ``1R.``.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Callable

from scof.articulation import Articulation
from scof.errors import MalformedMarking
from scof.fraction import U8_MAX, Fraction
from scof.pitch import ACCIDENTAL_SYMBOLS, Pitch, PitchAccidental, PitchClass, PitchName, PitchOctave

REST = "R"
TUPLET_SEPARATOR = "/"
WHOLE = Fraction(1, 1)


@dataclass
class Note:
    """
    A pitched note or a rest.

    Attributes:
        pitch:        Pitch and octave; None for a rest.
        duration:     Length as a fraction of a whole note.
        articulation: Articulations in marking order.
    """

    pitch: Pitch | None
    duration: Fraction
    articulation: list[Articulation] = field(default_factory=list)

    @property
    def is_rest(self) -> bool:
        return self.pitch is None

    # ------------------------------------------------------------------
    # Codec
    # ------------------------------------------------------------------

    @classmethod
    def parse(cls, text: str) -> Note:
        """
        Decode one marking string.

        Raises:
            MalformedMarking: With the span of the first offending characters.
        """
        return _NoteParser(text).parse()

    def __str__(self) -> str:
        parts: list[str] = []
        if self.duration.num != 1:
            parts.append(f"{self.duration.num}{TUPLET_SEPARATOR}")
        parts.append(str(self.duration.den))
        parts.append(REST if self.pitch is None else str(self.pitch))
        parts.extend(a.symbol for a in self.articulation if a.symbol is not None)
        return "".join(parts)

    # ------------------------------------------------------------------
    # Editing
    # ------------------------------------------------------------------

    def visual_distance(self) -> int:
        """
        Diatonic steps from middle C (C4), negated so that higher notes are
        further up the page (smaller y).  Rests return 0.
        """
        if self.pitch is None:
            return 0
        return -self.pitch.diatonic_index()

    def set_pitch(self, pitch: Pitch) -> None:
        self.pitch = pitch

    def set_duration(self, duration: Fraction) -> None:
        self.duration = duration

    def _move_step(self, create: Pitch, run: Callable[[Pitch], Pitch]) -> Note:
        pitch = run(self.pitch) if self.pitch is not None else create
        return replace(self, pitch=pitch, articulation=list(self.articulation))

    def step_up(self, create: Pitch) -> Note:
        """
        One step up within the key.

        Args:
            create: Pitch given to the note when it is a rest.
        """
        return self._move_step(create, Pitch.step_up)

    def step_down(self, create: Pitch) -> Note:
        """
        One step down within the key.

        Args:
            create: Pitch given to the note when it is a rest.
        """
        return self._move_step(create, Pitch.step_down)

    # No enharmonic spelling policy exists yet, so chromatic and microtonal
    # moves fall back to the diatonic step.
    def half_step_up(self, create: Pitch) -> Note:
        return self.step_up(create)

    def half_step_down(self, create: Pitch) -> Note:
        return self.step_down(create)

    def quarter_step_up(self, create: Pitch) -> Note:
        return self.step_up(create)

    def quarter_step_down(self, create: Pitch) -> Note:
        return self.step_down(create)


def parse_note(text: str) -> Note:
    """Module-level alias for :meth:`Note.parse`."""
    return Note.parse(text)


def format_note(note: Note) -> str:
    return str(note)


class _NoteParser:
    """Single-use left-to-right scanner over one marking string."""

    def __init__(self, text: str) -> None:
        self.text = text
        self.pos = 0

    def _fail(self, start: int, end: int, reason: str) -> MalformedMarking:
        return MalformedMarking(self.text, start, end, reason)

    def _peek(self) -> str:
        return self.text[self.pos:self.pos + 1]

    def _digits(self) -> tuple[str, int]:
        start = self.pos
        while self.pos < len(self.text) and self.text[self.pos] in "0123456789":
            self.pos += 1
        return self.text[start:self.pos], start

    def _u8(self, digits: str, start: int) -> int:
        value = int(digits)
        if value > U8_MAX:
            raise self._fail(start, start + len(digits), f"duration term {value} exceeds {U8_MAX}")
        return value

    def _duration(self) -> Fraction:
        digits, start = self._digits()
        if self._peek() == TUPLET_SEPARATOR:
            if not digits:
                raise self._fail(start, self.pos + 1, "missing duration numerator")
            num = self._u8(digits, start)
            self.pos += 1
            digits, start = self._digits()
            if not digits:
                raise self._fail(start, start + 1, "missing duration denominator")
        elif not digits:
            if self._peek() == REST:
                return WHOLE
            raise self._fail(start, start + 1, "missing duration")
        else:
            num = 1

        den = self._u8(digits, start)
        if den == 0:
            raise self._fail(start, self.pos, "zero duration denominator")
        return Fraction(num, den)

    def _pitch(self) -> Pitch | None:
        if self._peek() == REST:
            self.pos += 1
            return None

        if self.pos >= len(self.text):
            raise self._fail(self.pos, self.pos, "missing pitch or rest")
        letter = self.text[self.pos]
        name = PitchName.from_letter(letter)
        if name is None:
            raise self._fail(self.pos, self.pos + 1, f"unknown pitch letter {letter!r}")
        self.pos += 1

        accidental: PitchAccidental | None = None
        for symbol in ACCIDENTAL_SYMBOLS:
            if self.text.startswith(symbol, self.pos):
                accidental = PitchAccidental(symbol)
                self.pos += len(symbol)
                break

        octave = PitchOctave.from_char(self._peek())
        if octave is None:
            raise self._fail(self.pos, self.pos + 1, "missing or invalid octave")
        self.pos += 1
        return Pitch(PitchClass(name, accidental), octave)

    def _articulations(self) -> list[Articulation]:
        found: list[Articulation] = []
        while self.pos < len(self.text):
            articulation = Articulation.from_symbol(self.text[self.pos])
            if articulation is None:
                raise self._fail(self.pos, len(self.text), "unexpected trailing characters")
            found.append(articulation)
            self.pos += 1
        return found

    def parse(self) -> Note:
        duration = self._duration()
        pitch = self._pitch()
        articulation = self._articulations()
        return Note(pitch=pitch, duration=duration, articulation=articulation)
