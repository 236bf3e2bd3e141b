"""Pitch model: letter names, accidentals, octaves and diatonic steps."""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum, IntEnum

SEMITONES_PER_OCTAVE = 12
STEPS_PER_OCTAVE = 7


class PitchName(Enum):
    """A pitch letter, valued by its diatonic step above C."""

    C = 0
    D = 1
    E = 2
    F = 3
    G = 4
    A = 5
    B = 6

    @property
    def semitone(self) -> int:
        """Semitones above C for the natural form of this letter."""
        return _NATURAL_SEMITONES[self.value]

    @classmethod
    def from_letter(cls, letter: str) -> PitchName | None:
        """Look up an upper-case letter; returns None for anything else."""
        return cls.__members__.get(letter) if len(letter) == 1 else None

    def next(self) -> PitchName:
        return PitchName((self.value + 1) % STEPS_PER_OCTAVE)

    def previous(self) -> PitchName:
        return PitchName((self.value - 1) % STEPS_PER_OCTAVE)


_NATURAL_SEMITONES = (0, 2, 4, 5, 7, 9, 11)


class PitchAccidental(Enum):
    """
    An explicit accidental, valued by its marking-text symbol.

    Offsets are in semitones (quarter tones are halves).
    """

    DOUBLE_FLAT = "bb"
    FLAT_QUARTER_FLAT = "db"
    FLAT = "b"
    QUARTER_FLAT = "d"
    NATURAL = "n"
    QUARTER_SHARP = "t"
    SHARP = "#"
    SHARP_QUARTER_SHARP = "t#"
    DOUBLE_SHARP = "x"

    @property
    def symbol(self) -> str:
        return self.value

    @property
    def offset(self) -> float:
        return _ACCIDENTAL_OFFSETS[self]


_ACCIDENTAL_OFFSETS = {
    PitchAccidental.DOUBLE_FLAT: -2.0,
    PitchAccidental.FLAT_QUARTER_FLAT: -1.5,
    PitchAccidental.FLAT: -1.0,
    PitchAccidental.QUARTER_FLAT: -0.5,
    PitchAccidental.NATURAL: 0.0,
    PitchAccidental.QUARTER_SHARP: 0.5,
    PitchAccidental.SHARP: 1.0,
    PitchAccidental.SHARP_QUARTER_SHARP: 1.5,
    PitchAccidental.DOUBLE_SHARP: 2.0,
}

#: Accidental symbols ordered so that two-character symbols match first.
ACCIDENTAL_SYMBOLS: list[str] = sorted(
    (acc.symbol for acc in PitchAccidental), key=len, reverse=True
)


class PitchOctave(IntEnum):
    """Scientific octave number, -1 through 9 (C4 is middle C)."""

    OCTAVE_NEG1 = -1
    OCTAVE_0 = 0
    OCTAVE_1 = 1
    OCTAVE_2 = 2
    OCTAVE_3 = 3
    OCTAVE_4 = 4
    OCTAVE_5 = 5
    OCTAVE_6 = 6
    OCTAVE_7 = 7
    OCTAVE_8 = 8
    OCTAVE_9 = 9

    @classmethod
    def from_char(cls, char: str) -> PitchOctave | None:
        """Decode the single octave character of a marking ("-" is octave -1)."""
        if char == "-":
            return cls.OCTAVE_NEG1
        if len(char) == 1 and char.isdigit() and char.isascii():
            return cls(int(char))
        return None

    @property
    def char(self) -> str:
        return "-" if self is PitchOctave.OCTAVE_NEG1 else str(int(self))

    def lower(self) -> PitchOctave | None:
        """The octave below, or None below octave -1."""
        if self is PitchOctave.OCTAVE_NEG1:
            return None
        return PitchOctave(self - 1)

    def higher(self) -> PitchOctave | None:
        """The octave above, or None above octave 9."""
        if self is PitchOctave.OCTAVE_9:
            return None
        return PitchOctave(self + 1)


@dataclass(frozen=True)
class PitchClass:
    """A letter name with an optional accidental (None = from key signature)."""

    name: PitchName
    accidental: PitchAccidental | None = None

    def __str__(self) -> str:
        symbol = self.accidental.symbol if self.accidental is not None else ""
        return f"{self.name.name}{symbol}"


@dataclass(frozen=True)
class Pitch:
    """A pitch class placed in an octave."""

    pitch_class: PitchClass
    octave: PitchOctave

    @classmethod
    def of(
        cls,
        name: PitchName,
        octave: int,
        accidental: PitchAccidental | None = None,
    ) -> Pitch:
        """Shorthand constructor: ``Pitch.of(PitchName.C, 4)``."""
        return cls(PitchClass(name, accidental), PitchOctave(octave))

    @property
    def name(self) -> PitchName:
        return self.pitch_class.name

    @property
    def accidental(self) -> PitchAccidental | None:
        return self.pitch_class.accidental

    def diatonic_index(self) -> int:
        """Diatonic steps above middle C (C4 = 0, B3 = -1, C5 = 7)."""
        return self.name.value + STEPS_PER_OCTAVE * (int(self.octave) - 4)

    def midi_number(self) -> int:
        """
        MIDI key number (C4 = 60).  Missing accidentals count as natural and
        quarter tones round to the nearest semitone.
        """
        offset = self.accidental.offset if self.accidental is not None else 0.0
        semitone = self.name.semitone + offset
        return int(round((int(self.octave) + 1) * SEMITONES_PER_OCTAVE + semitone))

    def step_up(self) -> Pitch:
        """One diatonic step up; the octave rolls over at B -> C.

        At the top of the octave range the pitch is returned unchanged.
        """
        octave: PitchOctave | None = self.octave
        if self.name is PitchName.B:
            octave = self.octave.higher()
        if octave is None:
            return self
        return Pitch(replace(self.pitch_class, name=self.name.next()), octave)

    def step_down(self) -> Pitch:
        """One diatonic step down; the octave rolls over at C -> B."""
        octave: PitchOctave | None = self.octave
        if self.name is PitchName.C:
            octave = self.octave.lower()
        if octave is None:
            return self
        return Pitch(replace(self.pitch_class, name=self.name.previous()), octave)

    def __str__(self) -> str:
        return f"{self.pitch_class}{self.octave.char}"
