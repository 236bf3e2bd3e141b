"""Markings: every kind of event a channel's timeline can hold."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union

from scof.note import Note


class Dynamic(Enum):
    """Change in the intensity of sound."""

    PPPPPP = "pppppp"
    PPPPP = "ppppp"
    PPPP = "pppp"
    PPP = "ppp"
    PP = "pp"
    P = "p"
    MP = "mp"
    MF = "mf"
    F = "f"
    FF = "ff"
    FFF = "fff"
    FFFF = "ffff"
    FFFFF = "fffff"
    FFFFFF = "ffffff"
    N = "n"
    SF = "sf"
    SFZ = "sfz"
    FP = "fp"
    SFP = "sfp"


class Event(Enum):
    """Non-pitched markings that carry no data of their own."""

    BREATH = "breath"
    CAESURA_SHORT = "caesura_short"  # short grand pause for all instruments
    CAESURA_LONG = "caesura_long"
    CRESC = "cresc"
    DIM = "dim"
    PIZZ = "pizz"  # pluck
    ARCO = "arco"  # bowed
    MUTE = "mute"  # con sordino
    OPEN = "open"  # senza sordino
    REPEAT = "repeat"


@dataclass
class GraceInto:
    """Grace note leading into the following note."""

    note: Note


@dataclass
class GraceOutOf:
    """Grace note leading out of the preceding note."""

    note: Note


Marking = Union[Note, GraceInto, GraceOutOf, Dynamic, Event]


class RepeatSymbol(Enum):
    """A repeat or navigation symbol attached to a bar."""

    OPEN = "||:"
    CLOSE = ":||"
    SEGNO = "segno"  # sign to jump back to
    DC = "D.C."  # jump back to the beginning
    DS = "D.S."  # jump back to the sign
    CODA = "coda"  # beginning of the coda
    TO_CODA = "to coda"
    FINE = "fine"  # end here after jumping back


@dataclass(frozen=True)
class Ending:
    """Numbered ending (volta bracket)."""

    number: int

    def __str__(self) -> str:
        return f"{self.number}."


Repeat = Union[RepeatSymbol, Ending]


def parse_repeat(text: str) -> Repeat:
    """
    Decode a bar's repeat string (``"||:"``, ``"D.S."``, ``"2."`` ...).

    Raises:
        ValueError: If the text names no known repeat symbol.
    """
    cleaned = text.strip()
    for symbol in RepeatSymbol:
        if symbol.value == cleaned:
            return symbol
    number = cleaned[:-1] if cleaned.endswith(".") else cleaned
    if number.isdigit() and 0 < int(number) < 256:
        return Ending(int(number))
    raise ValueError(f"Unknown repeat symbol {text!r}")


def format_repeat(repeat: Repeat) -> str:
    if isinstance(repeat, Ending):
        return str(repeat)
    return repeat.value
