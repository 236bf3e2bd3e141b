"""Articulations (how a note is played) and their marking symbols."""

from enum import Enum


class Articulation(Enum):
    STACCATISSIMO = "staccatissimo"  # really separated
    STACCATO = "staccato"  # separated (short 1/2)
    TENUTO = "tenuto"
    MARCATO = "marcato"  # short sharp attack (2/3)
    ACCENT = "accent"  # sharp attack
    SLUR = "slur"
    GLISSANDO = "glissando"
    BEND_UP_INTO = "bend_up_into"
    BEND_DOWN_INTO = "bend_down_into"
    BEND_UP_OUT = "bend_up_out"
    BEND_DOWN_OUT = "bend_down_out"  # fall
    FERMATA = "fermata"
    MUTE = "mute"  # closed mute, or palm mute on guitar
    OPEN = "open"
    HARMONIC = "harmonic"
    TURN = "turn"
    TURN_INVERTED = "turn_inverted"
    TRILL = "trill"
    TREMOLO = "tremolo"
    STRUM_DOWN = "strum_down"  # arpeggio pitch up, strum guitar down
    STRUM_UP = "strum_up"
    PEDAL = "pedal"

    @property
    def symbol(self) -> str | None:
        """Marking-text symbol, or None for articulations without one."""
        return _SYMBOLS.get(self)

    @classmethod
    def from_symbol(cls, symbol: str) -> "Articulation | None":
        return _BY_SYMBOL.get(symbol)


_SYMBOLS = {
    Articulation.MARCATO: "^",
    Articulation.ACCENT: ">",
    Articulation.STACCATO: ".",
    Articulation.STACCATISSIMO: "'",
    Articulation.TENUTO: "_",
}
_BY_SYMBOL = {symbol: art for art, symbol in _SYMBOLS.items()}
