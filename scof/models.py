"""
Plain document records for a score.

Every record is a dataclass whose fields have defaults, so a partially
specified mapping (e.g. loaded from JSON) fills in the rest.  ``to_dict``
uses :func:`dataclasses.asdict`; ``from_dict`` ignores unknown keys.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field, fields
from typing import Any

WHOLE_REST = "1R"
DEFAULT_TIME_SIGNATURE = "4/4"
DEFAULT_TEMPO = 120
DEFAULT_COMPOSER = "Anonymous"


def _known(cls: type, data: dict[str, Any]) -> dict[str, Any]:
    """Keep only the keys that name a field of *cls*."""
    names = {f.name for f in fields(cls)}
    return {k: v for k, v in data.items() if k in names}


@dataclass
class Sig:
    """
    A signature.

    Attributes:
        key:   Key signature, 0-23 quarter steps above C (24+ reserved for
               middle eastern and Indian key signatures).
        time:  Time signature as ``"beats/note_len"``.
        tempo: Beats per minute.
        swing: Percent swing; None means straight (50).
    """

    key: int = 0
    time: str = DEFAULT_TIME_SIGNATURE
    tempo: int = DEFAULT_TEMPO
    swing: int | None = None

    def __post_init__(self) -> None:
        """
        Raises:
            ValueError: If ``time`` is not two positive integers joined by "/".
        """
        top, sep, bottom = str(self.time).partition("/")
        if not (sep and top.isdecimal() and bottom.isdecimal() and int(top) > 0 and int(bottom) > 0):
            raise ValueError(f"time signature {self.time!r} is not of the form 'beats/note_len'")

    @property
    def beats(self) -> tuple[int, int]:
        """Time signature as ``(beats, beat_value)``."""
        top, _, bottom = self.time.partition("/")
        return int(top), int(bottom)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Sig:
        return cls(**_known(cls, data))


@dataclass
class Chan:
    """One channel's markings (and lyrics) within a bar."""

    notes: list[str] = field(default_factory=lambda: [WHOLE_REST])
    lyric: list[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Chan:
        return cls(**_known(cls, data))


@dataclass
class Bar:
    """
    A bar (measure) of music.

    Attributes:
        sig:    Index into the movement's signature list; None keeps the
                previous signature.
        chan:   Channel contents, one per instrument.
        repeat: Repeat symbols for this bar (see :mod:`scof.marking`).
    """

    sig: int | None = None
    chan: list[Chan] = field(default_factory=list)
    repeat: list[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Bar:
        known = _known(cls, data)
        known["chan"] = [Chan.from_dict(c) for c in known.get("chan", [])]
        return cls(**known)


@dataclass
class Movement:
    """A movement: its signatures and its bars in order."""

    sig: list[Sig] = field(default_factory=list)
    bar: list[Bar] = field(default_factory=list)

    @classmethod
    def default(cls) -> Movement:
        """One 4/4 signature and a single bar holding one whole-rest channel."""
        return cls(sig=[Sig()], bar=[Bar(sig=0, chan=[Chan()])])

    def signature_at(self, measure: int) -> Sig:
        """The signature in effect at *measure* (the default one if none is set)."""
        current: Sig | None = None
        for bar in self.bar[: measure + 1]:
            if bar.sig is not None and bar.sig < len(self.sig):
                current = self.sig[bar.sig]
        if current is None:
            return self.sig[0] if self.sig else Sig()
        return current

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Movement:
        return cls(
            sig=[Sig.from_dict(s) for s in data.get("sig", [])],
            bar=[Bar.from_dict(b) for b in data.get("bar", [])],
        )


@dataclass
class Arranger:
    name: str
    ensemble: str | None = None


@dataclass
class Meta:
    """
    Score metadata.

    ``grade`` is playing level times two, to allow grade 1.5 and so on.
    """

    composer: str = DEFAULT_COMPOSER
    subtitle: str | None = None
    number: int | None = None
    lyricist: str | None = None
    translator: str | None = None
    performers: str | None = None
    arranger: list[Arranger] = field(default_factory=list)
    revised: list[str] = field(default_factory=list)
    licenses: list[str] = field(default_factory=list)
    grade: int | None = None
    movement: list[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Meta:
        known = _known(cls, data)
        known["arranger"] = [Arranger(**_known(Arranger, a)) for a in known.get("arranger", [])]
        return cls(**known)


@dataclass
class SigStyle:
    """How a signature is engraved."""

    tempo: str | None = None
    time_symbol: bool = False  # C for 4/4
    swing_text: str | None = None


@dataclass
class Style:
    sig: list[SigStyle] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Style:
        return cls(sig=[SigStyle(**_known(SigStyle, s)) for s in data.get("sig", [])])


@dataclass
class SynthChan:
    """Per-channel synthesis settings."""

    waveform: list[str] = field(default_factory=list)
    effect: list[int] = field(default_factory=list)
    volume: float = 1.0


@dataclass
class Synth:
    """Playback synthesis: effect presets and channel settings."""

    effect: list[dict[str, Any]] = field(default_factory=list)
    chan: list[SynthChan] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Synth:
        return cls(
            effect=list(data.get("effect", [])),
            chan=[SynthChan(**_known(SynthChan, c)) for c in data.get("chan", [])],
        )


@dataclass
class Instrument:
    """Waveform names for an instrument, with optional per-technique overrides."""

    waveform: str = ""
    mute: str | None = None
    cup_mute: str | None = None
    harmon_mute: str | None = None
    plunger_mute: str | None = None
    harmonic: str | None = None
    ppp: str | None = None
    pp: str | None = None
    p: str | None = None
    mp: str | None = None
    mf: str | None = None
    f: str | None = None
    ff: str | None = None
    fff: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Instrument:
        return cls(**_known(cls, data))
