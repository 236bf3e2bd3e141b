"""MusicXmlExporter: converts a movement to a music21 score and MusicXML."""

from __future__ import annotations

import fractions
import logging
from typing import Any

from scof.articulation import Articulation
from scof.errors import MalformedMarking
from scof.marking import RepeatSymbol, parse_repeat
from scof.models import WHOLE_REST, Movement, Sig
from scof.note import Note
from scof.pitch import Pitch, PitchAccidental

logger = logging.getLogger(__name__)

#: scof accidentals by their music21 accidental names
_ACCIDENTAL_NAMES: dict[PitchAccidental, str] = {
    PitchAccidental.DOUBLE_FLAT: "double-flat",
    PitchAccidental.FLAT_QUARTER_FLAT: "one-and-a-half-flat",
    PitchAccidental.FLAT: "flat",
    PitchAccidental.QUARTER_FLAT: "half-flat",
    PitchAccidental.NATURAL: "natural",
    PitchAccidental.QUARTER_SHARP: "half-sharp",
    PitchAccidental.SHARP: "sharp",
    PitchAccidental.SHARP_QUARTER_SHARP: "one-and-a-half-sharp",
    PitchAccidental.DOUBLE_SHARP: "double-sharp",
}

#: articulations with a music21 counterpart: (module, class name)
_NOTATIONS: dict[Articulation, tuple[str, str]] = {
    Articulation.STACCATISSIMO: ("articulations", "Staccatissimo"),
    Articulation.STACCATO: ("articulations", "Staccato"),
    Articulation.TENUTO: ("articulations", "Tenuto"),
    Articulation.MARCATO: ("articulations", "StrongAccent"),
    Articulation.ACCENT: ("articulations", "Accent"),
    Articulation.HARMONIC: ("articulations", "Harmonic"),
    Articulation.FERMATA: ("expressions", "Fermata"),
    Articulation.TRILL: ("expressions", "Trill"),
    Articulation.TURN: ("expressions", "Turn"),
    Articulation.TURN_INVERTED: ("expressions", "InvertedTurn"),
    Articulation.TREMOLO: ("expressions", "Tremolo"),
}


def quarter_length(note: Note) -> fractions.Fraction:
    """Duration of *note* in music21 quarter lengths."""
    return fractions.Fraction(4 * note.duration.num, note.duration.den)


class MusicXmlExporter:
    """
    Convert a movement into a music21 ``Score`` with one part per channel.

    Bars that lack a channel get a whole rest in that part.  Open and close
    repeats become repeat barlines.  Markings that do not parse are skipped
    with a warning.
    """

    def __init__(self, title: str = "") -> None:
        self.title = title

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _to_pitch(self, pitch: Pitch) -> Any:
        from music21 import pitch as m21pitch

        result = m21pitch.Pitch()
        result.step = pitch.name.name
        result.octave = int(pitch.octave)
        if pitch.accidental is not None:
            result.accidental = m21pitch.Accidental(_ACCIDENTAL_NAMES[pitch.accidental])
        return result

    def _add_notations(self, element: Any, articulation: list[Articulation]) -> None:
        from music21 import articulations, expressions

        modules = {"articulations": articulations, "expressions": expressions}
        for art in articulation:
            target = _NOTATIONS.get(art)
            if target is None:
                continue
            module_name, class_name = target
            notation = getattr(modules[module_name], class_name)()
            if module_name == "articulations":
                element.articulations.append(notation)
            else:
                element.expressions.append(notation)

    def _to_element(self, note: Note) -> Any:
        from music21 import note as m21note

        length = quarter_length(note)
        if note.pitch is None:
            element = m21note.Rest(quarterLength=length)
        else:
            element = m21note.Note(self._to_pitch(note.pitch), quarterLength=length)
        self._add_notations(element, note.articulation)
        return element

    def _add_repeats(self, measure: Any, repeats: list[str], index: int) -> None:
        from music21 import bar as m21bar

        for text in repeats:
            try:
                repeat = parse_repeat(text)
            except ValueError as exc:
                logger.warning("skipping repeat of measure %d: %s", index, exc)
                continue
            if repeat is RepeatSymbol.OPEN:
                measure.leftBarline = m21bar.Repeat(direction="start")
            elif repeat is RepeatSymbol.CLOSE:
                measure.rightBarline = m21bar.Repeat(direction="end")

    def _build_part(self, movement: Movement, chan: int) -> Any:
        from music21 import meter, stream, tempo

        part = stream.Part(id=f"P{chan + 1}")
        part.partName = f"Channel {chan + 1}"
        current: Sig | None = None

        for index, bar in enumerate(movement.bar):
            measure = stream.Measure(number=index + 1)
            sig = movement.signature_at(index)
            if sig != current:
                measure.insert(0, meter.TimeSignature(sig.time))
                if current is None or sig.tempo != current.tempo:
                    measure.insert(0, tempo.MetronomeMark(number=sig.tempo))
                current = sig

            texts = bar.chan[chan].notes if chan < len(bar.chan) else [WHOLE_REST]
            for marking, text in enumerate(texts):
                try:
                    note = Note.parse(text)
                except MalformedMarking as exc:
                    logger.warning(
                        "skipping marking %d of measure %d channel %d: %s",
                        marking, index, chan, exc,
                    )
                    continue
                measure.append(self._to_element(note))
            self._add_repeats(measure, bar.repeat, index)
            part.append(measure)

        return part

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def to_stream(self, movement: Movement) -> Any:
        """Build a music21 ``stream.Score`` for *movement*."""
        from music21 import metadata, stream

        score = stream.Score()
        info = metadata.Metadata()
        info.title = self.title
        score.insert(0, info)

        channels = max((len(bar.chan) for bar in movement.bar), default=0)
        for chan in range(channels):
            score.insert(0, self._build_part(movement, chan))
        return score

    def to_musicxml_bytes(self, movement: Movement) -> bytes:
        from music21.musicxml.m21ToXml import GeneralObjectExporter

        exporter = GeneralObjectExporter(self.to_stream(movement))
        return exporter.parse()

    def export(self, movement: Movement, output_path: str) -> None:
        """
        Write *movement* as a MusicXML file.

        Raises:
            OSError: If the output file cannot be written.
        """
        content = self.to_musicxml_bytes(movement)
        with open(output_path, "wb") as fh:
            fh.write(content)
