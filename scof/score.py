"""Score: the document root, with cursor-addressed marking access and edits."""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field
from typing import Any

from scof.cursor import Cursor
from scof.duration import Duration
from scof.errors import MalformedMarking, OutOfRangeError
from scof.fraction import Fraction
from scof.models import Bar, Chan, Instrument, Meta, Movement, Style, Synth
from scof.note import Note, format_note, parse_note
from scof.pitch import Pitch

logger = logging.getLogger(__name__)

#: Cursors always address the first movement.
CURSOR_MOVEMENT = 0
DEFAULT_TITLE = "Untitled Score"


def _get(items: list[Any], index: int) -> Any | None:
    """Bounds-checked list access that never wraps on negative indices."""
    if 0 <= index < len(items):
        return items[index]
    return None


@dataclass
class Score:
    """
    A whole score.

    Attributes:
        title:     Title of the piece (at most 64 characters when packaged).
        cover:     Cover image bytes, if any.
        meta:      Metadata for the piece.
        style:     Rendering style.
        synth:     Playback synthesis settings.
        soundfont: Instruments.
        movement:  Movements in order.
    """

    title: str = DEFAULT_TITLE
    cover: bytes | None = None
    meta: Meta = field(default_factory=Meta)
    style: Style = field(default_factory=Style)
    synth: Synth = field(default_factory=Synth)
    soundfont: list[Instrument] = field(default_factory=lambda: [Instrument()])
    movement: list[Movement] = field(default_factory=lambda: [Movement.default()])

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _chan(self, cursor: Cursor, movement: int = CURSOR_MOVEMENT) -> Chan | None:
        mov = _get(self.movement, movement)
        if mov is None:
            return None
        bar = _get(mov.bar, cursor.measure)
        if bar is None:
            return None
        return _get(bar.chan, cursor.chan)

    def _marking_str(self, cursor: Cursor, movement: int = CURSOR_MOVEMENT) -> str | None:
        chan = self._chan(cursor, movement)
        if chan is None:
            return None
        return _get(chan.notes, cursor.marking)

    def _note_at(self, cursor: Cursor) -> tuple[Chan, Note]:
        """Decode the marking at *cursor* for an edit.

        Raises:
            OutOfRangeError: If nothing is stored at the cursor.
            MalformedMarking: If the stored text is not a note.
        """
        chan = self._chan(cursor)
        text = self._marking_str(cursor)
        if chan is None or text is None:
            raise OutOfRangeError(cursor)
        return chan, parse_note(text)

    def _rewrite(self, cursor: Cursor, chan: Chan, note: Note) -> None:
        text = format_note(note)
        logger.debug("rewrite marking %s: %r -> %r", cursor, chan.notes[cursor.marking], text)
        chan.notes[cursor.marking] = text

    def last_measure(self, movement: int = CURSOR_MOVEMENT) -> Bar | None:
        mov = _get(self.movement, movement)
        if mov is None or not mov.bar:
            return None
        return mov.bar[-1]

    def push_measure(self, bar: Bar, movement: int = CURSOR_MOVEMENT) -> None:
        mov = _get(self.movement, movement)
        if mov is not None:
            mov.bar.append(bar)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def new_measure(self) -> int | None:
        """
        Append a bar with a whole rest in each channel of the previous bar.

        Returns:
            Index of the new measure, or None if the movement has no bars.
        """
        last_bar = self.last_measure()
        if last_bar is None:
            return None

        self.push_measure(Bar(sig=None, chan=[Chan() for _ in last_bar.chan], repeat=[]))
        index = len(self.movement[CURSOR_MOVEMENT].bar) - 1
        logger.debug("new measure %d with %d channel(s)", index, len(last_bar.chan))
        return index

    def marking_len(self, cursor: Cursor) -> int:
        """
        Count the markings of the cursor's (measure, channel).

        Probes from marking 0 and stops at the first index that is missing or
        does not parse, so a malformed marking ends the measure.
        """
        probe = Cursor(cursor.measure, cursor.chan, 0)
        while self.marking(probe) is not None:
            probe.right_unchecked()
        return probe.marking

    def marking(self, cursor: Cursor) -> Note | None:
        """The note at *cursor*, or None if absent or not parseable."""
        text = self._marking_str(cursor)
        if text is None:
            return None
        try:
            return parse_note(text)
        except MalformedMarking as exc:
            logger.debug("marking at %s does not parse: %s", cursor, exc)
            return None

    def insert_after(self, cursor: Cursor, note: Note) -> Cursor | None:
        """
        Insert *note* right after the cursor's marking.

        Returns:
            Cursor of the inserted marking, or None if the channel does not
            exist or the cursor is past the end of it.
        """
        chan = self._chan(cursor)
        index = cursor.marking + 1
        if chan is None or cursor.marking < 0 or index > len(chan.notes):
            return None

        chan.notes.insert(index, format_note(note))
        logger.debug("inserted %s at %s", note, cursor)
        return Cursor(cursor.measure, cursor.chan, index)

    def remove_after(self, cursor: Cursor) -> Note | None:
        """
        Remove the marking right after the cursor's marking.

        Returns:
            The removed note, or None if there is no marking there.

        Raises:
            MalformedMarking: If the marking is not a note; it is left in place.
        """
        chan = self._chan(cursor)
        index = cursor.marking + 1
        if chan is None or cursor.marking < 0 or index >= len(chan.notes):
            return None

        note = parse_note(chan.notes[index])
        del chan.notes[index]
        logger.debug("removed %s after %s", note, cursor)
        return note

    def set_pitch(self, cursor: Cursor, pitch: Pitch) -> None:
        """Set the pitch class and octave of the note at *cursor*."""
        chan, note = self._note_at(cursor)
        note.set_pitch(pitch)
        self._rewrite(cursor, chan, note)

    def set_duration(self, cursor: Cursor, duration: Fraction) -> None:
        """Set the duration (fraction of a whole note) of the note at *cursor*."""
        chan, note = self._note_at(cursor)
        note.set_duration(duration)
        self._rewrite(cursor, chan, note)

    def set_duration_indexed(self, cursor: Cursor, index: int) -> None:
        """
        Set the duration of the note at *cursor* to a plain denomination.

        Args:
            index: 0 (128th note) through 9 (quadruple whole note).
        """
        self.set_duration(cursor, Duration.from_index(index).to_fraction())

    def to_dict(self) -> dict[str, Any]:
        """Document records as plain data; the cover image is left out."""
        return {
            "title": self.title,
            "meta": asdict(self.meta),
            "style": asdict(self.style),
            "synth": asdict(self.synth),
            "soundfont": [asdict(i) for i in self.soundfont],
            "movement": [m.to_dict() for m in self.movement],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any], cover: bytes | None = None) -> Score:
        return cls(
            title=data.get("title", DEFAULT_TITLE),
            cover=cover,
            meta=Meta.from_dict(data.get("meta", {})),
            style=Style.from_dict(data.get("style", {})),
            synth=Synth.from_dict(data.get("synth", {})),
            soundfont=[Instrument.from_dict(i) for i in data.get("soundfont", [{}])],
            movement=(
                [Movement.from_dict(m) for m in data["movement"]]
                if "movement" in data
                else [Movement.default()]
            ),
        )
