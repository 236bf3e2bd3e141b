"""MidiExporter: writes a movement's channels to a Standard MIDI File."""

from __future__ import annotations

import logging

from midiutil import MIDIFile

from scof.cursor import Cursor
from scof.errors import MalformedMarking
from scof.models import Movement
from scof.note import Note

logger = logging.getLogger(__name__)

# In midiutil Format 1 MIDI, track 0 is the conductor/tempo track.
# Channel n of the score is written to track n + 1.
TRACK_CONDUCTOR = 0
GM_PERCUSSION_CHANNEL = 9
MIDI_CHANNELS = 16
MIDI_KEY_MAX = 127
QUARTERS_PER_WHOLE = 4
# Matches midiutil's default resolution.
TICKS_PER_QUARTER = 960


def note_beats(note: Note) -> float:
    """Length of *note* in quarter-note beats, quantised to the tick grid."""
    ticks = note.duration.scale(QUARTERS_PER_WHOLE * TICKS_PER_QUARTER)
    return ticks / TICKS_PER_QUARTER


class MidiExporter:
    """
    Writes one data track per score channel.

    Track layout (Format 1)
    -----------------------
    Track 0: conductor track (tempo only, no notes)

    Track n + 1: channel n of every bar, in bar order.  Each bar starts at
    the beat where the previous one ended according to its time signature,
    so short bars are padded and overfull bars overlap the next one.

    Rests advance time.  Markings that do not parse, and pitches outside the
    MIDI key range 0..127, are skipped with a warning.  Missing accidentals
    are treated as naturals (key signatures are not applied) and quarter tones
    are rounded to the nearest semitone.
    """

    DEFAULT_VELOCITY = 80  # MIDI velocity (0-127)

    def __init__(self, tempo: int | None = None, velocity: int = DEFAULT_VELOCITY) -> None:
        """
        Args:
            tempo:    Playback tempo in BPM; defaults to the first signature's
                      tempo of the exported movement.
            velocity: MIDI note-on velocity.
        """
        self.tempo = tempo
        self.velocity = velocity

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _resolve_tempo(self, movement: Movement) -> int:
        if self.tempo is not None:
            return self.tempo
        return movement.signature_at(0).tempo

    def _bar_beats(self, movement: Movement, measure: int) -> float:
        beats, beat_value = movement.signature_at(measure).beats
        return beats * QUARTERS_PER_WHOLE / beat_value

    def _midi_channel(self, chan: int) -> int:
        """Map a score channel to a MIDI channel, skipping GM percussion."""
        channel = chan % (MIDI_CHANNELS - 1)
        return channel + 1 if channel >= GM_PERCUSSION_CHANNEL else channel

    def _channel_count(self, movement: Movement) -> int:
        return max((len(bar.chan) for bar in movement.bar), default=0)

    def _write_bar_channel(
        self, midi: MIDIFile, movement: Movement, cursor: Cursor, start_beat: float
    ) -> None:
        track = cursor.chan + 1
        channel = self._midi_channel(cursor.chan)
        position = start_beat

        for marking, text in enumerate(movement.bar[cursor.measure].chan[cursor.chan].notes):
            try:
                note = Note.parse(text)
            except MalformedMarking as exc:
                logger.warning(
                    "skipping marking %d of measure %d channel %d: %s",
                    marking, cursor.measure, cursor.chan, exc,
                )
                continue

            beats = note_beats(note)
            if note.pitch is not None:
                key = note.pitch.midi_number()
                if 0 <= key <= MIDI_KEY_MAX:
                    midi.addNote(
                        track=track,
                        channel=channel,
                        pitch=key,
                        time=position,
                        duration=beats,
                        volume=self.velocity,
                    )
                else:
                    logger.warning(
                        "skipping marking %d of measure %d channel %d: %s is outside MIDI keys 0..%d",
                        marking, cursor.measure, cursor.chan, note.pitch, MIDI_KEY_MAX,
                    )
            position += beats

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def build(self, movement: Movement) -> MIDIFile:
        """Render *movement* into an in-memory MIDIFile."""
        channels = self._channel_count(movement)
        midi = MIDIFile(
            numTracks=channels + 1,
            removeDuplicates=False,
            deinterleave=False,
            ticks_per_quarternote=TICKS_PER_QUARTER,
        )
        midi.addTempo(TRACK_CONDUCTOR, 0, self._resolve_tempo(movement))
        for chan in range(channels):
            midi.addTrackName(chan + 1, 0, f"Channel {chan + 1}")

        bar_start = 0.0
        for measure, bar in enumerate(movement.bar):
            for chan in range(len(bar.chan)):
                self._write_bar_channel(midi, movement, Cursor(measure, chan, 0), bar_start)
            bar_start += self._bar_beats(movement, measure)

        logger.debug("built MIDI with %d bar(s), %d channel(s)", len(movement.bar), channels)
        return midi

    def export(self, movement: Movement, output_path: str) -> None:
        """
        Write *movement* to a Standard MIDI File (SMF format 1).

        Raises:
            OSError: If the output file cannot be opened for writing.
        """
        midi = self.build(movement)
        with open(output_path, "wb") as f:
            midi.writeFile(f)
