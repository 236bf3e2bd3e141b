"""Unit tests for MidiExporter timing, channel layout and file output."""

import logging
from typing import Any

import pytest
from midiutil import MIDIFile

from scof.midi_exporter import GM_PERCUSSION_CHANNEL, MidiExporter, note_beats
from scof.models import Bar, Chan, Movement, Sig
from scof.note import Note


def _movement() -> Movement:
    return Movement(
        sig=[Sig(time="3/4", tempo=90)],
        bar=[
            Bar(sig=0, chan=[Chan(notes=["4C4", "4R", "4E4"]), Chan(notes=["2/1C3"])]),
            Bar(chan=[Chan(notes=["2G4"]), Chan(notes=["1R"])]),
        ],
    )


@pytest.fixture
def recorded_notes(monkeypatch: pytest.MonkeyPatch) -> list[dict[str, Any]]:
    """Capture every addNote call instead of writing events."""
    calls: list[dict[str, Any]] = []

    def _record(self: MIDIFile, **kwargs: Any) -> None:
        calls.append(kwargs)

    monkeypatch.setattr(MIDIFile, "addNote", _record)
    return calls


def test_note_beats() -> None:
    assert note_beats(Note.parse("4C4")) == 1.0
    assert note_beats(Note.parse("8R")) == 0.5
    assert note_beats(Note.parse("3/8C4")) == 1.5
    assert note_beats(Note.parse("1R")) == 4.0


def test_midi_channel_skips_percussion() -> None:
    exporter = MidiExporter()
    channels = [exporter._midi_channel(c) for c in range(16)]
    assert GM_PERCUSSION_CHANNEL not in channels
    assert channels[:3] == [0, 1, 2]
    assert channels[9] == 10


def test_tempo_defaults_to_first_signature() -> None:
    assert MidiExporter()._resolve_tempo(_movement()) == 90
    assert MidiExporter(tempo=140)._resolve_tempo(_movement()) == 140
    assert MidiExporter()._resolve_tempo(Movement()) == 120


def test_bar_beats_follow_time_signature() -> None:
    movement = Movement(sig=[Sig(time="6/8")], bar=[Bar(sig=0, chan=[Chan()])])
    assert MidiExporter()._bar_beats(movement, 0) == 3.0
    assert MidiExporter()._bar_beats(_movement(), 1) == 3.0


def test_build_places_notes_and_skips_rests(recorded_notes: list[dict[str, Any]]) -> None:
    MidiExporter(velocity=100).build(_movement())
    placed = [(n["track"], n["pitch"], n["time"], n["duration"]) for n in recorded_notes]
    assert placed == [
        (1, 60, 0.0, 1.0),
        (1, 64, 2.0, 1.0),
        (2, 48, 0.0, 8.0),
        (1, 67, 3.0, 2.0),
    ]
    assert {n["volume"] for n in recorded_notes} == {100}


def test_build_skips_malformed_markings(
    recorded_notes: list[dict[str, Any]], caplog: pytest.LogCaptureFixture
) -> None:
    movement = Movement(sig=[Sig()], bar=[Bar(sig=0, chan=[Chan(notes=["4C4", "4H4", "4D4"])])])
    with caplog.at_level(logging.WARNING, logger="scof.midi_exporter"):
        MidiExporter().build(movement)
    assert [n["time"] for n in recorded_notes] == [0.0, 1.0]
    assert "skipping marking 1" in caplog.text


def test_build_returns_midifile() -> None:
    assert isinstance(MidiExporter().build(_movement()), MIDIFile)


def test_export_writes_standard_midi_file(tmp_path) -> None:
    output = tmp_path / "out.mid"
    MidiExporter().export(_movement(), str(output))
    data = output.read_bytes()
    assert data[:4] == b"MThd"
    assert b"MTrk" in data


def test_export_empty_movement(tmp_path) -> None:
    output = tmp_path / "empty.mid"
    MidiExporter().export(Movement(), str(output))
    assert output.read_bytes()[:4] == b"MThd"


def test_note_beats_rounds_down_to_tick_grid() -> None:
    # a third of a whole note is 1280 ticks at 960 per quarter
    assert note_beats(Note.parse("3R")) == 1280 / 960


@pytest.mark.parametrize("text", ["4B9", "4A9", "4Cbb-", "4Cb-"])
def test_build_skips_pitches_outside_midi_keys(
    text: str, recorded_notes: list[dict[str, Any]], caplog: pytest.LogCaptureFixture
) -> None:
    movement = Movement(sig=[Sig()], bar=[Bar(sig=0, chan=[Chan(notes=["4C4", text, "4D4"])])])
    with caplog.at_level(logging.WARNING, logger="scof.midi_exporter"):
        MidiExporter().build(movement)
    assert [(n["pitch"], n["time"]) for n in recorded_notes] == [(60, 0.0), (62, 2.0)]
    assert "outside MIDI keys" in caplog.text


def test_build_keeps_range_ends(recorded_notes: list[dict[str, Any]]) -> None:
    movement = Movement(sig=[Sig()], bar=[Bar(sig=0, chan=[Chan(notes=["4C-", "4G9"])])])
    MidiExporter().build(movement)
    assert [n["pitch"] for n in recorded_notes] == [0, 127]


def test_export_with_out_of_range_pitches(tmp_path) -> None:
    output = tmp_path / "edges.mid"
    movement = Movement(sig=[Sig()], bar=[Bar(sig=0, chan=[Chan(notes=["4B9", "4Cbb-", "2C4"])])])
    MidiExporter().export(movement, str(output))
    data = output.read_bytes()
    assert data[:4] == b"MThd"
    assert bytes([0x90, 131]) not in data
