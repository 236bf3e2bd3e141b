"""Unit tests for cursor navigation and cursor-addressed score edits."""

import pytest

from scof.cursor import Cursor
from scof.errors import MalformedMarking, OutOfRangeError
from scof.fraction import Fraction
from scof.models import Bar, Chan, Movement, Sig
from scof.note import Note
from scof.pitch import Pitch, PitchName
from scof.score import Score


def _sample_score() -> Score:
    """Two measures, two channels each."""
    movement = Movement(
        sig=[Sig()],
        bar=[
            Bar(sig=0, chan=[Chan(notes=["4C4", "4D4", "8R", "2E4"]), Chan(notes=["1R"])]),
            Bar(chan=[Chan(notes=["2G4", "2A4"]), Chan(notes=["1C3"])]),
        ],
    )
    return Score(movement=[movement])


def _notes(score: Score, measure: int = 0, chan: int = 0) -> list[str]:
    return score.movement[0].bar[measure].chan[chan].notes


# ── marking_len / marking ──────────────────────────────────────────────────────

def test_marking_len_counts_channel() -> None:
    assert _sample_score().marking_len(Cursor(0, 0, 2)) == 4


def test_marking_len_stops_at_malformed_marking() -> None:
    score = _sample_score()
    _notes(score)[2] = "8Q"
    assert score.marking_len(Cursor(0, 0, 0)) == 2


def test_marking_len_of_missing_channel_is_zero() -> None:
    assert _sample_score().marking_len(Cursor(0, 5, 0)) == 0
    assert _sample_score().marking_len(Cursor(9, 0, 0)) == 0


def test_marking_reads_note() -> None:
    note = _sample_score().marking(Cursor(0, 0, 1))
    assert note is not None
    assert str(note) == "4D4"


def test_marking_absent_or_negative_is_none() -> None:
    score = _sample_score()
    assert score.marking(Cursor(0, 0, 4)) is None
    assert score.marking(Cursor(0, 0, -1)) is None


# ── Cursor movement ────────────────────────────────────────────────────────────

def test_left_at_start_is_idempotent() -> None:
    score = _sample_score()
    cursor = Cursor(0, 0, 0)
    for _ in range(3):
        cursor.left(score)
        assert cursor == Cursor(0, 0, 0)


def test_left_within_measure() -> None:
    cursor = Cursor(0, 0, 2)
    cursor.left(_sample_score())
    assert cursor == Cursor(0, 0, 1)


def test_left_crosses_to_previous_measure_end() -> None:
    cursor = Cursor(1, 0, 0)
    cursor.left(_sample_score())
    assert cursor == Cursor(0, 0, 3)


def test_left_into_empty_measure_lands_on_zero() -> None:
    score = _sample_score()
    _notes(score).clear()
    cursor = Cursor(1, 0, 0)
    cursor.left(score)
    assert cursor == Cursor(0, 0, 0)


def test_right_within_measure() -> None:
    cursor = Cursor(0, 0, 0)
    cursor.right(_sample_score())
    assert cursor == Cursor(0, 0, 1)


def test_right_at_last_marking_advances_measure() -> None:
    cursor = Cursor(0, 1, 0)
    cursor.right(_sample_score())
    assert cursor == Cursor(1, 1, 0)


def test_right_past_last_measure_is_unchecked() -> None:
    cursor = Cursor(1, 0, 1)
    cursor.right(_sample_score())
    assert cursor == Cursor(2, 0, 0)


def test_walk_right_then_left_returns_home() -> None:
    score = _sample_score()
    cursor = Cursor()
    for _ in range(5):
        cursor.right(score)
    assert cursor == Cursor(1, 0, 1)
    for _ in range(5):
        cursor.left(score)
    assert cursor == Cursor(0, 0, 0)


def test_right_unchecked() -> None:
    cursor = Cursor(0, 0, 3)
    cursor.right_unchecked()
    assert cursor.marking == 4


def test_cursor_copy_is_independent() -> None:
    cursor = Cursor(1, 2, 3)
    clone = cursor.copy()
    clone.right_unchecked()
    assert cursor == Cursor(1, 2, 3)
    assert clone != cursor


# ── insert / remove ────────────────────────────────────────────────────────────

def test_insert_after() -> None:
    score = _sample_score()
    inserted = score.insert_after(Cursor(0, 0, 1), Note(None, Fraction(1, 4)))
    assert inserted == Cursor(0, 0, 2)
    assert _notes(score) == ["4C4", "4D4", "4R", "8R", "2E4"]


def test_insert_after_last_marking_appends() -> None:
    score = _sample_score()
    score.insert_after(Cursor(0, 0, 3), Note.parse("8F4"))
    assert _notes(score)[-1] == "8F4"


def test_insert_after_missing_position_returns_none() -> None:
    score = _sample_score()
    note = Note.parse("4R")
    assert score.insert_after(Cursor(0, 0, 7), note) is None
    assert score.insert_after(Cursor(0, 9, 0), note) is None
    assert score.insert_after(Cursor(5, 0, 0), note) is None
    assert _notes(score) == ["4C4", "4D4", "8R", "2E4"]


def test_remove_after() -> None:
    score = _sample_score()
    removed = score.remove_after(Cursor(0, 0, 1))
    assert removed is not None
    assert str(removed) == "8R"
    assert _notes(score) == ["4C4", "4D4", "2E4"]


def test_remove_after_nothing_returns_none() -> None:
    score = _sample_score()
    assert score.remove_after(Cursor(0, 0, 3)) is None
    assert score.remove_after(Cursor(0, 4, 0)) is None


def test_remove_after_malformed_keeps_marking() -> None:
    score = _sample_score()
    _notes(score)[1] = "bogus"
    with pytest.raises(MalformedMarking):
        score.remove_after(Cursor(0, 0, 0))
    assert _notes(score)[1] == "bogus"


# ── set_pitch / set_duration ───────────────────────────────────────────────────

def test_set_pitch() -> None:
    score = _sample_score()
    score.set_pitch(Cursor(0, 0, 3), Pitch.of(PitchName.F, 5))
    assert _notes(score)[3] == "2F5"


def test_set_pitch_on_rest_makes_note() -> None:
    score = _sample_score()
    score.set_pitch(Cursor(0, 0, 2), Pitch.of(PitchName.A, 3))
    assert _notes(score)[2] == "8A3"


def test_set_duration() -> None:
    score = _sample_score()
    score.set_duration(Cursor(0, 0, 0), Fraction(3, 8))
    assert _notes(score)[0] == "3/8C4"


def test_set_duration_indexed() -> None:
    score = _sample_score()
    score.set_duration_indexed(Cursor(0, 0, 0), 4)
    score.set_duration_indexed(Cursor(0, 0, 1), 9)
    assert _notes(score)[:2] == ["8C4", "4/1D4"]


def test_set_pitch_out_of_range() -> None:
    with pytest.raises(OutOfRangeError):
        _sample_score().set_pitch(Cursor(0, 0, 10), Pitch.of(PitchName.C, 4))


def test_set_duration_on_malformed_marking() -> None:
    score = _sample_score()
    _notes(score)[0] = "QC4"
    with pytest.raises(MalformedMarking):
        score.set_duration(Cursor(0, 0, 0), Fraction(1, 2))
    assert _notes(score)[0] == "QC4"


# ── new_measure ────────────────────────────────────────────────────────────────

def test_new_measure_matches_channel_count() -> None:
    score = _sample_score()
    index = score.new_measure()
    assert index == 2
    bar = score.movement[0].bar[2]
    assert [c.notes for c in bar.chan] == [["1R"], ["1R"]]
    assert bar.sig is None
    assert bar.repeat == []


def test_new_measure_without_bars_returns_none() -> None:
    score = Score(movement=[Movement()])
    assert score.new_measure() is None
    assert score.movement[0].bar == []


def test_default_score_has_one_rest_measure() -> None:
    score = Score()
    assert score.title == "Untitled Score"
    assert score.marking_len(Cursor()) == 1
    assert str(score.marking(Cursor())) == "1R"


# ── to_dict / from_dict ────────────────────────────────────────────────────────

def test_score_dict_round_trip() -> None:
    score = _sample_score()
    score.title = "Etude"
    restored = Score.from_dict(score.to_dict())
    assert restored == score


def test_score_from_empty_dict_uses_defaults() -> None:
    assert Score.from_dict({}) == Score()
