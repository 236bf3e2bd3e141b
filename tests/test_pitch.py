"""Unit tests for pitch names, accidentals, octaves and diatonic steps."""

from scof.pitch import Pitch, PitchAccidental, PitchClass, PitchName, PitchOctave


def test_step_up_rolls_octave_at_b() -> None:
    assert Pitch.of(PitchName.B, 4).step_up() == Pitch.of(PitchName.C, 5)


def test_step_down_rolls_octave_at_c() -> None:
    assert Pitch.of(PitchName.C, 4).step_down() == Pitch.of(PitchName.B, 3)


def test_step_within_octave() -> None:
    assert Pitch.of(PitchName.E, 4).step_up() == Pitch.of(PitchName.F, 4)
    assert Pitch.of(PitchName.A, 2).step_down() == Pitch.of(PitchName.G, 2)
    assert Pitch.of(PitchName.G, 6).step_up() == Pitch.of(PitchName.A, 6)


def test_step_keeps_accidental() -> None:
    stepped = Pitch.of(PitchName.F, 4, PitchAccidental.SHARP).step_up()
    assert stepped == Pitch.of(PitchName.G, 4, PitchAccidental.SHARP)


def test_step_at_range_ends_is_unchanged() -> None:
    top = Pitch.of(PitchName.B, 9)
    bottom = Pitch.of(PitchName.C, -1)
    assert top.step_up() == top
    assert bottom.step_down() == bottom


def test_octave_neighbours() -> None:
    assert PitchOctave.OCTAVE_4.higher() is PitchOctave.OCTAVE_5
    assert PitchOctave.OCTAVE_0.lower() is PitchOctave.OCTAVE_NEG1
    assert PitchOctave.OCTAVE_9.higher() is None
    assert PitchOctave.OCTAVE_NEG1.lower() is None


def test_octave_chars() -> None:
    assert PitchOctave.from_char("-") is PitchOctave.OCTAVE_NEG1
    assert PitchOctave.from_char("7") is PitchOctave.OCTAVE_7
    assert PitchOctave.from_char("x") is None
    assert PitchOctave.from_char("") is None
    assert PitchOctave.OCTAVE_NEG1.char == "-"


def test_from_letter() -> None:
    assert PitchName.from_letter("G") is PitchName.G
    assert PitchName.from_letter("H") is None
    assert PitchName.from_letter("c") is None


def test_midi_number() -> None:
    assert Pitch.of(PitchName.C, 4).midi_number() == 60
    assert Pitch.of(PitchName.A, 4).midi_number() == 69
    assert Pitch.of(PitchName.C, -1).midi_number() == 0
    assert Pitch.of(PitchName.B, 3, PitchAccidental.FLAT).midi_number() == 58
    assert Pitch.of(PitchName.G, 4, PitchAccidental.DOUBLE_SHARP).midi_number() == 69


def test_str() -> None:
    assert str(Pitch.of(PitchName.E, 5, PitchAccidental.FLAT)) == "Eb5"
    assert str(Pitch.of(PitchName.D, -1)) == "D-"
    assert str(PitchClass(PitchName.C, PitchAccidental.SHARP_QUARTER_SHARP)) == "Ct#"


def test_diatonic_index() -> None:
    assert Pitch.of(PitchName.C, 4).diatonic_index() == 0
    assert Pitch.of(PitchName.B, 3).diatonic_index() == -1
    assert Pitch.of(PitchName.C, 5).diatonic_index() == 7
