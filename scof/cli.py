"""scof CLI entry point."""

import logging
import sys
from pathlib import Path

import click

from scof import __version__
from scof.cursor import Cursor
from scof.document import load_movement, save_movement, score_for_movement
from scof.duration import Duration
from scof.errors import MalformedMarking, ScofError
from scof.marking import format_repeat, parse_repeat
from scof.midi_exporter import MidiExporter
from scof.models import Chan, Movement
from scof.note import Note


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _load_or_exit(path: str) -> Movement:
    try:
        return load_movement(path)
    except (OSError, ValueError) as exc:
        click.echo(f"  ERROR: Could not read movement — {exc}", err=True)
        sys.exit(1)


def _describe(note: Note) -> list[str]:
    """Human-readable lines describing a parsed marking."""
    lines = [f"  Marking  : {note}"]
    lines.append(f"  Duration : {note.duration} of a whole note")
    if note.pitch is None:
        lines.append("  Pitch    : rest")
    else:
        lines.append(f"  Pitch    : {note.pitch}  (MIDI {note.pitch.midi_number()})")
        lines.append(f"  Distance : {note.visual_distance()} step(s) from middle C")
    if note.articulation:
        names = ", ".join(a.value for a in note.articulation)
        lines.append(f"  Artic.   : {names}")
    return lines


def _describe_repeats(repeats: list[str]) -> str:
    shown = []
    for text in repeats:
        try:
            shown.append(format_repeat(parse_repeat(text)))
        except ValueError:
            shown.append(f"?{text}")
    return " ".join(shown)


# ── CLI group ──────────────────────────────────────────────────────────────────

@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(version=__version__, prog_name="scof")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
def main(verbose: bool) -> None:
    """scof: score markings, cursors and exports."""
    _configure_logging(verbose)


# ── parse subcommand ───────────────────────────────────────────────────────────

@main.command()
@click.argument("marking")
def parse(marking: str) -> None:
    """
    Describe one marking (e.g. 4C4) or a duration letter form (e.g. Q..).

    \b
    Examples:
      scof parse 4C#4
      scof parse 3/8R
      scof parse Q..
    """
    try:
        note = Note.parse(marking)
    except MalformedMarking as note_error:
        try:
            duration = Duration.parse(marking)
        except MalformedMarking:
            click.echo(f"  ERROR: {note_error}", err=True)
            click.echo(f"         {marking}", err=True)
            width = max(1, note_error.end - note_error.start)
            click.echo("         " + " " * note_error.start + "^" * width, err=True)
            sys.exit(1)
        click.echo(f"  Duration : {duration}  ({duration.denomination.name}, {duration.dots} dot(s))")
        click.echo(f"  Length   : {duration.to_fraction()} of a whole note")
        return

    for line in _describe(note):
        click.echo(line)


# ── new subcommand ─────────────────────────────────────────────────────────────

@main.command()
@click.argument("path", type=click.Path(dir_okay=False, writable=True))
@click.option(
    "--measures",
    type=click.IntRange(1, 999),
    default=1,
    show_default=True,
    help="Number of empty (whole-rest) measures.",
)
@click.option(
    "--channels",
    type=click.IntRange(1, 64),
    default=1,
    show_default=True,
    help="Number of channels per measure.",
)
def new(path: str, measures: int, channels: int) -> None:
    """Write a new movement of whole-rest measures as JSON."""
    movement = Movement.default()
    movement.bar[0].chan = [Chan() for _ in range(channels)]
    score = score_for_movement(movement)
    for _ in range(measures - 1):
        score.new_measure()

    try:
        save_movement(score.movement[0], path)
    except OSError as exc:
        click.echo(f"  ERROR: Could not write movement — {exc}", err=True)
        sys.exit(1)
    click.echo(f"Wrote {measures} measure(s) × {channels} channel(s) → '{path}'")


# ── show subcommand ────────────────────────────────────────────────────────────

@main.command()
@click.argument("path", type=click.Path(exists=True, dir_okay=False, readable=True))
def show(path: str) -> None:
    """List the markings of every measure and channel."""
    movement = _load_or_exit(path)
    score = score_for_movement(movement)

    for measure, bar in enumerate(movement.bar):
        sig = movement.signature_at(measure)
        click.echo(f"Measure {measure + 1}  ({sig.time}, {sig.tempo} BPM)")
        for chan, content in enumerate(bar.chan):
            count = score.marking_len(Cursor(measure, chan, 0))
            shown = " ".join(content.notes)
            suffix = "" if count == len(content.notes) else f"  [stops after {count}]"
            click.echo(f"  ch{chan + 1}: {shown}{suffix}")
        if bar.repeat:
            click.echo(f"  repeat: {_describe_repeats(bar.repeat)}")


# ── append-measure subcommand ──────────────────────────────────────────────────

@main.command("append-measure")
@click.argument("path", type=click.Path(exists=True, dir_okay=False, readable=True))
def append_measure(path: str) -> None:
    """Append a whole-rest measure to a movement file."""
    movement = _load_or_exit(path)
    score = score_for_movement(movement)
    index = score.new_measure()
    if index is None:
        click.echo("  ERROR: Movement has no measures to extend.", err=True)
        sys.exit(1)

    try:
        save_movement(movement, path)
    except OSError as exc:
        click.echo(f"  ERROR: Could not write movement — {exc}", err=True)
        sys.exit(1)
    click.echo(f"Appended measure {index + 1} → '{path}'")


# ── midi subcommand ────────────────────────────────────────────────────────────

@main.command()
@click.argument("path", type=click.Path(exists=True, dir_okay=False, readable=True))
@click.option(
    "--output",
    "-o",
    default=None,
    metavar="PATH",
    help="Destination MIDI file path. Defaults to the input with a .mid suffix.",
)
@click.option(
    "--tempo",
    type=click.IntRange(20, 300),
    default=None,
    help="Playback tempo in BPM. Defaults to the movement's first signature.",
)
def midi(path: str, output: str | None, tempo: int | None) -> None:
    """Export a movement file as MIDI."""
    movement = _load_or_exit(path)
    resolved_output = output if output is not None else str(Path(path).with_suffix(".mid"))

    exporter = MidiExporter(tempo=tempo)
    try:
        exporter.export(movement, resolved_output)
    except OSError as exc:
        click.echo(f"  ERROR: Could not write MIDI file — {exc}", err=True)
        sys.exit(1)
    except ScofError as exc:
        click.echo(f"  ERROR: Could not render movement — {exc}", err=True)
        sys.exit(1)
    click.echo(f"Done!  Wrote '{resolved_output}'.")


# ── musicxml subcommand ────────────────────────────────────────────────────────

@main.command()
@click.argument("path", type=click.Path(exists=True, dir_okay=False, readable=True))
@click.option(
    "--output",
    "-o",
    default=None,
    metavar="PATH",
    help="Destination MusicXML path. Defaults to the input with a .musicxml suffix.",
)
@click.option(
    "--title",
    default=None,
    metavar="TEXT",
    help="Title written to the score. Defaults to the input filename stem.",
)
def musicxml(path: str, output: str | None, title: str | None) -> None:
    """Export a movement file as MusicXML (via music21)."""
    from scof.musicxml_exporter import MusicXmlExporter

    movement = _load_or_exit(path)
    source = Path(path)
    resolved_title = title if title is not None else source.stem.replace("_", " ")
    resolved_output = output if output is not None else str(source.with_suffix(".musicxml"))

    exporter = MusicXmlExporter(title=resolved_title)
    try:
        exporter.export(movement, resolved_output)
    except OSError as exc:
        click.echo(f"  ERROR: Could not write output file — {exc}", err=True)
        sys.exit(1)
    except ScofError as exc:
        click.echo(f"  ERROR: Could not render movement — {exc}", err=True)
        sys.exit(1)
    click.echo(f"Done!  Wrote '{resolved_output}'.")
