"""TabComposer CLI entry point."""

import logging
import sys
from pathlib import Path

import click

from tabcomposer import __version__
from tabcomposer.buffer_editor import INITIAL_SCORE
from tabcomposer.chord_library import CHORD_LIBRARY
from tabcomposer.composer import TabComposer
from tabcomposer.tab_models import DEFAULT_DURATION, DURATIONS, InsertResult, Note, StrokeDirection
from tabcomposer.tab_renderers import AlphaTabHtmlRenderer, AlphaTexRenderer, FileRenderTarget, TabRenderer

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]


def configure_logging(log_level: str) -> None:
    """Configure the root logger for the requested level."""
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _read_document(path: str) -> str:
    try:
        return Path(path).read_text(encoding="utf-8")
    except OSError as exc:
        click.echo(f"  ERROR: Could not read '{path}' — {exc}", err=True)
        sys.exit(1)


def _write_document(path: str, text: str) -> None:
    try:
        Path(path).write_text(text, encoding="utf-8")
    except OSError as exc:
        click.echo(f"  ERROR: Could not write '{path}' — {exc}", err=True)
        sys.exit(1)


def _open_session(path: str, preview: str | None) -> TabComposer:
    """Load a document into a new session, with an optional live HTML preview."""
    composer = TabComposer(_read_document(path))
    if preview is not None:
        title = Path(path).stem.replace("_", " ")
        composer.add_render_target(FileRenderTarget(AlphaTabHtmlRenderer(), preview, title))
    return composer


def _selection(cursor: int | None) -> tuple[int, int] | None:
    """Turn the --cursor option into a collapsed selection (None appends)."""
    if cursor is None:
        return None
    return cursor, cursor


def _parse_notes(
    ctx: click.Context, param: click.Parameter, values: tuple[str, ...]
) -> list[Note]:
    """Parse repeated STRING:FRET options into notes."""
    notes: list[Note] = []
    for value in values:
        string_text, sep, fret_text = value.partition(":")
        try:
            if not sep:
                raise ValueError("expected STRING:FRET")
            notes.append(Note(string=int(string_text), fret=int(fret_text)))
        except ValueError as exc:
            raise click.BadParameter(f"'{value}': {exc}", ctx=ctx, param=param) from exc
    return notes


def _report(result: InsertResult, path: str) -> None:
    click.echo(f"Wrote '{path}'  (cursor → {result.cursor})")


def _shape_diagram(notes: tuple[Note, ...], string_count: int = 6) -> str:
    """Classic chord diagram from the lowest string to the highest, e.g. x32010."""
    frets = {held.string: held.fret for held in notes}
    return "".join(
        str(frets[string]) if string in frets else "x"
        for string in range(string_count, 0, -1)
    )


# ── Shared options ─────────────────────────────────────────────────────────────

_document_argument = click.argument(
    "document", type=click.Path(exists=True, dir_okay=False, readable=True, writable=True)
)
_cursor_option = click.option(
    "--cursor",
    type=click.IntRange(min=0),
    default=None,
    metavar="OFFSET",
    help="Character offset to insert at. Defaults to the end of the document.",
)
_duration_option = click.option(
    "--duration",
    "-d",
    type=click.Choice(list(DURATIONS)),
    default=DEFAULT_DURATION,
    show_default=True,
    help="Note length denominator: 1 whole, 2 half, 4 quarter, 8 eighth, 16 sixteenth.",
)
_preview_option = click.option(
    "--preview",
    default=None,
    metavar="PATH",
    help="Also refresh an alphaTab HTML preview at PATH after the edit.",
)


# ── CLI group ──────────────────────────────────────────────────────────────────

@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(version=__version__, prog_name="tabcomposer")
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default="WARNING",
    show_default=True,
    help="Logging verbosity.",
)
def main(log_level: str) -> None:
    """TabComposer — build alphaTex guitar tablature note by note."""
    configure_logging(log_level)


# ── new subcommand ─────────────────────────────────────────────────────────────

@main.command()
@click.argument("document", type=click.Path(dir_okay=False))
@click.option("--force", is_flag=True, help="Overwrite an existing file.")
def new(document: str, force: bool) -> None:
    """
    Create DOCUMENT holding the starting score (standard tuning, 4/4, 120 BPM).

    \b
    Examples:
      tabcomposer new song.atex
    """
    if Path(document).exists() and not force:
        click.echo(f"  ERROR: '{document}' already exists (use --force to overwrite).", err=True)
        sys.exit(1)
    _write_document(document, INITIAL_SCORE)
    click.echo(f"Created '{document}'.")


# ── note subcommand ────────────────────────────────────────────────────────────

@main.command()
@_document_argument
@click.argument("string", type=click.IntRange(min=1))
@click.argument("fret", type=click.IntRange(min=0))
@_duration_option
@_cursor_option
@_preview_option
def note(
    document: str,
    string: int,
    fret: int,
    duration: str,
    cursor: int | None,
    preview: str | None,
) -> None:
    """
    Insert a single note: FRET on STRING (string 1 is high E).

    \b
    Examples:
      tabcomposer note song.atex 2 3 --duration 8
      tabcomposer note song.atex 6 0 --cursor 120
    """
    composer = _open_session(document, preview)
    composer.set_duration(duration)
    try:
        result = composer.click_fret(string, fret, _selection(cursor))
    except ValueError as exc:
        click.echo(f"  ERROR: {exc}", err=True)
        sys.exit(1)
    if result is None:
        return
    _write_document(document, result.text)
    _report(result, document)


# ── chord subcommand ───────────────────────────────────────────────────────────

@main.command()
@_document_argument
@click.argument("name", required=False)
@click.option(
    "--note",
    "-n",
    "notes",
    multiple=True,
    metavar="STRING:FRET",
    callback=_parse_notes,
    help="Toggle a note in the chord; repeatable. Editing a library chord drops its name.",
)
@_duration_option
@click.option(
    "--stroke",
    type=click.Choice([stroke.value for stroke in StrokeDirection], case_sensitive=False),
    default=StrokeDirection.NONE.value,
    show_default=True,
    help="Strum direction.",
)
@_cursor_option
@_preview_option
def chord(
    document: str,
    name: str | None,
    notes: list[Note],
    duration: str,
    stroke: str,
    cursor: int | None,
    preview: str | None,
) -> None:
    """
    Insert a chord, either a library chord NAME and/or explicit --note positions.

    The chord name is written above the beat when the chord opens a bar.

    \b
    Examples:
      tabcomposer chord song.atex G --stroke down
      tabcomposer chord song.atex -n 5:3 -n 4:2 -n 2:1 --duration 2
      tabcomposer chord song.atex Am -n 6:0
    """
    composer = _open_session(document, preview)
    composer.set_duration(duration)
    composer.set_stroke_direction(StrokeDirection(stroke.lower()))

    if name is not None:
        if not composer.select_chord(name):
            click.echo(f"  WARNING: Unknown chord '{name}'; see `tabcomposer chords`.", err=True)
    if not composer.selection.is_chord_mode:
        composer.toggle_mode()

    try:
        for held in notes:
            composer.selection.toggle_note(held)
    except ValueError as exc:
        click.echo(f"  ERROR: {exc}", err=True)
        sys.exit(1)

    result = composer.commit_chord(_selection(cursor))
    if result is None:
        click.echo("  WARNING: The chord is empty; nothing was inserted.", err=True)
        return
    _write_document(document, result.text)
    _report(result, document)


# ── bar subcommand ─────────────────────────────────────────────────────────────

@main.command()
@_document_argument
@_cursor_option
@_preview_option
def bar(document: str, cursor: int | None, preview: str | None) -> None:
    """Insert a bar line."""
    composer = _open_session(document, preview)
    result = composer.insert_bar(_selection(cursor))
    _write_document(document, result.text)
    _report(result, document)


# ── reset subcommand ───────────────────────────────────────────────────────────

@main.command()
@_document_argument
@_preview_option
def reset(document: str, preview: str | None) -> None:
    """Discard DOCUMENT's contents and restore the starting score."""
    composer = _open_session(document, preview)
    _write_document(document, composer.reset_document())
    click.echo(f"Reset '{document}'.")


# ── chords subcommand ──────────────────────────────────────────────────────────

@main.command()
def chords() -> None:
    """List the chord library."""
    for chord_name, shape in CHORD_LIBRARY.items():
        click.echo(f"  {chord_name:<6} {_shape_diagram(shape)}")


# ── render subcommand ──────────────────────────────────────────────────────────

@main.command()
@click.argument("document", type=click.Path(exists=True, dir_okay=False, readable=True))
@click.option(
    "--output",
    "-o",
    default=None,
    metavar="PATH",
    help="Destination file path. Defaults to extension based on --format.",
)
@click.option(
    "--title",
    default=None,
    metavar="TEXT",
    help="Title shown in the page header. Defaults to the document filename stem.",
)
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["html", "atex"], case_sensitive=False),
    default="html",
    show_default=True,
    help="Output format: alphaTab HTML page or raw alphaTex.",
)
def render(document: str, output: str | None, title: str | None, output_format: str) -> None:
    """
    Render DOCUMENT for viewing, playback and printing.

    \b
    Examples:
      tabcomposer render song.atex
      tabcomposer render song.atex -o score.html --title "My Song"
    """
    doc_path = Path(document)
    renderer: TabRenderer = (
        AlphaTabHtmlRenderer() if output_format.lower() == "html" else AlphaTexRenderer()
    )
    resolved_title = title if title is not None else doc_path.stem.replace("_", " ")
    resolved_output = (
        output if output is not None else str(doc_path.with_suffix(renderer.default_extension))
    )
    if Path(resolved_output).resolve() == doc_path.resolve():
        click.echo("  ERROR: Output would overwrite the document itself.", err=True)
        sys.exit(1)

    target = FileRenderTarget(renderer, resolved_output, resolved_title)
    try:
        target(_read_document(document))
    except OSError as exc:
        click.echo(f"  ERROR: Could not write output file — {exc}", err=True)
        sys.exit(1)

    if output_format.lower() == "html":
        click.echo(f"Done!  Open '{resolved_output}' in any browser. Use Print → Save as PDF.")
    else:
        click.echo(f"Done!  Wrote alphaTex source to '{resolved_output}'.")
