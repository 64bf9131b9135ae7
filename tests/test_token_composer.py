"""Unit tests for token composition."""

from tabcomposer.chord_library import CHORD_LIBRARY
from tabcomposer.tab_models import Note, StrokeDirection
from tabcomposer.token_composer import (
    BAR_TOKEN,
    compose_chord,
    compose_single_note,
    sanitize_label,
)


def _notes(*positions: tuple[int, int]) -> list[Note]:
    return [Note(string=string, fret=fret) for string, fret in positions]


def test_single_note_token() -> None:
    assert compose_single_note(Note(string=2, fret=3), "8") == " 3.2.8 "


def test_single_note_open_string() -> None:
    assert compose_single_note(Note(string=6, fret=0), "1") == " 0.6.1 "


def test_bar_token_is_padded() -> None:
    assert BAR_TOKEN == " | "


def test_chord_library_c_quarter_note() -> None:
    token = compose_chord(CHORD_LIBRARY["C"], "4")
    assert token == " (0.1 1.2 0.3 2.4 3.5).4 "


def test_chord_sorted_by_string() -> None:
    token = compose_chord(_notes((5, 3), (1, 0), (3, 2)), "2")
    assert token == " (0.1 2.3 3.5).2 "


def test_empty_chord_yields_nothing() -> None:
    assert compose_chord([], "4") is None


def test_down_stroke_effect() -> None:
    token = compose_chord(_notes((1, 0), (2, 1)), "8", StrokeDirection.DOWN)
    assert token == " (0.1 1.2).8 {bd} "


def test_up_stroke_effect() -> None:
    token = compose_chord(_notes((1, 0)), "8", StrokeDirection.UP)
    assert token == " (0.1).8 {bu} "


def test_label_only_on_first_beat() -> None:
    notes = _notes((1, 0))
    assert compose_chord(notes, "4", label="C", is_first_beat_in_bar=True) == ' (0.1).4 {txt "C"} '
    assert compose_chord(notes, "4", label="C", is_first_beat_in_bar=False) == " (0.1).4 "


def test_stroke_precedes_label() -> None:
    token = compose_chord(
        _notes((6, 3)), "4", StrokeDirection.UP, label="G", is_first_beat_in_bar=True
    )
    assert token == ' (3.6).4 {bu txt "G"} '


def test_label_quotes_are_stripped() -> None:
    token = compose_chord(_notes((1, 0)), "4", label='My "Chord"', is_first_beat_in_bar=True)
    assert token == ' (0.1).4 {txt "My Chord"} '


def test_label_of_only_quotes_is_dropped() -> None:
    token = compose_chord(_notes((1, 0)), "4", label='""', is_first_beat_in_bar=True)
    assert token == " (0.1).4 "


def test_sanitize_label_handles_missing_label() -> None:
    assert sanitize_label(None) == ""
    assert sanitize_label("") == ""
    assert sanitize_label('A"m') == "Am"
