"""Unit tests for the static chord library."""

from tabcomposer.chord_library import CHORD_LIBRARY, chord_names, lookup_chord
from tabcomposer.tab_models import Note


def test_lookup_known_chord() -> None:
    notes = lookup_chord("Am")
    assert notes is not None
    assert Note(string=2, fret=1) in notes
    assert Note(string=5, fret=0) in notes


def test_lookup_unknown_chord_returns_none() -> None:
    assert lookup_chord("H#dim13") is None


def test_lookup_is_case_sensitive() -> None:
    assert lookup_chord("am") is None


def test_chord_names_keep_panel_order() -> None:
    names = chord_names()
    assert names[:3] == ["C", "D", "E"]
    assert names[-1] == "E7"
    assert len(names) == 12


def test_every_shape_uses_each_string_at_most_once() -> None:
    for name, notes in CHORD_LIBRARY.items():
        strings = [note.string for note in notes]
        assert len(strings) == len(set(strings)), name


def test_every_shape_fits_a_six_string_guitar() -> None:
    for notes in CHORD_LIBRARY.values():
        assert all(1 <= note.string <= 6 for note in notes)
        assert all(0 <= note.fret <= 12 for note in notes)
