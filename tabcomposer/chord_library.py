"""Chord library: open-position guitar chord shapes keyed by chord name."""

from typing import Final

from tabcomposer.tab_models import Note


def _shape(*positions: tuple[int, int]) -> tuple[Note, ...]:
    """Build a chord shape from ``(string, fret)`` pairs."""
    return tuple(Note(string=string, fret=fret) for string, fret in positions)


# ── Standard tuning shapes (string 1 = high E) ──────────────────────────────
# Muted strings are simply absent from a shape.

CHORD_LIBRARY: Final[dict[str, tuple[Note, ...]]] = {
    "C": _shape((5, 3), (4, 2), (2, 1), (3, 0), (1, 0)),
    "D": _shape((3, 2), (1, 2), (2, 3), (4, 0)),
    "E": _shape((5, 2), (4, 2), (3, 1), (6, 0), (2, 0), (1, 0)),
    "F": _shape((6, 1), (5, 3), (4, 3), (3, 2), (2, 1), (1, 1)),
    "G": _shape((6, 3), (5, 2), (1, 3), (2, 0), (3, 0), (4, 0)),
    "A": _shape((4, 2), (3, 2), (2, 2), (5, 0), (1, 0)),
    "Am": _shape((4, 2), (3, 2), (2, 1), (5, 0), (1, 0)),
    "Em": _shape((5, 2), (4, 2), (6, 0), (3, 0), (2, 0), (1, 0)),
    "Dm": _shape((3, 2), (2, 3), (1, 1), (4, 0)),
    "Cmaj7": _shape((5, 3), (4, 2), (3, 0), (2, 0), (1, 0)),
    "G7": _shape((6, 3), (5, 2), (4, 0), (3, 0), (2, 0), (1, 1)),
    "E7": _shape((5, 2), (4, 0), (3, 1), (6, 0), (2, 0), (1, 0)),
}


def lookup_chord(name: str) -> tuple[Note, ...] | None:
    """Return the notes of the named chord, or None if the library lacks it."""
    return CHORD_LIBRARY.get(name)


def chord_names() -> list[str]:
    """Chord names in library (panel) order."""
    return list(CHORD_LIBRARY)
