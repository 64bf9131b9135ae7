"""Token composition: translate note and chord selections into alphaTex tokens.

Every function here is pure. Tokens carry one space of padding on each side so
they can be spliced into existing body text without merging with neighbours.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Final

from tabcomposer.tab_models import Note, StrokeDirection

BAR_SEPARATOR: Final[str] = "|"
BAR_TOKEN: Final[str] = f" {BAR_SEPARATOR} "


def sanitize_label(label: str | None) -> str:
    """Strip double quotes, since the label is embedded in a quoted attribute."""
    if not label:
        return ""
    return label.replace('"', "")


def compose_single_note(note: Note, duration: str) -> str:
    """
    Build a single-note token, e.g. ``" 3.2.8 "`` for fret 3, string 2, eighth.

    Args:
        note:     The fretted position.
        duration: Note-length denominator (``"4"`` for a quarter note).
    """
    return f" {note.fret}.{note.string}.{duration} "


def compose_chord(
    notes: Iterable[Note],
    duration: str,
    stroke: StrokeDirection = StrokeDirection.NONE,
    label: str | None = None,
    is_first_beat_in_bar: bool = False,
) -> str | None:
    """
    Build a chord token such as ``" (0.1 1.2 0.3).4 {bd txt "C"} "``.

    Notes are sorted by string number so the token does not depend on the
    order in which they were selected. The effects block is emitted only for
    an up/down stroke, or for a label on the first beat of a bar.

    Args:
        notes:                Notes of the chord; at most one per string.
        duration:             Note-length denominator.
        stroke:               Strum direction.
        label:                Chord name shown above the beat.
        is_first_beat_in_bar: Whether the token starts a bar.

    Returns:
        The token, or None when there are no notes to commit.
    """
    ordered = sorted(notes, key=lambda note: (note.string, note.fret))
    if not ordered:
        return None

    pairs = " ".join(f"{note.fret}.{note.string}" for note in ordered)

    properties: list[str] = []
    if stroke.effect is not None:
        properties.append(stroke.effect)
    safe_label = sanitize_label(label)
    if safe_label and is_first_beat_in_bar:
        properties.append(f'txt "{safe_label}"')

    effects = f" {{{' '.join(properties)}}}" if properties else ""
    return f" ({pairs}).{duration}{effects} "
