"""Value types shared by the selection, composer and editor components."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Final

#: Note-length denominators offered by the composer (whole .. sixteenth).
DURATIONS: Final[tuple[str, ...]] = ("1", "2", "4", "8", "16")

DEFAULT_DURATION: Final[str] = "4"


class InputMode(Enum):
    """How fretboard clicks are interpreted."""

    SINGLE = "single"  # every click emits a note token immediately
    CHORD = "chord"    # clicks accumulate in the chord buffer until commit


class StrokeDirection(Enum):
    """Strum direction applied to chord tokens."""

    NONE = "none"
    DOWN = "down"
    UP = "up"

    @property
    def effect(self) -> str | None:
        """alphaTex beat effect for this stroke, or None when there is none."""
        if self is StrokeDirection.DOWN:
            return "bd"
        if self is StrokeDirection.UP:
            return "bu"
        return None


@dataclass(frozen=True)
class Note:
    """
    A fretted position on one string.

    Attributes:
        string: 1-based string number (1 is the highest-pitched string).
        fret:   Fret position; 0 means the open string.
    """

    string: int
    fret: int

    def __post_init__(self) -> None:
        if self.string < 1:
            raise ValueError(f"String number must be at least 1, got {self.string}.")
        if self.fret < 0:
            raise ValueError(f"Fret must be non-negative, got {self.fret}.")


@dataclass(frozen=True)
class InsertResult:
    """Outcome of a buffer insertion: the new text and where to put the cursor."""

    text: str
    cursor: int
