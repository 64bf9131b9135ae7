"""SelectionState: input mode, chord buffer and pending token settings."""

from __future__ import annotations

from tabcomposer.chord_library import lookup_chord
from tabcomposer.tab_models import (
    DEFAULT_DURATION,
    DURATIONS,
    InputMode,
    Note,
    StrokeDirection,
)
from tabcomposer.token_composer import compose_single_note


class SelectionState:
    """
    Tracks what the next emitted token will look like.

    In single-note mode every fretboard click is passed straight through as a
    note token. In chord mode clicks build up a chord buffer holding at most
    one note per string, which is emitted on commit.

    Attributes:
        string_count: Number of strings on the instrument.
        mode:         Current input mode.
        duration:     Note-length denominator applied to the next token.
        stroke:       Strum direction for chord tokens.
        label:        Chord name attached to the next chord token, or "".
    """

    DEFAULT_STRING_COUNT = 6

    def __init__(
        self,
        string_count: int = DEFAULT_STRING_COUNT,
        default_duration: str = DEFAULT_DURATION,
    ) -> None:
        if string_count < 1:
            raise ValueError(f"An instrument needs at least one string, got {string_count}.")
        self._check_duration(default_duration)
        self.string_count = string_count
        self.default_duration = default_duration
        self.mode = InputMode.SINGLE
        self.duration = default_duration
        self.stroke = StrokeDirection.NONE
        self.label = ""
        self._buffer: list[Note] = []

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _check_duration(self, duration: str) -> None:
        if duration not in DURATIONS:
            supported = ", ".join(DURATIONS)
            raise ValueError(f"Unsupported duration '{duration}'. Use one of: {supported}.")

    def _check_string(self, string: int) -> None:
        if not 1 <= string <= self.string_count:
            raise ValueError(
                f"String {string} is out of range for a {self.string_count}-string instrument."
            )

    def _clear_chord(self) -> None:
        self._buffer = []
        self.label = ""

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @property
    def chord_buffer(self) -> tuple[Note, ...]:
        """The notes selected so far, in selection order."""
        return tuple(self._buffer)

    @property
    def is_chord_mode(self) -> bool:
        return self.mode is InputMode.CHORD

    def toggle_mode(self) -> InputMode:
        """Switch between single-note and chord mode, discarding any partial chord."""
        self.mode = InputMode.SINGLE if self.is_chord_mode else InputMode.CHORD
        self._clear_chord()
        return self.mode

    def reset(self) -> None:
        """Restore duration, stroke, label and chord buffer to their initial values."""
        self.duration = self.default_duration
        self.stroke = StrokeDirection.NONE
        self._clear_chord()

    def set_duration(self, duration: str) -> None:
        self._check_duration(duration)
        self.duration = duration

    def set_stroke_direction(self, stroke: StrokeDirection) -> None:
        self.stroke = stroke

    def select_library_chord(self, name: str) -> bool:
        """
        Load a chord shape from the library into the buffer.

        Enters chord mode and uses the chord name as the label. Unknown names
        leave everything untouched.

        Returns:
            True if the chord was found and loaded.
        """
        notes = lookup_chord(name)
        if notes is None:
            return False
        for note in notes:
            self._check_string(note.string)
        self._buffer = list(notes)
        self.mode = InputMode.CHORD
        self.label = name
        return True

    def toggle_note(self, note: Note) -> None:
        """
        Add or remove a note from the chord buffer (chord mode only).

        Selecting the exact same position again removes it; selecting another
        fret on a string already in use replaces that string's note. Any manual
        edit drops the library label.
        """
        if not self.is_chord_mode:
            return
        self._check_string(note.string)
        if note in self._buffer:
            self._buffer = [held for held in self._buffer if held != note]
        else:
            self._buffer = [held for held in self._buffer if held.string != note.string]
            self._buffer.append(note)
        self.label = ""

    def record_fret_click(self, string: int, fret: int) -> str | None:
        """
        Handle a fretboard click.

        Returns:
            In single-note mode, the note token to insert right away.
            In chord mode the note is toggled in the buffer and None is returned.
        """
        self._check_string(string)
        note = Note(string=string, fret=fret)
        if self.is_chord_mode:
            self.toggle_note(note)
            return None
        return compose_single_note(note, self.duration)

    def take_chord(self) -> tuple[tuple[Note, ...], str]:
        """Return the buffered notes and label for a commit, then clear them."""
        notes, label = self.chord_buffer, self.label
        self._clear_chord()
        return notes, label
