"""TabComposer: one editing session over a notation document."""

from __future__ import annotations

import logging
from collections.abc import Callable

from tabcomposer.buffer_editor import INITIAL_SCORE, BufferEditor, Selection, SelectionSource
from tabcomposer.selection_state import SelectionState
from tabcomposer.tab_models import DEFAULT_DURATION, InputMode, InsertResult, StrokeDirection
from tabcomposer.token_composer import compose_chord

RenderTarget = Callable[[str], None]


class TabComposer:
    """
    Connects the fretboard, chord panel and text widget to one document.

    Fretboard clicks and chord commits go through ``SelectionState`` and the
    token composer, and land in the ``BufferEditor``. After every change to
    the text the full document is handed to each registered render target.
    Render targets are fire-and-forget: the text is often mid-edit and may
    not parse, so their failures are logged and dropped.

    Usage:

        composer = TabComposer()
        composer.add_render_target(FileRenderTarget(AlphaTabHtmlRenderer(), "score.html"))
        composer.select_chord("G")
        composer.commit_chord()
        composer.insert_bar()
    """

    def __init__(
        self,
        text: str | None = None,
        *,
        string_count: int = SelectionState.DEFAULT_STRING_COUNT,
        default_duration: str = DEFAULT_DURATION,
        initial_text: str = INITIAL_SCORE,
        selection_source: SelectionSource | None = None,
        editor: BufferEditor | None = None,
    ) -> None:
        """
        Args:
            text:             Starting document; defaults to ``initial_text``.
            string_count:     Number of strings on the instrument.
            default_duration: Duration restored by ``reset_selection``.
            initial_text:     Document restored by ``reset_document``.
            selection_source: Callable reporting the text widget's selection.
            editor:           Existing editor, to share one document between
                              sessions. ``text``, ``initial_text`` and
                              ``selection_source`` are ignored when given.
        """
        self.selection = SelectionState(string_count=string_count, default_duration=default_duration)
        self.editor = editor or BufferEditor(
            text=text,
            selection_source=selection_source,
            initial_text=initial_text,
        )
        self._render_targets: list[RenderTarget] = []

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _notify(self, target: RenderTarget, text: str) -> None:
        try:
            target(text)
        except Exception as exc:
            logging.debug("Render target %r rejected the document: %s", target, exc)

    def _publish(self) -> None:
        text = self.editor.text
        for target in self._render_targets:
            self._notify(target, text)

    def _insert(self, token: str, selection: Selection | None) -> InsertResult:
        result = self.editor.insert(token, selection)
        self._publish()
        return result

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @property
    def text(self) -> str:
        return self.editor.text

    def add_render_target(self, target: RenderTarget, publish: bool = True) -> None:
        """Register a callable that receives the full text after every change."""
        self._render_targets.append(target)
        if publish:
            self._notify(target, self.editor.text)

    def click_fret(
        self, string: int, fret: int, selection: Selection | None = None
    ) -> InsertResult | None:
        """
        Handle a fretboard click.

        Returns:
            The insertion result in single-note mode, None in chord mode.
        """
        token = self.selection.record_fret_click(string, fret)
        if token is None:
            return None
        return self._insert(token, selection)

    def select_chord(self, name: str) -> bool:
        """Load a library chord into the buffer; unknown names are ignored."""
        found = self.selection.select_library_chord(name)
        if not found:
            logging.debug("Chord %r is not in the library", name)
        return found

    def toggle_mode(self) -> InputMode:
        return self.selection.toggle_mode()

    def set_duration(self, duration: str) -> None:
        self.selection.set_duration(duration)

    def set_stroke_direction(self, stroke: StrokeDirection) -> None:
        self.selection.set_stroke_direction(stroke)

    def commit_chord(self, selection: Selection | None = None) -> InsertResult | None:
        """
        Emit the chord buffer as one chord token at the cursor.

        The chord label is only written when the chord opens a bar. The
        buffer and label are cleared afterwards.

        Returns:
            The insertion result, or None when the buffer is empty.
        """
        with self.editor.lock:
            if not self.selection.chord_buffer:
                return None
            resolved = self.editor.resolve_selection(selection)
            position = self.editor.insertion_point(resolved)
            first_beat = self.editor.is_first_beat_in_bar(position)
            notes, label = self.selection.take_chord()
            token = compose_chord(
                notes,
                self.selection.duration,
                self.selection.stroke,
                label,
                first_beat,
            )
            if token is None:
                return None
            result = self.editor.insert(token, resolved)
        self._publish()
        return result

    def insert_bar(self, selection: Selection | None = None) -> InsertResult:
        result = self.editor.insert_bar_separator(selection)
        self._publish()
        return result

    def edit_text(self, text: str) -> str:
        """Accept a raw text edit from the text widget."""
        self.editor.replace_text(text)
        self._publish()
        return self.editor.text

    def reset_selection(self) -> None:
        """Reset duration, stroke, label and chord buffer; the text is kept."""
        self.selection.reset()

    def reset_document(self) -> str:
        """Replace the text with the initial score."""
        self.editor.reset_to_initial()
        self._publish()
        return self.editor.text
