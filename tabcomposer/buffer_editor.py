"""BufferEditor: owns the alphaTex document and splices tokens into it safely."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from typing import Final, Optional

from tabcomposer.tab_models import InsertResult
from tabcomposer.token_composer import BAR_SEPARATOR, BAR_TOKEN

DIRECTIVE_MARKER: Final[str] = "\\"

INITIAL_SCORE: Final[str] = """\\staff{tabs}
\\tuning (E2 A2 D3 G3 B3 E4)
\\instrument 25
\\capo 1
\\ts (4 4)
\\tempo (120)
.
"""

Selection = tuple[int, int]
SelectionSource = Callable[[], Optional[Selection]]


def _directive_end(text: str) -> int | None:
    """Offset just past the last directive line, or None if there is none."""
    found: int | None = None
    offset = 0
    for line in text.split("\n"):
        if line.lstrip().startswith(DIRECTIVE_MARKER):
            found = min(offset + len(line) + 1, len(text))
        offset += len(line) + 1
    return found


def header_boundary(text: str) -> int:
    """
    Return the first offset at which body content may be inserted.

    This is the end of the last line starting with a directive marker. A
    document without any directive is treated as all header, so the only
    insertion point is its end.
    """
    end = _directive_end(text)
    return len(text) if end is None else end


class BufferEditor:
    """
    The single writer of the notation text.

    Every insertion recomputes the header boundary from the current text, so
    hand edits to the header between insertions are always respected. No
    insertion ever lands before that boundary, whatever the cursor says.

    Each editor serializes its own mutations on a re-entrant lock, which makes
    it safe to share one document between several sessions or threads.
    """

    def __init__(
        self,
        text: str | None = None,
        selection_source: SelectionSource | None = None,
        initial_text: str = INITIAL_SCORE,
    ) -> None:
        """
        Args:
            text:             Starting document. Defaults to ``initial_text``.
            selection_source: Callable returning the text widget's current
                              ``(start, end)`` selection, or None when the
                              widget is unavailable.
            initial_text:     Document restored by ``reset_to_initial``.
        """
        self.initial_text = initial_text
        self.selection_source = selection_source
        self._text = initial_text if text is None else text
        self._lock = threading.RLock()

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _clamp_offset(self, offset: int) -> int:
        return max(0, min(offset, len(self._text)))

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @property
    def text(self) -> str:
        return self._text

    @property
    def lock(self) -> threading.RLock:
        """Lock guarding this document; hold it to batch several edits."""
        return self._lock

    def header_boundary(self) -> int:
        return header_boundary(self._text)

    def resolve_selection(self, selection: Selection | None = None) -> Selection:
        """
        Normalise a cursor selection against the current text.

        Falls back to the selection source, then to the end of the text.
        Offsets are clamped into the text and ordered so that start <= end.
        """
        with self._lock:
            if selection is None and self.selection_source is not None:
                selection = self.selection_source()
            if selection is None:
                return len(self._text), len(self._text)
            start, end = (self._clamp_offset(offset) for offset in selection)
            return start, max(start, end)

    def insertion_point(self, selection: Selection | None = None) -> int:
        """Offset where the next insertion would actually start."""
        with self._lock:
            start, _end = self.resolve_selection(selection)
            return max(start, header_boundary(self._text))

    def is_first_beat_in_bar(self, position: int | None = None) -> bool:
        """
        Tell whether a token inserted at ``position`` would open a bar.

        Scans back to the nearest bar separator after the header and checks
        that only whitespace lies in between. Without such a separator the
        scan runs from the start of the document, so any header makes the
        answer False.
        """
        with self._lock:
            boundary = header_boundary(self._text)
            if position is None:
                position = self.insertion_point()
            else:
                position = max(self._clamp_offset(position), boundary)

            bar_index = self._text.rfind(BAR_SEPARATOR, boundary, position)
            if bar_index != -1:
                return not self._text[bar_index + 1:position].strip()

            return not self._text[:position].strip()

    def insert(self, token: str, selection: Selection | None = None) -> InsertResult:
        """
        Splice ``token`` into the text at the cursor, outside the header.

        A cursor inside or before the header is moved to the header boundary,
        and a line break is prepended when the boundary does not already
        start a fresh line.

        Returns:
            The new text and the cursor offset just after the inserted token.
        """
        with self._lock:
            text = self._text
            start, end = self.resolve_selection(selection)
            boundary = header_boundary(text)

            clamped = start < boundary
            if clamped:
                logging.debug("Cursor %d is inside the header; moving to %d", start, boundary)
                start = end = boundary

            directive_line_open = _directive_end(text) == len(text) and not text.endswith("\n")
            if start == boundary and (clamped or directive_line_open):
                if text[boundary - 1:boundary] not in ("", "\n"):
                    token = "\n" + token

            self._text = text[:start] + token + text[end:]
            return InsertResult(text=self._text, cursor=start + len(token))

    def insert_bar_separator(self, selection: Selection | None = None) -> InsertResult:
        return self.insert(BAR_TOKEN, selection)

    def replace_text(self, text: str) -> str:
        """Accept a raw edit from the text widget; the header may change too."""
        with self._lock:
            self._text = text
            return self._text

    def reset_to_initial(self) -> str:
        """Replace the whole document with the initial score."""
        with self._lock:
            self._text = self.initial_text
            return self._text
