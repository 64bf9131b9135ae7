"""Unit tests for the TabComposer session."""

import threading

from tabcomposer.buffer_editor import INITIAL_SCORE, BufferEditor
from tabcomposer.composer import TabComposer
from tabcomposer.tab_models import InputMode, StrokeDirection

HEADER = INITIAL_SCORE[: INITIAL_SCORE.index(".\n")]


class _Recorder:
    """Render target that remembers every document it was given."""

    def __init__(self) -> None:
        self.documents: list[str] = []

    def __call__(self, notation: str) -> None:
        self.documents.append(notation)


def _broken_target(notation: str) -> None:
    raise RuntimeError("unexpected token at line 9")


def test_single_note_click_inserts_token() -> None:
    composer = TabComposer()
    composer.set_duration("8")
    result = composer.click_fret(2, 3)
    assert result is not None
    assert "3.2.8" in composer.text
    assert result.cursor == len(composer.text)


def test_chord_mode_click_only_buffers() -> None:
    composer = TabComposer()
    composer.toggle_mode()
    assert composer.click_fret(2, 3) is None
    assert composer.text == INITIAL_SCORE


def test_library_chord_c_on_fresh_score_has_no_effects() -> None:
    composer = TabComposer()
    composer.select_chord("C")
    composer.set_duration("4")
    composer.set_stroke_direction(StrokeDirection.NONE)
    result = composer.commit_chord()
    assert result is not None
    assert composer.text == INITIAL_SCORE + " (0.1 1.2 0.3 2.4 3.5).4 "
    assert "{txt" not in composer.text


def test_label_written_once_per_bar() -> None:
    composer = TabComposer()
    composer.insert_bar()
    for _ in range(2):
        composer.select_chord("G")
        composer.commit_chord()
    assert composer.text.count('txt "G"') == 1

    composer.insert_bar()
    composer.select_chord("G")
    composer.commit_chord()
    assert composer.text.count('txt "G"') == 2


def test_stroke_direction_applies_to_chords() -> None:
    composer = TabComposer()
    composer.toggle_mode()
    composer.click_fret(1, 0)
    composer.click_fret(2, 1)
    composer.set_stroke_direction(StrokeDirection.DOWN)
    composer.commit_chord()
    assert composer.text.endswith(" (0.1 1.2).4 {bd} ")


def test_stroke_direction_ignored_for_single_notes() -> None:
    composer = TabComposer()
    composer.set_stroke_direction(StrokeDirection.UP)
    composer.click_fret(1, 5)
    assert composer.text.endswith(" 5.1.4 ")


def test_commit_clears_buffer_and_label() -> None:
    composer = TabComposer()
    composer.select_chord("Am")
    composer.commit_chord()
    assert composer.selection.chord_buffer == ()
    assert composer.selection.label == ""
    assert composer.selection.mode is InputMode.CHORD


def test_toggle_mode_then_commit_is_a_no_op() -> None:
    composer = TabComposer()
    composer.select_chord("E")
    composer.toggle_mode()
    assert composer.selection.chord_buffer == ()
    assert composer.commit_chord() is None
    assert composer.text == INITIAL_SCORE


def test_unknown_chord_is_ignored() -> None:
    composer = TabComposer()
    assert composer.select_chord("Bb13") is False
    assert composer.commit_chord() is None
    assert composer.text == INITIAL_SCORE


def test_commit_with_cursor_in_header_lands_after_header() -> None:
    composer = TabComposer(INITIAL_SCORE + " 0.1.4 ")
    composer.select_chord("D")
    composer.commit_chord((2, 2))
    body = composer.text[len(HEADER):]
    assert composer.text.startswith(HEADER)
    assert body.startswith(" (2.1 3.2 2.3 0.4).4 .\n")
    assert "{txt" not in composer.text


def test_render_targets_receive_every_change() -> None:
    recorder = _Recorder()
    composer = TabComposer()
    composer.add_render_target(recorder)
    composer.click_fret(1, 0)
    composer.insert_bar()
    composer.reset_document()
    assert recorder.documents[0] == INITIAL_SCORE
    assert recorder.documents[1].endswith(" 0.1.4 ")
    assert recorder.documents[2].endswith(" | ")
    assert recorder.documents[3] == INITIAL_SCORE
    assert len(recorder.documents) == 4


def test_add_render_target_without_initial_publish() -> None:
    recorder = _Recorder()
    composer = TabComposer()
    composer.add_render_target(recorder, publish=False)
    assert recorder.documents == []


def test_failing_render_target_is_swallowed() -> None:
    recorder = _Recorder()
    composer = TabComposer()
    composer.add_render_target(_broken_target)
    composer.add_render_target(recorder)
    composer.edit_text(INITIAL_SCORE + " (0.1")
    assert composer.text == INITIAL_SCORE + " (0.1"
    assert recorder.documents[-1] == INITIAL_SCORE + " (0.1"


def test_reset_selection_keeps_text() -> None:
    composer = TabComposer()
    composer.click_fret(1, 0)
    composer.set_duration("16")
    text = composer.text
    composer.reset_selection()
    assert composer.selection.duration == "4"
    assert composer.text == text


def test_reset_document_is_idempotent() -> None:
    composer = TabComposer()
    composer.click_fret(3, 2)
    assert composer.reset_document() == composer.reset_document() == INITIAL_SCORE


def test_sessions_can_share_an_editor() -> None:
    editor = BufferEditor()
    first = TabComposer(editor=editor)
    second = TabComposer(editor=editor)
    first.click_fret(1, 1)
    second.insert_bar()
    assert first.text == second.text == INITIAL_SCORE + " 1.1.4  | "


def test_selection_source_drives_insertion_point() -> None:
    composer = TabComposer(INITIAL_SCORE + " 0.1.4 ", selection_source=lambda: (0, 0))
    composer.click_fret(2, 2)
    assert composer.text == HEADER + " 2.2.4 " + ".\n 0.1.4 "


def test_commit_reads_widget_selection_once() -> None:
    calls: list[int] = []
    text = INITIAL_SCORE + " 0.1.4 | "

    def selection_source() -> tuple[int, int]:
        calls.append(len(calls))
        # Each read reports a different cursor: after the bar, then mid-bar.
        position = len(text) if len(calls) == 1 else text.index("0.1.4")
        return position, position

    composer = TabComposer(text, selection_source=selection_source)
    composer.select_chord("Am")
    composer.commit_chord()
    assert len(calls) == 1
    assert composer.text == text + ' (0.1 1.2 2.3 2.4 0.5).4 {txt "Am"} '


def test_commit_publishes_outside_the_document_lock() -> None:
    composer = TabComposer()
    lock_free: list[bool] = []

    def target(notation: str) -> None:
        def try_lock() -> None:
            acquired = composer.editor.lock.acquire(blocking=False)
            if acquired:
                composer.editor.lock.release()
            lock_free.append(acquired)

        worker = threading.Thread(target=try_lock)
        worker.start()
        worker.join()

    composer.add_render_target(target, publish=False)
    composer.select_chord("C")
    composer.commit_chord()
    assert lock_free == [True]
