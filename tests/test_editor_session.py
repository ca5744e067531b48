from __future__ import annotations

from pathlib import Path
from typing import List, Sequence

import grapheme

from eru_engine.adapters.textual import EditorSession, SessionHooks
from eru_engine.buffer import Document, HighlightTag, Position
from eru_engine.buffer.highlight import RESET_MARKER


def make_session(text: str = "", **kwargs) -> EditorSession:
    session = EditorSession(Document.from_text(text), **kwargs)
    session.resize(20, 5)
    return session


def type_text(session: EditorSession, text: str) -> None:
    for ch in text:
        session.handle_key(ch, text=ch)


def row_texts(session: EditorSession) -> List[str]:
    return [row.text for row in session.document]


def test_typing_into_empty_document_creates_row() -> None:
    session = make_session()
    type_text(session, "hi")

    assert row_texts(session) == ["hi"]
    assert session.cursor == Position(column=2, row=0)
    assert session.document.is_dirty()


def test_enter_splits_and_moves_to_next_row() -> None:
    session = make_session("abcd\n")
    session.handle_key("right")
    session.handle_key("right")
    session.handle_key("enter")

    assert row_texts(session) == ["ab", "cd"]
    assert session.cursor == Position(column=0, row=1)


def test_backspace_at_row_start_joins_rows() -> None:
    session = make_session("foo\nbar\n")
    session.handle_key("down")
    session.handle_key("backspace")

    assert row_texts(session) == ["foobar"]
    assert session.cursor == Position(column=3, row=0)


def test_backspace_at_origin_is_ignored() -> None:
    session = make_session("foo\n")
    session.handle_key("backspace")
    assert row_texts(session) == ["foo"]
    assert not session.document.is_dirty()


def test_cursor_movement_wraps_and_clamps() -> None:
    session = make_session("abc\nx\n")
    session.handle_key("end")
    assert session.cursor == Position(column=3, row=0)

    session.handle_key("down")
    assert session.cursor == Position(column=1, row=1)

    session.handle_key("right")
    assert session.cursor == Position(column=0, row=2)

    session.handle_key("left")
    assert session.cursor == Position(column=1, row=1)

    session.handle_key("home")
    session.handle_key("left")
    assert session.cursor == Position(column=3, row=0)


def test_scroll_follows_cursor() -> None:
    session = make_session("".join(f"line {i}\n" for i in range(10)))
    for _ in range(7):
        session.handle_key("down")
    assert session.offset.row == 3

    session.handle_key("pageup")
    assert session.cursor.row == 2
    assert session.offset.row == 2


def test_quit_requires_confirmation_when_dirty() -> None:
    session = make_session("a\n", quit_times=2)
    type_text(session, "b")

    session.handle_key("ctrl+q")
    assert not session.should_quit
    assert "2 more times" in session.status.text
    session.handle_key("ctrl+q")
    assert not session.should_quit
    session.handle_key("ctrl+q")
    assert session.should_quit


def test_quit_counter_resets_after_other_key() -> None:
    session = make_session("a\n", quit_times=1)
    type_text(session, "b")
    session.handle_key("ctrl+q")
    session.handle_key("right")
    session.handle_key("ctrl+q")
    assert not session.should_quit


def test_clean_document_quits_immediately() -> None:
    session = make_session("a\n")
    session.handle_key("ctrl+q")
    assert session.should_quit


def test_incremental_search_moves_cursor_and_highlights() -> None:
    session = make_session("abc\nxyz abc\n")
    session.handle_key("ctrl+f")
    type_text(session, "abc")
    assert session.cursor == Position(column=0, row=0)
    first = session.document.row(0)
    assert first is not None
    assert first.tags == [HighlightTag.MATCH] * 3

    session.handle_key("down")
    assert session.cursor == Position(column=4, row=1)

    session.handle_key("up")
    assert session.cursor == Position(column=0, row=0)

    session.handle_key("down")
    session.handle_key("enter")
    assert session.prompt is None
    assert session.cursor == Position(column=4, row=1)
    assert first.tags == [HighlightTag.NONE] * 3


def test_cancelled_search_restores_cursor() -> None:
    session = make_session("abc\nxyz abc\n")
    session.handle_key("down")
    session.handle_key("ctrl+f")
    type_text(session, "abc")
    assert session.cursor == Position(column=4, row=1)

    session.handle_key("escape")
    assert session.prompt is None
    assert session.cursor == Position(column=0, row=1)


def test_save_prompts_for_name(tmp_path: Path) -> None:
    session = make_session("hello\n")
    type_text(session, "!")
    session.handle_key("ctrl+s")
    assert session.prompt is not None

    target = tmp_path / "out.txt"
    type_text(session, str(target))
    session.handle_key("enter")

    assert target.read_text(encoding="utf-8") == "!hello\n"
    assert not session.document.is_dirty()
    assert session.status.text == "File saved successfully!"


def test_empty_save_name_aborts() -> None:
    session = make_session("hello\n")
    session.handle_key("ctrl+s")
    session.handle_key("escape")
    assert session.document.file_identity is None
    assert session.status.text == "Save aborted."


def test_save_error_is_reported(tmp_path: Path) -> None:
    document = Document.from_text("x\n")
    document.file_identity = tmp_path
    session = EditorSession(document)
    session.handle_key("ctrl+s")
    assert session.status.text == "ERROR: Error writing to file!"


def test_open_path_failure_falls_back_to_empty(tmp_path: Path) -> None:
    missing = tmp_path / "nope.txt"
    session = EditorSession.open_path(str(missing))
    assert session.document.is_empty()
    assert session.status.text.startswith("ERROR: Could not open file")


def test_hooks_receive_rendered_view(tmp_path: Path) -> None:
    path = tmp_path / "doc.txt"
    path.write_text("one\ntwo\n", encoding="utf-8")
    views: List[Sequence[str]] = []
    statuses: List[str] = []
    hooks = SessionHooks(update_view=views.append, update_status=statuses.append)

    session = EditorSession.open_path(str(path), hooks=hooks)
    session.resize(20, 4)

    assert views[-1] == [f"one{RESET_MARKER}", f"two{RESET_MARKER}", "~", "~"]
    assert statuses[-1].startswith("doc.txt - 2 lines")
    assert statuses[-1].endswith("1/2")
    assert len(statuses[-1]) == 20


def test_empty_document_shows_welcome_line() -> None:
    session = EditorSession()
    session.resize(40, 6)
    lines = session.visible_rows()
    assert lines[2].startswith("~")
    assert "Eru editor -- version" in lines[2]
    assert lines[0] == "~"


def test_combining_keystroke_is_rejected_without_editing() -> None:
    session = make_session("ab\n")
    session.handle_key("right")
    session.handle_key("\u0301", text="\u0301")

    assert row_texts(session) == ["ab"]
    assert session.cursor == Position(column=1, row=0)
    assert not session.document.is_dirty()
    assert session.status.text.startswith("Cannot insert")


def test_status_and_message_lines_cut_on_cluster_boundaries(tmp_path: Path) -> None:
    accented = "e\u0301"
    document = Document.from_text("x\n")
    document.file_identity = tmp_path / f"{accented * 25}.txt"
    session = EditorSession(document)
    session.resize(40, 5)

    status = session.status_line()
    assert status.startswith(accented * 20 + " - 1 lines")
    assert grapheme.length(status) == 40
    assert status.endswith("1/1")

    session.set_status(accented * 50)
    message = session.message_line()
    assert message == accented * 40

    session.resize(9, 5)
    assert session.status_line() == accented * 9
