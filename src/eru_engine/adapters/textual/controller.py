"""Editing session that turns host key events into document operations."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Sequence

import grapheme

from eru_engine import __version__
from eru_engine.buffer import (
    BufferValidationError,
    Document,
    DocumentIOError,
    Position,
    SearchDirection,
)
from eru_engine.buffer.graphemes import split_graphemes
from eru_engine.runtime import telemetry

QUIT_TIMES = 3
MESSAGE_TIMEOUT_S = 5.0
HELP_MESSAGE = "HELP: Ctrl-Q = quit | Ctrl-S = save | Ctrl-F = find"
SEARCH_LABEL = "Search (ESC to cancel, arrows to navigate): "
SAVE_LABEL = "Save as: "

_MOVE_KEYS = frozenset(
    {"up", "down", "left", "right", "pageup", "pagedown", "home", "end"}
)


def _noop(*_args, **_kwargs) -> None:  # pragma: no cover - default hook
    return None


@dataclass(slots=True)
class SessionHooks:
    """Callbacks the session invokes after every handled key."""

    update_view: Callable[[Sequence[str]], None] = _noop
    update_status: Callable[[str], None] = _noop
    update_message: Callable[[str], None] = _noop


@dataclass(slots=True)
class StatusMessage:
    text: str
    time: float = field(default_factory=time.monotonic)


@dataclass(slots=True)
class Prompt:
    """Single-line input collected in the message bar."""

    kind: str  # "save" or "search"
    label: str
    text: str = ""
    origin: Position = Position()
    direction: SearchDirection = SearchDirection.FORWARD


class EditorSession:
    """Owns one document plus the cursor, viewport, and prompt state."""

    def __init__(
        self,
        document: Optional[Document] = None,
        *,
        quit_times: int = QUIT_TIMES,
        hooks: Optional[SessionHooks] = None,
        status: str = HELP_MESSAGE,
    ) -> None:
        self.document = document if document is not None else Document()
        self.hooks = hooks or SessionHooks()
        self.cursor = Position()
        self.offset = Position()
        self.width = 80
        self.height = 24
        self.should_quit = False
        self.prompt: Optional[Prompt] = None
        self.status = StatusMessage(status)
        self._quit_times = quit_times
        self._quit_left = quit_times

    @classmethod
    def open_path(
        cls,
        path: Optional[str],
        *,
        quit_times: int = QUIT_TIMES,
        hooks: Optional[SessionHooks] = None,
    ) -> "EditorSession":
        """Open ``path`` or fall back to an empty document with an error."""

        if not path:
            return cls(quit_times=quit_times, hooks=hooks)
        try:
            document = Document.open(path)
        except DocumentIOError as exc:
            telemetry.record_event(
                "open_failed", level="error", data={"path": path, "error": exc}
            )
            return cls(
                quit_times=quit_times,
                hooks=hooks,
                status=f"ERROR: Could not open file: {path}",
            )
        return cls(document, quit_times=quit_times, hooks=hooks)

    # ------------------------------------------------------------------
    # Host entry points

    def resize(self, width: int, height: int) -> None:
        self.width = max(1, width)
        self.height = max(1, height)
        self.scroll()
        self.refresh()

    def handle_key(self, key: str, *, text: Optional[str] = None) -> None:
        """Dispatch one normalized key (``"ctrl+s"``, ``"left"``, ...)."""

        if self.prompt is not None:
            self._handle_prompt_key(key, text)
        else:
            self._handle_edit_key(key, text)
        self.scroll()
        self.refresh()

    def refresh(self) -> None:
        self.hooks.update_view(self.visible_rows())
        self.hooks.update_status(self.status_line())
        self.hooks.update_message(self.message_line())

    # ------------------------------------------------------------------
    # Editing keys

    def _handle_edit_key(self, key: str, text: Optional[str]) -> None:
        if key == "ctrl+q":
            if self._quit_left > 0 and self.document.is_dirty():
                self.set_status(
                    "WARNING: File has unsaved changes. "
                    f"Press Ctrl-Q {self._quit_left} more times to quit."
                )
                self._quit_left -= 1
                return
            telemetry.record_event("quit", data={"dirty": self.document.is_dirty()})
            self.should_quit = True
            return

        if self._quit_left < self._quit_times:
            self._quit_left = self._quit_times
            self.set_status("")

        if key == "ctrl+s":
            self.save()
        elif key == "ctrl+f":
            self.start_search()
        elif key == "enter":
            self.document.insert(self.cursor, "\n")
            self.move_cursor("right")
        elif key == "tab":
            self.insert_text("\t")
        elif key == "delete":
            self.document.delete(self.cursor)
        elif key == "backspace":
            if self.cursor.column > 0 or self.cursor.row > 0:
                self.move_cursor("left")
                self.document.delete(self.cursor)
        elif key in _MOVE_KEYS:
            self.move_cursor(key)
        elif text and text.isprintable():
            self.insert_text(text)

    def insert_text(self, text: str) -> None:
        for ch in split_graphemes(text):
            try:
                self.document.insert(self.cursor, ch)
            except BufferValidationError as exc:
                telemetry.record_event(
                    "insert_rejected", level="warning", data={"value": exc.value}
                )
                self.set_status(
                    "Cannot insert a character that joins its neighbour."
                )
                return
            self.move_cursor("right")

    def move_cursor(self, key: str) -> None:
        column, row = self.cursor.column, self.cursor.row
        height = len(self.document)
        current = self.document.row(row)
        width = len(current) if current is not None else 0

        if key == "up":
            row = max(row - 1, 0)
        elif key == "down":
            if row < height:
                row += 1
        elif key == "left":
            if column > 0:
                column -= 1
            elif row > 0:
                row -= 1
                previous = self.document.row(row)
                column = len(previous) if previous is not None else 0
        elif key == "right":
            if column < width:
                column += 1
            elif row < height:
                row += 1
                column = 0
        elif key == "pageup":
            row = max(row - self.height, 0)
        elif key == "pagedown":
            row = min(row + self.height, height)
        elif key == "home":
            column = 0
        elif key == "end":
            column = width

        target = self.document.row(row)
        column = min(column, len(target) if target is not None else 0)
        self.cursor = Position(column=column, row=row)

    def scroll(self) -> None:
        column, row = self.cursor.column, self.cursor.row
        offset_column, offset_row = self.offset.column, self.offset.row
        if row < offset_row:
            offset_row = row
        elif row >= offset_row + self.height:
            offset_row = row - self.height + 1
        if column < offset_column:
            offset_column = column
        elif column >= offset_column + self.width:
            offset_column = column - self.width + 1
        self.offset = Position(column=offset_column, row=offset_row)

    # ------------------------------------------------------------------
    # Save and search

    def save(self) -> None:
        if self.document.file_identity is None:
            self.prompt = Prompt(kind="save", label=SAVE_LABEL)
            self.set_status(SAVE_LABEL)
            return
        self._write()

    def _write(self, path: Optional[str] = None) -> None:
        try:
            self.document.save(path)
        except DocumentIOError as exc:
            telemetry.record_event(
                "save_failed", level="error", data={"error": exc}
            )
            self.set_status("ERROR: Error writing to file!")
            return
        telemetry.record_event(
            "save", data={"path": self.document.file_identity, "rows": len(self.document)}
        )
        self.set_status("File saved successfully!")

    def start_search(self) -> None:
        self.prompt = Prompt(kind="search", label=SEARCH_LABEL, origin=self.cursor)
        self.set_status(SEARCH_LABEL)

    def _handle_prompt_key(self, key: str, text: Optional[str]) -> None:
        prompt = self.prompt
        assert prompt is not None

        if key == "backspace":
            prompt.text = prompt.text[:-1]
        elif key == "enter":
            self._finish_prompt(prompt)
            return
        elif key == "escape":
            prompt.text = ""
            self._finish_prompt(prompt)
            return
        elif text and text.isprintable():
            prompt.text += text

        self.set_status(f"{prompt.label}{prompt.text}")
        if prompt.kind == "search":
            self._search_step(prompt, key)

    def _search_step(self, prompt: Prompt, key: str) -> None:
        moved = False
        if key in {"right", "down"}:
            prompt.direction = SearchDirection.FORWARD
            self.move_cursor("right")
            moved = True
        elif key in {"left", "up"}:
            prompt.direction = SearchDirection.BACKWARD
        else:
            prompt.direction = SearchDirection.FORWARD

        self.document.highlight(prompt.text or None)
        if not prompt.text:
            return
        found = self.document.find(prompt.text, self.cursor, prompt.direction)
        telemetry.record_event(
            "search",
            level="debug",
            data={
                "query": prompt.text,
                "direction": prompt.direction.value,
                "found": found,
            },
        )
        if found is not None:
            self.cursor = found
        elif moved:
            self.move_cursor("left")

    def _finish_prompt(self, prompt: Prompt) -> None:
        self.prompt = None
        self.set_status("")
        if prompt.kind == "search":
            self.document.highlight(None)
            if not prompt.text:
                self.cursor = prompt.origin
            return
        if not prompt.text:
            self.set_status("Save aborted.")
            return
        self._write(prompt.text)

    # ------------------------------------------------------------------
    # Display

    def set_status(self, text: str) -> None:
        self.status = StatusMessage(text)

    def message_line(self) -> str:
        if time.monotonic() - self.status.time < MESSAGE_TIMEOUT_S:
            return grapheme.slice(self.status.text, 0, self.width)
        return ""

    def status_line(self) -> str:
        name = grapheme.slice(self.document.file_name or "[No Name]", 0, 20)
        modified = " (modified)" if self.document.is_dirty() else ""
        status = f"{name} - {len(self.document)} lines{modified}"
        indicator = f"{self.cursor.row + 1}/{len(self.document)}"
        padding = max(
            self.width - grapheme.length(status) - grapheme.length(indicator), 0
        )
        line = f"{status}{' ' * padding}{indicator}"
        return grapheme.slice(line, 0, self.width)

    def _welcome(self) -> str:
        message = f"Eru editor -- version {__version__}"
        padding = max(self.width - len(message), 0) // 2
        return f"~{' ' * max(padding - 1, 0)}{message}"[: self.width]

    def visible_rows(self) -> List[str]:
        """Rendered markup for each screen line of the viewport."""

        lines: List[str] = []
        for screen_row in range(self.height):
            row = self.document.row(self.offset.row + screen_row)
            if row is not None:
                start = self.offset.column
                lines.append(row.render(start, start + self.width))
            elif self.document.is_empty() and screen_row == self.height // 3:
                lines.append(self._welcome())
            else:
                lines.append("~")
        return lines


__all__ = ["EditorSession", "SessionHooks", "Prompt", "StatusMessage", "QUIT_TIMES"]
