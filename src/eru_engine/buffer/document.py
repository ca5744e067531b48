"""Ordered collection of rows backed by an optional file."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Iterator, List, Optional, Union

from eru_engine.runtime import telemetry

from .errors import DocumentIOError
from .row import Row
from .state import Position, SearchDirection

PathLike = Union[str, "os.PathLike[str]"]

LINE_TERMINATOR = "\n"


def _split_lines(text: str) -> List[str]:
    """Split on ``\\n`` without producing a trailing empty line."""

    if not text:
        return []
    lines = text.split(LINE_TERMINATOR)
    if text.endswith(LINE_TERMINATOR):
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


class Document:
    """List-of-rows text buffer with a dirty flag and file identity.

    Positions outside the buffer are tolerated: ``insert`` and ``delete``
    silently ignore them so callers can dispatch edits without checking
    bounds first.
    """

    def __init__(
        self,
        rows: Optional[List[Row]] = None,
        *,
        file_identity: Optional[PathLike] = None,
    ) -> None:
        self._rows: List[Row] = list(rows or [])
        self._file_identity = Path(file_identity) if file_identity else None
        self._dirty = False

    @classmethod
    def from_text(cls, text: str) -> "Document":
        return cls([Row(line) for line in _split_lines(text)])

    @classmethod
    def open(cls, path: PathLike) -> "Document":
        """Load ``path`` into a clean document, one row per line."""

        target = Path(path)
        with telemetry.span(
            "document::open", component="document", metadata={"path": target}
        ) as handle:
            try:
                text = target.read_bytes().decode("utf-8")
            except (OSError, UnicodeDecodeError) as exc:
                raise DocumentIOError(f"Could not open file ({exc})", path=target) from exc
            rows = [Row(line) for line in _split_lines(text)]
            handle.add_metadata("rows", len(rows))
        return cls(rows, file_identity=target)

    # ------------------------------------------------------------------
    # Inspection

    @property
    def file_identity(self) -> Optional[Path]:
        return self._file_identity

    @file_identity.setter
    def file_identity(self, path: Optional[PathLike]) -> None:
        self._file_identity = Path(path) if path else None

    @property
    def file_name(self) -> Optional[str]:
        return self._file_identity.name if self._file_identity else None

    def __len__(self) -> int:
        return len(self._rows)

    def __iter__(self) -> Iterator[Row]:
        return iter(self._rows)

    def is_empty(self) -> bool:
        return not self._rows

    def is_dirty(self) -> bool:
        return self._dirty

    def row(self, index: int) -> Optional[Row]:
        if 0 <= index < len(self._rows):
            return self._rows[index]
        return None

    def text(self) -> str:
        return "".join(row.text + LINE_TERMINATOR for row in self._rows)

    # ------------------------------------------------------------------
    # Editing

    def insert(self, at: Position, ch: str) -> None:
        if at.row > len(self._rows) or at.row < 0:
            return
        if ch == LINE_TERMINATOR:
            self.insert_newline(at)
            return
        if at.row == len(self._rows):
            row = Row()
            row.insert(0, ch)
            self._rows.append(row)
        else:
            self._rows[at.row].insert(max(at.column, 0), ch)
        self._dirty = True

    def insert_newline(self, at: Position) -> None:
        if at.row >= len(self._rows) or at.row < 0:
            return
        tail = self._rows[at.row].split(max(at.column, 0))
        self._rows.insert(at.row + 1, tail)
        self._dirty = True

    def delete(self, at: Position) -> None:
        if at.row >= len(self._rows) or at.row < 0:
            return
        row = self._rows[at.row]
        if at.column == len(row) and at.row + 1 < len(self._rows):
            row.append(self._rows.pop(at.row + 1))
            self._dirty = True
            return
        before = len(row)
        row.delete(at.column)
        if len(row) != before:
            self._dirty = True

    # ------------------------------------------------------------------
    # Persistence

    def save(self, path: Optional[PathLike] = None) -> None:
        """Write every row followed by a terminator; ``path`` renames first."""

        if path is not None:
            self.file_identity = path
        target = self._file_identity
        if target is None:
            raise DocumentIOError("Document has no file name")

        with telemetry.span(
            "document::save", component="document", metadata={"path": target}
        ) as handle:
            try:
                with target.open("wb") as stream:
                    for row in self._rows:
                        stream.write(row.as_bytes())
                        stream.write(LINE_TERMINATOR.encode("utf-8"))
            except OSError as exc:
                raise DocumentIOError(f"Error writing to file ({exc})", path=target) from exc
            handle.add_metadata("rows", len(self._rows))
        self._dirty = False

    # ------------------------------------------------------------------
    # Search and display

    def find(
        self,
        query: str,
        start: Position,
        direction: SearchDirection = SearchDirection.FORWARD,
    ) -> Optional[Position]:
        """First match of ``query`` scanning rows away from ``start``."""

        if start.row < 0 or start.row >= len(self._rows):
            return None
        column = max(0, min(start.column, len(self._rows[start.row])))
        if direction is SearchDirection.FORWARD:
            rows = range(start.row, len(self._rows))
        elif direction is SearchDirection.BACKWARD:
            rows = range(start.row, -1, -1)
        else:
            raise AssertionError(f"unhandled direction {direction!r}")

        for index in rows:
            row = self._rows[index]
            if index != start.row:
                column = 0 if direction is SearchDirection.FORWARD else len(row)
            found = row.find(query, column, direction)
            if found is not None:
                return Position(column=found, row=index)
        return None

    def highlight(self, active_word: Optional[str] = None) -> None:
        for row in self._rows:
            row.highlight(active_word)


__all__ = ["Document", "LINE_TERMINATOR"]
