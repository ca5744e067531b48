"""Single line of text addressed by grapheme cluster."""

from __future__ import annotations

from typing import Iterator, List, Optional, Sequence

from .graphemes import find_run, grapheme_count, split_graphemes
from .highlight import RESET_MARKER, HighlightTag, classify, start_marker
from .state import SearchDirection
from .validation import ensure_grapheme, ensure_growth, ensure_index, ensure_line


class Row:
    """Mutable line store whose length and indices count graphemes.

    Every mutating call rebuilds ``text`` from its grapheme list and refreshes
    the cached count, so ``len(row)`` never drifts from the content. Highlight
    tags are cached too and are recomputed lazily after a mutation using the
    last active search word.
    """

    __slots__ = ("_text", "_length", "_tags", "_active_word")

    def __init__(self, text: str = "") -> None:
        self._text = ensure_line(text)
        self._length = grapheme_count(text)
        self._tags: Optional[List[HighlightTag]] = None
        self._active_word: Optional[str] = None

    @classmethod
    def from_text(cls, text: str) -> "Row":
        return cls(text)

    def __len__(self) -> int:
        return self._length

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Row):
            return NotImplemented
        return self._text == other._text

    def __repr__(self) -> str:
        return f"Row({self._text!r})"

    def __iter__(self) -> Iterator[str]:
        return iter(self.graphemes())

    @property
    def text(self) -> str:
        return self._text

    def is_empty(self) -> bool:
        return self._length == 0

    def graphemes(self) -> List[str]:
        return split_graphemes(self._text)

    def as_bytes(self) -> bytes:
        return self._text.encode("utf-8")

    def _replace(self, clusters: Sequence[str]) -> None:
        self._text = "".join(clusters)
        self._length = grapheme_count(self._text)
        self._tags = None

    # ------------------------------------------------------------------
    # Mutation

    def insert(self, at: int, ch: str) -> None:
        """Insert the grapheme ``ch`` before ``at``; past the end appends.

        ``ch`` must stay a cluster of its own once placed, so a combining mark
        or a lone regional indicator that would fuse with a neighbour is
        rejected and the row is left untouched.
        """

        ensure_index(at)
        ensure_grapheme(ch)
        clusters = self.graphemes()
        clusters.insert(min(at, len(clusters)), ch)
        text = "".join(clusters)
        length = ensure_growth(text, self._length + 1, ch)
        self._text, self._length, self._tags = text, length, None

    def delete(self, at: int) -> None:
        if at < 0 or at >= self._length:
            return
        clusters = self.graphemes()
        del clusters[at]
        self._replace(clusters)

    def append(self, other: "Row") -> None:
        self._replace([self._text, other.text])

    def split(self, at: int) -> "Row":
        """Keep ``[0, at)`` in place and return the remainder as a new row."""

        ensure_index(at)
        clusters = self.graphemes()
        at = min(at, len(clusters))
        tail = Row("".join(clusters[at:]))
        self._replace(clusters[:at])
        return tail

    # ------------------------------------------------------------------
    # Search

    def find(
        self,
        query: str,
        start: int,
        direction: SearchDirection = SearchDirection.FORWARD,
    ) -> Optional[int]:
        """Grapheme index of ``query`` in this row, or ``None``.

        Forward looks for the first match starting at or after ``start``.
        Backward looks for the last match ending at or before ``start``.
        """

        if start < 0 or start > self._length:
            return None
        needle = split_graphemes(query)
        clusters = self.graphemes()
        if direction is SearchDirection.FORWARD:
            return find_run(clusters, needle, start, self._length)
        if direction is SearchDirection.BACKWARD:
            return find_run(clusters, needle, 0, start, reverse=True)
        raise AssertionError(f"unhandled direction {direction!r}")

    # ------------------------------------------------------------------
    # Display

    def highlight(self, active_word: Optional[str] = None) -> List[HighlightTag]:
        self._active_word = active_word
        self._tags = classify(self.graphemes(), active_word)
        return list(self._tags)

    @property
    def tags(self) -> List[HighlightTag]:
        if self._tags is None:
            self._tags = classify(self.graphemes(), self._active_word)
        return list(self._tags)

    def render(self, start: int, end: int) -> str:
        """Markup for graphemes ``[start, end)`` with color change markers."""

        end = max(0, min(end, self._length))
        start = max(0, min(start, end))
        tags = self.tags
        clusters = self.graphemes()
        current = HighlightTag.NONE
        parts: List[str] = []
        for index in range(start, end):
            tag = tags[index]
            if tag is not current:
                current = tag
                parts.append(start_marker(tag))
            cluster = clusters[index]
            parts.append(" " if cluster == "\t" else cluster)
        parts.append(RESET_MARKER)
        return "".join(parts)


__all__ = ["Row"]
