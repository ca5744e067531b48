"""Grapheme-cluster helpers shared by rows and the highlight classifier."""

from __future__ import annotations

from typing import List, Optional, Sequence

import grapheme


def split_graphemes(text: str) -> List[str]:
    """Return ``text`` as a list of extended grapheme clusters."""

    return list(grapheme.graphemes(text))


def grapheme_count(text: str) -> int:
    return grapheme.length(text)


def find_run(
    haystack: Sequence[str],
    needle: Sequence[str],
    start: int,
    end: int,
    *,
    reverse: bool = False,
) -> Optional[int]:
    """Locate ``needle`` as a contiguous run inside ``haystack[start:end]``.

    Matches are grapheme-exact: a run cannot begin or end inside a cluster.
    With ``reverse`` the last run is returned instead of the first.
    """

    width = len(needle)
    if width == 0:
        return None
    last = end - width
    if last < start:
        return None
    candidates = range(last, start - 1, -1) if reverse else range(start, last + 1)
    first = needle[0]
    for index in candidates:
        if haystack[index] != first:
            continue
        if list(haystack[index : index + width]) == list(needle):
            return index
    return None


__all__ = ["split_graphemes", "grapheme_count", "find_run"]
