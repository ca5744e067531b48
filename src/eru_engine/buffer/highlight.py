"""Per-grapheme display classification for rendered rows."""

from __future__ import annotations

import string
from enum import Enum
from typing import Dict, List, Optional, Sequence, Tuple

from .graphemes import find_run, split_graphemes

RGB = Tuple[int, int, int]

RESET_MARKER = "\x1b[39m"

_SEPARATORS = frozenset(string.punctuation) | frozenset(string.whitespace)


class HighlightTag(Enum):
    """Closed set of display classes a single grapheme can carry."""

    NONE = "none"
    NUMBER = "number"
    MATCH = "match"

    @property
    def color(self) -> RGB:
        return _TAG_COLORS[self]


_TAG_COLORS: Dict[HighlightTag, RGB] = {
    HighlightTag.NONE: (255, 255, 255),
    HighlightTag.NUMBER: (220, 163, 163),
    HighlightTag.MATCH: (38, 139, 210),
}


def start_marker(tag: HighlightTag) -> str:
    """SGR sequence switching the foreground to ``tag``'s color."""

    red, green, blue = tag.color
    return f"\x1b[38;2;{red};{green};{blue}m"


def _is_separator(cluster: str) -> bool:
    return cluster in _SEPARATORS


def _is_digit(cluster: str) -> bool:
    return len(cluster) == 1 and "0" <= cluster <= "9"


def _match_mask(graphemes: Sequence[str], active_word: Optional[str]) -> List[bool]:
    mask = [False] * len(graphemes)
    if not active_word:
        return mask
    needle = split_graphemes(active_word)
    cursor = 0
    while True:
        found = find_run(graphemes, needle, cursor, len(graphemes))
        if found is None:
            break
        for index in range(found, found + len(needle)):
            mask[index] = True
        cursor = found + len(needle)
    return mask


def classify(
    graphemes: Sequence[str], active_word: Optional[str] = None
) -> List[HighlightTag]:
    """Return one ``HighlightTag`` per grapheme.

    Digits starting a token (or continuing a number) and a ``.`` following a
    number are tagged ``NUMBER``. Every grapheme inside a non-overlapping
    occurrence of ``active_word`` is tagged ``MATCH``, overriding ``NUMBER``.
    """

    matched = _match_mask(graphemes, active_word)
    tags: List[HighlightTag] = []
    prev_is_sep = True
    prev_tag = HighlightTag.NONE
    for index, cluster in enumerate(graphemes):
        if matched[index]:
            tag = HighlightTag.MATCH
        elif _is_digit(cluster) and (prev_is_sep or prev_tag is HighlightTag.NUMBER):
            tag = HighlightTag.NUMBER
        elif cluster == "." and prev_tag is HighlightTag.NUMBER:
            tag = HighlightTag.NUMBER
        else:
            tag = HighlightTag.NONE
        tags.append(tag)
        prev_tag = tag
        prev_is_sep = _is_separator(cluster)
    return tags


__all__ = ["HighlightTag", "RESET_MARKER", "classify", "start_marker"]
