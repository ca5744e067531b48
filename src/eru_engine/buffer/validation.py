"""Validation helpers shared across row operations."""

from __future__ import annotations

from .errors import BufferValidationError
from .graphemes import grapheme_count


def ensure_index(at: int) -> int:
    if at < 0:
        raise BufferValidationError("Index must not be negative", value=at)
    return at


def ensure_grapheme(ch: str) -> str:
    if "\n" in ch:
        raise BufferValidationError("Rows cannot hold line terminators", value=ch)
    if grapheme_count(ch) != 1:
        raise BufferValidationError("Expected exactly one grapheme", value=ch)
    return ch


def ensure_line(text: str) -> str:
    if "\n" in text:
        raise BufferValidationError("Rows cannot hold line terminators", value=text)
    return text


def ensure_growth(text: str, expected: int, ch: str) -> int:
    length = grapheme_count(text)
    if length != expected:
        raise BufferValidationError(
            "Grapheme would merge with its neighbours", value=ch
        )
    return length
