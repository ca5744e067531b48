"""Grapheme-correct rows, documents, and highlight tags."""

from .document import Document
from .errors import BufferValidationError, DocumentIOError
from .highlight import HighlightTag, classify
from .row import Row
from .state import Position, SearchDirection

__all__ = [
    "Document",
    "Row",
    "Position",
    "SearchDirection",
    "HighlightTag",
    "classify",
    "DocumentIOError",
    "BufferValidationError",
]
