"""Grapheme-aware text buffer engine with a Textual host."""

__all__ = [
    "adapters",
    "buffer",
    "runtime",
]

__version__ = "0.1.0"
