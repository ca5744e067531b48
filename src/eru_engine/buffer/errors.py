"""Error types raised by the buffer layer."""

from __future__ import annotations

from pathlib import Path
from typing import Optional


class BufferValidationError(ValueError):
    """Raised when a row operation receives a malformed argument."""

    def __init__(self, message: str, *, value: object | None = None) -> None:
        super().__init__(message)
        self.value = value


class DocumentIOError(OSError):
    """Raised when a document cannot be read from or written to disk."""

    def __init__(self, message: str, *, path: Optional[Path] = None) -> None:
        super().__init__(message)
        self.path = path

    def __str__(self) -> str:
        base = super().__str__()
        if self.path is None:
            return base
        return f"{base}: {self.path}"
