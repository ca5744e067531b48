"""Addressing and search-direction types for documents."""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum


class SearchDirection(Enum):
    FORWARD = "forward"
    BACKWARD = "backward"


@dataclass(frozen=True, slots=True)
class Position:
    """Zero-based ``(column, row)`` address; column counts graphemes."""

    column: int = 0
    row: int = 0

    def with_column(self, column: int) -> "Position":
        return replace(self, column=column)
