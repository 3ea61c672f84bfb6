"""Cursor state tied to a BufferDocument."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(slots=True)
class Cursor:
    """Document offset plus the preferred column kept across vertical moves."""

    offset: int = 0
    sticky_col: int = 0


@dataclass(slots=True)
class BufferState:
    cursor: Cursor = field(default_factory=Cursor)

    @property
    def offset(self) -> int:
        return self.cursor.offset

    def set_offset(self, offset: int, *, sticky_col: int | None = None) -> None:
        self.cursor.offset = offset
        if sticky_col is not None:
            self.cursor.sticky_col = sticky_col
