"""Core document storage for hollow_engine buffers."""

from __future__ import annotations

from .rope import Rope
from .validation import ensure_line, ensure_offset, ensure_range


def count_words(text: str) -> int:
    """Whitespace-delimited token count used by save, history and stats alike."""

    return len(text.split())


class BufferDocument:
    """Rope-backed text with line translation and a monotonically rising version.

    Mutations never clamp: out-of-range offsets raise ``InvalidPosition`` so
    undo deltas always describe exactly what happened. ``insert`` and
    ``delete`` return the text they added or removed.
    """

    __slots__ = ("_rope", "version", "dirty")

    def __init__(self, text: str = "") -> None:
        self._rope = Rope(text)
        self.version = 0
        self.dirty = False

    @classmethod
    def from_text(cls, text: str) -> "BufferDocument":
        return cls(text)

    def __len__(self) -> int:
        return len(self._rope)

    @property
    def length(self) -> int:
        return len(self._rope)

    @property
    def text(self) -> str:
        return str(self._rope)

    def _touch(self) -> None:
        self.version += 1
        self.dirty = True

    def insert(self, offset: int, text: str) -> str:
        ensure_offset(len(self._rope), offset)
        if text:
            self._rope.insert(offset, text)
            self._touch()
        return text

    def delete(self, start: int, end: int) -> str:
        ensure_range(len(self._rope), start, end)
        removed = self._rope.slice(start, end)
        if removed:
            self._rope.delete(start, end)
            self._touch()
        return removed

    def replace_all(self, text: str) -> None:
        self._rope = Rope(text)
        self._touch()

    def slice(self, start: int, end: int) -> str:
        ensure_range(len(self._rope), start, end)
        return self._rope.slice(start, end)

    def char_at(self, offset: int) -> str:
        ensure_offset(len(self._rope) - 1, offset)
        return self._rope.char_at(offset)

    @property
    def line_count(self) -> int:
        return self._rope.newline_count + 1

    def line_range(self, line: int) -> tuple[int, int]:
        """``(start, end)`` of ``line``; ``end`` stops before the newline."""

        ensure_line(self.line_count, line)
        start = self._rope.line_start(line)
        if line + 1 < self.line_count:
            end = self._rope.line_start(line + 1) - 1
        else:
            end = len(self._rope)
        return start, end

    def line_length(self, line: int) -> int:
        start, end = self.line_range(line)
        return end - start

    def get_line(self, line: int) -> str:
        start, end = self.line_range(line)
        return self._rope.slice(start, end)

    def lines(self, start: int, stop: int) -> list[str]:
        stop = min(stop, self.line_count)
        return [self.get_line(index) for index in range(max(0, start), stop)]

    def offset_to_line_col(self, offset: int) -> tuple[int, int]:
        ensure_offset(len(self._rope), offset)
        line = self._rope.newlines_before(offset)
        return line, offset - self._rope.line_start(line)

    def line_col_to_offset(self, line: int, col: int) -> int:
        start, end = self.line_range(line)
        ensure_offset(end - start, col)
        return start + col

    def word_count(self) -> int:
        return self._rope.word_count

    def mark_clean(self) -> None:
        self.dirty = False


__all__ = ["BufferDocument", "count_words"]
