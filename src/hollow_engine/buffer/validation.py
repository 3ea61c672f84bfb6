"""Validation helpers shared across buffer services."""

from __future__ import annotations

from hollow_engine.errors import InvalidPosition


def ensure_offset(length: int, offset: int) -> int:
    if offset < 0 or offset > length:
        raise InvalidPosition(
            f"Offset {offset} outside [0, {length}]", offset=offset, length=length
        )
    return offset


def ensure_range(length: int, start: int, end: int) -> tuple[int, int]:
    ensure_offset(length, start)
    ensure_offset(length, end)
    if start > end:
        raise InvalidPosition(
            f"Range start {start} is after end {end}", offset=start, length=length
        )
    return start, end


def ensure_line(line_count: int, line: int) -> int:
    if line < 0 or line >= line_count:
        raise InvalidPosition(
            f"Line {line} outside [0, {line_count - 1}]", offset=line, length=line_count
        )
    return line


__all__ = ["ensure_offset", "ensure_range", "ensure_line"]
