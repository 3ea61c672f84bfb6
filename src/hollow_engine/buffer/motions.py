"""Cursor movement over a BufferDocument.

Every motion is a pure function ``(document, cursor, ...) -> Cursor``. With
``navigate=True`` the result never rests one past the last character of a
non-empty line. Horizontal and word motions reset the sticky column; vertical
motions keep it.
"""

from __future__ import annotations

from typing import Callable, Dict

from .document import BufferDocument
from .state import Cursor

Motion = Callable[..., Cursor]

_WHITESPACE = 0
_WORD = 1
_PUNCT = 2


def char_class(char: str) -> int:
    if char.isspace():
        return _WHITESPACE
    if char.isalnum() or char == "_":
        return _WORD
    return _PUNCT


def settle(document: BufferDocument, offset: int, *, navigate: bool) -> int:
    """Clamp ``offset`` into the document and apply the Navigate end-of-line rule."""

    offset = max(0, min(offset, document.length))
    if not navigate:
        return offset
    line, col = document.offset_to_line_col(offset)
    length = document.line_length(line)
    if length and col >= length:
        return offset - (col - length + 1)
    return offset


def _horizontal(document: BufferDocument, offset: int, navigate: bool) -> Cursor:
    offset = settle(document, offset, navigate=navigate)
    _, col = document.offset_to_line_col(offset)
    return Cursor(offset=offset, sticky_col=col)


def _vertical(
    document: BufferDocument, cursor: Cursor, line: int, navigate: bool
) -> Cursor:
    line = max(0, min(line, document.line_count - 1))
    col = min(cursor.sticky_col, document.line_length(line))
    offset = settle(document, document.line_col_to_offset(line, col), navigate=navigate)
    return Cursor(offset=offset, sticky_col=cursor.sticky_col)


def _line_of(document: BufferDocument, cursor: Cursor) -> int:
    return document.offset_to_line_col(cursor.offset)[0]


def left(document: BufferDocument, cursor: Cursor, *, navigate: bool = False) -> Cursor:
    return _horizontal(document, cursor.offset - 1, navigate)


def right(document: BufferDocument, cursor: Cursor, *, navigate: bool = False) -> Cursor:
    target = cursor.offset + 1
    if navigate:
        line, col = document.offset_to_line_col(cursor.offset)
        if col + 1 >= document.line_length(line):
            target = cursor.offset
    return _horizontal(document, target, navigate)


def up(document: BufferDocument, cursor: Cursor, *, navigate: bool = False) -> Cursor:
    line = _line_of(document, cursor)
    if line == 0:
        return Cursor(cursor.offset, cursor.sticky_col)
    return _vertical(document, cursor, line - 1, navigate)


def down(document: BufferDocument, cursor: Cursor, *, navigate: bool = False) -> Cursor:
    line = _line_of(document, cursor)
    if line + 1 >= document.line_count:
        return Cursor(cursor.offset, cursor.sticky_col)
    return _vertical(document, cursor, line + 1, navigate)


def page_up(
    document: BufferDocument, cursor: Cursor, *, rows: int = 20, navigate: bool = False
) -> Cursor:
    return _vertical(document, cursor, _line_of(document, cursor) - max(1, rows), navigate)


def page_down(
    document: BufferDocument, cursor: Cursor, *, rows: int = 20, navigate: bool = False
) -> Cursor:
    return _vertical(document, cursor, _line_of(document, cursor) + max(1, rows), navigate)


def word_forward(
    document: BufferDocument, cursor: Cursor, *, navigate: bool = False
) -> Cursor:
    length = document.length
    position = cursor.offset
    if position < length:
        start_class = char_class(document.char_at(position))
        if start_class != _WHITESPACE:
            while position < length and char_class(document.char_at(position)) == start_class:
                position += 1
        while position < length and char_class(document.char_at(position)) == _WHITESPACE:
            position += 1
    return _horizontal(document, position, navigate)


def word_backward(
    document: BufferDocument, cursor: Cursor, *, navigate: bool = False
) -> Cursor:
    position = cursor.offset
    if position == 0:
        return _horizontal(document, 0, navigate)
    position -= 1
    while position > 0 and char_class(document.char_at(position)) == _WHITESPACE:
        position -= 1
    run_class = char_class(document.char_at(position))
    while position > 0 and char_class(document.char_at(position - 1)) == run_class:
        position -= 1
    return _horizontal(document, position, navigate)


def is_blank_line(document: BufferDocument, line: int) -> bool:
    if line >= document.line_count:
        return True
    return not document.get_line(line).strip()


def paragraph_forward(
    document: BufferDocument, cursor: Cursor, *, navigate: bool = False
) -> Cursor:
    last = document.line_count - 1
    line = _line_of(document, cursor)
    while line < last and not is_blank_line(document, line):
        line += 1
    while line < last and is_blank_line(document, line):
        line += 1
    return _horizontal(document, document.line_range(line)[0], navigate)


def paragraph_backward(
    document: BufferDocument, cursor: Cursor, *, navigate: bool = False
) -> Cursor:
    line = _line_of(document, cursor)
    if line > 0 and not is_blank_line(document, line):
        line -= 1
    while line > 0 and is_blank_line(document, line):
        line -= 1
    while line > 0 and not is_blank_line(document, line - 1):
        line -= 1
    return _horizontal(document, document.line_range(line)[0], navigate)


def line_start(
    document: BufferDocument, cursor: Cursor, *, navigate: bool = False
) -> Cursor:
    start, _ = document.line_range(_line_of(document, cursor))
    return _horizontal(document, start, navigate)


def line_end(document: BufferDocument, cursor: Cursor, *, navigate: bool = False) -> Cursor:
    _, end = document.line_range(_line_of(document, cursor))
    return _horizontal(document, end, navigate)


def document_start(
    document: BufferDocument, cursor: Cursor, *, navigate: bool = False
) -> Cursor:
    return _horizontal(document, 0, navigate)


def document_end(
    document: BufferDocument, cursor: Cursor, *, navigate: bool = False
) -> Cursor:
    return _horizontal(document, document.length, navigate)


def last_line(document: BufferDocument, cursor: Cursor, *, navigate: bool = False) -> Cursor:
    start, _ = document.line_range(document.line_count - 1)
    return _horizontal(document, start, navigate)


MOTIONS: Dict[str, Motion] = {
    "left": left,
    "right": right,
    "up": up,
    "down": down,
    "page_up": page_up,
    "page_down": page_down,
    "word_forward": word_forward,
    "word_backward": word_backward,
    "paragraph_forward": paragraph_forward,
    "paragraph_backward": paragraph_backward,
    "line_start": line_start,
    "line_end": line_end,
    "document_start": document_start,
    "document_end": document_end,
    "last_line": last_line,
}


__all__ = ["MOTIONS", "Motion", "char_class", "is_blank_line", "settle"]
