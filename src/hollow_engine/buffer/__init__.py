"""Buffer abstractions: rope storage, cursor motions, register and undo."""

from .buffer import Buffer, BufferDelta, Transaction
from .document import BufferDocument, count_words
from .registers import RegisterBank, RegisterValue
from .rope import Rope
from .state import BufferState, Cursor
from .undo import UndoDelta, UndoGroup, UndoHistory
from .validation import ensure_line, ensure_offset, ensure_range

__all__ = [
    "Buffer",
    "BufferDelta",
    "BufferDocument",
    "BufferState",
    "Cursor",
    "RegisterBank",
    "RegisterValue",
    "Rope",
    "Transaction",
    "UndoDelta",
    "UndoGroup",
    "UndoHistory",
    "count_words",
    "ensure_line",
    "ensure_offset",
    "ensure_range",
]
