"""High-level buffer façade combining document, cursor, register, and undo."""

from __future__ import annotations

from contextlib import AbstractContextManager
from dataclasses import dataclass
from typing import Callable, ContextManager, Optional

from hollow_engine.runtime import telemetry

from . import motions
from .document import BufferDocument
from .registers import RegisterBank
from .state import BufferState, Cursor
from .undo import EditKind, UndoDelta, UndoGroup, UndoHistory


@dataclass(frozen=True, slots=True)
class BufferDelta:
    version: int
    label: str
    offset: int
    removed: str
    inserted: str
    cursor: int


class Buffer:
    def __init__(
        self,
        *,
        name: str = "default",
        document: Optional[BufferDocument] = None,
        state: Optional[BufferState] = None,
        registers: Optional[RegisterBank] = None,
        undo: Optional[UndoHistory] = None,
        clock: Optional[Callable[[], float]] = None,
    ) -> None:
        self.name = name
        self.document = document or BufferDocument()
        self.state = state or BufferState()
        self.registers = registers or RegisterBank()
        if undo is None:
            undo = UndoHistory(clock=clock) if clock is not None else UndoHistory()
        self.undo_history = undo

    @classmethod
    def from_text(
        cls,
        text: str,
        *,
        name: str = "default",
        clock: Optional[Callable[[], float]] = None,
    ) -> "Buffer":
        return cls(name=name, document=BufferDocument.from_text(text), clock=clock)

    @property
    def text(self) -> str:
        return self.document.text

    @property
    def cursor(self) -> Cursor:
        return self.state.cursor

    @property
    def offset(self) -> int:
        return self.state.cursor.offset

    def cursor_line_col(self) -> tuple[int, int]:
        return self.document.offset_to_line_col(self.offset)

    def current_line(self) -> int:
        return self.cursor_line_col()[0]

    # ------------------------------------------------------------------
    # cursor
    # ------------------------------------------------------------------
    def move_to(self, offset: int) -> Cursor:
        """Place the cursor at ``offset`` (clamped) and reset the sticky column."""

        offset = max(0, min(offset, self.document.length))
        _, col = self.document.offset_to_line_col(offset)
        self.state.set_offset(offset, sticky_col=col)
        return self.state.cursor

    def apply_motion(self, name: str, *, navigate: bool = False, **options: int) -> Cursor:
        motion = motions.MOTIONS[name]
        self.state.cursor = motion(self.document, self.state.cursor, navigate=navigate, **options)
        return self.state.cursor

    def settle(self, *, navigate: bool) -> Cursor:
        offset = motions.settle(self.document, self.offset, navigate=navigate)
        if offset != self.offset:
            self.move_to(offset)
        return self.state.cursor

    # ------------------------------------------------------------------
    # editing
    # ------------------------------------------------------------------
    def _edit(
        self,
        label: str,
        *,
        kind: EditKind,
        start: int,
        end: int,
        text: str,
        cursor_after: Optional[int] = None,
        standalone: bool = False,
    ) -> BufferDelta:
        with Transaction(self, label) as tx:
            cursor_before = self.offset
            removed = self.document.delete(start, end)
            inserted = self.document.insert(start, text)
            target = start + len(inserted) if cursor_after is None else cursor_after
            self.move_to(target)
            tx.commit(
                UndoDelta(offset=start, removed=removed, inserted=inserted),
                kind=kind,
                cursor_before=cursor_before,
                cursor_after=self.offset,
                standalone=standalone,
            )
        return BufferDelta(
            version=self.document.version,
            label=label,
            offset=start,
            removed=removed,
            inserted=inserted,
            cursor=self.offset,
        )

    def insert_text(self, text: str) -> Optional[BufferDelta]:
        if not text:
            return None
        offset = self.offset
        return self._edit("insert_text", kind="insert", start=offset, end=offset, text=text)

    def newline(self) -> BufferDelta:
        offset = self.offset
        return self._edit("newline", kind="insert", start=offset, end=offset, text="\n")

    def backspace(self) -> Optional[BufferDelta]:
        offset = self.offset
        if offset == 0:
            return None
        return self._edit("backspace", kind="delete", start=offset - 1, end=offset, text="")

    def delete_forward(self) -> Optional[BufferDelta]:
        offset = self.offset
        if offset >= self.document.length:
            return None
        return self._edit(
            "delete_forward",
            kind="delete",
            start=offset,
            end=offset + 1,
            text="",
            cursor_after=offset,
        )

    def delete_line(self) -> Optional[BufferDelta]:
        """Remove the cursor's line into the register (``dd``).

        The last line loses only its text; the newline before it stays.
        """

        document = self.document
        if document.length == 0:
            return None
        line = self.current_line()
        start, end = document.line_range(line)
        text = document.slice(start, end)
        if line + 1 < document.line_count:
            end += 1
        elif start == end:
            return None
        self.registers.store_line(text)
        with Transaction(self, "delete_line") as tx:
            cursor_before = self.offset
            removed = document.delete(start, end)
            target_line = min(line, document.line_count - 1)
            self.move_to(document.line_range(target_line)[0])
            tx.commit(
                UndoDelta(offset=start, removed=removed, inserted=""),
                kind="delete",
                cursor_before=cursor_before,
                cursor_after=self.offset,
                standalone=True,
            )
        return BufferDelta(
            version=document.version,
            label="delete_line",
            offset=start,
            removed=removed,
            inserted="",
            cursor=self.offset,
        )

    def yank_line(self) -> str:
        """Copy the cursor's line into the register (``yy``); no undo entry."""

        line = self.document.get_line(self.current_line())
        return self.registers.store_line(line).text

    def paste_line(self) -> Optional[BufferDelta]:
        """Insert the register as a new line below the cursor's line (``p``)."""

        value = self.registers.get()
        if value is None:
            return None
        document = self.document
        line = self.current_line()
        _, end = document.line_range(line)
        if line + 1 < document.line_count:
            at, text = end + 1, value.text
        else:
            at, text = end, "\n" + value.text[:-1]
        return self._edit(
            "paste_line",
            kind="insert",
            start=at,
            end=at,
            text=text,
            cursor_after=end + 1,
            standalone=True,
        )

    # ------------------------------------------------------------------
    # history
    # ------------------------------------------------------------------
    def _apply(self, delta: UndoDelta) -> None:
        self.document.delete(delta.offset, delta.offset + len(delta.removed))
        self.document.insert(delta.offset, delta.inserted)

    def undo(self) -> UndoGroup:
        """Revert the most recent group; raises ``NothingToUndo`` when empty."""

        group = self.undo_history.pop_undo()
        with telemetry.span("buffer::undo", metadata={"buffer": self.name}):
            for delta in group.inverse_deltas():
                self._apply(delta)
            self.move_to(group.cursor_before)
        return group

    def redo(self) -> UndoGroup:
        group = self.undo_history.pop_redo()
        with telemetry.span("buffer::redo", metadata={"buffer": self.name}):
            for delta in group.deltas:
                self._apply(delta)
            self.move_to(group.cursor_after)
        return group

    def close_undo_group(self) -> None:
        self.undo_history.close()

    def set_content(self, text: str) -> None:
        """Replace everything; the change is not undoable and history resets."""

        with telemetry.span("buffer::set_content", metadata={"buffer": self.name}):
            self.document.replace_all(text)
            self.undo_history.reset()
            self.move_to(0)


class Transaction(AbstractContextManager["Transaction"]):
    def __init__(self, buffer: Buffer, label: str) -> None:
        self.buffer = buffer
        self.label = label
        self._span_cm: Optional[ContextManager[object]] = None

    def __enter__(self) -> "Transaction":
        self._span_cm = telemetry.span(
            name=f"buffer::{self.label}",
            component=True,
            metadata={"buffer": self.buffer.name},
        )
        self._span_cm.__enter__()
        return self

    def commit(
        self,
        delta: UndoDelta,
        *,
        kind: EditKind,
        cursor_before: int,
        cursor_after: int,
        standalone: bool = False,
    ) -> None:
        if not delta.removed and not delta.inserted:
            return
        self.buffer.undo_history.record(
            delta,
            kind=kind,
            cursor_before=cursor_before,
            cursor_after=cursor_after,
            standalone=standalone,
        )

    def __exit__(self, exc_type, exc, tb) -> bool:
        if self._span_cm is not None:
            self._span_cm.__exit__(exc_type, exc, tb)
        return False


__all__ = ["Buffer", "BufferDelta", "Transaction"]
