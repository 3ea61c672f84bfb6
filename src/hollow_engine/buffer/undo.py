"""Grouped undo/redo history for buffer edits.

Edits are stored as plain ``UndoDelta`` records. Consecutive edits of the same
kind merge into one ``UndoGroup`` while each new edit starts where the last
one left the cursor and arrives within ``GROUP_WINDOW`` seconds of it.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Callable, List, Literal, Optional

from hollow_engine.errors import NothingToRedo, NothingToUndo

EditKind = Literal["insert", "delete"]
GROUP_WINDOW = 2.0


@dataclass(frozen=True, slots=True)
class UndoDelta:
    """At ``offset``, ``removed`` was replaced by ``inserted``."""

    offset: int
    removed: str
    inserted: str

    def inverted(self) -> "UndoDelta":
        return UndoDelta(offset=self.offset, removed=self.inserted, inserted=self.removed)


@dataclass(slots=True)
class UndoGroup:
    kind: EditKind
    created_at: float
    last_at: float
    cursor_before: int
    cursor_after: int
    deltas: List[UndoDelta] = field(default_factory=list)
    standalone: bool = False

    def inverse_deltas(self) -> List[UndoDelta]:
        return [delta.inverted() for delta in reversed(self.deltas)]


class UndoHistory:
    """Linear undo/redo stacks plus the currently open group."""

    def __init__(
        self,
        *,
        clock: Callable[[], float] = time.monotonic,
        window: float = GROUP_WINDOW,
    ) -> None:
        self._clock = clock
        self.window = window
        self._undo: List[UndoGroup] = []
        self._redo: List[UndoGroup] = []
        self._open: Optional[UndoGroup] = None

    @property
    def open_group(self) -> Optional[UndoGroup]:
        return self._open

    @property
    def undo_depth(self) -> int:
        return len(self._undo) + (1 if self._open is not None else 0)

    @property
    def redo_depth(self) -> int:
        return len(self._redo)

    def can_undo(self) -> bool:
        return self.undo_depth > 0

    def can_redo(self) -> bool:
        return bool(self._redo)

    def _extends(self, kind: EditKind, cursor_before: int, now: float) -> bool:
        group = self._open
        if group is None or group.standalone:
            return False
        return (
            group.kind == kind
            and group.cursor_after == cursor_before
            and now - group.last_at <= self.window
        )

    def record(
        self,
        delta: UndoDelta,
        *,
        kind: EditKind,
        cursor_before: int,
        cursor_after: int,
        standalone: bool = False,
    ) -> UndoGroup:
        """Add a committed edit; a fresh edit always invalidates redo."""

        now = self._clock()
        self._redo.clear()
        if not standalone and self._extends(kind, cursor_before, now):
            group = self._open
            assert group is not None
            group.deltas.append(delta)
            group.last_at = now
            group.cursor_after = cursor_after
            return group

        self.close()
        group = UndoGroup(
            kind=kind,
            created_at=now,
            last_at=now,
            cursor_before=cursor_before,
            cursor_after=cursor_after,
            deltas=[delta],
            standalone=standalone,
        )
        if standalone:
            self._undo.append(group)
        else:
            self._open = group
        return group

    def close(self) -> None:
        if self._open is not None:
            self._undo.append(self._open)
            self._open = None

    def pop_undo(self) -> UndoGroup:
        self.close()
        if not self._undo:
            raise NothingToUndo()
        group = self._undo.pop()
        self._redo.append(group)
        return group

    def pop_redo(self) -> UndoGroup:
        self.close()
        if not self._redo:
            raise NothingToRedo()
        group = self._redo.pop()
        self._undo.append(group)
        return group

    def reset(self) -> None:
        self._undo.clear()
        self._redo.clear()
        self._open = None


__all__ = ["EditKind", "GROUP_WINDOW", "UndoDelta", "UndoGroup", "UndoHistory"]
