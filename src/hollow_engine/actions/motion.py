"""Cursor-movement actions built from the motion table."""

from __future__ import annotations

from typing import Callable

from hollow_engine.buffer.motions import MOTIONS
from hollow_engine.keymaps import ResolutionMatch
from hollow_engine.modes.base import DispatchResult, EditorContext

MotionHandler = Callable[[EditorContext, ResolutionMatch], DispatchResult]

_PAGED = {"page_up", "page_down"}


def move(context: EditorContext, name: str) -> DispatchResult:
    buffer = context.buffer
    if name in _PAGED:
        buffer.apply_motion(name, navigate=context.navigating, rows=context.page_rows)
    else:
        buffer.apply_motion(name, navigate=context.navigating)
    return DispatchResult(consumed=True, status="motion")


def motion_action(name: str) -> MotionHandler:
    if name not in MOTIONS:
        raise KeyError(f"Unknown motion '{name}'")

    def handler(context: EditorContext, match: ResolutionMatch) -> DispatchResult:
        del match
        return move(context, name)

    handler.__name__ = f"move_{name}"
    return handler


__all__ = ["MotionHandler", "motion_action", "move"]
