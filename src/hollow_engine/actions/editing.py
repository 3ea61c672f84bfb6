"""Text-changing actions for Write mode and the line-wise Navigate commands."""

from __future__ import annotations

from hollow_engine.keymaps import ResolutionMatch
from hollow_engine.modes.base import DispatchResult, EditorContext


def insert_text(context: EditorContext, text: str) -> DispatchResult:
    context.buffer.insert_text(text)
    return DispatchResult(consumed=True, status="insert")


def insert_newline(context: EditorContext, match: ResolutionMatch) -> DispatchResult:
    del match
    context.buffer.newline()
    return DispatchResult(consumed=True, status="insert")


def insert_tab(context: EditorContext, match: ResolutionMatch) -> DispatchResult:
    del match
    return insert_text(context, "\t")


def backspace(context: EditorContext, match: ResolutionMatch) -> DispatchResult:
    del match
    delta = context.buffer.backspace()
    return DispatchResult(consumed=True, status="delete" if delta else "noop")


def delete_forward(context: EditorContext, match: ResolutionMatch) -> DispatchResult:
    del match
    delta = context.buffer.delete_forward()
    return DispatchResult(consumed=True, status="delete" if delta else "noop")


def delete_line(context: EditorContext, match: ResolutionMatch) -> DispatchResult:
    del match
    delta = context.buffer.delete_line()
    if delta is None:
        return DispatchResult(consumed=True, status="noop")
    context.buffer.settle(navigate=context.navigating)
    context.bus.emit("register.store", delta.removed)
    return DispatchResult(consumed=True, status="delete_line")


def yank_line(context: EditorContext, match: ResolutionMatch) -> DispatchResult:
    del match
    text = context.buffer.yank_line()
    context.bus.emit("register.store", text)
    return DispatchResult(consumed=True, status="yank", message="Line copied")


def paste_line(context: EditorContext, match: ResolutionMatch) -> DispatchResult:
    del match
    delta = context.buffer.paste_line()
    if delta is None:
        return DispatchResult(consumed=True, status="register_empty", message="Nothing to paste")
    context.buffer.settle(navigate=context.navigating)
    return DispatchResult(consumed=True, status="paste")


__all__ = [
    "backspace",
    "delete_forward",
    "delete_line",
    "insert_newline",
    "insert_tab",
    "insert_text",
    "paste_line",
    "yank_line",
]
