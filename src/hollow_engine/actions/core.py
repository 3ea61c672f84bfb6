"""Core actions: mode switches, save/quit, status bar, undo/redo."""

from __future__ import annotations

from dataclasses import replace

from hollow_engine.keymaps import ResolutionMatch
from hollow_engine.modes.base import DispatchResult, EditorContext
from hollow_engine.modes.states import ConfirmQuitMode, NavigateMode, WriteMode


def _settle(context: EditorContext) -> None:
    context.buffer.settle(navigate=context.navigating)


def enter_write_mode(context: EditorContext, match: ResolutionMatch) -> DispatchResult:
    del match
    return DispatchResult(consumed=True, switch_to=WriteMode())


def enter_navigate_mode(context: EditorContext, match: ResolutionMatch) -> DispatchResult:
    del match
    return DispatchResult(consumed=True, switch_to=NavigateMode())


def save_document(context: EditorContext, match: ResolutionMatch) -> DispatchResult:
    del match
    outcome = context.session.save()
    context.bus.emit("document.saved", outcome)
    return DispatchResult(consumed=True, status="saved", message="Saved")


def request_quit(context: EditorContext, match: ResolutionMatch) -> DispatchResult:
    del match
    if not context.session.modified:
        return DispatchResult(consumed=True, status="quit", quit=True)
    previous = context.mode
    if isinstance(previous, NavigateMode):
        previous = replace(previous, pending=())
    return DispatchResult(
        consumed=True,
        switch_to=ConfirmQuitMode(previous=previous),
        status="confirm_quit",
        message="Unsaved changes: (y) save and quit, (n) discard, (c) cancel",
    )


def confirm_save_and_quit(context: EditorContext, match: ResolutionMatch) -> DispatchResult:
    del match
    context.session.save()
    return DispatchResult(consumed=True, status="quit", quit=True)


def confirm_discard(context: EditorContext, match: ResolutionMatch) -> DispatchResult:
    del context, match
    return DispatchResult(consumed=True, status="quit", quit=True)


def confirm_cancel(context: EditorContext, match: ResolutionMatch) -> DispatchResult:
    del match
    mode = context.mode
    previous = mode.previous if isinstance(mode, ConfirmQuitMode) else NavigateMode()
    return DispatchResult(consumed=True, switch_to=previous, status="quit_cancelled")


def toggle_status_bar(context: EditorContext, match: ResolutionMatch) -> DispatchResult:
    del match
    context.show_status_bar(not context.status_bar_visible)
    return DispatchResult(consumed=True, status="status_bar")


def undo(context: EditorContext, match: ResolutionMatch) -> DispatchResult:
    del match
    context.buffer.undo()
    _settle(context)
    context.session.rebaseline()
    return DispatchResult(consumed=True, status="undo")


def redo(context: EditorContext, match: ResolutionMatch) -> DispatchResult:
    del match
    context.buffer.redo()
    _settle(context)
    context.session.rebaseline()
    return DispatchResult(consumed=True, status="redo")


def noop_action(context: EditorContext, match: ResolutionMatch) -> DispatchResult:
    del context, match
    return DispatchResult(consumed=True, status="noop")


__all__ = [
    "confirm_cancel",
    "confirm_discard",
    "confirm_save_and_quit",
    "enter_navigate_mode",
    "enter_write_mode",
    "noop_action",
    "redo",
    "request_quit",
    "save_document",
    "toggle_status_bar",
    "undo",
]
