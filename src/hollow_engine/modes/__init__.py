"""Modal dispatch: key events, mode variants and the shared action context."""

from .base import DispatchResult, EditorContext, EventBus, KeyInput, key_to_token
from .states import (
    ConfirmQuitMode,
    EditorMode,
    NavigateMode,
    OverlayMode,
    SearchMode,
    WriteMode,
)

__all__ = [
    "ConfirmQuitMode",
    "DispatchResult",
    "EditorContext",
    "EditorMode",
    "EventBus",
    "KeyInput",
    "NavigateMode",
    "OverlayMode",
    "SearchMode",
    "WriteMode",
    "key_to_token",
]
