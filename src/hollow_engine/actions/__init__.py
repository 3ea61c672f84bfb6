"""Action handlers bound to keys by ``hollow_engine.keymaps.defaults``.

Every handler takes ``(context, match)`` and returns a ``DispatchResult``;
``insert_text`` and ``search_append`` take the typed text instead of a match
and back the printable-key fallback in Write and Search modes.
"""

from .core import (
    confirm_cancel,
    confirm_discard,
    confirm_save_and_quit,
    enter_navigate_mode,
    enter_write_mode,
    noop_action,
    redo,
    request_quit,
    save_document,
    toggle_status_bar,
    undo,
)
from .editing import (
    backspace,
    delete_forward,
    delete_line,
    insert_newline,
    insert_tab,
    insert_text,
    paste_line,
    yank_line,
)
from .motion import motion_action, move
from .overlay import describe_overlay
from .search import search_append

__all__ = [
    "backspace",
    "confirm_cancel",
    "confirm_discard",
    "confirm_save_and_quit",
    "delete_forward",
    "delete_line",
    "describe_overlay",
    "enter_navigate_mode",
    "enter_write_mode",
    "insert_newline",
    "insert_tab",
    "insert_text",
    "motion_action",
    "move",
    "noop_action",
    "paste_line",
    "redo",
    "request_quit",
    "save_document",
    "search_append",
    "toggle_status_bar",
    "undo",
]
