"""Built-in keymaps that seed each mode with the editor's key map."""

from __future__ import annotations

from typing import Iterable, Mapping, Sequence

from hollow_engine.actions import core as core_actions
from hollow_engine.actions import editing as editing_actions
from hollow_engine.actions import overlay as overlay_actions
from hollow_engine.actions import search as search_actions
from hollow_engine.actions.motion import motion_action

from .models import ActionRef, Binding, KeySequence, WhenClause
from .registry import KeymapRegistry

UNIVERSAL_MODE = "universal"
HISTORY_DETAIL = "history.detail"

_MOTIONS = (
    ("left", "Move left"),
    ("right", "Move right"),
    ("up", "Move up"),
    ("down", "Move down"),
    ("word_forward", "Next word"),
    ("word_backward", "Previous word"),
    ("paragraph_forward", "Next paragraph"),
    ("paragraph_backward", "Previous paragraph"),
    ("line_start", "Start of line"),
    ("line_end", "End of line"),
    ("document_start", "Start of document"),
    ("document_end", "End of document"),
    ("last_line", "Last line"),
    ("page_up", "Page up"),
    ("page_down", "Page down"),
)

DEFAULT_ACTIONS: tuple[ActionRef, ...] = (
    ActionRef(
        id="core.enter_write",
        handler=core_actions.enter_write_mode,
        description="Enter write mode",
    ),
    ActionRef(
        id="core.enter_navigate",
        handler=core_actions.enter_navigate_mode,
        description="Enter navigate mode",
    ),
    ActionRef(id="core.save", handler=core_actions.save_document, description="Save"),
    ActionRef(id="core.quit", handler=core_actions.request_quit, description="Quit"),
    ActionRef(
        id="core.toggle_status",
        handler=core_actions.toggle_status_bar,
        description="Toggle status bar",
    ),
    ActionRef(id="core.undo", handler=core_actions.undo, description="Undo"),
    ActionRef(id="core.redo", handler=core_actions.redo, description="Redo"),
    ActionRef(id="core.noop", handler=core_actions.noop_action, description="Do nothing"),
    ActionRef(
        id="confirm.save_quit",
        handler=core_actions.confirm_save_and_quit,
        description="Save and quit",
    ),
    ActionRef(
        id="confirm.discard",
        handler=core_actions.confirm_discard,
        description="Quit without saving",
    ),
    ActionRef(
        id="confirm.cancel",
        handler=core_actions.confirm_cancel,
        description="Keep editing",
    ),
    ActionRef(
        id="edit.newline",
        handler=editing_actions.insert_newline,
        description="New line",
    ),
    ActionRef(id="edit.tab", handler=editing_actions.insert_tab, description="Insert tab"),
    ActionRef(
        id="edit.backspace",
        handler=editing_actions.backspace,
        description="Delete previous character",
    ),
    ActionRef(
        id="edit.delete",
        handler=editing_actions.delete_forward,
        description="Delete next character",
    ),
    ActionRef(
        id="edit.delete_line",
        handler=editing_actions.delete_line,
        description="Delete line",
    ),
    ActionRef(id="edit.yank_line", handler=editing_actions.yank_line, description="Copy line"),
    ActionRef(
        id="edit.paste_line",
        handler=editing_actions.paste_line,
        description="Paste line below",
    ),
    ActionRef(id="search.start", handler=search_actions.enter_search, description="Search"),
    ActionRef(
        id="search.cancel",
        handler=search_actions.search_cancel,
        description="Cancel search",
    ),
    ActionRef(
        id="search.submit",
        handler=search_actions.search_submit,
        description="Jump to match",
    ),
    ActionRef(
        id="search.backspace",
        handler=search_actions.search_backspace,
        description="Delete query character",
    ),
    ActionRef(id="search.next", handler=search_actions.search_next, description="Next match"),
    ActionRef(
        id="search.previous",
        handler=search_actions.search_previous,
        description="Previous match",
    ),
    ActionRef(id="overlay.help", handler=overlay_actions.open_help, description="Help"),
    ActionRef(id="overlay.stats", handler=overlay_actions.open_stats, description="Writing stats"),
    ActionRef(
        id="overlay.history",
        handler=overlay_actions.open_history,
        description="Version history",
    ),
    ActionRef(id="overlay.close", handler=overlay_actions.close_overlay, description="Close"),
    ActionRef(
        id="history.next",
        handler=overlay_actions.history_next,
        description="Select older version",
    ),
    ActionRef(
        id="history.previous",
        handler=overlay_actions.history_previous,
        description="Select newer version",
    ),
    ActionRef(
        id="history.scroll_down",
        handler=overlay_actions.scroll_down,
        description="Scroll down",
    ),
    ActionRef(id="history.scroll_up", handler=overlay_actions.scroll_up, description="Scroll up"),
    ActionRef(
        id="history.view",
        handler=overlay_actions.history_view,
        description="View version",
    ),
    ActionRef(
        id="history.diff",
        handler=overlay_actions.history_diff,
        description="Diff version against current text",
    ),
    ActionRef(
        id="history.restore",
        handler=overlay_actions.history_restore,
        description="Restore version",
    ),
    ActionRef(id="history.back", handler=overlay_actions.history_back, description="Back"),
) + tuple(
    ActionRef(
        id=f"motion.{name}",
        handler=motion_action(name),
        description=description,
        metadata={"motion": name},
    )
    for name, description in _MOTIONS
)


def _bind(
    mode: str,
    name: str,
    keys: Sequence[str],
    action_id: str,
    description: str = "",
    *,
    when: Sequence[WhenClause] = (),
) -> Binding:
    return Binding(
        id=f"{mode}.{name}",
        mode=mode,
        sequence=KeySequence.from_strings(*keys),
        action_id=action_id,
        description=description,
        when=tuple(when),
    )


_IN_DETAIL = (WhenClause(HISTORY_DETAIL),)
_IN_LIST = (WhenClause(HISTORY_DETAIL, expected=False),)

DEFAULT_BINDINGS: tuple[Binding, ...] = (
    # anywhere except the quit prompt
    _bind(UNIVERSAL_MODE, "save", ["ctrl+s"], "core.save", "Save"),
    _bind(UNIVERSAL_MODE, "quit", ["ctrl+q"], "core.quit", "Quit"),
    _bind(UNIVERSAL_MODE, "toggle_status", ["ctrl+g"], "core.toggle_status", "Toggle status bar"),
    _bind(UNIVERSAL_MODE, "undo", ["ctrl+z"], "core.undo", "Undo"),
    _bind(UNIVERSAL_MODE, "redo", ["ctrl+y"], "core.redo", "Redo"),
    # write
    _bind("write", "navigate", ["ESC"], "core.enter_navigate", "Navigate mode"),
    _bind("write", "newline", ["ENTER"], "edit.newline"),
    _bind("write", "tab", ["TAB"], "edit.tab"),
    _bind("write", "backspace", ["BACKSPACE"], "edit.backspace"),
    _bind("write", "delete", ["DELETE"], "edit.delete"),
    _bind("write", "left", ["LEFT"], "motion.left"),
    _bind("write", "right", ["RIGHT"], "motion.right"),
    _bind("write", "up", ["UP"], "motion.up"),
    _bind("write", "down", ["DOWN"], "motion.down"),
    _bind("write", "word_backward", ["ctrl+LEFT"], "motion.word_backward", "Previous word"),
    _bind("write", "word_forward", ["ctrl+RIGHT"], "motion.word_forward", "Next word"),
    _bind("write", "line_start", ["HOME"], "motion.line_start", "Start of line"),
    _bind("write", "line_end", ["END"], "motion.line_end", "End of line"),
    _bind("write", "document_start", ["ctrl+HOME"], "motion.document_start", "Start of document"),
    _bind("write", "document_end", ["ctrl+END"], "motion.document_end", "End of document"),
    _bind("write", "page_up", ["PAGEUP"], "motion.page_up"),
    _bind("write", "page_down", ["PAGEDOWN"], "motion.page_down"),
    # navigate
    _bind("navigate", "write", ["i"], "core.enter_write", "Write mode"),
    _bind("navigate", "cancel", ["ESC"], "core.noop"),
    _bind("navigate", "left", ["h"], "motion.left", "Left"),
    _bind("navigate", "down", ["j"], "motion.down", "Down"),
    _bind("navigate", "up", ["k"], "motion.up", "Up"),
    _bind("navigate", "right", ["l"], "motion.right", "Right"),
    _bind("navigate", "left_arrow", ["LEFT"], "motion.left"),
    _bind("navigate", "down_arrow", ["DOWN"], "motion.down"),
    _bind("navigate", "up_arrow", ["UP"], "motion.up"),
    _bind("navigate", "right_arrow", ["RIGHT"], "motion.right"),
    _bind("navigate", "word_forward", ["w"], "motion.word_forward", "Next word"),
    _bind("navigate", "word_backward", ["b"], "motion.word_backward", "Previous word"),
    _bind("navigate", "paragraph_forward", ["}"], "motion.paragraph_forward", "Next paragraph"),
    _bind(
        "navigate", "paragraph_backward", ["{"], "motion.paragraph_backward", "Previous paragraph"
    ),
    _bind("navigate", "line_start", ["0"], "motion.line_start", "Start of line"),
    _bind("navigate", "line_end", ["$"], "motion.line_end", "End of line"),
    _bind("navigate", "home", ["HOME"], "motion.line_start"),
    _bind("navigate", "end", ["END"], "motion.line_end"),
    _bind("navigate", "document_start", ["g", "g"], "motion.document_start", "First line"),
    _bind("navigate", "last_line", ["G"], "motion.last_line", "Last line"),
    _bind("navigate", "page_up", ["PAGEUP"], "motion.page_up", "Page up"),
    _bind("navigate", "page_down", ["PAGEDOWN"], "motion.page_down", "Page down"),
    _bind("navigate", "delete_line", ["d", "d"], "edit.delete_line", "Delete line"),
    _bind("navigate", "yank_line", ["y", "y"], "edit.yank_line", "Copy line"),
    _bind("navigate", "paste_line", ["p"], "edit.paste_line", "Paste line below"),
    _bind("navigate", "undo", ["u"], "core.undo", "Undo"),
    _bind("navigate", "redo", ["ctrl+r"], "core.redo", "Redo"),
    _bind("navigate", "search", ["/"], "search.start", "Search"),
    _bind("navigate", "search_next", ["n"], "search.next", "Next match"),
    _bind("navigate", "search_previous", ["N"], "search.previous", "Previous match"),
    _bind("navigate", "help", ["?"], "overlay.help", "Help"),
    _bind("navigate", "stats", ["s"], "overlay.stats", "Writing stats"),
    _bind("navigate", "history", ["v"], "overlay.history", "Version history"),
    # search
    _bind("search", "cancel", ["ESC"], "search.cancel", "Cancel search"),
    _bind("search", "submit", ["ENTER"], "search.submit", "Jump to match"),
    _bind("search", "backspace", ["BACKSPACE"], "search.backspace"),
    # history overlay
    _bind("overlay", "next", ["j"], "history.next", "Older version", when=_IN_LIST),
    _bind("overlay", "previous", ["k"], "history.previous", "Newer version", when=_IN_LIST),
    _bind("overlay", "next_arrow", ["DOWN"], "history.next", when=_IN_LIST),
    _bind("overlay", "previous_arrow", ["UP"], "history.previous", when=_IN_LIST),
    _bind("overlay", "view", ["ENTER"], "history.view", "View version", when=_IN_LIST),
    _bind("overlay", "diff", ["d"], "history.diff", "Diff against current", when=_IN_LIST),
    _bind("overlay", "restore", ["r"], "history.restore", "Restore version", when=_IN_LIST),
    _bind("overlay", "scroll_down", ["j"], "history.scroll_down", when=_IN_DETAIL),
    _bind("overlay", "scroll_up", ["k"], "history.scroll_up", when=_IN_DETAIL),
    _bind("overlay", "scroll_down_arrow", ["DOWN"], "history.scroll_down", when=_IN_DETAIL),
    _bind("overlay", "scroll_up_arrow", ["UP"], "history.scroll_up", when=_IN_DETAIL),
    _bind("overlay", "back", ["ESC"], "history.back", "Back"),
    _bind("overlay", "back_q", ["q"], "history.back"),
    # quit prompt
    _bind("confirm", "save_quit", ["y"], "confirm.save_quit", "Save and quit"),
    _bind("confirm", "discard", ["n"], "confirm.discard", "Quit without saving"),
    _bind("confirm", "cancel", ["c"], "confirm.cancel", "Keep editing"),
    _bind("confirm", "cancel_escape", ["ESC"], "confirm.cancel"),
)


def load_default_keymaps(
    registry: KeymapRegistry,
    *,
    replace: bool = False,
    extra_bindings: Iterable[Binding] | None = None,
    include_actions: Sequence[str] | None = None,
    exclude_actions: Sequence[str] | None = None,
    include_bindings: Sequence[str] | None = None,
    exclude_bindings: Sequence[str] | None = None,
    per_mode_overrides: Mapping[str, Iterable[Binding]] | None = None,
) -> None:
    """Register built-in actions and bindings for every mode."""

    allowed_actions = _build_filters(include_actions, exclude_actions)
    allowed_bindings = _build_filters(include_bindings, exclude_bindings)

    for action in DEFAULT_ACTIONS:
        if not _selected(action.id, allowed_actions):
            continue
        registry.register_action(action, replace=replace)

    for binding in DEFAULT_BINDINGS:
        if not _selected(binding.id, allowed_bindings):
            continue
        registry.register_binding(binding, replace=replace)

    if extra_bindings:
        for binding in extra_bindings:
            registry.register_binding(binding, replace=replace)

    if per_mode_overrides:
        for mode, bindings in per_mode_overrides.items():
            for binding in bindings:
                if binding.mode != mode:
                    raise ValueError(
                        f"Override binding '{binding.id}' must target mode '{mode}'"
                    )
                registry.register_binding(binding, replace=True)


def _build_filters(
    include: Sequence[str] | None, exclude: Sequence[str] | None
) -> tuple[set[str] | None, set[str]]:
    include_set = set(include) if include else None
    exclude_set = set(exclude or ())
    return include_set, exclude_set


def _selected(item_id: str, filters: tuple[set[str] | None, set[str]]) -> bool:
    include, exclude = filters
    if include is not None and item_id not in include:
        return False
    if item_id in exclude:
        return False
    return True


__all__ = [
    "DEFAULT_ACTIONS",
    "DEFAULT_BINDINGS",
    "HISTORY_DETAIL",
    "UNIVERSAL_MODE",
    "load_default_keymaps",
]
