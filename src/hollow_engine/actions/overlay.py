"""Help, stats and version-history overlays.

Overlay state lives in :class:`OverlayMode`; the loaded version list is cached
on the context when the history overlay opens so selection indexes stay stable
while it is shown.
"""

from __future__ import annotations

from dataclasses import replace
from typing import List, Optional

from hollow_engine.history import VersionRecord, render_diff
from hollow_engine.history.diff import split_lines
from hollow_engine.keymaps import KeymapRegistry, ResolutionMatch
from hollow_engine.modes.base import DispatchResult, EditorContext
from hollow_engine.modes.states import NavigateMode, OverlayMode
from hollow_engine.session.view import OverlayView

HELP_SECTIONS = (
    ("universal", "Anywhere"),
    ("write", "Write mode"),
    ("navigate", "Navigate mode"),
    ("search", "Search"),
    ("overlay", "History overlay"),
)


def _overlay(context: EditorContext) -> OverlayMode:
    mode = context.mode
    return mode if isinstance(mode, OverlayMode) else OverlayMode()


def _selected_record(context: EditorContext, mode: OverlayMode) -> Optional[VersionRecord]:
    if 0 <= mode.selected < len(context.versions):
        return context.versions[mode.selected]
    return None


def open_help(context: EditorContext, match: ResolutionMatch) -> DispatchResult:
    del match
    return DispatchResult(consumed=True, switch_to=OverlayMode(kind="help"))


def open_stats(context: EditorContext, match: ResolutionMatch) -> DispatchResult:
    del match
    context.session.flush_stats()
    return DispatchResult(consumed=True, switch_to=OverlayMode(kind="stats"))


def open_history(context: EditorContext, match: ResolutionMatch) -> DispatchResult:
    del match
    if context.session.versions is None:
        return DispatchResult(
            consumed=True, status="history_disabled", message="Version history is disabled"
        )
    context.versions = context.session.list_versions()
    return DispatchResult(consumed=True, switch_to=OverlayMode(kind="history"))


def close_overlay(context: EditorContext, match: ResolutionMatch) -> DispatchResult:
    del context, match
    return DispatchResult(consumed=True, switch_to=NavigateMode())


def history_next(context: EditorContext, match: ResolutionMatch) -> DispatchResult:
    del match
    mode = _overlay(context)
    last = max(len(context.versions) - 1, 0)
    return DispatchResult(
        consumed=True, switch_to=replace(mode, selected=min(mode.selected + 1, last))
    )


def history_previous(context: EditorContext, match: ResolutionMatch) -> DispatchResult:
    del match
    mode = _overlay(context)
    return DispatchResult(
        consumed=True, switch_to=replace(mode, selected=max(mode.selected - 1, 0))
    )


def scroll_down(context: EditorContext, match: ResolutionMatch) -> DispatchResult:
    del match
    mode = _overlay(context)
    limit = max(len(_detail_lines(context, mode)) - 1, 0)
    return DispatchResult(consumed=True, switch_to=replace(mode, scroll=min(mode.scroll + 1, limit)))


def scroll_up(context: EditorContext, match: ResolutionMatch) -> DispatchResult:
    del match
    mode = _overlay(context)
    return DispatchResult(consumed=True, switch_to=replace(mode, scroll=max(mode.scroll - 1, 0)))


def history_view(context: EditorContext, match: ResolutionMatch) -> DispatchResult:
    del match
    mode = _overlay(context)
    if _selected_record(context, mode) is None:
        return DispatchResult(consumed=True, status="noop")
    return DispatchResult(consumed=True, switch_to=replace(mode, detail="view", scroll=0))


def history_diff(context: EditorContext, match: ResolutionMatch) -> DispatchResult:
    del match
    mode = _overlay(context)
    if _selected_record(context, mode) is None:
        return DispatchResult(consumed=True, status="noop")
    return DispatchResult(consumed=True, switch_to=replace(mode, detail="diff", scroll=0))


def history_restore(context: EditorContext, match: ResolutionMatch) -> DispatchResult:
    del match
    record = _selected_record(context, _overlay(context))
    if record is None:
        return DispatchResult(consumed=True, status="noop")
    context.session.restore(record)
    context.search.clear()
    context.versions = context.session.list_versions()
    return DispatchResult(
        consumed=True,
        switch_to=NavigateMode(),
        status="restored",
        message=f"Restored version from {record.formatted_time()}",
    )


def history_back(context: EditorContext, match: ResolutionMatch) -> DispatchResult:
    del match
    mode = _overlay(context)
    if mode.detail is not None:
        return DispatchResult(consumed=True, switch_to=replace(mode, detail=None, scroll=0))
    return DispatchResult(consumed=True, switch_to=NavigateMode())


# ----------------------------------------------------------------------
# overlay content
# ----------------------------------------------------------------------
def _detail_lines(context: EditorContext, mode: OverlayMode) -> List[str]:
    record = _selected_record(context, mode)
    if record is None or mode.detail is None:
        return []
    if mode.detail == "view":
        return split_lines(record.content)
    return render_diff(context.session.diff_against_current(record))


def _help_lines(context: EditorContext) -> List[str]:
    registry = context.extras.get("keymap_registry")
    if not isinstance(registry, KeymapRegistry):
        return []
    lines: List[str] = []
    for mode, heading in HELP_SECTIONS:
        rows = registry.describe(mode)
        if not rows:
            continue
        if lines:
            lines.append("")
        lines.append(heading)
        width = max(len(keys) for keys, _ in rows)
        lines.extend(f"  {keys.ljust(width)}  {description}" for keys, description in rows)
    return lines


def _stats_lines(context: EditorContext) -> List[str]:
    session = context.session
    current = session.session_stats
    lines = [
        f"Words: {session.word_count()}",
        f"This session: {current.words_written} words in {current.elapsed_formatted()}",
    ]
    if session.stats is None:
        return lines
    summary = session.stats.summary()
    lines.append(f"Today: {summary.today_words} words")
    if summary.progress.enabled:
        suffix = " (goal exceeded)" if summary.progress.exceeded else ""
        lines.append(f"Goal: {summary.goal} words, {summary.progress.percent}%{suffix}")
        lines.append(f"Streak: {summary.streak} day{'s' if summary.streak != 1 else ''}")
    if summary.best_day is not None:
        lines.append(f"Best day: {summary.best_day.isoformat()} ({summary.best_day_words} words)")
    lines.append(f"Total words: {summary.total_words}")
    lines.append(f"Active days: {summary.active_days}")
    return lines


def _history_list(context: EditorContext) -> List[str]:
    if not context.versions:
        return ["No saved versions yet"]
    return [
        f"{record.formatted_time()}  {record.word_count:>6} words  {record.preview()}"
        for record in context.versions
    ]


def describe_overlay(context: EditorContext, mode: OverlayMode) -> OverlayView:
    if mode.kind == "help":
        return OverlayView(kind="help", title="Help", lines=tuple(_help_lines(context)))
    if mode.kind == "stats":
        return OverlayView(kind="stats", title="Writing stats", lines=tuple(_stats_lines(context)))
    if mode.detail is None:
        selected = mode.selected if context.versions else None
        return OverlayView(
            kind="history",
            title="Version history",
            lines=tuple(_history_list(context)),
            selected=selected,
        )
    record = _selected_record(context, mode)
    assert record is not None
    label = "Diff against current" if mode.detail == "diff" else "Version"
    return OverlayView(
        kind=f"history.{mode.detail}",
        title=f"{label}: {record.formatted_time()}",
        lines=tuple(_detail_lines(context, mode)[mode.scroll :]),
    )


__all__ = [
    "close_overlay",
    "describe_overlay",
    "history_back",
    "history_diff",
    "history_next",
    "history_previous",
    "history_restore",
    "history_view",
    "open_help",
    "open_history",
    "open_stats",
    "scroll_down",
    "scroll_up",
]
