"""Top-level key dispatcher driving the mode state machine."""

from __future__ import annotations

import time
from dataclasses import replace
from typing import Callable, Dict, Optional, Sequence

from hollow_engine.actions import editing as editing_actions
from hollow_engine.actions import search as search_actions
from hollow_engine.actions.overlay import describe_overlay
from hollow_engine.errors import DocumentIOError, HollowError, InvalidPosition
from hollow_engine.keymaps import (
    KeymapRegistry,
    KeymapResolver,
    ResolutionMatch,
    ResolutionResult,
)
from hollow_engine.keymaps.defaults import HISTORY_DETAIL, UNIVERSAL_MODE, load_default_keymaps
from hollow_engine.runtime import telemetry
from hollow_engine.search import SearchEngine
from hollow_engine.session import EditingSession, SaveOutcome
from hollow_engine.session.view import RenderView, StatusBar, StatusMessage, screen_column

from .base import DispatchResult, EditorContext, EventBus, KeyInput, key_to_token
from .states import (
    ConfirmQuitMode,
    EditorMode,
    NavigateMode,
    OverlayMode,
    SearchMode,
    WriteMode,
)


class Dispatcher:
    """Owns the active mode, routes keys to actions and builds the render view.

    Universal bindings are tried first in every mode except the quit prompt.
    Navigate mode buffers a pending prefix (``g``, ``d``, ``y``); a key that
    completes nothing drops the prefix and is tried again on its own.
    """

    def __init__(
        self,
        session: EditingSession,
        *,
        clock: Callable[[], float] = time.monotonic,
        registry: KeymapRegistry | None = None,
        resolver: KeymapResolver | None = None,
        load_defaults: bool = True,
    ) -> None:
        self.session = session
        self._clock = clock
        self.keymap_registry = registry or KeymapRegistry(logger_name="hollow_engine.keymaps")
        if load_defaults and registry is None:
            load_default_keymaps(self.keymap_registry)
        self.keymap_resolver = resolver or KeymapResolver(
            self.keymap_registry, logger_name="hollow_engine.keymaps"
        )
        config = session.config
        self.context = EditorContext(
            session=session,
            search=SearchEngine(),
            bus=EventBus(),
            page_rows=config.page_size,
            status_bar_visible=config.show_status,
            now=clock(),
        )
        self.context.extras.setdefault("keymap_registry", self.keymap_registry)
        self.context.extras.setdefault("keymap_resolver", self.keymap_resolver)
        self.context.extras.setdefault("dispatcher", self)
        self.status: Optional[StatusMessage] = None
        self._top_line = 0
        self._should_quit = False

    @property
    def mode(self) -> EditorMode:
        return self.context.mode

    @property
    def should_quit(self) -> bool:
        return self._should_quit

    # ------------------------------------------------------------------
    # key handling
    # ------------------------------------------------------------------
    def handle_key(self, key: KeyInput) -> DispatchResult:
        self.context.now = self._clock()
        document = self.session.buffer.document
        version = document.version
        mode = self.context.mode
        with telemetry.span(
            f"mode::{mode.name}",
            component=True,
            metadata={"key": key.key, "mode": mode.name},
        ) as handle:
            try:
                result = self._dispatch(mode, key)
            except InvalidPosition:
                raise
            except HollowError as exc:
                handle.add_metadata("error", exc.kind)
                result = DispatchResult(consumed=True, status=exc.kind, message=str(exc))
            handle.add_metadata("status", result.status)
        self._apply(result)
        if document.version != version and self.context.search.query:
            self.context.search.refresh(document, self.session.buffer.offset)
        try:
            self.session.note_changes()
        except DocumentIOError as exc:
            self.show_message(str(exc), kind=exc.kind)
        return result

    def _dispatch(self, mode: EditorMode, key: KeyInput) -> DispatchResult:
        token = key_to_token(key)
        if not isinstance(mode, ConfirmQuitMode):
            universal = self._resolve(UNIVERSAL_MODE, (token,))
            if universal.match is not None:
                if isinstance(mode, NavigateMode) and mode.pending:
                    self.context.mode = replace(mode, pending=())
                return self._execute(universal.match)

        if isinstance(mode, OverlayMode) and mode.dismiss_on_any_key:
            return DispatchResult(consumed=True, switch_to=NavigateMode())

        if isinstance(mode, NavigateMode):
            return self._dispatch_navigate(mode, token)

        result = self._resolve(mode.keymap, (token,))
        if result.match is not None:
            return self._execute(result.match)

        text = key.printable
        if text is not None:
            if isinstance(mode, WriteMode):
                return editing_actions.insert_text(self.context, text)
            if isinstance(mode, SearchMode):
                return search_actions.search_append(self.context, text)
        return DispatchResult(consumed=False, status="unbound")

    def _dispatch_navigate(self, mode: NavigateMode, token: str) -> DispatchResult:
        tokens = mode.pending + (token,)
        result = self._resolve(mode.keymap, tokens)
        if result.status == "pending":
            self.context.mode = NavigateMode(pending=tokens)
            return DispatchResult(consumed=True, status="pending")
        if result.match is not None:
            self.context.mode = NavigateMode()
            return self._execute(result.match)
        if mode.pending:
            # drop the prefix and give the key its own meaning
            self.context.mode = NavigateMode()
            return self._dispatch_navigate(self.context.mode, token)
        return DispatchResult(consumed=False, status="unbound")

    def _resolve(self, keymap: str, tokens: Sequence[str]) -> ResolutionResult:
        return self.keymap_resolver.resolve(keymap, tokens, context=self._flags())

    def _flags(self) -> Dict[str, bool]:
        mode = self.context.mode
        return {HISTORY_DETAIL: isinstance(mode, OverlayMode) and mode.detail is not None}

    def _execute(self, match: ResolutionMatch) -> DispatchResult:
        with telemetry.span(
            "keymaps::execute",
            component="keymaps",
            metadata={"binding_id": match.binding.id, "action": match.action.id},
        ):
            outcome = match.action(self.context, match)

        if isinstance(outcome, DispatchResult):
            return outcome
        return DispatchResult(consumed=True)

    def _apply(self, result: DispatchResult) -> None:
        if result.message:
            self.show_message(result.message, kind=result.status)
        if result.quit:
            self._should_quit = True
        if result.switch_to is not None:
            self.switch_mode(result.switch_to)

    def switch_mode(self, target: EditorMode) -> None:
        previous = self.context.mode
        self.context.mode = target
        if type(previous) is type(target):
            return
        buffer = self.session.buffer
        buffer.close_undo_group()
        if isinstance(target, WriteMode):
            self.context.search.clear()
        elif isinstance(target, NavigateMode):
            buffer.settle(navigate=True)
        telemetry.record_event("mode.switch", data={"mode": target.name, "from": previous.name})
        self.context.bus.emit("mode.changed", target)

    def show_message(self, text: str, *, kind: str = "info") -> None:
        timeout = self.session.config.status_timeout
        expires_at = self.context.now + timeout if timeout > 0 else None
        self.status = StatusMessage(text=text, kind=kind, expires_at=expires_at)

    # ------------------------------------------------------------------
    # maintenance
    # ------------------------------------------------------------------
    def tick(self, now: Optional[float] = None) -> Optional[SaveOutcome]:
        """Periodic upkeep: expire the status line and bar, then autosave."""

        current = self._clock() if now is None else now
        self.context.now = current
        if self.status is not None and self.status.expired(current):
            self.status = None
        until = self.context.status_bar_until
        if until is not None and current >= until:
            self.context.status_bar_visible = False
            self.context.status_bar_until = None
        try:
            outcome = self.session.autosave_tick(current)
        except DocumentIOError as exc:
            self.show_message(f"Autosave failed: {exc}", kind=exc.kind)
            return None
        if outcome is not None:
            self.show_message("Saved", kind="saved")
            self.context.bus.emit("document.saved", outcome)
        return outcome

    def resize(self, rows: int) -> None:
        self.context.page_rows = max(1, rows)

    def close(self) -> None:
        self.session.close()

    # ------------------------------------------------------------------
    # rendering
    # ------------------------------------------------------------------
    def view(self) -> RenderView:
        session = self.session
        config = session.config
        document = session.buffer.document
        line, col = session.buffer.cursor_line_col()
        rows = self.context.page_rows
        if line < self._top_line:
            self._top_line = line
        elif line >= self._top_line + rows:
            self._top_line = line - rows + 1
        self._top_line = min(self._top_line, max(document.line_count - 1, 0))
        top = self._top_line

        mode = self.context.mode
        ranges, current = self.context.search.highlights()
        overlay = describe_overlay(self.context, mode) if isinstance(mode, OverlayMode) else None
        return RenderView(
            lines=tuple(document.lines(top, top + rows)),
            top_line=top,
            cursor_row=line - top,
            cursor_col=screen_column(document.get_line(line), col, config.tab_width),
            mode=mode.name,
            text_width=config.text_width,
            tab_width=config.tab_width,
            status=self.status,
            status_bar=self._status_bar() if self.context.status_bar_visible else None,
            highlights=ranges,
            current_match=current,
            search_input=mode.query if isinstance(mode, SearchMode) else None,
            overlay=overlay,
            confirm_quit=isinstance(mode, ConfirmQuitMode),
        )

    def _status_bar(self) -> StatusBar:
        session = self.session
        config = session.config
        progress = None
        streak = None
        tracker = session.stats
        if tracker is not None and config.daily_goal > 0:
            if config.show_progress:
                progress = tracker.progress()
            if config.show_streak:
                streak = tracker.streak()
        return StatusBar(
            word_count=session.word_count(),
            words_this_session=session.session_stats.words_written,
            elapsed=session.session_stats.elapsed_formatted(),
            modified=session.modified,
            progress=progress,
            streak=streak,
        )


__all__ = ["Dispatcher"]
