"""Minimal Textual adapter that wires Dispatcher output into UI callbacks."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Optional

from hollow_engine.errors import DocumentIOError
from hollow_engine.keymaps.models import MODIFIERS
from hollow_engine.modes.base import DispatchResult, KeyInput
from hollow_engine.modes.dispatcher import Dispatcher
from hollow_engine.runtime import telemetry
from hollow_engine.session.view import RenderView

TEXTUAL_KEY_NAMES: Dict[str, str] = {
    "escape": "ESC",
    "enter": "ENTER",
    "tab": "TAB",
    "backspace": "BACKSPACE",
    "delete": "DELETE",
    "left": "LEFT",
    "right": "RIGHT",
    "up": "UP",
    "down": "DOWN",
    "home": "HOME",
    "end": "END",
    "pageup": "PAGEUP",
    "pagedown": "PAGEDOWN",
}

_COMMAND_MODIFIERS = {"ctrl", "alt", "meta"}


def _noop(*_args, **_kwargs) -> None:  # pragma: no cover - default hook
    return None


def translate_key(key: str, character: Optional[str] = None) -> Optional[KeyInput]:
    """Turn a Textual key name (``"ctrl+left"``, ``"escape"``, ``"a"``) into a KeyInput.

    Returns ``None`` for keys the engine has no use for.
    """

    parts = key.split("+")
    name = parts[-1]
    modifiers = tuple(part for part in parts[:-1] if part in MODIFIERS)
    if name in TEXTUAL_KEY_NAMES:
        return KeyInput(key=TEXTUAL_KEY_NAMES[name], modifiers=modifiers)
    if _COMMAND_MODIFIERS.intersection(modifiers):
        return KeyInput(key=name, modifiers=modifiers)
    if character and character.isprintable():
        return KeyInput.char(character)
    return None


@dataclass(slots=True)
class TextualUIHooks:
    """Callbacks invoked by the adapter to update Textual widgets."""

    render: Callable[[RenderView], None]
    update_status: Callable[[str], None] = _noop
    handle_event: Callable[[str, object | None], None] = _noop
    exit: Callable[[], None] = _noop


class TextualEditorAdapter:
    """Bridges Dispatcher + bus events to a Textual-friendly surface."""

    def __init__(self, dispatcher: Dispatcher, hooks: TextualUIHooks) -> None:
        self.dispatcher = dispatcher
        self.hooks = hooks
        self._closed = False
        self._subscribe_events()
        self._refresh()

    def handle_textual_key(
        self, key: str, *, character: Optional[str] = None
    ) -> Optional[DispatchResult]:
        """Translate a Textual key event into a KeyInput and dispatch it."""

        key_input = translate_key(key, character)
        if key_input is None:
            return None
        result = self.dispatcher.handle_key(key_input)
        telemetry.record_event(
            "adapter.key",
            level="debug",
            data={"key": key, "status": result.status, "mode": self.dispatcher.mode.name},
            logger_name="hollow_engine.adapters.textual",
        )
        self._after_result(result)
        return result

    def tick(self, now: Optional[float] = None) -> None:
        """Forward the periodic maintenance call and repaint."""

        outcome = self.dispatcher.tick(now)
        if outcome is not None:
            self.hooks.update_status("Saved")
        self._refresh()

    def resize(self, rows: int) -> None:
        self.dispatcher.resize(rows)
        self._refresh()

    def _after_result(self, result: DispatchResult) -> None:
        if result.message:
            self.hooks.update_status(result.message)
        self._refresh()
        if self.dispatcher.should_quit and not self._closed:
            self._closed = True
            try:
                self.dispatcher.close()
            except DocumentIOError as exc:
                telemetry.record_event(
                    "adapter.close_failed",
                    level="warning",
                    data={"reason": str(exc)},
                    logger_name="hollow_engine.adapters.textual",
                )
                self.hooks.update_status(f"Could not save writing stats: {exc}")
            self.hooks.exit()

    def _subscribe_events(self) -> None:
        bus = self.dispatcher.context.bus
        for event in ("mode.changed", "document.saved", "register.store"):
            bus.subscribe(event, lambda payload, name=event: self.hooks.handle_event(name, payload))

    def _refresh(self) -> None:
        self.hooks.render(self.dispatcher.view())


__all__ = ["TEXTUAL_KEY_NAMES", "TextualEditorAdapter", "TextualUIHooks", "translate_key"]
