"""Key events, dispatch results and the context shared with actions."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable, Dict, List, Optional, Tuple

from hollow_engine.keymaps import KeyStroke
from hollow_engine.runtime import EngineConfig
from hollow_engine.search import SearchEngine

from .states import EditorMode, NavigateMode, WriteMode

if TYPE_CHECKING:
    from hollow_engine.buffer import Buffer
    from hollow_engine.history import VersionRecord
    from hollow_engine.session import EditingSession


@dataclass(slots=True)
class KeyInput:
    """Normalized key event passed to the dispatcher.

    ``key`` is either a printable character (``"a"``, ``"G"``, ``"?"``) or an
    uppercase name (``"ENTER"``, ``"ESC"``, ``"PAGEUP"``). ``text`` is what the
    key would type, if anything.
    """

    key: str
    modifiers: Tuple[str, ...] = ()
    text: Optional[str] = None

    @classmethod
    def char(cls, character: str) -> "KeyInput":
        return cls(key=character, text=character)

    @classmethod
    def ctrl(cls, key: str) -> "KeyInput":
        return cls(key=key, modifiers=("ctrl",))

    @property
    def printable(self) -> Optional[str]:
        if self.text and self.text.isprintable() and not _has_command_modifier(self):
            return self.text
        return None


def _has_command_modifier(key: KeyInput) -> bool:
    return any(modifier in {"ctrl", "alt", "meta"} for modifier in key.modifiers)


def key_to_token(key: KeyInput) -> str:
    modifiers = key.modifiers
    if len(key.key) == 1:
        # shift is already folded into the character itself
        modifiers = tuple(m for m in modifiers if m != "shift")
    return KeyStroke(key.key, modifiers).token


@dataclass(slots=True)
class DispatchResult:
    """Result returned from ``Dispatcher.handle_key`` and every action."""

    consumed: bool
    switch_to: Optional[EditorMode] = None
    status: str = "ok"
    message: Optional[str] = None
    quit: bool = False


class EventBus:
    """Minimal event bus letting the dispatcher notify hosts."""

    def __init__(self) -> None:
        self._subscribers: Dict[str, List[Callable[[object], None]]] = {}

    def subscribe(self, event: str, callback: Callable[[object], None]) -> None:
        self._subscribers.setdefault(event, []).append(callback)

    def emit(self, event: str, payload: object | None = None) -> None:
        for callback in self._subscribers.get(event, []):
            callback(payload)


@dataclass(slots=True)
class EditorContext:
    """Shared services every action can access."""

    session: "EditingSession"
    search: SearchEngine
    bus: EventBus
    mode: EditorMode = field(default_factory=WriteMode)
    page_rows: int = 20
    status_bar_visible: bool = False
    status_bar_until: Optional[float] = None
    now: float = 0.0
    versions: List["VersionRecord"] = field(default_factory=list)
    extras: Dict[str, object] = field(default_factory=dict)

    @property
    def buffer(self) -> "Buffer":
        return self.session.buffer

    @property
    def config(self) -> EngineConfig:
        return self.session.config

    def show_status_bar(self, visible: bool) -> None:
        self.status_bar_visible = visible
        timeout = self.config.status_timeout
        self.status_bar_until = self.now + timeout if visible and timeout > 0 else None

    @property
    def navigating(self) -> bool:
        return isinstance(self.mode, NavigateMode)


__all__ = [
    "DispatchResult",
    "EditorContext",
    "EventBus",
    "KeyInput",
    "key_to_token",
]
