"""Editor modes as a closed set of immutable variants.

Each variant carries only the state its mode needs; transitions replace the
dispatcher's current variant instead of mutating it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Literal, Optional, Union

OverlayKind = Literal["help", "stats", "history"]
HistoryDetail = Literal["view", "diff"]


@dataclass(frozen=True, slots=True)
class WriteMode:
    name: ClassVar[str] = "write"
    keymap: ClassVar[str] = "write"


@dataclass(frozen=True, slots=True)
class NavigateMode:
    name: ClassVar[str] = "navigate"
    keymap: ClassVar[str] = "navigate"

    pending: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class SearchMode:
    name: ClassVar[str] = "search"
    keymap: ClassVar[str] = "search"

    query: str = ""


@dataclass(frozen=True, slots=True)
class OverlayMode:
    name: ClassVar[str] = "overlay"
    keymap: ClassVar[str] = "overlay"

    kind: OverlayKind = "help"
    selected: int = 0
    detail: Optional[HistoryDetail] = None
    scroll: int = 0

    @property
    def dismiss_on_any_key(self) -> bool:
        return self.kind != "history"


@dataclass(frozen=True, slots=True)
class ConfirmQuitMode:
    name: ClassVar[str] = "confirm_quit"
    keymap: ClassVar[str] = "confirm"

    previous: "EditorMode" = WriteMode()


EditorMode = Union[WriteMode, NavigateMode, SearchMode, OverlayMode, ConfirmQuitMode]


__all__ = [
    "ConfirmQuitMode",
    "EditorMode",
    "HistoryDetail",
    "NavigateMode",
    "OverlayKind",
    "OverlayMode",
    "SearchMode",
    "WriteMode",
]
