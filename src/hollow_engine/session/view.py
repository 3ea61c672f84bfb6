"""Read-only render state handed to the host after every event."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from hollow_engine.stats import GoalProgress


@dataclass(frozen=True, slots=True)
class StatusMessage:
    text: str
    kind: str = "info"
    expires_at: Optional[float] = None

    def expired(self, now: float) -> bool:
        return self.expires_at is not None and now >= self.expires_at


@dataclass(frozen=True, slots=True)
class StatusBar:
    word_count: int
    words_this_session: int
    elapsed: str
    modified: bool
    progress: Optional[GoalProgress] = None
    streak: Optional[int] = None


@dataclass(frozen=True, slots=True)
class OverlayView:
    kind: str
    title: str
    lines: tuple[str, ...]
    selected: Optional[int] = None


@dataclass(frozen=True, slots=True)
class RenderView:
    lines: tuple[str, ...]
    top_line: int
    cursor_row: int
    cursor_col: int
    mode: str
    text_width: int
    tab_width: int = 4
    status: Optional[StatusMessage] = None
    status_bar: Optional[StatusBar] = None
    highlights: tuple[tuple[int, int], ...] = ()
    current_match: int = -1
    search_input: Optional[str] = None
    overlay: Optional[OverlayView] = None
    confirm_quit: bool = False


def screen_column(line: str, col: int, tab_width: int) -> int:
    """Display column of ``col`` in ``line`` with tabs expanded."""

    position = 0
    for char in line[:col]:
        if char == "\t":
            position += tab_width - (position % tab_width)
        else:
            position += 1
    return position


__all__ = ["OverlayView", "RenderView", "StatusBar", "StatusMessage", "screen_column"]
