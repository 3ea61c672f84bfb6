"""Per-run writing session counters."""

from __future__ import annotations

import time
from typing import Callable


class SessionStats:
    def __init__(
        self, initial_word_count: int, *, clock: Callable[[], float] = time.monotonic
    ) -> None:
        self._clock = clock
        self.started_at = clock()
        self.initial_word_count = initial_word_count
        self.current_word_count = initial_word_count

    def update(self, word_count: int) -> None:
        self.current_word_count = word_count

    @property
    def words_written(self) -> int:
        return max(0, self.current_word_count - self.initial_word_count)

    @property
    def elapsed(self) -> float:
        return max(0.0, self._clock() - self.started_at)

    def elapsed_formatted(self) -> str:
        total = int(self.elapsed)
        hours, minutes = total // 3600, (total % 3600) // 60
        if hours:
            return f"{hours}h {minutes}m"
        return f"{minutes}m"


__all__ = ["SessionStats"]
