"""Daily word totals, goal progress and streaks.

Totals are persisted as a small JSON object mapping ``YYYY-MM-DD`` to the
number of words written that day. Only increases in the observed document
word count are credited; deleting text never subtracts from a day.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import date, timedelta
from pathlib import Path
from typing import Callable, Dict, Optional

from hollow_engine.runtime import telemetry
from hollow_engine.runtime.fileio import atomic_write_bytes


@dataclass(frozen=True, slots=True)
class GoalProgress:
    words: int
    goal: int
    ratio: float
    exceeded: bool

    @property
    def enabled(self) -> bool:
        return self.goal > 0

    @property
    def met(self) -> bool:
        return self.enabled and self.words >= self.goal

    @property
    def percent(self) -> int:
        return int(self.ratio * 100)


@dataclass(frozen=True, slots=True)
class WritingSummary:
    today_words: int
    goal: int
    progress: GoalProgress
    streak: int
    best_day: Optional[date]
    best_day_words: int
    total_words: int
    active_days: int


class StatsTracker:
    def __init__(
        self,
        path: Path,
        *,
        daily_goal: int = 0,
        today: Callable[[], date] = date.today,
    ) -> None:
        self.path = Path(path)
        self.daily_goal = max(0, daily_goal)
        self._today = today
        self._totals: Dict[date, int] = {}
        self._baseline: Optional[int] = None
        self.dirty = False

    # ------------------------------------------------------------------
    # persistence
    # ------------------------------------------------------------------
    def load(self) -> "StatsTracker":
        """Read persisted totals; an unreadable file starts an empty history."""

        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return self
        except (OSError, ValueError) as exc:
            telemetry.record_event(
                "stats.load_failed",
                level="warning",
                data={"path": str(self.path), "reason": str(exc)},
            )
            return self
        if not isinstance(raw, dict):
            telemetry.record_event(
                "stats.load_failed",
                level="warning",
                data={"path": str(self.path), "reason": "expected an object"},
            )
            return self
        for key, value in raw.items():
            try:
                day = date.fromisoformat(key)
            except (TypeError, ValueError):
                continue
            if isinstance(value, int) and not isinstance(value, bool) and value >= 0:
                self._totals[day] = value
        return self

    def flush(self) -> None:
        """Persist totals if anything changed; raises ``DocumentIOError``."""

        if not self.dirty:
            return
        payload = {day.isoformat(): words for day, words in sorted(self._totals.items())}
        atomic_write_bytes(self.path, json.dumps(payload, indent=2).encode("utf-8"))
        self.dirty = False
        telemetry.record_event(
            "stats.flushed", data={"path": str(self.path), "days": len(payload)}
        )

    # ------------------------------------------------------------------
    # recording
    # ------------------------------------------------------------------
    def start(self, word_count: int) -> None:
        self._baseline = word_count

    def observe(self, word_count: int) -> int:
        """Credit growth since the previous observation to today; return it."""

        if self._baseline is None:
            self._baseline = word_count
            return 0
        gained = word_count - self._baseline
        self._baseline = word_count
        if gained <= 0:
            return 0
        day = self._today()
        self._totals[day] = self._totals.get(day, 0) + gained
        self.dirty = True
        return gained

    def set_total(self, day: date, words: int) -> None:
        self._totals[day] = max(0, words)
        self.dirty = True

    def words_on(self, day: date) -> int:
        return self._totals.get(day, 0)

    def today_words(self) -> int:
        return self.words_on(self._today())

    # ------------------------------------------------------------------
    # goals
    # ------------------------------------------------------------------
    def _met(self, day: date) -> bool:
        return day in self._totals and self._totals[day] >= self.daily_goal

    def streak(self, today: Optional[date] = None) -> int:
        """Consecutive goal-meeting days ending today (or yesterday, if today
        has not reached the goal yet)."""

        if self.daily_goal <= 0:
            return 0
        day = today or self._today()
        if not self._met(day):
            day -= timedelta(days=1)
        count = 0
        while self._met(day):
            count += 1
            day -= timedelta(days=1)
        return count

    def progress(self, today: Optional[date] = None) -> GoalProgress:
        words = self.words_on(today or self._today())
        if self.daily_goal <= 0:
            return GoalProgress(words=words, goal=0, ratio=0.0, exceeded=False)
        ratio = words / self.daily_goal
        return GoalProgress(
            words=words,
            goal=self.daily_goal,
            ratio=min(1.0, ratio),
            exceeded=ratio > 1.0,
        )

    def summary(self, today: Optional[date] = None) -> WritingSummary:
        day = today or self._today()
        best_day: Optional[date] = None
        best_words = 0
        for candidate, words in sorted(self._totals.items()):
            if words > best_words:
                best_day, best_words = candidate, words
        return WritingSummary(
            today_words=self.words_on(day),
            goal=self.daily_goal,
            progress=self.progress(day),
            streak=self.streak(day),
            best_day=best_day,
            best_day_words=best_words,
            total_words=sum(self._totals.values()),
            active_days=sum(1 for words in self._totals.values() if words > 0),
        )


__all__ = ["GoalProgress", "StatsTracker", "WritingSummary"]
