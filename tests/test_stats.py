import json
from datetime import date, timedelta
from pathlib import Path

from hollow_engine.stats import SessionStats, StatsTracker

MONDAY = date(2024, 3, 4)


class Today:
    def __init__(self, day: date) -> None:
        self.day = day

    def __call__(self) -> date:
        return self.day


def tracker_with_days(tmp_path: Path, totals: dict) -> StatsTracker:
    tracker = StatsTracker(tmp_path / "stats.json", daily_goal=500, today=Today(MONDAY))
    for day, words in totals.items():
        tracker.set_total(day, words)
    return tracker


def test_streak_counts_consecutive_met_days(tmp_path: Path) -> None:
    day1, day2, day3 = MONDAY, MONDAY + timedelta(days=1), MONDAY + timedelta(days=2)
    tracker = tracker_with_days(tmp_path, {day1: 600, day2: 500, day3: 700})

    assert tracker.streak(day3) == 3
    # today has not reached the goal yet, the run ending yesterday still counts
    assert tracker.streak(day3 + timedelta(days=1)) == 3
    assert tracker.streak(day3 + timedelta(days=2)) == 0


def test_streak_breaks_on_short_day(tmp_path: Path) -> None:
    tracker = tracker_with_days(
        tmp_path,
        {MONDAY: 600, MONDAY + timedelta(days=1): 100, MONDAY + timedelta(days=2): 500},
    )

    assert tracker.streak(MONDAY + timedelta(days=2)) == 1


def test_streak_is_zero_without_goal(tmp_path: Path) -> None:
    tracker = StatsTracker(tmp_path / "stats.json", daily_goal=0, today=Today(MONDAY))
    tracker.set_total(MONDAY, 1000)

    assert tracker.streak() == 0
    assert not tracker.progress().enabled


def test_progress_ratio_and_exceeded(tmp_path: Path) -> None:
    tracker = tracker_with_days(tmp_path, {MONDAY: 250})
    half = tracker.progress()
    assert half.ratio == 0.5
    assert half.percent == 50
    assert not half.exceeded and not half.met

    tracker.set_total(MONDAY, 750)
    over = tracker.progress()
    assert over.ratio == 1.0
    assert over.exceeded and over.met


def test_observe_credits_only_growth(tmp_path: Path) -> None:
    clock = Today(MONDAY)
    tracker = StatsTracker(tmp_path / "stats.json", daily_goal=10, today=clock)
    tracker.start(100)

    assert tracker.observe(110) == 10
    assert tracker.observe(90) == 0
    assert tracker.observe(95) == 5
    clock.day = MONDAY + timedelta(days=1)
    assert tracker.observe(97) == 2

    assert tracker.words_on(MONDAY) == 15
    assert tracker.today_words() == 2


def test_flush_and_reload(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "stats.json"
    tracker = StatsTracker(path, daily_goal=10, today=Today(MONDAY))
    tracker.start(0)
    tracker.observe(42)
    tracker.flush()

    assert json.loads(path.read_text(encoding="utf-8")) == {"2024-03-04": 42}
    assert not tracker.dirty
    reloaded = StatsTracker(path, daily_goal=10, today=Today(MONDAY)).load()
    assert reloaded.today_words() == 42


def test_unreadable_stats_file_starts_empty(tmp_path: Path) -> None:
    path = tmp_path / "stats.json"
    path.write_text("{not json", encoding="utf-8")

    tracker = StatsTracker(path, today=Today(MONDAY)).load()

    assert tracker.today_words() == 0


def test_invalid_entries_are_ignored(tmp_path: Path) -> None:
    path = tmp_path / "stats.json"
    path.write_text(
        json.dumps({"2024-03-04": 12, "yesterday": 5, "2024-03-03": -1, "2024-03-02": True}),
        encoding="utf-8",
    )

    tracker = StatsTracker(path, today=Today(MONDAY)).load()

    assert tracker.today_words() == 12
    assert tracker.words_on(date(2024, 3, 3)) == 0
    assert tracker.words_on(date(2024, 3, 2)) == 0


def test_summary_reports_best_day(tmp_path: Path) -> None:
    tracker = tracker_with_days(
        tmp_path, {MONDAY - timedelta(days=1): 900, MONDAY: 300, MONDAY - timedelta(days=5): 0}
    )

    summary = tracker.summary()

    assert summary.best_day == MONDAY - timedelta(days=1)
    assert summary.best_day_words == 900
    assert summary.total_words == 1200
    assert summary.active_days == 2
    assert summary.streak == 1


def test_session_stats_counters() -> None:
    now = [100.0]
    stats = SessionStats(50, clock=lambda: now[0])

    stats.update(40)
    assert stats.words_written == 0
    stats.update(75)
    now[0] += 3725
    assert stats.words_written == 25
    assert stats.elapsed == 3725
    assert stats.elapsed_formatted() == "1h 2m"
