"""Writing goals, streaks and session counters."""

from .session import SessionStats
from .tracker import GoalProgress, StatsTracker, WritingSummary

__all__ = ["GoalProgress", "SessionStats", "StatsTracker", "WritingSummary"]
