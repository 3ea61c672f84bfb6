"""Case-insensitive search over a buffer document."""

from .engine import Match, SearchEngine, SearchState, find_all

__all__ = ["Match", "SearchEngine", "SearchState", "find_all"]
