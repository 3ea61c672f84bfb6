"""Persistent version history: record, list, diff."""

from .diff import DiffLine, diff_lines, render_diff
from .store import VersionRecord, VersionStore

__all__ = ["DiffLine", "VersionRecord", "VersionStore", "diff_lines", "render_diff"]
