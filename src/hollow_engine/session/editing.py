"""One open document plus everything persisted alongside it."""

from __future__ import annotations

import time
from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Callable, List, Optional

from hollow_engine.buffer import Buffer
from hollow_engine.errors import DocumentIOError
from hollow_engine.history import DiffLine, VersionRecord, VersionStore, diff_lines
from hollow_engine.runtime import EngineConfig, telemetry
from hollow_engine.stats import SessionStats, StatsTracker

from . import files


@dataclass(frozen=True, slots=True)
class SaveOutcome:
    path: Path
    bytes_written: int
    manual: bool
    version: Optional[VersionRecord] = None


class EditingSession:
    """Owns the buffer for ``path`` and coordinates save, autosave and restore.

    ``clock`` drives the autosave interval; ``wall_clock`` stamps version
    records; ``today`` decides which calendar day receives word credit.
    """

    def __init__(
        self,
        path: Path,
        *,
        config: Optional[EngineConfig] = None,
        buffer: Optional[Buffer] = None,
        raw: Optional[bytes] = None,
        versions: Optional[VersionStore] = None,
        stats: Optional[StatsTracker] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.path = Path(path)
        self.config = config or EngineConfig()
        self.buffer = buffer or Buffer(name=self.path.name)
        self.versions = versions
        self.stats = stats
        self._clock = clock
        self._original_raw = raw
        self._backup_done = raw is None
        self._seen_version = self.buffer.document.version
        self._last_autosave = clock()
        words = self.buffer.document.word_count()
        self.session_stats = SessionStats(words, clock=clock)
        if self.stats is not None:
            self.stats.start(words)

    @classmethod
    def open(
        cls,
        path: Path,
        *,
        config: Optional[EngineConfig] = None,
        clock: Callable[[], float] = time.monotonic,
        wall_clock: Callable[[], float] = time.time,
        today: Callable[[], date] = date.today,
        undo_clock: Optional[Callable[[], float]] = None,
    ) -> "EditingSession":
        config = (config or EngineConfig()).validate()
        loaded = files.load_document(Path(path))
        buffer = Buffer.from_text(loaded.text, name=loaded.path.name, clock=undo_clock or clock)
        versions = None
        if config.versions_enabled:
            versions = VersionStore(
                config.versions_dir, max_versions=config.max_versions, clock=wall_clock
            )
        stats = StatsTracker(config.stats_path, daily_goal=config.daily_goal, today=today).load()
        return cls(
            loaded.path,
            config=config,
            buffer=buffer,
            raw=loaded.raw,
            versions=versions,
            stats=stats,
            clock=clock,
        )

    @property
    def modified(self) -> bool:
        return self.buffer.document.dirty

    def word_count(self) -> int:
        return self.buffer.document.word_count()

    # ------------------------------------------------------------------
    # change tracking
    # ------------------------------------------------------------------
    def note_changes(self) -> None:
        """Run after each dispatched key: backup once, then credit new words."""

        version = self.buffer.document.version
        if version == self._seen_version:
            return
        self._seen_version = version
        words = self.word_count()
        self.session_stats.update(words)
        if self.stats is not None:
            self.stats.observe(words)
        self._ensure_backup()

    def rebaseline(self) -> None:
        """Accept the current text without crediting words (undo, redo, restore)."""

        self._seen_version = self.buffer.document.version
        words = self.word_count()
        self.session_stats.update(words)
        if self.stats is not None:
            self.stats.start(words)
        self._ensure_backup()

    def _ensure_backup(self) -> None:
        # a failed write is retried with the next change
        if self._backup_done:
            return
        assert self._original_raw is not None
        files.write_backup(self.path, self._original_raw, suffix=self.config.backup_suffix)
        self._backup_done = True

    # ------------------------------------------------------------------
    # saving
    # ------------------------------------------------------------------
    def save(self, *, manual: bool = True) -> SaveOutcome:
        text = self.buffer.text
        if manual:
            self.buffer.close_undo_group()
        with telemetry.span("session::save", metadata={"path": str(self.path), "manual": manual}):
            written = files.save_document(self.path, text)
            self.buffer.document.mark_clean()
            self._last_autosave = self._clock()
            telemetry.record_event(
                "document.saved",
                data={"path": str(self.path), "bytes": written, "manual": manual},
            )
            version = None
            if self.versions is not None and (
                manual
                or (
                    self.config.version_on_autosave
                    and self.versions.content_differs(self.path, text)
                )
            ):
                version = self.versions.record(self.path, text)
            self.flush_stats()
        return SaveOutcome(path=self.path, bytes_written=written, manual=manual, version=version)

    def autosave_due(self, now: Optional[float] = None) -> bool:
        interval = self.config.autosave_seconds
        if interval <= 0 or not self.modified:
            return False
        current = self._clock() if now is None else now
        return current - self._last_autosave >= interval

    def autosave_tick(self, now: Optional[float] = None) -> Optional[SaveOutcome]:
        """Save when the interval has elapsed; failures wait for the next interval."""

        if not self.autosave_due(now):
            return None
        current = self._clock() if now is None else now
        try:
            return self.save(manual=False)
        except DocumentIOError as exc:
            telemetry.record_event(
                "document.autosave_failed",
                level="warning",
                data={"path": str(self.path), "reason": str(exc)},
            )
            raise
        finally:
            self._last_autosave = current

    def flush_stats(self) -> None:
        if self.stats is not None:
            self.stats.flush()

    # ------------------------------------------------------------------
    # history
    # ------------------------------------------------------------------
    def list_versions(self) -> List[VersionRecord]:
        if self.versions is None:
            return []
        return self.versions.versions(self.path)

    def diff_against_current(self, record: VersionRecord) -> List[DiffLine]:
        return diff_lines(record.content, self.buffer.text)

    def restore(self, record: VersionRecord) -> VersionRecord:
        """Snapshot the live text, then replace it with ``record``'s content."""

        if self.versions is None:
            raise DocumentIOError("Version history is disabled", path=str(self.path))
        snapshot = self.versions.record(self.path, self.buffer.text)
        self.buffer.set_content(record.content)
        self.rebaseline()
        telemetry.record_event(
            "history.restored",
            data={"path": str(self.path), "timestamp_ms": record.timestamp_ms},
        )
        return snapshot

    def close(self) -> None:
        self.flush_stats()


__all__ = ["EditingSession", "SaveOutcome"]
