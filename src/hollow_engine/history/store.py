"""Per-document version history kept as an append-only log plus an index.

Every document path maps to one ``<sha1>.hvlog`` file under the versions
directory. The index (offsets, timestamps, word counts) is built by scanning
the log the first time a path is touched; payloads are read back only when a
version is listed or compared.
"""

from __future__ import annotations

import hashlib
import os
import time
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Callable, Dict, List, Optional

from hollow_engine.buffer.document import count_words
from hollow_engine.errors import DocumentIOError, VersionRecordCorrupt
from hollow_engine.runtime import telemetry
from hollow_engine.runtime.fileio import atomic_write_bytes

from . import codec

LOG_SUFFIX = ".hvlog"
PREVIEW_CHARS = 50


@dataclass(frozen=True, slots=True)
class IndexEntry:
    offset: int
    size: int
    timestamp_ms: int
    word_count: int


@dataclass(frozen=True, slots=True)
class VersionRecord:
    path: str
    timestamp_ms: int
    word_count: int
    content: str

    @property
    def created_at(self) -> datetime:
        return datetime.fromtimestamp(self.timestamp_ms / 1000)

    def preview(self) -> str:
        flat = "".join(" " if char == "\n" else char for char in self.content[:PREVIEW_CHARS])
        if len(self.content) > PREVIEW_CHARS:
            return f"{flat.strip()}..."
        return flat.strip()

    def formatted_time(self) -> str:
        return self.created_at.strftime("%Y-%m-%d %H:%M")


def _document_key(path: str | os.PathLike[str]) -> str:
    return os.path.abspath(os.fspath(path))


class VersionStore:
    def __init__(
        self,
        directory: Path,
        *,
        max_versions: int = 100,
        clock: Callable[[], float] = time.time,
    ) -> None:
        if max_versions < 1:
            raise ValueError("max_versions must be >= 1")
        self.directory = Path(directory)
        self.max_versions = max_versions
        self._clock = clock
        self._indexes: Dict[str, List[IndexEntry]] = {}

    def log_path(self, path: str | os.PathLike[str]) -> Path:
        digest = hashlib.sha1(_document_key(path).encode("utf-8")).hexdigest()
        return self.directory / f"{digest}{LOG_SUFFIX}"

    # ------------------------------------------------------------------
    # reading
    # ------------------------------------------------------------------
    def _read_log(self, key: str) -> bytes:
        log = self.log_path(key)
        try:
            return log.read_bytes()
        except FileNotFoundError:
            return b""
        except OSError as exc:
            raise DocumentIOError(f"Cannot read history: {exc.strerror or exc}", path=str(log)) from exc

    def _report_corrupt(self, key: str) -> Callable[[VersionRecordCorrupt], None]:
        def report(exc: VersionRecordCorrupt) -> None:
            telemetry.record_event(
                "history.record_corrupt",
                level="warning",
                data={"path": key, "offset": exc.offset, "reason": exc.reason},
            )

        return report

    def _index(self, key: str) -> List[IndexEntry]:
        index = self._indexes.get(key)
        if index is None:
            data = self._read_log(key)
            index = [
                IndexEntry(
                    offset=raw.offset,
                    size=raw.size,
                    timestamp_ms=raw.timestamp_ms,
                    word_count=raw.word_count,
                )
                for raw in codec.scan(data, on_corrupt=self._report_corrupt(key))
            ]
            self._indexes[key] = index
        return index

    def _decode(self, key: str, data: bytes, entry: IndexEntry) -> Optional[VersionRecord]:
        try:
            raw = codec.decode_at(data, entry.offset)
            content = codec.decompress(raw.payload, offset=entry.offset)
        except VersionRecordCorrupt as exc:
            self._report_corrupt(key)(exc)
            return None
        return VersionRecord(
            path=key,
            timestamp_ms=raw.timestamp_ms,
            word_count=raw.word_count,
            content=content,
        )

    def count(self, path: str | os.PathLike[str]) -> int:
        return len(self._index(_document_key(path)))

    def versions(self, path: str | os.PathLike[str]) -> List[VersionRecord]:
        """Readable versions, newest first; damaged records are skipped."""

        key = _document_key(path)
        index = self._index(key)
        if not index:
            return []
        data = self._read_log(key)
        records = [self._decode(key, data, entry) for entry in index]
        ordered = [record for record in records if record is not None]
        ordered.reverse()
        ordered.sort(key=lambda record: record.timestamp_ms, reverse=True)
        return ordered

    def latest(self, path: str | os.PathLike[str]) -> Optional[VersionRecord]:
        listed = self.versions(path)
        return listed[0] if listed else None

    def content_differs(self, path: str | os.PathLike[str], content: str) -> bool:
        newest = self.latest(path)
        return newest is None or newest.content != content

    # ------------------------------------------------------------------
    # writing
    # ------------------------------------------------------------------
    def record(self, path: str | os.PathLike[str], content: str) -> VersionRecord:
        """Append a snapshot of ``content`` and evict the oldest beyond the cap."""

        key = _document_key(path)
        index = self._index(key)
        timestamp_ms = int(self._clock() * 1000)
        words = count_words(content)
        frame = codec.encode_record(timestamp_ms, words, content)
        log = self.log_path(key)
        with telemetry.span("history::record", metadata={"path": key}):
            try:
                log.parent.mkdir(parents=True, exist_ok=True)
                with log.open("ab") as handle:
                    offset = handle.tell()
                    handle.write(frame)
                    handle.flush()
                    os.fsync(handle.fileno())
            except OSError as exc:
                raise DocumentIOError(
                    f"Cannot write history: {exc.strerror or exc}", path=str(log)
                ) from exc
            index.append(
                IndexEntry(
                    offset=offset,
                    size=len(frame),
                    timestamp_ms=timestamp_ms,
                    word_count=words,
                )
            )
            telemetry.record_event(
                "history.recorded",
                data={"path": key, "words": words, "versions": len(index)},
            )
            if len(index) > self.max_versions:
                self._evict(key, index)
        return VersionRecord(path=key, timestamp_ms=timestamp_ms, word_count=words, content=content)

    def _evict(self, key: str, index: List[IndexEntry]) -> None:
        surplus = len(index) - self.max_versions
        by_age = sorted(range(len(index)), key=lambda position: index[position].timestamp_ms)
        dropped = set(by_age[:surplus])
        data = self._read_log(key)
        kept: List[codec.RawRecord] = []
        for position, entry in enumerate(index):
            if position in dropped:
                continue
            try:
                kept.append(codec.decode_at(data, entry.offset))
            except VersionRecordCorrupt as exc:
                self._report_corrupt(key)(exc)

        rebuilt: List[IndexEntry] = []
        chunks: List[bytes] = []
        offset = 0
        for raw in kept:
            frame = codec.encode_raw(raw)
            chunks.append(frame)
            rebuilt.append(
                IndexEntry(
                    offset=offset,
                    size=len(frame),
                    timestamp_ms=raw.timestamp_ms,
                    word_count=raw.word_count,
                )
            )
            offset += len(frame)
        atomic_write_bytes(self.log_path(key), b"".join(chunks))
        self._indexes[key] = rebuilt
        telemetry.record_event(
            "history.evicted",
            data={"path": key, "evicted": surplus, "versions": len(rebuilt)},
        )


__all__ = ["IndexEntry", "VersionRecord", "VersionStore"]
