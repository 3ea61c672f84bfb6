"""Document file loading, atomic saving and first-edit backups."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from hollow_engine.errors import DocumentIOError
from hollow_engine.runtime import telemetry
from hollow_engine.runtime.fileio import atomic_write_bytes


@dataclass(frozen=True, slots=True)
class LoadedDocument:
    path: Path
    text: str
    raw: Optional[bytes]

    @property
    def existed(self) -> bool:
        return self.raw is not None


def normalize_newlines(text: str) -> str:
    return text.replace("\r\n", "\n").replace("\r", "\n")


def load_document(path: Path) -> LoadedDocument:
    """Read ``path`` whole; a missing file opens as an empty document."""

    path = Path(path)
    try:
        raw = path.read_bytes()
    except FileNotFoundError:
        return LoadedDocument(path=path, text="", raw=None)
    except OSError as exc:
        raise DocumentIOError(f"Cannot open {path}: {exc.strerror or exc}", path=str(path)) from exc
    try:
        text = raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise DocumentIOError(f"{path} is not valid UTF-8", path=str(path)) from exc
    return LoadedDocument(path=path, text=normalize_newlines(text), raw=raw)


def save_document(path: Path, text: str) -> int:
    data = text.encode("utf-8")
    atomic_write_bytes(Path(path), data)
    return len(data)


def backup_path(path: Path, suffix: str) -> Path:
    path = Path(path)
    return path.with_name(path.name + suffix)


def write_backup(path: Path, raw: bytes, *, suffix: str) -> Path:
    target = backup_path(path, suffix)
    atomic_write_bytes(target, raw)
    telemetry.record_event(
        "document.backup_created", data={"path": str(path), "backup": str(target)}
    )
    return target


__all__ = [
    "LoadedDocument",
    "backup_path",
    "load_document",
    "normalize_newlines",
    "save_document",
    "write_backup",
]
