"""All-or-nothing file replacement shared by documents, history and stats."""

from __future__ import annotations

import os
import tempfile
from pathlib import Path

from hollow_engine.errors import DocumentIOError


def atomic_write_bytes(path: Path, data: bytes) -> None:
    """Write ``data`` to a sibling temp file, fsync it, then rename over ``path``."""

    path = Path(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    except OSError as exc:
        raise DocumentIOError(f"Cannot write {path}: {exc.strerror or exc}", path=str(path)) from exc
    try:
        with os.fdopen(fd, "wb") as handle:
            handle.write(data)
            handle.flush()
            os.fsync(handle.fileno())
        if path.exists():
            os.chmod(tmp, path.stat().st_mode & 0o777)
        os.replace(tmp, path)
    except OSError as exc:
        try:
            os.unlink(tmp)
        except FileNotFoundError:
            pass
        raise DocumentIOError(f"Cannot write {path}: {exc.strerror or exc}", path=str(path)) from exc


__all__ = ["atomic_write_bytes"]
