"""Exception hierarchy shared by every engine component."""

from __future__ import annotations

from typing import Optional


class HollowError(RuntimeError):
    """Base class for engine failures.

    ``kind`` is a short, stable identifier the dispatcher turns into a
    status-line message.
    """

    kind: str = "error"

    def __init__(self, message: str = "") -> None:
        super().__init__(message or self.kind.replace("_", " "))


class InvalidPosition(HollowError, IndexError):
    """Raised when a buffer operation receives an out-of-range offset."""

    kind = "invalid_position"

    def __init__(
        self,
        message: str,
        *,
        offset: Optional[int] = None,
        length: Optional[int] = None,
    ) -> None:
        super().__init__(message)
        self.offset = offset
        self.length = length


class NothingToUndo(HollowError):
    kind = "nothing_to_undo"

    def __init__(self, message: str = "Nothing to undo") -> None:
        super().__init__(message)


class NothingToRedo(HollowError):
    kind = "nothing_to_redo"

    def __init__(self, message: str = "Nothing to redo") -> None:
        super().__init__(message)


class NoMatches(HollowError):
    kind = "no_matches"

    def __init__(self, query: str = "") -> None:
        message = f"No matches for '{query}'" if query else "No matches"
        super().__init__(message)
        self.query = query


class DocumentIOError(HollowError):
    """File read/write/rename failure; never fatal for the session."""

    kind = "io_error"

    def __init__(self, message: str, *, path: Optional[str] = None) -> None:
        super().__init__(message)
        self.path = path


class VersionRecordCorrupt(HollowError):
    kind = "record_corrupt"

    def __init__(self, reason: str, *, offset: Optional[int] = None) -> None:
        super().__init__(f"Corrupt version record at {offset}: {reason}")
        self.reason = reason
        self.offset = offset


class ConfigInvalid(HollowError, ValueError):
    kind = "config_invalid"

    def __init__(self, message: str, *, field: Optional[str] = None) -> None:
        super().__init__(message)
        self.field = field


__all__ = [
    "HollowError",
    "InvalidPosition",
    "NothingToUndo",
    "NothingToRedo",
    "NoMatches",
    "DocumentIOError",
    "VersionRecordCorrupt",
    "ConfigInvalid",
]
