"""Single-slot line register used by yank, delete-line and paste."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True, slots=True)
class RegisterValue:
    text: str


class RegisterBank:
    """Holds the most recent yanked or deleted line; each store overwrites it."""

    def __init__(self) -> None:
        self._value: Optional[RegisterValue] = None

    def get(self) -> Optional[RegisterValue]:
        return self._value

    def store_line(self, line: str) -> RegisterValue:
        text = line if line.endswith("\n") else line + "\n"
        self._value = RegisterValue(text=text)
        return self._value


__all__ = ["RegisterBank", "RegisterValue"]
