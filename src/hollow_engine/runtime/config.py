"""Resolved engine configuration.

The engine never reads configuration files itself; a host hands over an
``EngineConfig`` (or a plain mapping via ``EngineConfig.from_mapping``).
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Mapping

from hollow_engine.errors import ConfigInvalid


def _default_data_dir() -> Path:
    return Path.home() / ".config" / "hollow"


@dataclass(frozen=True, slots=True)
class EngineConfig:
    text_width: int = 80
    tab_width: int = 4
    autosave_seconds: int = 30
    status_timeout: int = 3
    show_status: bool = False
    daily_goal: int = 0
    show_progress: bool = True
    show_streak: bool = True
    versions_enabled: bool = True
    max_versions: int = 100
    version_on_autosave: bool = False
    data_dir: Path = field(default_factory=_default_data_dir)
    backup_suffix: str = ".hollow-backup"
    page_size: int = 20

    @property
    def versions_dir(self) -> Path:
        return self.data_dir / "versions"

    @property
    def stats_path(self) -> Path:
        return self.data_dir / "stats.json"

    def validate(self) -> "EngineConfig":
        non_negative = ("text_width", "autosave_seconds", "status_timeout", "daily_goal")
        for name in non_negative:
            if getattr(self, name) < 0:
                raise ConfigInvalid(f"{name} must be >= 0", field=name)
        for name in ("tab_width", "max_versions", "page_size"):
            if getattr(self, name) < 1:
                raise ConfigInvalid(f"{name} must be >= 1", field=name)
        if not self.backup_suffix:
            raise ConfigInvalid("backup_suffix cannot be empty", field="backup_suffix")
        return self

    def with_changes(self, **changes: Any) -> "EngineConfig":
        return replace(self, **changes).validate()

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "EngineConfig":
        """Build a validated config from already-parsed settings."""

        known = {item.name: item for item in fields(cls)}
        values: dict[str, Any] = {}
        for key, value in data.items():
            if key not in known:
                raise ConfigInvalid(f"Unknown setting '{key}'", field=key)
            if key == "data_dir":
                values[key] = Path(value).expanduser()
                continue
            expected = type(getattr(cls(), key))
            if expected is bool:
                if not isinstance(value, bool):
                    raise ConfigInvalid(f"{key} must be true or false", field=key)
            elif expected is int:
                if isinstance(value, bool) or not isinstance(value, int):
                    raise ConfigInvalid(f"{key} must be an integer", field=key)
            elif not isinstance(value, expected):
                raise ConfigInvalid(f"{key} must be {expected.__name__}", field=key)
            values[key] = value
        return cls(**values).validate()


__all__ = ["EngineConfig"]
