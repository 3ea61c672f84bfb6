"""Runtime services: telemetry and resolved configuration."""

from . import telemetry
from .config import EngineConfig

__all__ = ["EngineConfig", "telemetry"]
