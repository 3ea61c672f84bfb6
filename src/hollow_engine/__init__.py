"""Distraction-free modal writing engine with version history and goals."""

__all__ = [
    "actions",
    "adapters",
    "buffer",
    "errors",
    "history",
    "keymaps",
    "modes",
    "runtime",
    "search",
    "session",
    "stats",
]

__version__ = "0.1.0"
