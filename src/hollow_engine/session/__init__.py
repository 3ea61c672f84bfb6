"""Editing session: file persistence, autosave, history restore, render view."""

from .editing import EditingSession, SaveOutcome
from .files import LoadedDocument, load_document, normalize_newlines, save_document
from .view import OverlayView, RenderView, StatusBar, StatusMessage

__all__ = [
    "EditingSession",
    "LoadedDocument",
    "OverlayView",
    "RenderView",
    "SaveOutcome",
    "StatusBar",
    "StatusMessage",
    "load_document",
    "normalize_newlines",
    "save_document",
]
