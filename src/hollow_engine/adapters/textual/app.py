"""Executable Textual app that hosts the writing engine."""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import List, Optional, Sequence

try:  # pragma: no cover - imported only when the app is run
    from textual import events
    from textual.app import App, ComposeResult
    from textual.widgets import Static
except ModuleNotFoundError as exc:  # pragma: no cover - friendly error for missing dep
    raise RuntimeError(
        "Install the 'textual' package to use hollow_engine.adapters.textual.app"
    ) from exc

from hollow_engine.modes.dispatcher import Dispatcher
from hollow_engine.runtime import EngineConfig, telemetry
from hollow_engine.session import EditingSession
from hollow_engine.session.view import RenderView

from .controller import TextualEditorAdapter, TextualUIHooks

TICK_SECONDS = 0.25
CURSOR_MARK = "▏"


def create_dispatcher(path: Path, config: Optional[EngineConfig] = None) -> Dispatcher:
    """Open ``path`` and build a Dispatcher with the default keymaps."""

    session = EditingSession.open(path, config=config)
    return Dispatcher(session)


def paint(view: RenderView) -> str:
    """Plain-text rendering of a view; layout polish belongs to the host."""

    if view.overlay is not None:
        lines: List[str] = [view.overlay.title, ""]
        for index, line in enumerate(view.overlay.lines):
            marker = "> " if index == view.overlay.selected else "  "
            lines.append(marker + line)
        return "\n".join(lines)
    lines = list(view.lines) or [""]
    row = view.cursor_row
    if 0 <= row < len(lines):
        text = lines[row].expandtabs(view.tab_width)
        col = min(view.cursor_col, len(text))
        lines[row] = text[:col] + CURSOR_MARK + text[col:]
    return "\n".join(lines)


def status_line(view: RenderView) -> str:
    parts: List[str] = [view.mode.upper()]
    if view.search_input is not None:
        parts.append(f"/{view.search_input}")
    if view.confirm_quit:
        parts.append("Save before quitting? (y/n/c)")
    elif view.status is not None:
        parts.append(view.status.text)
    bar = view.status_bar
    if bar is not None:
        parts.append(f"{bar.word_count} words (+{bar.words_this_session}) {bar.elapsed}")
        if bar.progress is not None:
            parts.append(f"goal {bar.progress.percent}%")
        if bar.streak is not None:
            parts.append(f"streak {bar.streak}")
        if bar.modified:
            parts.append("[modified]")
    return "  ".join(parts)


class HollowApp(App[None]):
    """Minimal Textual UI embedding the writing engine."""

    CSS = """
	Screen {
		layout: vertical;
		align-horizontal: center;
	}

	#document-view {
		height: 1fr;
		width: 82;
		padding: 0 1;
	}

	#status-line {
		height: 1;
		padding: 0 1;
	}
	"""

    def __init__(self, path: Path, *, config: Optional[EngineConfig] = None) -> None:
        super().__init__()
        self._path = path
        self._config = config
        self.adapter: TextualEditorAdapter | None = None
        self._document_widget = Static("", id="document-view", markup=False)
        self._status_widget = Static("", id="status-line", markup=False)

    def compose(self) -> ComposeResult:
        yield self._document_widget
        yield self._status_widget

    async def on_mount(self) -> None:
        dispatcher = create_dispatcher(self._path, self._config)
        hooks = TextualUIHooks(render=self._render_view, exit=self.exit)
        self.adapter = TextualEditorAdapter(dispatcher, hooks)
        self.adapter.resize(max(1, self.size.height - 1))
        self.set_interval(TICK_SECONDS, self.adapter.tick)

    def on_resize(self, event: events.Resize) -> None:
        if self.adapter:
            self.adapter.resize(max(1, event.size.height - 1))

    async def action_quit(self) -> None:
        # ctrl+q belongs to the engine so unsaved changes get confirmed
        if self.adapter:
            self.adapter.handle_textual_key("ctrl+q")

    async def on_key(self, event: events.Key) -> None:
        if not self.adapter:
            return
        result = self.adapter.handle_textual_key(event.key, character=event.character)
        if result is not None:
            event.prevent_default()
            event.stop()

    def _render_view(self, view: RenderView) -> None:
        self._document_widget.styles.width = view.text_width + 2
        self._document_widget.update(paint(view))
        self._status_widget.update(status_line(view))


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Distraction-free writing in the terminal.")
    parser.add_argument("path", type=Path, help="Document to open (created on first save)")
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = _parse_args(argv)
    telemetry.configure()
    app = HollowApp(args.path)
    app.run()


if __name__ == "__main__":  # pragma: no cover - manual entry point
    main()
