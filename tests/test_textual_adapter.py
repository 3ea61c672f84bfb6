from __future__ import annotations

from datetime import date
from pathlib import Path
from typing import List

from hollow_engine.adapters.textual.controller import (
    TextualEditorAdapter,
    TextualUIHooks,
    translate_key,
)
from hollow_engine.modes.base import KeyInput
from hollow_engine.modes.dispatcher import Dispatcher
from hollow_engine.modes.states import NavigateMode
from hollow_engine.runtime import EngineConfig
from hollow_engine.session import EditingSession
from hollow_engine.session.view import RenderView


def make_dispatcher(tmp_path: Path) -> Dispatcher:
    session = EditingSession.open(
        tmp_path / "draft.txt",
        config=EngineConfig(data_dir=tmp_path / "data"),
        clock=lambda: 0.0,
        today=lambda: date(2024, 3, 4),
    )
    return Dispatcher(session, clock=lambda: 0.0)


def test_translate_named_and_printable_keys() -> None:
    assert translate_key("escape") == KeyInput(key="ESC")
    assert translate_key("enter") == KeyInput(key="ENTER")
    assert translate_key("ctrl+left") == KeyInput(key="LEFT", modifiers=("ctrl",))
    assert translate_key("ctrl+s") == KeyInput(key="s", modifiers=("ctrl",))
    assert translate_key("a", "a") == KeyInput.char("a")
    assert translate_key("question_mark", "?") == KeyInput.char("?")
    assert translate_key("f1") is None


def test_adapter_renders_and_relays_events(tmp_path: Path) -> None:
    views: List[RenderView] = []
    events: List[tuple[str, object | None]] = []
    hooks = TextualUIHooks(
        render=views.append,
        handle_event=lambda name, payload: events.append((name, payload)),
    )
    adapter = TextualEditorAdapter(make_dispatcher(tmp_path), hooks)
    assert len(views) == 1

    adapter.handle_textual_key("h", character="h")
    adapter.handle_textual_key("escape")

    assert views[-1].lines == ("h",)
    assert views[-1].mode == "navigate"
    assert ("mode.changed", NavigateMode()) in events


def test_adapter_ignores_unknown_keys(tmp_path: Path) -> None:
    views: List[RenderView] = []
    adapter = TextualEditorAdapter(make_dispatcher(tmp_path), TextualUIHooks(render=views.append))

    assert adapter.handle_textual_key("f1") is None
    assert len(views) == 1


def test_adapter_confirms_then_exits_once(tmp_path: Path) -> None:
    statuses: List[str] = []
    exits: List[bool] = []
    hooks = TextualUIHooks(
        render=lambda view: None,
        update_status=statuses.append,
        exit=lambda: exits.append(True),
    )
    adapter = TextualEditorAdapter(make_dispatcher(tmp_path), hooks)
    adapter.handle_textual_key("x", character="x")

    adapter.handle_textual_key("ctrl+q")
    assert statuses[-1].startswith("Unsaved changes")
    assert exits == []

    adapter.handle_textual_key("n", character="n")
    adapter.handle_textual_key("n", character="n")
    assert exits == [True]


def test_adapter_exits_even_when_stats_cannot_be_saved(tmp_path: Path) -> None:
    (tmp_path / "data" / "stats.json").mkdir(parents=True)
    statuses: List[str] = []
    exits: List[bool] = []
    hooks = TextualUIHooks(
        render=lambda view: None,
        update_status=statuses.append,
        exit=lambda: exits.append(True),
    )
    adapter = TextualEditorAdapter(make_dispatcher(tmp_path), hooks)
    adapter.handle_textual_key("x", character="x")

    adapter.handle_textual_key("ctrl+q")
    adapter.handle_textual_key("n", character="n")

    assert exits == [True]
    assert statuses[-1].startswith("Could not save writing stats")


def test_adapter_tick_reports_autosave(tmp_path: Path) -> None:
    statuses: List[str] = []
    views: List[RenderView] = []
    adapter = TextualEditorAdapter(
        make_dispatcher(tmp_path),
        TextualUIHooks(render=views.append, update_status=statuses.append),
    )
    adapter.handle_textual_key("x", character="x")

    adapter.tick(30.0)

    assert statuses == ["Saved"]
    assert views[-1].status.text == "Saved"
    assert (tmp_path / "draft.txt").read_text(encoding="utf-8") == "x"
