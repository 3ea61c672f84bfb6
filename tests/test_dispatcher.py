from datetime import date
from pathlib import Path

import pytest

from hollow_engine.modes.base import KeyInput
from hollow_engine.modes.dispatcher import Dispatcher
from hollow_engine.modes.states import (
    ConfirmQuitMode,
    NavigateMode,
    OverlayMode,
    SearchMode,
    WriteMode,
)
from hollow_engine.runtime import EngineConfig
from hollow_engine.session import EditingSession

NAMED = {"ESC", "ENTER", "TAB", "BACKSPACE", "DELETE", "UP", "DOWN", "LEFT", "RIGHT"}


class ManualClock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


class WallClock:
    def __init__(self) -> None:
        self.now = 1_700_000_000.0

    def __call__(self) -> float:
        self.now += 60.0
        return self.now


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock()


@pytest.fixture
def make_dispatcher(tmp_path: Path, clock: ManualClock):
    def factory(text: str = "", **settings) -> Dispatcher:
        path = tmp_path / "draft.txt"
        if text:
            path.write_text(text, encoding="utf-8")
        config = EngineConfig(data_dir=tmp_path / "data", **settings)
        session = EditingSession.open(
            path,
            config=config,
            clock=clock,
            wall_clock=WallClock(),
            today=lambda: date(2024, 3, 4),
        )
        return Dispatcher(session, clock=clock)

    return factory


def press(dispatcher: Dispatcher, *keys: str):
    result = None
    for key in keys:
        key_input = KeyInput(key=key) if key in NAMED else KeyInput.char(key)
        result = dispatcher.handle_key(key_input)
    return result


def ctrl(dispatcher: Dispatcher, key: str):
    return dispatcher.handle_key(KeyInput.ctrl(key))


def text_of(dispatcher: Dispatcher) -> str:
    return dispatcher.session.buffer.text


def test_starts_in_write_mode_and_types(make_dispatcher) -> None:
    dispatcher = make_dispatcher()

    press(dispatcher, "h", "i", " ", "?")

    assert isinstance(dispatcher.mode, WriteMode)
    assert text_of(dispatcher) == "hi ?"
    assert dispatcher.session.modified


def test_escape_and_insert_switch_modes(make_dispatcher) -> None:
    dispatcher = make_dispatcher()
    press(dispatcher, "a", "b")

    press(dispatcher, "ESC")
    assert isinstance(dispatcher.mode, NavigateMode)
    # navigate mode keeps the cursor on a character
    assert dispatcher.session.buffer.offset == 1

    press(dispatcher, "i")
    assert isinstance(dispatcher.mode, WriteMode)
    assert text_of(dispatcher) == "ab"


def test_navigate_keys_do_not_type(make_dispatcher) -> None:
    dispatcher = make_dispatcher("one two")
    press(dispatcher, "ESC")

    result = press(dispatcher, "x")

    assert result.status == "unbound"
    assert text_of(dispatcher) == "one two"


def test_ctrl_keys_never_insert(make_dispatcher) -> None:
    dispatcher = make_dispatcher()

    result = ctrl(dispatcher, "k")

    assert result.status == "unbound"
    assert text_of(dispatcher) == ""


def test_multi_key_motion(make_dispatcher) -> None:
    dispatcher = make_dispatcher("one\ntwo\nthree")
    press(dispatcher, "ESC", "G")
    assert dispatcher.session.buffer.current_line() == 2

    result = press(dispatcher, "g")
    assert result.status == "pending"
    assert dispatcher.mode == NavigateMode(pending=("g",))

    press(dispatcher, "g")
    assert dispatcher.session.buffer.offset == 0
    assert dispatcher.mode == NavigateMode()


def test_unmatched_prefix_is_dropped_and_key_retried(make_dispatcher) -> None:
    dispatcher = make_dispatcher("one\ntwo\nthree")
    press(dispatcher, "ESC")

    press(dispatcher, "g", "j")

    assert dispatcher.mode == NavigateMode()
    assert dispatcher.session.buffer.current_line() == 1


def test_delete_line_and_paste(make_dispatcher) -> None:
    dispatcher = make_dispatcher("one\ntwo\nthree")
    press(dispatcher, "ESC", "j", "d", "d")
    assert text_of(dispatcher) == "one\nthree"

    press(dispatcher, "p")
    assert text_of(dispatcher) == "one\nthree\ntwo"

    press(dispatcher, "u")
    assert text_of(dispatcher) == "one\nthree"


def test_yank_and_paste(make_dispatcher) -> None:
    dispatcher = make_dispatcher("one\ntwo")
    press(dispatcher, "ESC")

    result = press(dispatcher, "y", "y")
    assert result.message == "Line copied"
    press(dispatcher, "p")

    assert text_of(dispatcher) == "one\none\ntwo"


def test_paste_with_empty_register(make_dispatcher) -> None:
    dispatcher = make_dispatcher("one")
    press(dispatcher, "ESC")

    result = press(dispatcher, "p")

    assert result.status == "register_empty"
    assert text_of(dispatcher) == "one"


def test_search_flow(make_dispatcher) -> None:
    dispatcher = make_dispatcher("The cat, the mat")
    press(dispatcher, "ESC", "/", "t", "h", "e")
    assert dispatcher.mode == SearchMode(query="the")
    assert dispatcher.view().search_input == "the"

    result = press(dispatcher, "ENTER")
    assert isinstance(dispatcher.mode, NavigateMode)
    assert result.message == "2 matches"
    assert dispatcher.session.buffer.offset == 0

    press(dispatcher, "n")
    assert dispatcher.session.buffer.offset == 9
    press(dispatcher, "n")
    assert dispatcher.session.buffer.offset == 0
    press(dispatcher, "N")
    assert dispatcher.session.buffer.offset == 9
    assert dispatcher.view().highlights == ((0, 3), (9, 12))


def test_search_highlights_follow_edits(make_dispatcher) -> None:
    dispatcher = make_dispatcher("The cat\nthe mat\nthe end")
    press(dispatcher, "ESC", "/", "t", "h", "e", "ENTER")

    press(dispatcher, "d", "d")

    assert text_of(dispatcher) == "the mat\nthe end"
    assert dispatcher.view().highlights == ((0, 3), (8, 11))
    press(dispatcher, "n")
    assert dispatcher.session.buffer.offset == 8


def test_search_without_matches(make_dispatcher) -> None:
    dispatcher = make_dispatcher("The cat")
    press(dispatcher, "ESC", "/", "z", "ENTER")

    assert isinstance(dispatcher.mode, NavigateMode)
    assert dispatcher.status.kind == "no_matches"
    assert dispatcher.status.text == "No matches for 'z'"

    result = press(dispatcher, "n")
    assert result.status == "no_matches"


def test_search_cancel_clears_query(make_dispatcher) -> None:
    dispatcher = make_dispatcher("The cat")
    press(dispatcher, "ESC", "/", "c", "a", "BACKSPACE")
    assert dispatcher.mode == SearchMode(query="c")

    press(dispatcher, "ESC")

    assert isinstance(dispatcher.mode, NavigateMode)
    assert dispatcher.view().highlights == ()


def test_quit_without_changes(make_dispatcher) -> None:
    dispatcher = make_dispatcher("saved")

    ctrl(dispatcher, "q")

    assert dispatcher.should_quit


def test_quit_with_changes_asks_first(make_dispatcher) -> None:
    dispatcher = make_dispatcher()
    press(dispatcher, "a")

    ctrl(dispatcher, "q")
    assert isinstance(dispatcher.mode, ConfirmQuitMode)
    assert dispatcher.view().confirm_quit
    assert not dispatcher.should_quit

    press(dispatcher, "c")
    assert isinstance(dispatcher.mode, WriteMode)

    ctrl(dispatcher, "q")
    press(dispatcher, "ESC")
    assert isinstance(dispatcher.mode, WriteMode)
    assert text_of(dispatcher) == "a"


def test_confirm_ignores_universal_bindings(make_dispatcher) -> None:
    dispatcher = make_dispatcher()
    press(dispatcher, "a")
    ctrl(dispatcher, "q")

    ctrl(dispatcher, "s")

    assert isinstance(dispatcher.mode, ConfirmQuitMode)
    assert dispatcher.session.modified


def test_confirm_discard_quits_without_saving(make_dispatcher, tmp_path: Path) -> None:
    dispatcher = make_dispatcher()
    press(dispatcher, "a")
    ctrl(dispatcher, "q")

    press(dispatcher, "n")

    assert dispatcher.should_quit
    assert not (tmp_path / "draft.txt").exists()


def test_confirm_save_and_quit(make_dispatcher, tmp_path: Path) -> None:
    dispatcher = make_dispatcher()
    press(dispatcher, "a")
    ctrl(dispatcher, "q")

    press(dispatcher, "y")

    assert dispatcher.should_quit
    assert (tmp_path / "draft.txt").read_text(encoding="utf-8") == "a"


def test_undo_with_empty_history_reports_status(make_dispatcher) -> None:
    dispatcher = make_dispatcher()

    result = ctrl(dispatcher, "z")

    assert result.status == "nothing_to_undo"
    assert dispatcher.status.text == "Nothing to undo"


def test_undo_and_redo_from_write_mode(make_dispatcher) -> None:
    dispatcher = make_dispatcher()
    press(dispatcher, "a", "b")

    ctrl(dispatcher, "z")
    assert text_of(dispatcher) == ""
    ctrl(dispatcher, "y")
    assert text_of(dispatcher) == "ab"


def test_undo_redo_cycles_do_not_inflate_daily_words(make_dispatcher) -> None:
    dispatcher = make_dispatcher()
    press(dispatcher, *"one two three")

    for _ in range(5):
        ctrl(dispatcher, "z")
        ctrl(dispatcher, "y")

    assert text_of(dispatcher) == "one two three"
    assert dispatcher.session.stats.today_words() == 3


def test_help_overlay_closes_on_any_key(make_dispatcher) -> None:
    dispatcher = make_dispatcher("text")
    press(dispatcher, "ESC", "?")

    overlay = dispatcher.view().overlay
    assert overlay is not None and overlay.kind == "help"
    assert "Anywhere" in overlay.lines

    press(dispatcher, "x")
    assert isinstance(dispatcher.mode, NavigateMode)
    assert text_of(dispatcher) == "text"


def test_stats_overlay(make_dispatcher) -> None:
    dispatcher = make_dispatcher(daily_goal=10)
    press(dispatcher, "o", "n", "e", "ESC", "s")

    overlay = dispatcher.view().overlay
    assert overlay.kind == "stats"
    assert "Today: 1 words" in overlay.lines
    assert "Goal: 10 words, 10%" in overlay.lines


def test_history_overlay_flow(make_dispatcher) -> None:
    dispatcher = make_dispatcher()
    press(dispatcher, *"first")
    ctrl(dispatcher, "s")
    press(dispatcher, *" second")
    ctrl(dispatcher, "s")

    press(dispatcher, "ESC", "v")
    overlay = dispatcher.view().overlay
    assert overlay.kind == "history"
    assert len(overlay.lines) == 2
    assert overlay.selected == 0

    press(dispatcher, "j")
    assert dispatcher.view().overlay.selected == 1

    press(dispatcher, "ENTER")
    detail = dispatcher.view().overlay
    assert detail.kind == "history.view"
    assert detail.lines == ("first",)

    press(dispatcher, "ESC", "d")
    assert dispatcher.view().overlay.lines == ("- first", "+ first second")

    press(dispatcher, "ESC")
    assert dispatcher.mode == OverlayMode(kind="history", selected=1)
    result = press(dispatcher, "r")

    assert isinstance(dispatcher.mode, NavigateMode)
    assert text_of(dispatcher) == "first"
    assert result.message.startswith("Restored version from ")
    assert len(dispatcher.session.list_versions()) == 3


def test_history_overlay_when_empty(make_dispatcher) -> None:
    dispatcher = make_dispatcher()
    press(dispatcher, "ESC", "v")

    assert dispatcher.view().overlay.lines == ("No saved versions yet",)
    assert press(dispatcher, "ENTER").status == "noop"
    press(dispatcher, "q")
    assert isinstance(dispatcher.mode, NavigateMode)


def test_history_disabled(make_dispatcher) -> None:
    dispatcher = make_dispatcher(versions_enabled=False)
    press(dispatcher, "ESC")

    result = press(dispatcher, "v")

    assert result.status == "history_disabled"
    assert isinstance(dispatcher.mode, NavigateMode)


def test_status_message_expires(make_dispatcher, clock: ManualClock) -> None:
    dispatcher = make_dispatcher()
    press(dispatcher, "a")
    ctrl(dispatcher, "s")
    assert dispatcher.view().status.text == "Saved"

    dispatcher.tick(2.0)
    assert dispatcher.status is not None
    dispatcher.tick(3.0)
    assert dispatcher.status is None


def test_status_bar_toggle_auto_hides(make_dispatcher) -> None:
    dispatcher = make_dispatcher("two words")

    ctrl(dispatcher, "g")
    bar = dispatcher.view().status_bar
    assert bar is not None
    assert bar.word_count == 2
    assert bar.progress is None

    dispatcher.tick(3.0)
    assert dispatcher.view().status_bar is None


def test_status_bar_goal_progress(make_dispatcher) -> None:
    dispatcher = make_dispatcher(daily_goal=4, show_status=True, status_timeout=0)
    press(dispatcher, *"a b")

    bar = dispatcher.view().status_bar

    assert bar.words_this_session == 2
    assert bar.progress.percent == 50
    assert bar.streak == 0
    assert bar.modified


def test_autosave_on_tick(make_dispatcher, tmp_path: Path) -> None:
    dispatcher = make_dispatcher(autosave_seconds=30)
    saved = []
    dispatcher.context.bus.subscribe("document.saved", saved.append)
    press(dispatcher, *"draft")

    assert dispatcher.tick(10.0) is None
    outcome = dispatcher.tick(30.0)

    assert outcome is not None and not outcome.manual
    assert saved == [outcome]
    assert dispatcher.status.text == "Saved"
    assert (tmp_path / "draft.txt").read_text(encoding="utf-8") == "draft"


def test_mode_change_event(make_dispatcher) -> None:
    dispatcher = make_dispatcher()
    seen = []
    dispatcher.context.bus.subscribe("mode.changed", lambda mode: seen.append(mode.name))

    press(dispatcher, "ESC", "i")

    assert seen == ["navigate", "write"]


def test_view_expands_tabs_for_cursor(make_dispatcher) -> None:
    dispatcher = make_dispatcher(tab_width=4)

    press(dispatcher, "TAB", "x")

    view = dispatcher.view()
    assert view.lines == ("\tx",)
    assert view.cursor_col == 5
    assert view.mode == "write"


def test_view_scrolls_to_cursor(make_dispatcher) -> None:
    dispatcher = make_dispatcher("\n".join(f"line {n}" for n in range(10)))
    dispatcher.resize(3)
    press(dispatcher, "ESC", "G")

    view = dispatcher.view()

    assert view.top_line == 7
    assert view.lines == ("line 7", "line 8", "line 9")
    assert view.cursor_row == 2
