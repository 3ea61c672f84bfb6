from hollow_engine.buffer import Buffer


def make_buffer(text: str, line: int = 0) -> Buffer:
    buffer = Buffer.from_text(text)
    buffer.move_to(buffer.document.line_range(line)[0])
    return buffer


def test_delete_line_middle() -> None:
    buffer = make_buffer("a\nb\nc", line=1)

    delta = buffer.delete_line()

    assert delta is not None
    assert buffer.text == "a\nc"
    assert buffer.cursor_line_col() == (1, 0)
    assert buffer.registers.get().text == "b\n"


def test_delete_last_line_keeps_preceding_newline() -> None:
    buffer = make_buffer("a\nb\nc", line=2)

    delta = buffer.delete_line()

    assert delta is not None
    assert delta.removed == "c"
    assert buffer.text == "a\nb\n"
    assert buffer.cursor_line_col() == (2, 0)
    assert buffer.registers.get().text == "c\n"


def test_delete_empty_last_line_is_noop() -> None:
    buffer = make_buffer("a\nb\nc", line=1)
    buffer.yank_line()
    buffer.move_to(buffer.document.length)
    buffer.insert_text("\n")

    assert buffer.delete_line() is None
    assert buffer.text == "a\nb\nc\n"
    assert buffer.registers.get().text == "b\n"


def test_delete_only_line_leaves_empty_document() -> None:
    buffer = make_buffer("solo")

    buffer.delete_line()

    assert buffer.text == ""
    assert buffer.offset == 0
    assert buffer.delete_line() is None


def test_delete_line_is_one_delete_group() -> None:
    buffer = make_buffer("a\nb\nc", line=1)
    buffer.delete_line()

    group = buffer.undo()

    assert group.kind == "delete"
    assert buffer.text == "a\nb\nc"
    assert buffer.cursor_line_col() == (1, 0)


def test_yank_then_paste_below() -> None:
    buffer = make_buffer("a\nb", line=0)

    buffer.yank_line()
    assert not buffer.undo_history.can_undo()
    buffer.paste_line()

    assert buffer.text == "a\na\nb"
    assert buffer.cursor_line_col() == (1, 0)
    assert buffer.undo().kind == "insert"
    assert buffer.text == "a\nb"


def test_paste_after_last_line() -> None:
    buffer = make_buffer("a\nb", line=1)

    buffer.yank_line()
    buffer.paste_line()

    assert buffer.text == "a\nb\nb"
    assert buffer.cursor_line_col() == (2, 0)


def test_paste_with_empty_register_is_noop() -> None:
    buffer = make_buffer("a")

    assert buffer.paste_line() is None
    assert buffer.text == "a"


def test_delete_then_paste_moves_line() -> None:
    buffer = make_buffer("one\ntwo\nthree", line=0)

    buffer.delete_line()
    buffer.paste_line()

    assert buffer.text == "two\none\nthree"


def test_set_content_resets_history() -> None:
    buffer = make_buffer("a")
    buffer.insert_text("b")

    buffer.set_content("fresh")

    assert buffer.text == "fresh"
    assert buffer.offset == 0
    assert not buffer.undo_history.can_undo()
