import random

import pytest

from hollow_engine.buffer import BufferDocument, Rope, count_words
from hollow_engine.errors import InvalidPosition


def make_document(text: str = "ab\n\ncd") -> BufferDocument:
    return BufferDocument.from_text(text)


def test_insert_then_delete_round_trip() -> None:
    document = make_document("hello world")

    inserted = document.insert(5, ", dear")
    removed = document.delete(5, 5 + len(inserted))

    assert inserted == ", dear"
    assert removed == ", dear"
    assert document.text == "hello world"


def test_mutations_bump_version_and_dirty() -> None:
    document = make_document()
    assert document.dirty is False

    document.insert(0, "x")

    assert document.version == 1
    assert document.dirty is True
    document.mark_clean()
    assert document.dirty is False


def test_out_of_range_positions_fail() -> None:
    document = make_document("abc")

    with pytest.raises(InvalidPosition):
        document.insert(4, "x")
    with pytest.raises(InvalidPosition):
        document.delete(2, 5)
    with pytest.raises(InvalidPosition):
        document.slice(-1, 2)
    with pytest.raises(InvalidPosition):
        document.line_range(1)
    assert document.text == "abc"


def test_line_translation() -> None:
    document = make_document("ab\n\ncd")

    assert document.line_count == 3
    assert document.line_range(0) == (0, 2)
    assert document.line_range(1) == (3, 3)
    assert document.line_range(2) == (4, 6)
    assert document.get_line(2) == "cd"
    assert document.offset_to_line_col(2) == (0, 2)
    assert document.offset_to_line_col(3) == (1, 0)
    assert document.offset_to_line_col(6) == (2, 2)
    assert document.line_col_to_offset(2, 1) == 5
    assert document.lines(1, 10) == ["", "cd"]


def test_trailing_newline_opens_empty_last_line() -> None:
    document = make_document("one\n")

    assert document.line_count == 2
    assert document.get_line(1) == ""
    assert document.offset_to_line_col(4) == (1, 0)


def test_word_count_is_whitespace_delimited() -> None:
    document = make_document("  hello,  world\n\tfoo ")

    assert document.word_count() == 3
    document.insert(document.length, "bar")
    assert document.word_count() == 4
    assert count_words("") == 0


def test_rope_matches_string_model_under_random_edits() -> None:
    rng = random.Random(7)
    model = "".join(f"line {index}\n" for index in range(400))
    rope = Rope(model)
    for _ in range(300):
        if model and rng.random() < 0.4:
            start = rng.randrange(len(model))
            end = min(len(model), start + rng.randrange(1, 40))
            rope.delete(start, end)
            model = model[:start] + model[end:]
        else:
            offset = rng.randrange(len(model) + 1)
            text = rng.choice(["x", "word ", "\n", "two\nlines", "é" * 30])
            rope.insert(offset, text)
            model = model[:offset] + text + model[offset:]

    assert str(rope) == model
    assert len(rope) == len(model)
    assert rope.newline_count == model.count("\n")
    assert rope.word_count == len(model.split())
    for probe in (0, len(model) // 3, len(model) // 2, len(model)):
        assert rope.newlines_before(probe) == model.count("\n", 0, probe)
        assert rope.slice(probe, probe + 25) == model[probe : probe + 25]
    line_starts = [0] + [index + 1 for index, char in enumerate(model) if char == "\n"]
    for line in (1, len(line_starts) // 2, len(line_starts) - 1):
        assert rope.line_start(line) == line_starts[line]


def test_rope_word_count_spans_chunk_boundaries() -> None:
    rope = Rope("x" * 1500)
    assert rope.word_count == 1

    rope.insert(700, " ")
    assert rope.word_count == 2
    rope.insert(0, "\n\t")
    assert rope.word_count == 2
    rope.delete(702, 703)
    assert rope.word_count == 1
    rope.delete(0, len(rope))
    assert rope.word_count == 0


def test_rope_stays_shallow_after_many_appends() -> None:
    rope = Rope()
    for index in range(2000):
        rope.insert(len(rope), f"{index} ")

    assert str(rope).startswith("0 1 2 ")
    assert rope.depth <= 40
