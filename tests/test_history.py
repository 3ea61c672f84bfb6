from pathlib import Path

import pytest

from hollow_engine.errors import VersionRecordCorrupt
from hollow_engine.history import DiffLine, VersionRecord, VersionStore, diff_lines, render_diff
from hollow_engine.history import codec


class StepClock:
    def __init__(self, start: float = 1_700_000_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        self.now += 1.0
        return self.now


def make_store(tmp_path: Path, *, max_versions: int = 100) -> VersionStore:
    return VersionStore(tmp_path / "versions", max_versions=max_versions, clock=StepClock())


def test_codec_detects_damage() -> None:
    frame = codec.encode_record(1000, 2, "two words")
    record = codec.decode_at(frame, 0)
    assert codec.decompress(record.payload) == "two words"
    assert record.size == len(frame)

    with pytest.raises(VersionRecordCorrupt):
        codec.decode_at(frame[:10], 0)
    with pytest.raises(VersionRecordCorrupt):
        codec.decode_at(b"XXXX" + frame[4:], 0)
    flipped = bytearray(frame)
    flipped[-1] ^= 0xFF
    with pytest.raises(VersionRecordCorrupt) as info:
        codec.decode_at(bytes(flipped), 0)
    assert info.value.reason == "checksum mismatch"


def test_scan_skips_corrupt_middle_record() -> None:
    first = codec.encode_record(1, 1, "first")
    broken = bytearray(codec.encode_record(2, 1, "second"))
    broken[-1] ^= 0xFF
    third = codec.encode_record(3, 1, "third")
    seen = []

    records = list(codec.scan(first + bytes(broken) + third, on_corrupt=seen.append))

    assert [record.timestamp_ms for record in records] == [1, 3]
    assert len(seen) == 1


def test_record_and_list_newest_first(tmp_path: Path) -> None:
    store = make_store(tmp_path)
    document = tmp_path / "draft.txt"

    store.record(document, "one")
    store.record(document, "one two")

    versions = store.versions(document)
    assert [version.content for version in versions] == ["one two", "one"]
    assert [version.word_count for version in versions] == [2, 1]
    assert store.count(document) == 2


def test_index_is_rebuilt_from_disk(tmp_path: Path) -> None:
    document = tmp_path / "draft.txt"
    make_store(tmp_path).record(document, "persisted")

    reopened = make_store(tmp_path)

    assert reopened.latest(document).content == "persisted"


def test_eviction_keeps_most_recent(tmp_path: Path) -> None:
    store = make_store(tmp_path, max_versions=3)
    document = tmp_path / "draft.txt"

    stamps = [store.record(document, f"version {index}").timestamp_ms for index in range(5)]

    versions = store.versions(document)
    assert [version.timestamp_ms for version in versions] == sorted(stamps[2:], reverse=True)
    assert [version.content for version in versions] == ["version 4", "version 3", "version 2"]
    assert make_store(tmp_path).count(document) == 3


def test_corrupt_record_on_disk_is_skipped(tmp_path: Path) -> None:
    store = make_store(tmp_path)
    document = tmp_path / "draft.txt"
    store.record(document, "good one")
    store.record(document, "damaged")
    store.record(document, "good two")
    log = store.log_path(document)
    data = bytearray(log.read_bytes())
    second = codec.decode_at(bytes(data), codec.decode_at(bytes(data), 0).size)
    data[second.offset + codec.HEADER.size] ^= 0xFF
    log.write_bytes(bytes(data))

    reopened = make_store(tmp_path)

    assert [version.content for version in reopened.versions(document)] == [
        "good two",
        "good one",
    ]


def test_content_differs(tmp_path: Path) -> None:
    store = make_store(tmp_path)
    document = tmp_path / "draft.txt"
    assert store.content_differs(document, "anything")

    store.record(document, "same")

    assert not store.content_differs(document, "same")
    assert store.content_differs(document, "changed")


def test_preview_and_time_format() -> None:
    long_text = "line one\nline two " + "x" * 60
    record = VersionRecord(path="p", timestamp_ms=0, word_count=3, content=long_text)

    assert record.preview().startswith("line one line two")
    assert record.preview().endswith("...")
    assert len(record.preview()) <= 53
    assert VersionRecord("p", 0, 1, "short\n").preview() == "short"
    assert len(record.formatted_time()) == len("2024-01-01 00:00")


def test_diff_lines_minimal_script() -> None:
    script = diff_lines("a\nb\nc\n", "a\nx\nc\nd\n")

    assert script == [
        DiffLine("equal", "a"),
        DiffLine("delete", "b"),
        DiffLine("insert", "x"),
        DiffLine("equal", "c"),
        DiffLine("insert", "d"),
    ]
    assert render_diff(script)[1] == "- b"


def test_diff_of_identical_texts_is_all_equal() -> None:
    assert all(line.tag == "equal" for line in diff_lines("same\ntext", "same\ntext"))
    assert diff_lines("", "") == []
