"""Line-level diff between two document contents."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Literal, Sequence

DiffTag = Literal["equal", "insert", "delete"]

_PREFIX = {"equal": "  ", "insert": "+ ", "delete": "- "}


@dataclass(frozen=True, slots=True)
class DiffLine:
    tag: DiffTag
    text: str

    def render(self) -> str:
        return f"{_PREFIX[self.tag]}{self.text}"


def split_lines(text: str) -> List[str]:
    if not text:
        return []
    lines = text.split("\n")
    if text.endswith("\n"):
        lines.pop()
    return lines


def _lcs_script(old: Sequence[str], new: Sequence[str]) -> List[DiffLine]:
    rows, cols = len(old), len(new)
    # table[i][j] is the LCS length of old[i:] and new[j:]
    table = [[0] * (cols + 1) for _ in range(rows + 1)]
    for i in range(rows - 1, -1, -1):
        row, below = table[i], table[i + 1]
        for j in range(cols - 1, -1, -1):
            if old[i] == new[j]:
                row[j] = below[j + 1] + 1
            else:
                row[j] = max(below[j], row[j + 1])

    script: List[DiffLine] = []
    i = j = 0
    while i < rows and j < cols:
        if old[i] == new[j]:
            script.append(DiffLine("equal", old[i]))
            i += 1
            j += 1
        elif table[i + 1][j] >= table[i][j + 1]:
            script.append(DiffLine("delete", old[i]))
            i += 1
        else:
            script.append(DiffLine("insert", new[j]))
            j += 1
    script.extend(DiffLine("delete", line) for line in old[i:])
    script.extend(DiffLine("insert", line) for line in new[j:])
    return script


def diff_lines(old: str, new: str) -> List[DiffLine]:
    """Minimal edit script turning ``old`` into ``new``, one entry per line."""

    before = split_lines(old)
    after = split_lines(new)
    head = 0
    limit = min(len(before), len(after))
    while head < limit and before[head] == after[head]:
        head += 1
    tail = 0
    while (
        tail < limit - head
        and before[len(before) - 1 - tail] == after[len(after) - 1 - tail]
    ):
        tail += 1

    script = [DiffLine("equal", line) for line in before[:head]]
    script.extend(
        _lcs_script(before[head : len(before) - tail], after[head : len(after) - tail])
    )
    script.extend(DiffLine("equal", line) for line in before[len(before) - tail :])
    return script


def render_diff(script: Sequence[DiffLine]) -> List[str]:
    return [line.render() for line in script]


__all__ = ["DiffLine", "DiffTag", "diff_lines", "render_diff", "split_lines"]
