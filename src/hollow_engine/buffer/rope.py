"""Balanced chunked text storage.

Text lives in leaf chunks of at most ``MAX_LEAF`` characters. Internal nodes
cache character, newline and word counts for their subtree, so offset/line
translation walks a single root-to-leaf path and the word count is read off
the root. Nodes are immutable and shared
between revisions; every edit builds a new spine and swaps the root.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, List, Optional

MAX_LEAF = 512
_DEPTH_SLACK = 4


@dataclass(frozen=True, slots=True)
class RopeNode:
    length: int
    newlines: int
    depth: int = 0
    leaves: int = 1
    words: int = 0
    # whether the first / last character belongs to a word
    head_word: bool = False
    tail_word: bool = False
    text: Optional[str] = None
    left: Optional["RopeNode"] = None
    right: Optional["RopeNode"] = None

    @property
    def is_leaf(self) -> bool:
        return self.text is not None


def _leaf(text: str) -> RopeNode:
    return RopeNode(
        length=len(text),
        newlines=text.count("\n"),
        words=len(text.split()),
        head_word=bool(text) and not text[0].isspace(),
        tail_word=bool(text) and not text[-1].isspace(),
        text=text,
    )


def _join(left: RopeNode, right: RopeNode) -> RopeNode:
    return RopeNode(
        length=left.length + right.length,
        newlines=left.newlines + right.newlines,
        depth=max(left.depth, right.depth) + 1,
        leaves=left.leaves + right.leaves,
        words=left.words + right.words - (left.tail_word and right.head_word),
        head_word=left.head_word,
        tail_word=right.tail_word,
        left=left,
        right=right,
    )


def _chunk(text: str) -> List[str]:
    return [text[i : i + MAX_LEAF] for i in range(0, len(text), MAX_LEAF)]


def _build(pieces: List[str]) -> Optional[RopeNode]:
    if not pieces:
        return None
    if len(pieces) == 1:
        return _leaf(pieces[0])
    middle = len(pieces) // 2
    left = _build(pieces[:middle])
    right = _build(pieces[middle:])
    assert left is not None and right is not None
    return _join(left, right)


def _concat(left: Optional[RopeNode], right: Optional[RopeNode]) -> Optional[RopeNode]:
    if left is None or left.length == 0:
        return right
    if right is None or right.length == 0:
        return left
    if left.is_leaf and right.is_leaf and left.length + right.length <= MAX_LEAF:
        return _leaf(left.text + right.text)  # type: ignore[operator]
    # keep keystroke-sized edits from producing long chains of tiny leaves
    if (
        right.is_leaf
        and not left.is_leaf
        and left.right is not None
        and left.right.is_leaf
        and left.right.length + right.length <= MAX_LEAF
    ):
        assert left.left is not None
        return _join(left.left, _leaf(left.right.text + right.text))  # type: ignore[operator]
    if (
        left.is_leaf
        and not right.is_leaf
        and right.left is not None
        and right.left.is_leaf
        and left.length + right.left.length <= MAX_LEAF
    ):
        assert right.right is not None
        return _join(_leaf(left.text + right.left.text), right.right)  # type: ignore[operator]
    return _join(left, right)


def _split(
    node: Optional[RopeNode], offset: int
) -> tuple[Optional[RopeNode], Optional[RopeNode]]:
    if node is None:
        return None, None
    if offset <= 0:
        return None, node
    if offset >= node.length:
        return node, None
    if node.is_leaf:
        text = node.text or ""
        return _leaf(text[:offset]), _leaf(text[offset:])
    assert node.left is not None and node.right is not None
    if offset <= node.left.length:
        head, tail = _split(node.left, offset)
        return head, _concat(tail, node.right)
    head, tail = _split(node.right, offset - node.left.length)
    return _concat(node.left, head), tail


def _iter_leaves(node: Optional[RopeNode]) -> Iterator[str]:
    stack: list[RopeNode] = [node] if node is not None else []
    while stack:
        current = stack.pop()
        if current.is_leaf:
            if current.text:
                yield current.text
            continue
        assert current.left is not None and current.right is not None
        stack.append(current.right)
        stack.append(current.left)


class Rope:
    """Mutable handle over an immutable tree of text chunks.

    Offsets are code-point indices. Callers validate ranges; the rope assumes
    ``0 <= offset <= len(self)``.
    """

    __slots__ = ("_root",)

    def __init__(self, text: str = "") -> None:
        self._root: Optional[RopeNode] = _build(_chunk(text))

    def __len__(self) -> int:
        return self._root.length if self._root else 0

    def __str__(self) -> str:
        return "".join(_iter_leaves(self._root))

    @property
    def newline_count(self) -> int:
        return self._root.newlines if self._root else 0

    @property
    def depth(self) -> int:
        return self._root.depth if self._root else 0

    @property
    def word_count(self) -> int:
        return self._root.words if self._root else 0

    def insert(self, offset: int, text: str) -> None:
        if not text:
            return
        head, tail = _split(self._root, offset)
        middle = _build(_chunk(text))
        self._root = _concat(_concat(head, middle), tail)
        self._maybe_rebalance()

    def delete(self, start: int, end: int) -> None:
        if start >= end:
            return
        head, rest = _split(self._root, start)
        _, tail = _split(rest, end - start)
        self._root = _concat(head, tail)
        self._maybe_rebalance()

    def slice(self, start: int, end: int) -> str:
        if start >= end or self._root is None:
            return ""
        parts: list[str] = []
        position = 0
        for chunk in _iter_leaves(self._root):
            chunk_end = position + len(chunk)
            if chunk_end > start:
                parts.append(chunk[max(0, start - position) : end - position])
            if chunk_end >= end:
                break
            position = chunk_end
        return "".join(parts)

    def char_at(self, offset: int) -> str:
        node = self._root
        if node is None:
            raise IndexError(offset)
        while not node.is_leaf:
            assert node.left is not None and node.right is not None
            if offset < node.left.length:
                node = node.left
            else:
                offset -= node.left.length
                node = node.right
        return (node.text or "")[offset]

    def newlines_before(self, offset: int) -> int:
        """Number of ``\\n`` characters in ``[0, offset)``."""

        node = self._root
        if node is None:
            return 0
        count = 0
        while not node.is_leaf:
            assert node.left is not None and node.right is not None
            if offset <= node.left.length:
                node = node.left
            else:
                count += node.left.newlines
                offset -= node.left.length
                node = node.right
        return count + (node.text or "").count("\n", 0, offset)

    def line_start(self, line: int) -> int:
        """Offset of the first character of ``line`` (0-based)."""

        if line <= 0:
            return 0
        node = self._root
        if node is None or line > node.newlines:
            raise IndexError(line)
        wanted = line
        base = 0
        while not node.is_leaf:
            assert node.left is not None and node.right is not None
            if wanted <= node.left.newlines:
                node = node.left
            else:
                wanted -= node.left.newlines
                base += node.left.length
                node = node.right
        text = node.text or ""
        index = -1
        for _ in range(wanted):
            index = text.index("\n", index + 1)
        return base + index + 1

    def _maybe_rebalance(self) -> None:
        root = self._root
        if root is None or root.is_leaf:
            return
        if root.depth <= 2 * root.leaves.bit_length() + _DEPTH_SLACK:
            return
        merged: list[str] = []
        for chunk in _iter_leaves(root):
            if merged and len(merged[-1]) + len(chunk) <= MAX_LEAF:
                merged[-1] += chunk
            else:
                merged.append(chunk)
        self._root = _build(merged)


__all__ = ["Rope", "RopeNode", "MAX_LEAF"]
