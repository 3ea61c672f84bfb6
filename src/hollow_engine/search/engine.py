"""Search engine: match discovery plus cyclic navigation between matches."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from hollow_engine.buffer.document import BufferDocument
from hollow_engine.errors import NoMatches


@dataclass(frozen=True, slots=True)
class Match:
    start: int
    end: int


@dataclass(slots=True)
class SearchState:
    query: str = ""
    matches: List[Match] = field(default_factory=list)
    current: int = -1

    @property
    def active(self) -> bool:
        return bool(self.query)

    @property
    def current_match(self) -> Optional[Match]:
        if 0 <= self.current < len(self.matches):
            return self.matches[self.current]
        return None


def _fold_char(char: str) -> str:
    lowered = char.lower()
    return lowered if len(lowered) == 1 else char


def _fold(text: str) -> str:
    # per-character folding keeps offsets aligned with the original text
    return "".join(_fold_char(char) for char in text)


def find_all(text: str, query: str) -> List[Match]:
    """Non-overlapping case-insensitive matches, earliest start first."""

    if not query:
        return []
    haystack = _fold(text)
    needle = _fold(query)
    found: List[Match] = []
    position = haystack.find(needle)
    while position != -1:
        found.append(Match(position, position + len(needle)))
        position = haystack.find(needle, position + len(needle))
    return found


class SearchEngine:
    """Owns the ``SearchState``; never mutates the document it scans."""

    def __init__(self) -> None:
        self.state = SearchState()

    @property
    def query(self) -> str:
        return self.state.query

    @property
    def matches(self) -> List[Match]:
        return self.state.matches

    def execute(self, document: BufferDocument, query: str) -> int:
        if not query:
            self.clear()
            return 0
        self.state = SearchState(query=query, matches=find_all(document.text, query))
        return len(self.state.matches)

    def refresh(self, document: BufferDocument, offset: int) -> int:
        """Rescan the active query after an edit.

        The current match becomes the last one starting at or before
        ``offset`` so ``next`` continues forward from the cursor.
        """

        query = self.state.query
        if not query:
            return 0
        count = self.execute(document, query)
        for index, match in enumerate(self.state.matches):
            if match.start > offset:
                break
            self.state.current = index
        return count

    def clear(self) -> None:
        self.state = SearchState()

    def _require_matches(self) -> List[Match]:
        if not self.state.matches:
            raise NoMatches(self.state.query)
        return self.state.matches

    def next(self) -> Match:
        matches = self._require_matches()
        self.state.current = (self.state.current + 1) % len(matches)
        return matches[self.state.current]

    def previous(self) -> Match:
        matches = self._require_matches()
        if self.state.current < 0:
            self.state.current = len(matches) - 1
        else:
            self.state.current = (self.state.current - 1) % len(matches)
        return matches[self.state.current]

    def jump_from(self, offset: int) -> Match:
        """Select the first match starting at or after ``offset``, wrapping."""

        matches = self._require_matches()
        for index, match in enumerate(matches):
            if match.start >= offset:
                self.state.current = index
                return match
        self.state.current = 0
        return matches[0]

    def highlights(self) -> tuple[tuple[tuple[int, int], ...], int]:
        ranges = tuple((match.start, match.end) for match in self.state.matches)
        return ranges, self.state.current


__all__ = ["Match", "SearchEngine", "SearchState", "find_all"]
