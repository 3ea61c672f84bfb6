"""Search-mode actions and the Navigate-mode match jumps."""

from __future__ import annotations

from hollow_engine.errors import NoMatches
from hollow_engine.keymaps import ResolutionMatch
from hollow_engine.modes.base import DispatchResult, EditorContext
from hollow_engine.modes.states import NavigateMode, SearchMode
from hollow_engine.search import Match


def _query(context: EditorContext) -> str:
    mode = context.mode
    return mode.query if isinstance(mode, SearchMode) else ""


def _goto(context: EditorContext, match: Match) -> None:
    context.buffer.move_to(match.start)
    context.buffer.settle(navigate=True)


def enter_search(context: EditorContext, match: ResolutionMatch) -> DispatchResult:
    del match
    context.search.clear()
    return DispatchResult(consumed=True, switch_to=SearchMode())


def search_append(context: EditorContext, text: str) -> DispatchResult:
    query = _query(context) + text
    context.search.execute(context.buffer.document, query)
    return DispatchResult(consumed=True, switch_to=SearchMode(query=query), status="search_input")


def search_backspace(context: EditorContext, match: ResolutionMatch) -> DispatchResult:
    del match
    query = _query(context)[:-1]
    context.search.execute(context.buffer.document, query)
    return DispatchResult(consumed=True, switch_to=SearchMode(query=query), status="search_input")


def search_cancel(context: EditorContext, match: ResolutionMatch) -> DispatchResult:
    del match
    context.search.clear()
    return DispatchResult(consumed=True, switch_to=NavigateMode(), status="search_cancelled")


def search_submit(context: EditorContext, match: ResolutionMatch) -> DispatchResult:
    del match
    query = _query(context)
    if not query:
        context.search.clear()
        return DispatchResult(consumed=True, switch_to=NavigateMode())
    context.search.execute(context.buffer.document, query)
    try:
        found = context.search.jump_from(context.buffer.offset)
    except NoMatches as exc:
        return DispatchResult(
            consumed=True, switch_to=NavigateMode(), status=exc.kind, message=str(exc)
        )
    _goto(context, found)
    total = len(context.search.matches)
    return DispatchResult(
        consumed=True,
        switch_to=NavigateMode(),
        status="search",
        message=f"{total} match{'es' if total != 1 else ''}",
    )


def search_next(context: EditorContext, match: ResolutionMatch) -> DispatchResult:
    del match
    _goto(context, context.search.next())
    return DispatchResult(consumed=True, status="search_next")


def search_previous(context: EditorContext, match: ResolutionMatch) -> DispatchResult:
    del match
    _goto(context, context.search.previous())
    return DispatchResult(consumed=True, status="search_previous")


__all__ = [
    "enter_search",
    "search_append",
    "search_backspace",
    "search_cancel",
    "search_next",
    "search_previous",
    "search_submit",
]
