from __future__ import annotations

from hollow_engine.keymaps import (
    ActionRef,
    Binding,
    KeySequence,
    KeymapRegistry,
    KeymapResolver,
    WhenClause,
)


def make_action(action_id: str) -> ActionRef:
    return ActionRef(id=action_id, handler=lambda *args, **kwargs: None)


def make_binding(
    binding_id: str,
    *,
    mode: str = "navigate",
    keys: tuple[str, ...] = ("g", "g"),
    action_id: str = "core.test",
    when: tuple[WhenClause, ...] = (),
    priority: int = 0,
) -> Binding:
    return Binding(
        id=binding_id,
        mode=mode,
        sequence=KeySequence.from_strings(*keys),
        action_id=action_id,
        when=when,
        priority=priority,
    )


def build_registry(bindings: list[Binding]) -> KeymapRegistry:
    registry = KeymapRegistry()
    action_ids = {binding.action_id for binding in bindings}
    for action_id in action_ids:
        registry.register_action(make_action(action_id))
    for binding in bindings:
        registry.register_binding(binding)
    return registry


def test_resolver_matches_exact_sequence() -> None:
    binding = make_binding("navigate.gg")
    resolver = KeymapResolver(build_registry([binding]))

    result = resolver.resolve("navigate", ("g", "g"))

    assert result.status == "match"
    assert result.match is not None
    assert result.match.binding.id == binding.id
    assert result.consumed == 2


def test_resolver_reports_pending_for_prefix() -> None:
    resolver = KeymapResolver(build_registry([make_binding("navigate.gg")]))

    result = resolver.resolve("navigate", ("g",))

    assert result.status == "pending"
    assert result.next_expected == ("g",)


def test_resolver_misses_broken_prefix() -> None:
    resolver = KeymapResolver(build_registry([make_binding("navigate.gg")]))

    result = resolver.resolve("navigate", ("g", "x"))

    assert result.status == "miss"
    assert result.consumed == 1


def test_resolver_honors_when_clauses() -> None:
    gating = make_binding(
        "overlay.scroll",
        mode="overlay",
        keys=("j",),
        when=(WhenClause("history.detail"),),
        action_id="history.scroll_down",
    )
    resolver = KeymapResolver(build_registry([gating]))

    miss = resolver.resolve("overlay", ("j",), context={})
    assert miss.status == "miss"

    hit = resolver.resolve("overlay", ("j",), context={"history.detail": True})
    assert hit.status == "match"
    assert hit.match is not None
    assert hit.match.binding.id == gating.id


def test_resolver_prefers_higher_priority() -> None:
    low = make_binding("navigate.low", keys=("x",), action_id="core.low")
    high = make_binding(
        "navigate.high",
        keys=("x",),
        action_id="core.high",
        priority=5,
        when=(WhenClause("focused"),),
    )
    resolver = KeymapResolver(build_registry([low, high]))

    result = resolver.resolve("navigate", ("x",), context={"focused": True})

    assert result.match is not None
    assert result.match.binding.id == "navigate.high"


def test_resolver_cache_refreshes_on_revision() -> None:
    registry = build_registry([])
    resolver = KeymapResolver(registry)

    miss = resolver.resolve("navigate", ("x",))
    assert miss.status == "miss"

    new_binding = make_binding("navigate.x", keys=("x",), action_id="core.x")
    registry.register_action(make_action("core.x"))
    registry.register_binding(new_binding)

    match = resolver.resolve("navigate", ("x",))
    assert match.status == "match"
    assert match.match is not None
    assert match.match.binding.id == new_binding.id
