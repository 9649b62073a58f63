from __future__ import annotations

from litelab_engine.keymaps import (
    ActionRef,
    Binding,
    KeymapRegistry,
    KeymapResolver,
    KeyStroke,
    WhenClause,
)


def make_action(action_id: str) -> ActionRef:
    return ActionRef(id=action_id, handler=lambda *args, **kwargs: None)


def make_binding(
    binding_id: str,
    *,
    chord: str = "enter",
    action_id: str = "core.test",
    when: tuple[WhenClause, ...] = (),
    priority: int = 0,
) -> Binding:
    return Binding(
        id=binding_id,
        stroke=KeyStroke.parse(chord),
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


def test_resolver_matches_exact_chord() -> None:
    binding = make_binding("undo", chord="mod+z")
    resolver = KeymapResolver(build_registry([binding]))

    result = resolver.resolve("mod+z")

    assert result.status == "match"
    assert result.match is not None
    assert result.match.binding.id == binding.id


def test_resolver_misses_other_chords() -> None:
    resolver = KeymapResolver(build_registry([make_binding("undo", chord="mod+z")]))

    assert resolver.resolve("mod+shift+z").status == "miss"
    assert resolver.resolve("z").status == "miss"


def test_resolver_honors_when_clauses() -> None:
    gating = make_binding(
        "snippets.insert",
        when=(WhenClause("snippets_open"),),
        action_id="core.insert",
    )
    resolver = KeymapResolver(build_registry([gating]))

    miss = resolver.resolve("enter", context={})
    assert miss.status == "miss"

    hit = resolver.resolve("enter", context={"snippets_open": True})
    assert hit.status == "match"
    assert hit.match is not None
    assert hit.match.binding.id == gating.id


def test_resolver_prefers_higher_priority() -> None:
    low = make_binding(
        "low", when=(WhenClause("panel_open"),), action_id="core.low", priority=0
    )
    high = make_binding(
        "high", when=(WhenClause("composing", False),), action_id="core.high", priority=5
    )
    registry = KeymapRegistry()
    registry.register_action(make_action("core.low"))
    registry.register_action(make_action("core.high"))
    registry.register_binding(low)
    registry.register_binding(high)
    resolver = KeymapResolver(registry)

    result = resolver.resolve("enter", context={"panel_open": True})

    assert result.match is not None
    assert result.match.binding.id == "high"


def test_resolver_sees_bindings_registered_later() -> None:
    registry = build_registry([])
    resolver = KeymapResolver(registry)

    assert resolver.resolve("x").status == "miss"

    registry.register_action(make_action("core.x"))
    registry.register_binding(make_binding("x", chord="x", action_id="core.x"))

    match = resolver.resolve("x")
    assert match.status == "match"
    assert match.match is not None
    assert match.match.binding.id == "x"
