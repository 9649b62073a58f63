import pytest

from litelab_engine.keymaps import (
    ActionRef,
    Binding,
    KeymapConflictError,
    KeymapRegistry,
    KeyStroke,
    WhenClause,
)
from litelab_engine.keymaps.defaults import DEFAULT_BINDINGS, load_default_keymaps


def make_action(action_id: str = "core.test") -> ActionRef:
    return ActionRef(id=action_id, handler=lambda *args, **kwargs: None)


def make_binding(
    *,
    binding_id: str,
    chord: str = "mod+k",
    action_id: str = "core.test",
    when: tuple[WhenClause, ...] = (),
) -> Binding:
    return Binding(
        id=binding_id,
        stroke=KeyStroke.parse(chord),
        action_id=action_id,
        when=when,
    )


def test_keystroke_orders_modifiers() -> None:
    stroke = KeyStroke(key="Z", modifiers=("shift", "mod"))

    assert stroke.token == "mod+shift+z"
    assert KeyStroke.parse("Esc").token == "escape"


def test_keystroke_rejects_unknown_modifier() -> None:
    with pytest.raises(ValueError):
        KeyStroke(key="k", modifiers=("hyper",))


def test_register_binding_success() -> None:
    registry = KeymapRegistry()
    registry.register_action(make_action())
    binding = make_binding(binding_id="panel.snippets")

    registry.register_binding(binding)

    assert registry.stats().binding_count == 1
    assert list(registry.iter_bindings(scope="editor")) == [binding]


def test_register_binding_requires_action() -> None:
    registry = KeymapRegistry()

    with pytest.raises(KeyError):
        registry.register_binding(make_binding(binding_id="orphan"))


def test_register_binding_conflict_detection() -> None:
    registry = KeymapRegistry()
    registry.register_action(make_action())
    registry.register_binding(make_binding(binding_id="panel.snippets"))

    with pytest.raises(KeymapConflictError):
        registry.register_binding(make_binding(binding_id="panel.snippets.duplicate"))


def test_register_binding_non_overlapping_when() -> None:
    registry = KeymapRegistry()
    registry.register_action(make_action())

    registry.register_binding(make_binding(binding_id="default"))
    registry.register_binding(
        make_binding(binding_id="panel", when=(WhenClause("panel_open"),))
    )
    registry.register_binding(
        make_binding(binding_id="no_panel", when=(WhenClause.parse("!panel_open"),))
    )

    assert registry.stats().binding_count == 3


def test_register_binding_with_replace() -> None:
    registry = KeymapRegistry()
    registry.register_action(make_action())
    first = make_binding(binding_id="binding")
    second = make_binding(binding_id="binding", chord="mod+/")

    registry.register_binding(first)
    registry.register_binding(second, replace=True)

    assert list(registry.iter_bindings()) == [second]
    assert registry.candidates("editor", "mod+k") == []


def test_unregister_binding_bumps_revision() -> None:
    registry = KeymapRegistry()
    registry.register_action(make_action())
    binding = make_binding(binding_id="binding")
    registry.register_binding(binding)
    before = registry.revision()

    removed = registry.unregister_binding("binding")

    assert removed == binding
    assert registry.stats().binding_count == 0
    assert registry.revision() == before + 1


def test_load_default_keymaps_registers_every_binding() -> None:
    registry = KeymapRegistry()

    load_default_keymaps(registry)

    assert registry.stats().binding_count == len(DEFAULT_BINDINGS)
    assert registry.get_binding("history.redo_alt").key_signature == "mod+y"
    assert registry.get_binding("snippets.insert_top").when_map == {
        "snippets_open": True
    }


def test_load_default_keymaps_is_repeatable() -> None:
    registry = KeymapRegistry()

    load_default_keymaps(registry)
    load_default_keymaps(registry)

    assert registry.stats().binding_count == len(DEFAULT_BINDINGS)
