"""Built-in editor shortcuts."""

from __future__ import annotations

from typing import Iterable

from .models import ActionRef, Binding, KeyStroke
from .registry import KeymapRegistry

SNIPPETS_OPEN = "snippets_open"


def default_actions() -> tuple[ActionRef, ...]:
    # Imported here: the action handlers depend on the input package,
    # which itself loads this module.
    from litelab_engine.actions import core as core_actions

    return (
        ActionRef(
            id="panel.toggle_snippets",
            handler=core_actions.toggle_snippets,
            description="Toggle the snippet panel",
        ),
        ActionRef(
            id="panel.toggle_docs",
            handler=core_actions.toggle_docs,
            description="Toggle the docs panel",
        ),
        ActionRef(
            id="panel.close",
            handler=core_actions.close_panels,
            description="Close any open panel",
        ),
        ActionRef(
            id="buffer.markup",
            handler=core_actions.switch_buffer,
            description="Switch to the HTML buffer",
            metadata={"buffer": "markup"},
        ),
        ActionRef(
            id="buffer.style",
            handler=core_actions.switch_buffer,
            description="Switch to the CSS buffer",
            metadata={"buffer": "style"},
        ),
        ActionRef(
            id="buffer.script",
            handler=core_actions.switch_buffer,
            description="Switch to the JS buffer",
            metadata={"buffer": "script"},
        ),
        ActionRef(id="history.undo", handler=core_actions.undo, description="Undo"),
        ActionRef(id="history.redo", handler=core_actions.redo, description="Redo"),
        ActionRef(
            id="snippets.insert_top",
            handler=core_actions.insert_top_snippet,
            description="Insert the top snippet and close the panel",
        ),
        ActionRef(
            id="snippets.insert_top_keep_open",
            handler=core_actions.insert_top_snippet,
            description="Insert the top snippet and keep the panel open",
            metadata={"keep_open": True},
        ),
    )


DEFAULT_BINDINGS: tuple[Binding, ...] = (
    Binding(
        id="panel.toggle_snippets",
        stroke=KeyStroke.parse("mod+k"),
        action_id="panel.toggle_snippets",
    ),
    Binding(
        id="panel.toggle_docs",
        stroke=KeyStroke.parse("mod+/"),
        action_id="panel.toggle_docs",
    ),
    Binding(id="panel.close", stroke=KeyStroke("escape"), action_id="panel.close"),
    Binding(
        id="buffer.markup", stroke=KeyStroke.parse("alt+1"), action_id="buffer.markup"
    ),
    Binding(
        id="buffer.style", stroke=KeyStroke.parse("alt+2"), action_id="buffer.style"
    ),
    Binding(
        id="buffer.script", stroke=KeyStroke.parse("alt+3"), action_id="buffer.script"
    ),
    Binding(
        id="history.undo", stroke=KeyStroke.parse("mod+z"), action_id="history.undo"
    ),
    Binding(
        id="history.redo",
        stroke=KeyStroke.parse("mod+shift+z"),
        action_id="history.redo",
    ),
    Binding(
        id="history.redo_alt",
        stroke=KeyStroke.parse("mod+y"),
        action_id="history.redo",
    ),
    Binding(
        id="snippets.insert_top",
        stroke=KeyStroke("enter"),
        action_id="snippets.insert_top",
        when=(SNIPPETS_OPEN,),
    ),
    Binding(
        id="snippets.insert_top_keep_open",
        stroke=KeyStroke.parse("shift+enter"),
        action_id="snippets.insert_top_keep_open",
        when=(SNIPPETS_OPEN,),
    ),
)


def load_default_keymaps(
    registry: KeymapRegistry,
    *,
    actions: Iterable[ActionRef] | None = None,
    bindings: Iterable[Binding] = DEFAULT_BINDINGS,
) -> KeymapRegistry:
    for action in actions if actions is not None else default_actions():
        registry.register_action(action, replace=True)
    for binding in bindings:
        registry.register_binding(binding, replace=True)
    return registry


__all__ = ["DEFAULT_BINDINGS", "default_actions", "load_default_keymaps", "SNIPPETS_OPEN"]
