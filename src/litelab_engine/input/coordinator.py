"""Composition-safe key routing and the modal panel state machine."""

from __future__ import annotations

from typing import Dict, Optional

from litelab_engine.buffer import BufferKind
from litelab_engine.keymaps import KeymapRegistry, KeymapResolver, KeyStroke
from litelab_engine.keymaps.defaults import SNIPPETS_OPEN, load_default_keymaps
from litelab_engine.keymaps.models import MODIFIER_ORDER
from litelab_engine.runtime import telemetry

from .base import DispatchResult, KeyInput, Panel


def key_to_token(key: KeyInput, *, mac: bool = False) -> str:
    """Fold the platform command key into ``mod`` and build a chord token."""

    command = "meta" if mac else "ctrl"
    modifiers = []
    for raw in key.modifiers:
        name = raw.strip().lower()
        if name == command:
            name = "mod"
        if name in MODIFIER_ORDER:
            modifiers.append(name)
    return KeyStroke(key=key.key, modifiers=tuple(modifiers)).token


class InputCoordinator:
    """Owns ``active_buffer``, ``panel`` and ``composing`` for one session."""

    def __init__(
        self,
        *,
        keymap_registry: KeymapRegistry | None = None,
        keymap_resolver: KeymapResolver | None = None,
        load_defaults: bool = True,
        mac: bool = False,
        active_buffer: BufferKind = BufferKind.MARKUP,
    ) -> None:
        self.logger = telemetry.get_logger("litelab_engine.input")
        self.keymap_registry = keymap_registry or KeymapRegistry(
            logger_name="litelab_engine.keymaps"
        )
        if load_defaults and keymap_registry is None:
            load_default_keymaps(self.keymap_registry)
        self.keymap_resolver = keymap_resolver or KeymapResolver(
            self.keymap_registry, logger_name="litelab_engine.keymaps"
        )
        self.mac = mac
        self.active_buffer = active_buffer
        self.panel = Panel.NONE
        self.composing = False

    def flags(self) -> Dict[str, bool]:
        return {
            SNIPPETS_OPEN: self.panel is Panel.SNIPPETS,
            "docs_open": self.panel is Panel.DOCS,
            "panel_open": self.panel is not Panel.NONE,
            "composing": self.composing,
        }

    def open_panel(self, panel: Panel) -> Panel:
        if panel is not self.panel:
            telemetry.record_event(
                "panel.switch",
                level="debug",
                data={"from": self.panel.value, "to": panel.value},
            )
        self.panel = panel
        return self.panel

    def toggle_panel(self, panel: Panel) -> Panel:
        if panel is Panel.NONE or self.panel is panel:
            return self.open_panel(Panel.NONE)
        return self.open_panel(panel)

    def close_panels(self) -> bool:
        was_open = self.panel is not Panel.NONE
        self.open_panel(Panel.NONE)
        return was_open

    def close_panel(self, panel: Panel) -> None:
        if self.panel is panel:
            self.open_panel(Panel.NONE)

    def switch_buffer(self, kind: BufferKind | str) -> BufferKind:
        self.active_buffer = BufferKind.parse(kind)
        return self.active_buffer

    def composition_start(self) -> None:
        self.composing = True

    def composition_end(self) -> None:
        self.composing = False

    def dispatch(self, key: KeyInput, context: object) -> DispatchResult:
        """Resolve ``key`` and run the bound action with ``context``."""

        if self.composing:
            return DispatchResult(consumed=False, status="composing")
        token = key_to_token(key, mac=self.mac)
        result = self.keymap_resolver.resolve(token, context=self.flags())
        if result.status != "match" or result.match is None:
            return DispatchResult(consumed=False, status="miss")

        match = result.match
        with telemetry.span(
            "keymaps::execute",
            component="keymaps",
            metadata={"binding_id": match.binding.id, "action": match.action.id},
        ):
            outcome = match.action(context, match)

        if isinstance(outcome, DispatchResult):
            if outcome.action_id is None:
                outcome.action_id = match.action.id
            return outcome
        return DispatchResult(consumed=True, action_id=match.action.id)

    def describe(self) -> Dict[str, Optional[str]]:
        return {
            "buffer": self.active_buffer.value,
            "panel": self.panel.value,
            "composing": str(self.composing).lower(),
        }


__all__ = ["InputCoordinator", "key_to_token"]
