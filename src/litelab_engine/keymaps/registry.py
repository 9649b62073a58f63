"""Storage for actions and the chord bindings that point at them."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from typing import DefaultDict, Dict, Iterable, Iterator, Optional, Sequence, Tuple

from litelab_engine.runtime.telemetry import span

from .models import ActionRef, Binding

_Slot = Tuple[str, str]


@dataclass(slots=True)
class RegistryStats:
    action_count: int
    binding_count: int
    scopes: tuple[str, ...]


class KeymapConflictError(RuntimeError):
    """A binding would shadow another one for the same chord and context."""

    def __init__(self, binding: Binding, conflicts: Iterable[Binding]):
        self.binding = binding
        self.conflicts = tuple(conflicts)
        names = ", ".join(item.id for item in self.conflicts)
        super().__init__(f"Binding '{binding.id}' clashes with: {names}")


def shadows(first: Binding, second: Binding) -> bool:
    """True when both bindings would be live under exactly the same flags."""

    return first.when_map == second.when_map


class KeymapRegistry:
    """Actions by id plus bindings indexed by ``(scope, chord token)``.

    ``revision`` increases whenever the binding set changes.
    """

    def __init__(self, *, logger_name: str | None = None) -> None:
        self._logger_name = logger_name
        self._actions: Dict[str, ActionRef] = {}
        self._bindings: Dict[str, Binding] = {}
        self._slots: DefaultDict[_Slot, Dict[str, Binding]] = defaultdict(dict)
        self._revision = 0

    def revision(self) -> int:
        return self._revision

    def get_action(self, action_id: str) -> ActionRef:
        action = self._actions.get(action_id)
        if action is None:
            raise KeyError(f"Action '{action_id}' is not registered")
        return action

    def get_binding(self, binding_id: str) -> Binding:
        binding = self._bindings.get(binding_id)
        if binding is None:
            raise KeyError(f"Binding '{binding_id}' is not registered")
        return binding

    def register_action(self, action: ActionRef, *, replace: bool = False) -> ActionRef:
        if action.id in self._actions and not replace:
            raise ValueError(f"Action '{action.id}' already registered")
        self._actions[action.id] = action
        return action

    def register_binding(self, binding: Binding, *, replace: bool = False) -> Binding:
        """Add ``binding``; with ``replace`` it evicts same-id and clashing entries."""

        with span(
            "keymaps::register_binding",
            logger_name=self._logger_name,
            component="keymaps",
            metadata={"binding_id": binding.id, "chord": binding.key_signature},
        ) as handle:
            if binding.action_id not in self._actions:
                raise KeyError(
                    f"Binding '{binding.id}' points at unknown action '{binding.action_id}'"
                )
            clashes = self.detect_conflicts(binding, ignore=(binding.id,))
            if not replace:
                if clashes:
                    handle.add_metadata("conflicts", len(clashes))
                    raise KeymapConflictError(binding, clashes)
                if binding.id in self._bindings:
                    raise ValueError(f"Binding id '{binding.id}' already registered")
            evicted = [*clashes]
            if binding.id in self._bindings:
                evicted.append(self._bindings[binding.id])
            for old in evicted:
                self._drop(old)
            self._bindings[binding.id] = binding
            self._slots[(binding.scope, binding.key_signature)][binding.id] = binding
            self._revision += 1
            return binding

    def unregister_binding(self, binding_id: str) -> Optional[Binding]:
        binding = self._bindings.get(binding_id)
        if binding is not None:
            self._drop(binding)
            self._revision += 1
        return binding

    def iter_bindings(self, scope: Optional[str] = None) -> Iterator[Binding]:
        for binding in self._bindings.values():
            if scope is None or binding.scope == scope:
                yield binding

    def candidates(self, scope: str, token: str) -> list[Binding]:
        slot = self._slots.get((scope, token), {})
        return [slot[key] for key in sorted(slot)]

    def detect_conflicts(
        self, binding: Binding, *, ignore: Sequence[str] = ()
    ) -> list[Binding]:
        return [
            other
            for other in self.candidates(binding.scope, binding.key_signature)
            if other.id not in ignore and shadows(binding, other)
        ]

    def stats(self) -> RegistryStats:
        scopes = {binding.scope for binding in self._bindings.values()}
        return RegistryStats(
            action_count=len(self._actions),
            binding_count=len(self._bindings),
            scopes=tuple(sorted(scopes)),
        )

    def _drop(self, binding: Binding) -> None:
        del self._bindings[binding.id]
        key = (binding.scope, binding.key_signature)
        slot = self._slots.get(key)
        if slot is not None:
            slot.pop(binding.id, None)
            if not slot:
                del self._slots[key]


__all__ = [
    "KeymapConflictError",
    "KeymapRegistry",
    "RegistryStats",
    "shadows",
]
