"""Chords, context conditions, actions and the bindings that join them."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Callable, Iterable, Mapping

# ``mod`` is the platform command modifier: ctrl, or meta on macOS hosts.
MODIFIER_ORDER = ("mod", "ctrl", "meta", "alt", "shift")

_KEY_ALIASES: Mapping[str, str] = {
    "esc": "escape",
    "<esc>": "escape",
    "return": "enter",
    "slash": "/",
}


def normalize_key(key: str) -> str:
    name = key.strip().lower()
    if not name:
        raise ValueError("key cannot be empty")
    return _KEY_ALIASES.get(name, name)


def _ordered_modifiers(modifiers: Iterable[str]) -> tuple[str, ...]:
    wanted = {name.strip().lower() for name in modifiers if name.strip()}
    unknown = sorted(wanted.difference(MODIFIER_ORDER))
    if unknown:
        raise ValueError(f"Unknown modifiers: {unknown}")
    return tuple(name for name in MODIFIER_ORDER if name in wanted)


@dataclass(frozen=True, slots=True)
class KeyStroke:
    """One chord such as ``mod+shift+z``; modifiers kept in canonical order."""

    key: str
    modifiers: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "key", normalize_key(self.key))
        object.__setattr__(self, "modifiers", _ordered_modifiers(self.modifiers))

    @property
    def token(self) -> str:
        return "+".join((*self.modifiers, self.key))

    @classmethod
    def parse(cls, chord: str) -> "KeyStroke":
        *modifiers, key = chord.split("+")
        return cls(key=key, modifiers=tuple(modifiers))


@dataclass(frozen=True, slots=True)
class WhenClause:
    """``flag`` must be truthy (or falsy, written ``!flag``) in the context."""

    flag: str
    expected: bool = True

    def __post_init__(self) -> None:
        if not self.flag:
            raise ValueError("flag cannot be empty")

    @classmethod
    def parse(cls, expression: str) -> "WhenClause":
        text = expression.strip()
        negated = text.startswith("!")
        flag = text[1:].strip() if negated else text
        if not flag:
            raise ValueError(f"invalid when expression {expression!r}")
        return cls(flag, not negated)

    def evaluate(self, context: Mapping[str, bool]) -> bool:
        return bool(context.get(self.flag)) == self.expected


@dataclass(frozen=True, slots=True)
class ActionRef:
    """Named handler; ``metadata`` parameterises shared handlers."""

    id: str
    handler: Callable[..., object]
    description: str = ""
    metadata: Mapping[str, object] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("action id cannot be empty")
        if not callable(self.handler):
            raise TypeError(f"handler for '{self.id}' must be callable")
        object.__setattr__(self, "metadata", MappingProxyType(dict(self.metadata)))

    def __call__(self, *args: object, **kwargs: object) -> object:
        return self.handler(*args, **kwargs)


def _as_clause(value: WhenClause | str) -> WhenClause:
    return value if isinstance(value, WhenClause) else WhenClause.parse(value)


@dataclass(frozen=True, slots=True)
class Binding:
    """Chord -> action, active only while every ``when`` clause holds.

    ``stroke`` and the ``when`` entries may be given as strings
    (``"shift+enter"``, ``"!composing"``).
    """

    id: str
    stroke: KeyStroke
    action_id: str
    description: str = ""
    when: tuple[WhenClause, ...] = ()
    scope: str = "editor"
    priority: int = 0

    def __post_init__(self) -> None:
        if not self.id or not self.action_id:
            raise ValueError("binding id and action_id are required")
        if isinstance(self.stroke, str):
            object.__setattr__(self, "stroke", KeyStroke.parse(self.stroke))
        object.__setattr__(self, "when", tuple(_as_clause(c) for c in self.when))

    @property
    def when_map(self) -> Mapping[str, bool]:
        return MappingProxyType({clause.flag: clause.expected for clause in self.when})

    def allows(self, context: Mapping[str, bool]) -> bool:
        return all(clause.evaluate(context) for clause in self.when)

    @property
    def key_signature(self) -> str:
        return self.stroke.token


__all__ = [
    "ActionRef",
    "Binding",
    "KeyStroke",
    "MODIFIER_ORDER",
    "WhenClause",
    "normalize_key",
]
