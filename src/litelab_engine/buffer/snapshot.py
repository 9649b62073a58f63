"""Buffer kinds and the immutable three-buffer snapshot."""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Mapping, Optional


class BufferKind(str, Enum):
    MARKUP = "markup"
    STYLE = "style"
    SCRIPT = "script"

    @property
    def label(self) -> str:
        return BUFFER_TRAITS[self].label

    @property
    def index(self) -> int:
        return BUFFER_TRAITS[self].index

    @property
    def filename(self) -> str:
        return BUFFER_TRAITS[self].filename

    @classmethod
    def parse(cls, value: "str | BufferKind") -> "BufferKind":
        if isinstance(value, BufferKind):
            return value
        key = str(value).strip().lower()
        kind = _ALIASES.get(key)
        if kind is None:
            raise ValueError(f"Unknown buffer kind '{value}'")
        return kind

    @classmethod
    def from_index(cls, index: int) -> "BufferKind":
        for kind, traits in BUFFER_TRAITS.items():
            if traits.index == index:
                return kind
        raise ValueError(f"No buffer at index {index}")


@dataclass(frozen=True, slots=True)
class BufferTraits:
    label: str
    index: int
    filename: str
    json_key: str


BUFFER_TRAITS: Mapping[BufferKind, BufferTraits] = {
    BufferKind.MARKUP: BufferTraits("HTML", 1, "index.html", "html"),
    BufferKind.STYLE: BufferTraits("CSS", 2, "styles.css", "css"),
    BufferKind.SCRIPT: BufferTraits("JS", 3, "app.js", "js"),
}

_ALIASES: Mapping[str, BufferKind] = {
    **{kind.value: kind for kind in BufferKind},
    **{traits.json_key: kind for kind, traits in BUFFER_TRAITS.items()},
}


def _text(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


@dataclass(frozen=True, slots=True)
class Snapshot:
    """The three buffers at one instant. Fields are always strings."""

    markup: str = ""
    style: str = ""
    script: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "markup", _text(self.markup))
        object.__setattr__(self, "style", _text(self.style))
        object.__setattr__(self, "script", _text(self.script))

    def get(self, kind: BufferKind | str) -> str:
        return getattr(self, BufferKind.parse(kind).value)

    def replace(self, kind: BufferKind | str, text: str) -> "Snapshot":
        return replace(self, **{BufferKind.parse(kind).value: _text(text)})

    def to_json(self) -> dict[str, str]:
        return {BUFFER_TRAITS[kind].json_key: self.get(kind) for kind in BufferKind}

    @classmethod
    def from_json(cls, data: Mapping[str, Any]) -> "Snapshot":
        return cls(
            markup=data.get("html") or "",
            style=data.get("css") or "",
            script=data.get("js") or "",
        )


EMPTY_SNAPSHOT = Snapshot()


class SnapshotModel:
    """Holds the only mutable cell: the current snapshot."""

    def __init__(self, initial: Optional[Snapshot] = None) -> None:
        self._current = initial or EMPTY_SNAPSHOT

    def get(self) -> Snapshot:
        return self._current

    def set(self, kind: BufferKind | str, text: str) -> Snapshot:
        self._current = self._current.replace(kind, text)
        return self._current

    def reset(self, snapshot: Snapshot) -> Snapshot:
        self._current = snapshot
        return self._current


__all__ = [
    "BufferKind",
    "BufferTraits",
    "BUFFER_TRAITS",
    "Snapshot",
    "SnapshotModel",
    "EMPTY_SNAPSHOT",
]
