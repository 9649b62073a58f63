"""Snippet records and their kinds."""

from __future__ import annotations

import secrets
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Iterable, Mapping, Optional

from litelab_engine.buffer import BufferKind


class SnippetKind(str, Enum):
    MARKUP = "markup"
    STYLE = "style"
    SCRIPT = "script"
    ALL = "all"

    @property
    def target(self) -> BufferKind:
        """Buffer a snippet of this kind is inserted into."""

        if self is SnippetKind.ALL:
            return BufferKind.MARKUP
        return BufferKind(self.value)

    @property
    def json_key(self) -> str:
        return _JSON_KEYS[self]

    @classmethod
    def parse(cls, value: "str | SnippetKind | BufferKind") -> "SnippetKind":
        if isinstance(value, SnippetKind):
            return value
        if isinstance(value, BufferKind):
            return cls(value.value)
        key = str(value).strip().lower()
        if key == cls.ALL.value:
            return cls.ALL
        return cls(BufferKind.parse(key).value)


_JSON_KEYS: Mapping[SnippetKind, str] = {
    SnippetKind.MARKUP: "html",
    SnippetKind.STYLE: "css",
    SnippetKind.SCRIPT: "js",
    SnippetKind.ALL: "all",
}


def _normalize_tags(tags: Iterable[str]) -> tuple[str, ...]:
    seen: dict[str, None] = {}
    for tag in tags:
        cleaned = str(tag).strip()
        if cleaned:
            seen.setdefault(cleaned, None)
    return tuple(seen)


def new_id() -> str:
    return secrets.token_hex(4)[:7]


@dataclass(frozen=True, slots=True)
class Snippet:
    """Reusable fragment; ``body`` is the text spliced into a buffer."""

    label: str
    body: str
    kind: SnippetKind
    id: Optional[str] = None
    description: Optional[str] = None
    tags: tuple[str, ...] = field(default=())

    def __post_init__(self) -> None:
        object.__setattr__(self, "kind", SnippetKind.parse(self.kind))
        object.__setattr__(self, "tags", _normalize_tags(self.tags))

    @property
    def haystack(self) -> str:
        parts = (self.label, self.description or "", self.body, " ".join(self.tags))
        return " ".join(parts).lower()

    def with_id(self, snippet_id: Optional[str] = None) -> "Snippet":
        return replace(self, id=snippet_id or new_id())

    def to_json(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "label": self.label,
            "snippet": self.body,
            "kind": self.kind.json_key,
        }
        if self.id is not None:
            data["id"] = self.id
        if self.description is not None:
            data["description"] = self.description
        if self.tags:
            data["tags"] = list(self.tags)
        return data

    @classmethod
    def from_json(cls, data: Mapping[str, Any]) -> "Snippet":
        body = data.get("snippet", data.get("body"))
        if not isinstance(body, str) or "label" not in data or "kind" not in data:
            raise ValueError("snippet records need 'label', 'snippet' and 'kind'")
        return cls(
            label=str(data["label"]),
            body=body,
            kind=SnippetKind.parse(data["kind"]),
            id=data.get("id"),
            description=data.get("description"),
            tags=tuple(data.get("tags") or ()),
        )


__all__ = ["Snippet", "SnippetKind", "new_id"]
