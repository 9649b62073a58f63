"""Adapter boundary types for the host's text input surfaces."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional, Protocol, Tuple

from litelab_engine.errors import SelectionError

from .snapshot import BufferKind

Selection = Tuple[int, int]  # (start, end) character offsets


class EditorSurface(Protocol):
    """How the session reads and moves the caret in the host's text areas."""

    def get_selection(self, kind: BufferKind) -> Optional[Selection]:
        """Return the selection of ``kind``'s input, or None if unknown."""
        ...

    def set_caret(self, kind: BufferKind, offset: int) -> None:
        """Collapse the selection of ``kind``'s input to ``offset``."""
        ...

    def focus(self, kind: BufferKind) -> None:
        """Give keyboard focus to ``kind``'s input."""
        ...


@dataclass(slots=True)
class SurfaceMirror:
    """Host-friendly description of one buffer after an engine change."""

    kind: BufferKind
    text: str
    caret: Optional[int]
    attributes: dict[str, str] = field(default_factory=dict)


class TrackedSurface:
    """In-process surface remembering selections and focus per buffer.

    Used when the host does not expose live text areas, and by tests.
    """

    def __init__(self) -> None:
        self._selections: Dict[BufferKind, Selection] = {}
        self.focused: Optional[BufferKind] = None

    def get_selection(self, kind: BufferKind) -> Optional[Selection]:
        return self._selections.get(kind)

    def select(self, kind: BufferKind, start: int, end: Optional[int] = None) -> None:
        selection = (start, start if end is None else end)
        if min(selection) < 0:
            raise SelectionError("Selection offsets must be >= 0", selection=selection)
        self._selections[kind] = selection

    def set_caret(self, kind: BufferKind, offset: int) -> None:
        self._selections[kind] = (offset, offset)

    def focus(self, kind: BufferKind) -> None:
        self.focused = kind

    def caret(self, kind: BufferKind) -> Optional[int]:
        selection = self._selections.get(kind)
        return selection[1] if selection else None


def clamp_selection(text: str, selection: Optional[Selection]) -> Selection:
    """Return a usable selection, falling back to end-of-text."""

    size = len(text)
    if selection is None:
        return size, size
    start, end = sorted(selection)
    return min(max(start, 0), size), min(max(end, 0), size)


__all__ = [
    "EditorSurface",
    "Selection",
    "SurfaceMirror",
    "TrackedSurface",
    "clamp_selection",
]
