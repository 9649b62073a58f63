"""Snapshot model, undo/redo history, and host surface abstractions."""

from .history import DEFAULT_HISTORY_LIMIT, HistoryEngine
from .snapshot import (
    BUFFER_TRAITS,
    EMPTY_SNAPSHOT,
    BufferKind,
    BufferTraits,
    Snapshot,
    SnapshotModel,
)
from .surface import (
    EditorSurface,
    Selection,
    SurfaceMirror,
    TrackedSurface,
    clamp_selection,
)

__all__ = [
    "BufferKind",
    "BufferTraits",
    "BUFFER_TRAITS",
    "Snapshot",
    "SnapshotModel",
    "EMPTY_SNAPSHOT",
    "HistoryEngine",
    "DEFAULT_HISTORY_LIMIT",
    "EditorSurface",
    "Selection",
    "SurfaceMirror",
    "TrackedSurface",
    "clamp_selection",
]
