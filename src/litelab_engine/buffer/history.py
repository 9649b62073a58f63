"""Bounded linear undo/redo history of snapshots."""

from __future__ import annotations

from collections import deque
from typing import Deque, List, Optional

from litelab_engine.runtime import telemetry

from .snapshot import Snapshot

DEFAULT_HISTORY_LIMIT = 60


class HistoryEngine:
    """Two stacks of snapshots: ``undo`` (top is current) and ``redo``.

    Pushing past ``limit`` drops the oldest entry. Every ``record`` clears the
    redo lane; there is no branching history.
    """

    def __init__(self, *, limit: int = DEFAULT_HISTORY_LIMIT) -> None:
        if limit < 1:
            raise ValueError("limit must be at least 1")
        self.limit = limit
        self._undo: Deque[Snapshot] = deque(maxlen=limit)
        self._redo: List[Snapshot] = []

    @property
    def depth(self) -> int:
        return len(self._undo)

    @property
    def redo_depth(self) -> int:
        return len(self._redo)

    def current(self) -> Optional[Snapshot]:
        return self._undo[-1] if self._undo else None

    def can_undo(self) -> bool:
        return len(self._undo) > 1

    def can_redo(self) -> bool:
        return bool(self._redo)

    def record(self, snapshot: Snapshot, *, replace_latest: bool = False) -> None:
        if replace_latest and self._undo:
            self._undo[-1] = snapshot
        else:
            self._undo.append(snapshot)
        self._redo.clear()
        telemetry.record_event(
            "history.record",
            level="debug",
            data={"depth": len(self._undo), "replace_latest": replace_latest},
        )

    def undo(self) -> Optional[Snapshot]:
        if len(self._undo) <= 1:
            return None
        self._redo.append(self._undo.pop())
        return self._undo[-1]

    def redo(self) -> Optional[Snapshot]:
        if not self._redo:
            return None
        snapshot = self._redo.pop()
        self._undo.append(snapshot)
        return snapshot

    def clear(self) -> None:
        self._undo.clear()
        self._redo.clear()


__all__ = ["HistoryEngine", "DEFAULT_HISTORY_LIMIT"]
