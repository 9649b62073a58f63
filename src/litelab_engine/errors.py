"""Exception taxonomy for the editing engine and its collaborators."""

from __future__ import annotations

from typing import Optional


class EngineError(RuntimeError):
    """Base class for every error raised by litelab_engine."""


class ParseError(EngineError):
    """A markup or script buffer failed the tolerant parse."""

    def __init__(self, message: str, *, source: str) -> None:
        super().__init__(message)
        self.source = source


class StyleBalanceError(EngineError):
    """Unbalanced braces found while scanning a style buffer."""

    def __init__(self, message: str, *, offset: Optional[int] = None) -> None:
        super().__init__(message)
        self.offset = offset


class StorageError(EngineError):
    """Persistence failed; callers fall back to in-memory state."""


class RemoteError(EngineError):
    """A question search or detail fetch failed."""

    def __init__(self, message: str, *, status: Optional[int] = None) -> None:
        super().__init__(message)
        self.status = status


class ImportFormatError(EngineError):
    """A user supplied file does not have the expected shape."""


class SelectionError(EngineError):
    """Raised when a host surface reports an out-of-range selection."""

    def __init__(
        self, message: str, *, selection: Optional[tuple[int, int]] = None
    ) -> None:
        super().__init__(message)
        self.selection = selection


__all__ = [
    "EngineError",
    "ParseError",
    "StyleBalanceError",
    "StorageError",
    "RemoteError",
    "ImportFormatError",
    "SelectionError",
]
