"""Diagnostic records produced by validation passes."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from litelab_engine.buffer import BufferKind

Level = Literal["error", "warning"]


@dataclass(frozen=True, slots=True)
class Diagnostic:
    level: Level
    message: str
    source: BufferKind

    @property
    def source_label(self) -> str:
        return self.source.label

    def to_json(self) -> dict[str, str]:
        return {"level": self.level, "message": self.message, "source": self.source_label}


def error(message: str, source: BufferKind) -> Diagnostic:
    return Diagnostic(level="error", message=message, source=source)


def warning(message: str, source: BufferKind) -> Diagnostic:
    return Diagnostic(level="warning", message=message, source=source)


__all__ = ["Diagnostic", "Level", "error", "warning"]
