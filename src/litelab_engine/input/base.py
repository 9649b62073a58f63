"""Key events, dispatch results, and the panel state shared by input handling."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple


@dataclass(slots=True)
class KeyInput:
    """Normalized key event delivered by the host."""

    key: str
    modifiers: Tuple[str, ...] = ()


@dataclass(slots=True)
class DispatchResult:
    """Outcome of routing one key event."""

    consumed: bool
    status: str = "ok"
    message: Optional[str] = None
    action_id: Optional[str] = None


class Panel(str, Enum):
    NONE = "none"
    SNIPPETS = "snippets"
    DOCS = "docs"


__all__ = ["KeyInput", "DispatchResult", "Panel"]
