"""Shortcut action implementations.

Every handler receives the editing session and the resolved match, and
returns a ``DispatchResult``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from litelab_engine.buffer import BufferKind
from litelab_engine.input.base import DispatchResult, Panel
from litelab_engine.keymaps.resolver import ResolutionMatch

if TYPE_CHECKING:
    from litelab_engine.session.editor import EditingSession


def toggle_snippets(session: "EditingSession", match: ResolutionMatch) -> DispatchResult:
    del match
    panel = session.input.toggle_panel(Panel.SNIPPETS)
    return DispatchResult(consumed=True, message=f"panel:{panel.value}")


def toggle_docs(session: "EditingSession", match: ResolutionMatch) -> DispatchResult:
    del match
    panel = session.input.toggle_panel(Panel.DOCS)
    return DispatchResult(consumed=True, message=f"panel:{panel.value}")


def close_panels(session: "EditingSession", match: ResolutionMatch) -> DispatchResult:
    del match
    was_open = session.input.close_panels()
    if not was_open:
        return DispatchResult(consumed=False, status="noop")
    return DispatchResult(consumed=True, message="panel:none")


def switch_buffer(session: "EditingSession", match: ResolutionMatch) -> DispatchResult:
    kind = BufferKind.parse(str(match.action.metadata["buffer"]))
    session.switch_buffer(kind)
    return DispatchResult(consumed=True, message=f"buffer:{kind.value}")


def undo(session: "EditingSession", match: ResolutionMatch) -> DispatchResult:
    del match
    restored = session.undo()
    if restored is None:
        return DispatchResult(consumed=True, status="noop", message="nothing_to_undo")
    return DispatchResult(consumed=True, message="undo")


def redo(session: "EditingSession", match: ResolutionMatch) -> DispatchResult:
    del match
    restored = session.redo()
    if restored is None:
        return DispatchResult(consumed=True, status="noop", message="nothing_to_redo")
    return DispatchResult(consumed=True, message="redo")


def insert_top_snippet(
    session: "EditingSession", match: ResolutionMatch
) -> DispatchResult:
    keep_open = bool(match.action.metadata.get("keep_open", False))
    inserted = session.insert_top_snippet(keep_open=keep_open)
    if inserted is None:
        return DispatchResult(consumed=False, status="noop", message="no_snippets")
    return DispatchResult(consumed=True, message=f"inserted:{inserted.label}")


__all__ = [
    "toggle_snippets",
    "toggle_docs",
    "close_panels",
    "switch_buffer",
    "undo",
    "redo",
    "insert_top_snippet",
]
