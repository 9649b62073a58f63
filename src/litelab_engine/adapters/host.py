"""Host adapter that wires an EditingSession into UI callbacks."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterable, Optional, Sequence

from litelab_engine.buffer import BufferKind, Snapshot, SurfaceMirror
from litelab_engine.diagnostics import Diagnostic
from litelab_engine.input import DispatchResult, KeyInput
from litelab_engine.session import EditingSession


@dataclass(slots=True)
class HostUIHooks:
    """Widget callbacks. Only ``update_buffer`` is required; unset hooks are skipped.

    ``handle_event`` receives ``(name, payload)`` for dispatched actions,
    composition edges and fired timers. ``log`` receives one debug line per
    key, timer and diagnostics pass.
    """

    update_buffer: Callable[[SurfaceMirror], None]
    update_status: Optional[Callable[[str], None]] = None
    update_diagnostics: Optional[Callable[[Sequence[Diagnostic]], None]] = None
    handle_event: Optional[Callable[[str, object | None], None]] = None
    log: Optional[Callable[[str], None]] = None


class HostAdapter:
    """Feeds host key, text and timer events to one session and pushes renders back."""

    def __init__(self, session: EditingSession, hooks: HostUIHooks) -> None:
        self.session = session
        self.hooks = hooks
        session.on_change(lambda _snapshot: self.render())
        session.on_diagnostics(self._diagnostics_changed)
        self.render()

    # -- host -> session -----------------------------------------------------

    def handle_key(self, key: str, *, modifiers: Iterable[str] = ()) -> DispatchResult:
        chord = KeyInput(key=key, modifiers=tuple(m.lower() for m in modifiers))
        result = self.session.handle_key(chord)
        self._trace(
            "key",
            key=key,
            mods="+".join(chord.modifiers),
            status=result.status,
            action=result.action_id,
        )
        if self.hooks.update_status and (result.message or result.status):
            self.hooks.update_status(result.message or result.status)
        if result.action_id:
            self._event(result.action_id, result.message)
        self.render()
        return result

    def edit(self, text: str, kind: BufferKind | str | None = None) -> Snapshot:
        return self.session.edit(kind or self.session.active_buffer, text)

    def composition_start(self) -> None:
        self.session.composition_start()
        self._event("composition.start")

    def composition_end(self) -> None:
        self.session.composition_end()
        self._event("composition.end")

    def process_timers(self) -> list[str]:
        fired = self.session.process_timers()
        for channel in fired:
            self._trace("timer", channel=channel)
            self._event(f"timer.{channel}")
        return fired

    def next_timer_in(self) -> Optional[float]:
        """Milliseconds until ``process_timers`` has work; None when idle."""

        debouncer = self.session.debouncer
        deadline = debouncer.next_deadline()
        if deadline is None:
            return None
        return max(0.0, deadline - debouncer.now())

    # -- session -> host -----------------------------------------------------

    def render(self) -> None:
        session = self.session
        kind = session.active_buffer
        selection = session.surface.get_selection(kind)
        self.hooks.update_buffer(
            SurfaceMirror(
                kind=kind,
                text=session.snapshot.get(kind),
                caret=None if selection is None else selection[1],
                attributes={"label": kind.label, "panel": session.panel.value},
            )
        )

    def _diagnostics_changed(self, results: Sequence[Diagnostic]) -> None:
        self._trace("diagnostics", count=len(results))
        if self.hooks.update_diagnostics:
            self.hooks.update_diagnostics(results)

    def _event(self, name: str, payload: object | None = None) -> None:
        if self.hooks.handle_event:
            self.hooks.handle_event(name, payload)

    def _trace(self, what: str, **details: object) -> None:
        if not self.hooks.log:
            return
        session = self.session
        state = {
            "buffer": session.active_buffer.value,
            "panel": session.panel.value,
            "composing": session.input.composing,
            "history": session.history.depth,
        }
        state.update((k, v) for k, v in details.items() if v not in (None, ""))
        self.hooks.log(f"{what} -> " + " ".join(f"{k}={v!r}" for k, v in state.items()))


__all__ = ["HostAdapter", "HostUIHooks"]
