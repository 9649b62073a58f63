"""Editing session: the three buffers, history, diagnostics, and propagation."""

from __future__ import annotations

from typing import Callable, List, Optional, Sequence

from litelab_engine.buffer import (
    EMPTY_SNAPSHOT,
    BufferKind,
    EditorSurface,
    HistoryEngine,
    Snapshot,
    SnapshotModel,
    TrackedSurface,
    clamp_selection,
)
from litelab_engine.diagnostics import Diagnostic, DiagnosticsPipeline
from litelab_engine.input import DispatchResult, InputCoordinator, KeyInput, Panel
from litelab_engine.keymaps import KeymapRegistry
from litelab_engine.runtime import EngineConfig, telemetry
from litelab_engine.runtime.scheduler import Clock, Debouncer
from litelab_engine.services.storage import STARTER_PROJECT
from litelab_engine.snippets import (
    Snippet,
    SnippetKind,
    SnippetLibrary,
    normalize,
    search,
)
from litelab_engine.snippets.models import new_id

from .propagation import PropagationChannel, Sink

SETTLE_CHANNEL = "settle"

ChangeListener = Callable[[Snapshot], None]
DiagnosticsListener = Callable[[Sequence[Diagnostic]], None]


class EditingSession:
    """One mounted editor.

    All state is local to the instance. Deferred work (settle, propagation,
    diagnostics) only runs when the host calls ``process_timers``.
    """

    def __init__(
        self,
        project: Optional[Snapshot] = None,
        *,
        sink: Optional[Sink] = None,
        surface: Optional[EditorSurface] = None,
        config: Optional[EngineConfig] = None,
        library: Optional[SnippetLibrary] = None,
        keymap_registry: Optional[KeymapRegistry] = None,
        clock: Optional[Clock] = None,
    ) -> None:
        self.config = config or EngineConfig()
        self.debouncer = Debouncer(clock=clock)
        self.model = SnapshotModel(project or EMPTY_SNAPSHOT)
        self.history = HistoryEngine(limit=self.config.history_limit)
        self.surface: EditorSurface = surface or TrackedSurface()
        self.library = library or SnippetLibrary(
            favorites_limit=self.config.favorites_limit,
            recents_limit=self.config.recents_limit,
        )
        self.input = InputCoordinator(
            keymap_registry=keymap_registry, mac=self.config.mac_shortcuts
        )
        self.propagation = PropagationChannel(
            self.debouncer,
            sink,
            current=self.model.get,
            delay_ms=self.config.propagation_delay_ms,
        )
        self.pipeline = DiagnosticsPipeline(
            self.debouncer,
            self.model.get,
            set_errors=self._publish_diagnostics,
            delay_ms=self.config.diagnostics_delay_ms,
            limit=self.config.diagnostics_limit,
        )
        self.query = ""
        self.closed = False
        self._change_listeners: List[ChangeListener] = []
        self._diagnostics_listeners: List[DiagnosticsListener] = []
        self.history.record(self.model.get())

    # -- state ---------------------------------------------------------------

    @property
    def snapshot(self) -> Snapshot:
        return self.model.get()

    @property
    def active_buffer(self) -> BufferKind:
        return self.input.active_buffer

    @property
    def panel(self) -> Panel:
        return self.input.panel

    @property
    def diagnostics(self) -> tuple[Diagnostic, ...]:
        return self.pipeline.diagnostics

    def on_change(self, listener: ChangeListener) -> None:
        self._change_listeners.append(listener)

    def on_diagnostics(self, listener: DiagnosticsListener) -> None:
        self._diagnostics_listeners.append(listener)

    # -- typing --------------------------------------------------------------

    def edit(self, kind: BufferKind | str, text: str) -> Snapshot:
        """Apply the full new text of one buffer, as a host text area reports it."""

        kind = BufferKind.parse(kind)
        snapshot = self.model.set(kind, text)
        self._notify_change()
        if not self.input.composing:
            self._commit_live_edit(kind)
        return snapshot

    def composition_start(self) -> None:
        self.input.composition_start()

    def composition_end(self, kind: BufferKind | str | None = None) -> None:
        self.input.composition_end()
        target = BufferKind.parse(kind) if kind is not None else self.active_buffer
        self._commit_live_edit(target)

    def blur(self, kind: BufferKind | str | None = None) -> None:
        target = BufferKind.parse(kind) if kind is not None else self.active_buffer
        self.propagation.flush()
        self.pipeline.request(target)

    def set_selection(
        self, kind: BufferKind | str, start: int, end: Optional[int] = None
    ) -> None:
        """Move ``kind``'s selection, clamped to the buffer text."""

        select = getattr(self.surface, "select", None)
        if select is None:
            raise TypeError("surface does not accept selections from the session")
        kind = BufferKind.parse(kind)
        start, end = clamp_selection(
            self.model.get().get(kind), (start, start if end is None else end)
        )
        select(kind, start, end)

    def switch_buffer(self, kind: BufferKind | str) -> BufferKind:
        return self.input.switch_buffer(kind)

    def _commit_live_edit(self, kind: BufferKind) -> None:
        snapshot = self.model.get()
        if snapshot != self.history.current():
            deadline = self.debouncer.deadline(SETTLE_CHANNEL)
            settling = deadline is not None and deadline > self.debouncer.now()
            self.history.record(snapshot, replace_latest=settling)
            self.debouncer.schedule(
                SETTLE_CHANNEL, _settled, self.config.settle_delay_ms
            )
        self.propagation.schedule()
        self.pipeline.request(kind)

    # -- history -------------------------------------------------------------

    def undo(self) -> Optional[Snapshot]:
        snapshot = self.history.undo()
        if snapshot is not None:
            self._restore(snapshot)
        return snapshot

    def redo(self) -> Optional[Snapshot]:
        snapshot = self.history.redo()
        if snapshot is not None:
            self._restore(snapshot)
        return snapshot

    def _restore(self, snapshot: Snapshot) -> None:
        self.debouncer.cancel(SETTLE_CHANNEL)
        self.model.reset(snapshot)
        self.propagation.flush()
        self._place_caret(self.active_buffer, len(snapshot.get(self.active_buffer)))
        self._notify_change()
        self.pipeline.request()

    def load_project(self, snapshot: Snapshot) -> Snapshot:
        """Replace all three buffers from outside (import, reset, reload)."""

        self.debouncer.cancel(SETTLE_CHANNEL)
        self.model.reset(snapshot)
        self.history.record(snapshot)
        self.propagation.flush()
        self._notify_change()
        self.pipeline.request()
        return snapshot

    def reset_to_starter(self) -> Snapshot:
        return self.load_project(STARTER_PROJECT)

    # -- snippets ------------------------------------------------------------

    def set_query(self, query: str) -> None:
        self.query = query

    def search_snippets(self, query: Optional[str] = None) -> list[Snippet]:
        return search(
            self.library.pool(),
            self.active_buffer,
            self.query if query is None else query,
            favorites=self.library.favorites,
        )

    def toggle_favorite(self, snippet: Snippet) -> bool:
        return self.library.toggle_favorite(snippet)

    def insert_top_snippet(self, *, keep_open: bool = False) -> Optional[Snippet]:
        results = self.search_snippets()
        if not results:
            return None
        top = results[0]
        self.insert_snippet(top.body, top, keep_open=keep_open)
        return top

    def insert_snippet(
        self,
        body: str,
        meta: Optional[Snippet] = None,
        *,
        keep_open: bool = False,
    ) -> Snapshot:
        """Splice ``body`` at the target buffer's selection, like a paste."""

        kind = meta.kind if meta is not None else SnippetKind.parse(self.active_buffer)
        target = kind.target
        with telemetry.span(
            "snippets::insert",
            component="snippets",
            metadata={"kind": kind.value, "target": target.value},
        ):
            if target is not self.active_buffer:
                self.input.switch_buffer(target)
            normalized = normalize(body, kind)
            text = self.model.get().get(target)
            start, end = clamp_selection(text, self.surface.get_selection(target))
            snapshot = self.model.set(target, text[:start] + normalized + text[end:])

            self.debouncer.cancel(SETTLE_CHANNEL)
            self.history.record(snapshot)
            self.propagation.flush()
            self._place_caret(target, start + len(normalized))

            self.library.add_recent(
                Snippet(
                    id=new_id(),
                    label=meta.label if meta is not None else "Generated snippet",
                    body=normalized,
                    kind=kind,
                    description=meta.description if meta is not None else None,
                )
            )
            if not keep_open:
                self.input.close_panel(Panel.SNIPPETS)
            self.query = ""
            self._notify_change()
            self.pipeline.request(target)
        return snapshot

    # -- keys & timers -------------------------------------------------------

    def handle_key(self, key: KeyInput) -> DispatchResult:
        return self.input.dispatch(key, self)

    def process_timers(self) -> list[str]:
        return self.debouncer.process_due()

    def flush(self) -> None:
        self.propagation.flush()

    def close(self) -> None:
        if self.closed:
            return
        if self.propagation.pending:
            self.propagation.flush()
        self.debouncer.cancel_all()
        self.closed = True

    # -- internals -----------------------------------------------------------

    def _place_caret(self, kind: BufferKind, offset: int) -> None:
        try:
            self.surface.set_caret(kind, offset)
            self.surface.focus(kind)
        except Exception as exc:
            telemetry.record_failure(
                "session.caret_failed", exc, data={"buffer": kind.value}
            )

    def _notify_change(self) -> None:
        snapshot = self.model.get()
        for listener in list(self._change_listeners):
            try:
                listener(snapshot)
            except Exception as exc:
                telemetry.record_failure("session.listener_failed", exc)

    def _publish_diagnostics(self, results: Sequence[Diagnostic]) -> None:
        for listener in list(self._diagnostics_listeners):
            try:
                listener(results)
            except Exception as exc:
                telemetry.record_failure("session.listener_failed", exc)


def _settled() -> None:
    """Settle timer target; the next edit after it fires starts a new entry."""


__all__ = ["EditingSession", "SETTLE_CHANNEL"]
