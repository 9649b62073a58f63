"""Debounced delivery of the current snapshot to the outside world."""

from __future__ import annotations

from typing import Callable, Optional

from litelab_engine.buffer import EMPTY_SNAPSHOT, Snapshot
from litelab_engine.runtime import telemetry
from litelab_engine.runtime.scheduler import Debouncer

CHANNEL = "propagation"
DEFAULT_DELAY_MS = 400

Sink = Callable[[Snapshot], object]


class PropagationChannel:
    """Delivers the latest snapshot to ``sink`` (persistence + preview).

    With a ``current`` holder the snapshot is re-read at delivery time, so a
    deferred call never sends a stale value. Without one, the most recent
    snapshot passed to ``schedule``/``flush`` is delivered. Sink failures are
    logged and swallowed.
    """

    def __init__(
        self,
        debouncer: Debouncer,
        sink: Optional[Sink] = None,
        *,
        current: Optional[Callable[[], Snapshot]] = None,
        delay_ms: int = DEFAULT_DELAY_MS,
    ) -> None:
        self._debouncer = debouncer
        self._sink = sink
        self._current = current
        self._latest: Snapshot = EMPTY_SNAPSHOT
        self.delay_ms = delay_ms
        self.deliveries = 0
        self.failures = 0

    @property
    def pending(self) -> bool:
        return self._debouncer.is_pending(CHANNEL)

    def schedule(self, snapshot: Optional[Snapshot] = None) -> None:
        if snapshot is not None:
            self._latest = snapshot
        self._debouncer.schedule(CHANNEL, self._deliver, self.delay_ms)

    def flush(self, snapshot: Optional[Snapshot] = None) -> None:
        if snapshot is not None:
            self._latest = snapshot
        self._debouncer.cancel(CHANNEL)
        self._deliver()

    def cancel(self) -> None:
        self._debouncer.cancel(CHANNEL)

    def _resolve(self) -> Snapshot:
        if self._current is not None:
            return self._current()
        return self._latest

    def _deliver(self) -> None:
        if self._sink is None:
            return
        snapshot = self._resolve()
        try:
            with telemetry.span("propagation::deliver", component="propagation"):
                self._sink(snapshot)
        except Exception as exc:
            self.failures += 1
            telemetry.record_failure("propagation.sink_failed", exc)
            return
        self.deliveries += 1


__all__ = ["PropagationChannel", "Sink", "CHANNEL"]
