"""Cancel-and-replace debounce timers polled by the host event loop."""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional

from . import telemetry

Clock = Callable[[], float]


def monotonic_ms() -> float:
    return time.monotonic() * 1000.0


@dataclass
class PendingCall:
    deadline: float
    delay_ms: int
    generation: int
    callback: Callable[[], None]


class Debouncer:
    """Owns at most one pending call per channel.

    ``schedule`` cancels whatever is armed on the channel and arms the new
    callback; ``flush`` runs a channel immediately. Nothing fires on its own:
    the host calls ``process_due`` from its event loop (or a timer tick).
    """

    def __init__(self, *, clock: Optional[Clock] = None) -> None:
        self._clock = clock or monotonic_ms
        self._pending: Dict[str, PendingCall] = {}
        self._counter = 0

    def now(self) -> float:
        return self._clock()

    def schedule(
        self, channel: str, callback: Callable[[], None], delay_ms: int
    ) -> int:
        self._counter += 1
        self._pending[channel] = PendingCall(
            deadline=self._clock() + delay_ms,
            delay_ms=delay_ms,
            generation=self._counter,
            callback=callback,
        )
        return self._counter

    def cancel(self, channel: str) -> bool:
        return self._pending.pop(channel, None) is not None

    def cancel_all(self) -> None:
        self._pending.clear()

    def is_pending(self, channel: str) -> bool:
        return channel in self._pending

    def deadline(self, channel: str) -> Optional[float]:
        call = self._pending.get(channel)
        return None if call is None else call.deadline

    def next_deadline(self) -> Optional[float]:
        if not self._pending:
            return None
        return min(call.deadline for call in self._pending.values())

    def flush(self, channel: str) -> bool:
        """Run the pending call on ``channel`` now; False if nothing was armed."""

        call = self._pending.get(channel)
        if call is None:
            return False
        return self._fire(channel, call.generation)

    def process_due(self) -> list[str]:
        now = self._clock()
        due = sorted(
            (
                (call.deadline, call.generation, channel)
                for channel, call in self._pending.items()
                if call.deadline <= now
            ),
        )
        fired: list[str] = []
        for _deadline, generation, channel in due:
            if self._fire(channel, generation):
                fired.append(channel)
        return fired

    def _fire(self, channel: str, generation: int) -> bool:
        call = self._pending.get(channel)
        if call is None or call.generation != generation:
            return False
        self._pending.pop(channel, None)
        try:
            call.callback()
        except Exception as exc:
            telemetry.record_failure(
                "scheduler.callback_failed", exc, data={"channel": channel}
            )
        return True


__all__ = ["Clock", "Debouncer", "PendingCall", "monotonic_ms"]
