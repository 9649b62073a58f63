"""Debounced validation passes that publish a bounded diagnostics list."""

from __future__ import annotations

from typing import Callable, Iterable, List, Mapping, Optional, Sequence

from litelab_engine.buffer import BufferKind, Snapshot
from litelab_engine.runtime import telemetry
from litelab_engine.runtime.scheduler import Debouncer

from .models import Diagnostic, error
from .validators import VALIDATORS, Validator

CHANNEL = "diagnostics"
DEFAULT_DELAY_MS = 600
DEFAULT_LIMIT = 6


def run_validators(
    snapshot: Snapshot,
    kinds: Optional[Iterable[BufferKind]] = None,
    *,
    validators: Mapping[BufferKind, Validator] = VALIDATORS,
    limit: int = DEFAULT_LIMIT,
) -> List[Diagnostic]:
    """Validate ``kinds`` (all buffers by default), markup then style then script."""

    wanted = set(kinds) if kinds is not None else set(BufferKind)
    findings: List[Diagnostic] = []
    for kind in BufferKind:
        if kind not in wanted:
            continue
        findings.extend(validators[kind](snapshot.get(kind)))
    return findings[:limit]


class DiagnosticsPipeline:
    """Schedules validation after a quiet period and replaces the result list."""

    def __init__(
        self,
        debouncer: Debouncer,
        current: Callable[[], Snapshot],
        *,
        set_errors: Optional[Callable[[Sequence[Diagnostic]], None]] = None,
        delay_ms: int = DEFAULT_DELAY_MS,
        limit: int = DEFAULT_LIMIT,
        validators: Mapping[BufferKind, Validator] = VALIDATORS,
    ) -> None:
        self._debouncer = debouncer
        self._current = current
        self._set_errors = set_errors
        self.delay_ms = delay_ms
        self.limit = limit
        self._validators = validators
        self._diagnostics: tuple[Diagnostic, ...] = ()
        self.passes = 0

    @property
    def diagnostics(self) -> tuple[Diagnostic, ...]:
        return self._diagnostics

    @property
    def pending(self) -> bool:
        return self._debouncer.is_pending(CHANNEL)

    def request(self, kind: Optional[BufferKind] = None) -> None:
        self._debouncer.schedule(CHANNEL, lambda: self.run_now(kind), self.delay_ms)

    def cancel(self) -> None:
        self._debouncer.cancel(CHANNEL)

    def run_now(self, kind: Optional[BufferKind] = None) -> tuple[Diagnostic, ...]:
        self._debouncer.cancel(CHANNEL)
        kinds = None if kind is None else (kind,)
        with telemetry.span(
            "diagnostics::pass",
            component="diagnostics",
            metadata={"buffer": kind.value if kind else "all"},
        ) as handle:
            try:
                results = run_validators(
                    self._current(),
                    kinds,
                    validators=self._validators,
                    limit=self.limit,
                )
            except Exception as exc:
                telemetry.record_failure("diagnostics.validator_failed", exc)
                results = [error("Validation failed", kind or BufferKind.MARKUP)]
            handle.add_metadata("count", len(results))
        self.passes += 1
        self._publish(tuple(results))
        return self._diagnostics

    def _publish(self, results: tuple[Diagnostic, ...]) -> None:
        self._diagnostics = results
        if self._set_errors is None:
            return
        try:
            self._set_errors(results)
        except Exception as exc:
            telemetry.record_failure("diagnostics.publish_failed", exc)


__all__ = ["DiagnosticsPipeline", "run_validators", "CHANNEL"]
