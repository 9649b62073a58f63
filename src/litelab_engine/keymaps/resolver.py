"""Turn a chord token plus context flags into at most one action."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Mapping, Optional

from litelab_engine.runtime.telemetry import span

from .models import ActionRef, Binding
from .registry import KeymapRegistry


@dataclass(frozen=True, slots=True)
class ResolutionMatch:
    binding: Binding
    action: ActionRef


@dataclass(frozen=True, slots=True)
class ResolutionResult:
    status: Literal["match", "miss"]
    match: Optional[ResolutionMatch] = None

    @classmethod
    def miss(cls) -> "ResolutionResult":
        return cls(status="miss")


class KeymapResolver:
    """Reads the registry on every call, so later registrations are seen."""

    def __init__(
        self, registry: KeymapRegistry, *, logger_name: str | None = None
    ) -> None:
        self.registry = registry
        self._logger_name = logger_name

    def resolve(
        self,
        token: str,
        *,
        scope: str = "editor",
        context: Optional[Mapping[str, bool]] = None,
    ) -> ResolutionResult:
        flags = context or {}
        live = [
            binding
            for binding in self.registry.candidates(scope, token)
            if binding.allows(flags)
        ]
        if not live:
            return ResolutionResult.miss()

        # Highest priority wins; ids break ties.
        winner = min(live, key=lambda binding: (-binding.priority, binding.id))
        with span(
            "keymaps::resolve",
            logger_name=self._logger_name,
            component="keymaps",
            metadata={"token": token, "binding_id": winner.id},
        ):
            action = self.registry.get_action(winner.action_id)
        return ResolutionResult(
            status="match", match=ResolutionMatch(binding=winner, action=action)
        )


__all__ = ["KeymapResolver", "ResolutionMatch", "ResolutionResult"]
