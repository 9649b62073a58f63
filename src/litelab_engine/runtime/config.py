"""Engine tunables with ``LITELAB_ENGINE_*`` environment overrides."""

from __future__ import annotations

import os
from dataclasses import dataclass, fields, replace
from typing import Mapping, Optional

from .telemetry import ENV_PREFIX

WEEK_MS = 1000 * 60 * 60 * 24 * 7


@dataclass(frozen=True, slots=True)
class EngineConfig:
    """Timings and capacities shared by every session component."""

    history_limit: int = 60
    propagation_delay_ms: int = 400
    settle_delay_ms: int = 400
    diagnostics_delay_ms: int = 600
    diagnostics_limit: int = 6
    favorites_limit: int = 30
    recents_limit: int = 8
    search_delay_ms: int = 500
    search_page_size: int = 10
    cache_ttl_ms: int = WEEK_MS
    mac_shortcuts: bool = False

    def __post_init__(self) -> None:
        for item in fields(self):
            value = getattr(self, item.name)
            if item.type == "int" and value < 0:
                raise ValueError(f"{item.name} must be non-negative")
        if self.history_limit < 1:
            raise ValueError("history_limit must be at least 1")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "EngineConfig":
        """Build a config, overriding defaults from ``LITELAB_ENGINE_<FIELD>``."""

        env = os.environ if environ is None else environ
        overrides: dict[str, object] = {}
        for item in fields(cls):
            raw = env.get(f"{ENV_PREFIX}{item.name.upper()}")
            if raw is None:
                continue
            if item.type == "bool":
                overrides[item.name] = raw.strip().lower() in {"1", "true", "yes", "on"}
            else:
                try:
                    overrides[item.name] = int(raw)
                except ValueError as exc:
                    raise ValueError(
                        f"{ENV_PREFIX}{item.name.upper()} must be an integer, got {raw!r}"
                    ) from exc
        return replace(cls(), **overrides)


__all__ = ["EngineConfig", "WEEK_MS"]
