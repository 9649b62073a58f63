"""Telemetry, configuration, and timer primitives shared by the engine."""

from .config import EngineConfig
from .scheduler import Debouncer, monotonic_ms

__all__ = ["EngineConfig", "Debouncer", "monotonic_ms"]
