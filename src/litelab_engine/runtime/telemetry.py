"""Structured logging and profiling for the editing engine, built on telelog.

Everything in ``litelab_engine`` logs through this module:

``configure(...)`` -- choose a preset, explicit settings, or a raw ``tl.Config``
``get_logger(name)`` -- cached telelog logger for a dotted engine name
``record_event(name, ...)`` -- one ``event::<name>`` line with key/value data
``record_failure(name, exc, ...)`` -- an error event for a swallowed exception
``span(name, ...)`` -- profile a block and optionally track it as a component
"""

from __future__ import annotations

import os
from contextlib import ExitStack, contextmanager
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Iterator, Mapping, Optional, cast

import telelog  # type: ignore[import]

tl = cast(Any, telelog)

ENV_PREFIX = "LITELAB_ENGINE_"
ROOT_LOGGER = "litelab_engine"

_TRUTHY = {"1", "true", "yes", "on"}


def _text(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, (dict, list, tuple, set)):
        return repr(value)
    return str(value)


@dataclass(frozen=True, slots=True)
class LogSettings:
    """What a telelog ``Config`` should look like for this process."""

    level: str = "WARNING"
    console: bool = True
    colored: bool = True
    json_format: bool = False
    log_file: str = ""
    buffered: bool = False
    buffer_size: Optional[int] = None

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "LogSettings":
        env = os.environ if environ is None else environ

        def flag(name: str, default: bool) -> bool:
            raw = env.get(f"{ENV_PREFIX}{name}")
            return default if raw is None else raw.strip().lower() in _TRUTHY

        size = env.get(f"{ENV_PREFIX}LOG_BUFFER_SIZE")
        return cls(
            level=env.get(f"{ENV_PREFIX}LOG_LEVEL", "WARNING").upper(),
            console=not flag("DISABLE_CONSOLE", False),
            colored=not flag("NO_COLOR", False),
            json_format=flag("LOG_JSON", False),
            log_file=env.get(f"{ENV_PREFIX}LOG_FILE", ""),
            buffered=flag("LOG_BUFFERED", False),
            buffer_size=int(size) if size else None,
        )

    def build(self) -> Any:
        config = tl.Config()
        config.with_min_level(self.level)
        config.with_console_output(self.console)
        if self.console:
            config.with_colored_output(self.colored)
        config.with_json_format(self.json_format)
        if self.log_file:
            config.with_file_output(self.log_file)
        if self.buffered:
            config.with_buffering(True)
            if self.buffer_size:
                config.with_buffer_size(self.buffer_size)
        # Spans rely on ``logger.profile``.
        config.with_profiling(True)
        return config


PRESETS: Mapping[str, LogSettings] = {
    "development": LogSettings(level="DEBUG"),
    "production": LogSettings(
        level="INFO",
        console=False,
        log_file="litelab_engine.log",
        buffered=True,
    ),
    "performance": LogSettings(
        level="DEBUG",
        console=False,
        json_format=True,
        log_file="litelab_engine-performance.log",
        buffered=True,
    ),
}


class _State:
    config: Optional[Any] = None
    loggers: Dict[str, Any] = {}


def configure(
    *,
    settings: Optional[LogSettings] = None,
    preset: Optional[str] = None,
    config: Optional[Any] = None,
) -> None:
    """Replace the active telelog configuration and drop cached loggers.

    With no arguments the settings come from ``LITELAB_ENGINE_*`` variables.
    A preset keeps ``LITELAB_ENGINE_LOG_FILE`` if it is set.
    """

    if sum(item is not None for item in (settings, preset, config)) > 1:
        raise ValueError("Pass only one of `settings`, `preset` or `config`.")

    if config is not None:
        config.with_profiling(True)
        built = config
    elif preset is not None:
        try:
            chosen = PRESETS[preset.lower()]
        except KeyError as exc:
            raise ValueError(f"Unknown preset '{preset}'.") from exc
        log_file = os.environ.get(f"{ENV_PREFIX}LOG_FILE")
        if log_file:
            chosen = replace(chosen, log_file=log_file)
        built = chosen.build()
    else:
        built = (settings or LogSettings.from_env()).build()

    _State.config = built
    _State.loggers.clear()


def get_logger(name: Optional[str] = None) -> Any:
    """Return the telelog logger for ``name`` (the engine root by default)."""

    key = name or os.environ.get(f"{ENV_PREFIX}LOGGER", ROOT_LOGGER)
    cached = _State.loggers.get(key)
    if cached is None:
        if _State.config is None:
            configure()
        cached = tl.Logger.with_config(key, _State.config)
        _State.loggers[key] = cached
    return cached


def _write(log: Any, level: str, message: str, payload: Mapping[str, Any]) -> None:
    name = str(level).lower()
    structured = getattr(log, f"{name}_with", None)
    if structured is not None:
        structured(message, [(str(key), _text(value)) for key, value in payload.items()])
        return
    plain = getattr(log, name, None)
    if plain is None:
        raise ValueError(f"Unsupported log level '{level}'.")
    plain(f"{message} {dict(payload)}")


def record_event(
    name: str,
    *,
    level: str = "info",
    data: Optional[Dict[str, Any]] = None,
    logger_name: Optional[str] = None,
) -> None:
    _write(
        get_logger(logger_name),
        level,
        f"event::{name}",
        {"event": name, **(data or {})},
    )


def record_failure(
    name: str,
    exc: BaseException,
    *,
    data: Optional[Dict[str, Any]] = None,
    logger_name: Optional[str] = None,
) -> None:
    """Log an exception the caller is about to discard."""

    record_event(
        name,
        level="error",
        data={"error": type(exc).__name__, "reason": str(exc), **(data or {})},
        logger_name=logger_name,
    )


@dataclass
class SpanHandle:
    """Yielded by ``span``; extra metadata lands on the failure line."""

    logger: Any
    name: str
    component: Optional[str] = None
    metadata: Dict[str, str] = field(default_factory=dict)

    def add_metadata(self, key: str, value: Any) -> None:
        self.metadata[key] = _text(value)

    def fail(self, reason: str) -> None:
        payload: Dict[str, Any] = {"span": self.name, **self.metadata}
        if self.component:
            payload["component"] = self.component
        payload["reason"] = reason
        _write(self.logger, "error", "span::fail", payload)


@contextmanager
def span(
    name: str,
    *,
    logger_name: Optional[str] = None,
    component: Optional[str | bool] = None,
    metadata: Optional[Dict[str, Any]] = None,
) -> Iterator[SpanHandle]:
    """Profile the block as ``name``.

    ``component=True`` tracks the block under ``name``; a string tracks it
    under that component. ``metadata`` is pushed as logger context for the
    duration of the block.
    """

    log = get_logger(logger_name)
    tracked = name if component is True else component or None
    context = {key: _text(value) for key, value in (metadata or {}).items()}
    handle = SpanHandle(logger=log, name=name, component=tracked, metadata=dict(context))

    with ExitStack() as stack:
        for key, value in context.items():
            log.add_context(key, value)
            stack.callback(log.remove_context, key)
        if tracked:
            stack.enter_context(log.track_component(tracked))
        stack.enter_context(log.profile(name))
        try:
            yield handle
        except Exception as exc:
            handle.fail(str(exc))
            raise


configure()
logger = get_logger()

__all__ = [
    "LogSettings",
    "PRESETS",
    "SpanHandle",
    "configure",
    "get_logger",
    "record_event",
    "record_failure",
    "span",
    "logger",
]
