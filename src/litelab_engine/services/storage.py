"""Best-effort local persistence: key/value stores and the typed stores on top."""

from __future__ import annotations

import json
import os
import time
from contextlib import suppress
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, Optional, Protocol, Sequence

from litelab_engine.buffer import Snapshot
from litelab_engine.errors import StorageError
from litelab_engine.runtime import telemetry
from litelab_engine.runtime.config import WEEK_MS

PROJECT_KEY = "litelab:project:v2"
SEARCH_CACHE_PREFIX = "searchCache:"
LESSONS_KEY = "lessons"

STARTER_PROJECT = Snapshot(
    markup=(
        "<!-- Blank starter -->\n<header>\n  <h1>My Page</h1>\n</header>\n"
        "<main>\n  <p>Edit HTML, CSS, JS and hit Run</p>\n</main>"
    ),
    style=(
        ":root{--accent:#38bdf8}\n"
        "body{font-family:system-ui, sans-serif;margin:0;padding:0;"
        "background:transparent;color:inherit}"
    ),
    script="// Starter JS\nconsole.log('LiteLab starter ready');",
)


def wall_clock_ms() -> int:
    return int(time.time() * 1000)


class KeyValueStore(Protocol):
    def get(self, key: str) -> Any:
        """Return the stored JSON value or None."""
        ...

    def set(self, key: str, value: Any) -> None:
        """Store a JSON-serializable value; raise StorageError on failure."""
        ...

    def remove(self, key: str) -> None:
        ...


class MemoryStore:
    """Process-local store. Values are round-tripped through JSON."""

    def __init__(self, initial: Optional[Mapping[str, Any]] = None) -> None:
        self._data: Dict[str, str] = {}
        for key, value in (initial or {}).items():
            self.set(key, value)

    def get(self, key: str) -> Any:
        raw = self._data.get(key)
        return None if raw is None else json.loads(raw)

    def set(self, key: str, value: Any) -> None:
        try:
            self._data[key] = json.dumps(value)
        except (TypeError, ValueError) as exc:
            raise StorageError(f"Value for '{key}' is not JSON serializable") from exc

    def remove(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> list[str]:
        return list(self._data)


class JsonFileStore:
    """All keys in a single JSON document on disk.

    Unreadable or corrupt files load as empty. Writes go through a sibling
    temp file and ``os.replace``; a failed write raises StorageError and leaves
    both the file and the in-memory copy as they were.
    """

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)
        self._data: Dict[str, Any] = {}
        self.load()

    def load(self) -> None:
        if not self.path.exists():
            return
        try:
            with open(self.path, "r", encoding="utf-8") as handle:
                stored = json.load(handle)
        except (json.JSONDecodeError, OSError) as exc:
            telemetry.record_failure(
                "storage.load_failed", exc, data={"path": str(self.path)}
            )
            return
        if isinstance(stored, dict):
            self._data.update(stored)

    def get(self, key: str) -> Any:
        return self._data.get(key)

    def set(self, key: str, value: Any) -> None:
        self._commit({**self._data, key: value})

    def remove(self, key: str) -> None:
        if key in self._data:
            staged = dict(self._data)
            del staged[key]
            self._commit(staged)

    def _commit(self, staged: Dict[str, Any]) -> None:
        try:
            document = json.dumps(staged, indent=2, ensure_ascii=False)
        except (TypeError, ValueError) as exc:
            raise StorageError(f"Value is not JSON serializable: {exc}") from exc
        scratch = self.path.with_name(f"{self.path.name}.tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            scratch.write_text(document, encoding="utf-8")
            os.replace(scratch, self.path)
        except OSError as exc:
            with suppress(OSError):
                scratch.unlink(missing_ok=True)
            raise StorageError(f"Failed to write {self.path}: {exc}") from exc
        self._data = staged


class ProjectStore:
    """Loads and saves the current project; remembers the last save in memory."""

    def __init__(self, store: KeyValueStore, *, key: str = PROJECT_KEY) -> None:
        self._store = store
        self._key = key
        self._memory: Optional[Snapshot] = None

    def load_project(self) -> Optional[Snapshot]:
        try:
            raw = self._store.get(self._key)
        except StorageError as exc:
            telemetry.record_failure("storage.project_load_failed", exc)
            return self._memory
        if isinstance(raw, Mapping):
            return Snapshot.from_json(raw)
        return self._memory

    def save_project(self, snapshot: Snapshot) -> None:
        self._memory = snapshot
        try:
            self._store.set(self._key, snapshot.to_json())
        except StorageError:
            raise
        except Exception as exc:
            raise StorageError(f"Failed to save project: {exc}") from exc

    def reset(self) -> Snapshot:
        """Replace the stored project with the starter template."""

        try:
            self.save_project(STARTER_PROJECT)
        except StorageError as exc:
            telemetry.record_failure("storage.project_reset_failed", exc)
        return STARTER_PROJECT


@dataclass(frozen=True, slots=True)
class CachedSearch:
    query: str
    items: Sequence[Any]
    timestamp: int

    def is_fresh(self, now_ms: int, *, ttl_ms: int = WEEK_MS) -> bool:
        return now_ms - self.timestamp < ttl_ms


class SearchCache:
    def __init__(
        self,
        store: KeyValueStore,
        *,
        clock: Callable[[], int] = wall_clock_ms,
    ) -> None:
        self._store = store
        self._clock = clock

    def get_cached_search(self, query: str) -> Optional[CachedSearch]:
        raw = self._store.get(f"{SEARCH_CACHE_PREFIX}{query}")
        if not isinstance(raw, Mapping):
            return None
        try:
            return CachedSearch(
                query=str(raw["query"]),
                items=list(raw.get("items") or []),
                timestamp=int(raw["timestamp"]),
            )
        except (KeyError, TypeError, ValueError):
            return None

    def set_cached_search(self, query: str, items: Sequence[Any]) -> None:
        record = {"query": query, "items": list(items), "timestamp": self._clock()}
        self._store.set(f"{SEARCH_CACHE_PREFIX}{query}", record)


class LessonStore:
    """Saved lessons keyed by id, listed oldest first."""

    def __init__(
        self,
        store: KeyValueStore,
        *,
        clock: Callable[[], int] = wall_clock_ms,
    ) -> None:
        self._store = store
        self._clock = clock

    def _load(self) -> List[Dict[str, Any]]:
        raw = self._store.get(LESSONS_KEY)
        if not isinstance(raw, list):
            return []
        return [dict(item) for item in raw if isinstance(item, Mapping)]

    def save_lesson(self, record: Mapping[str, Any]) -> Dict[str, Any]:
        if not record.get("id"):
            raise StorageError("Lesson records need an 'id'")
        stored = {
            "id": record["id"],
            "createdAt": self._clock(),
            "title": record.get("title", ""),
            "items": list(record.get("items") or []),
            "attribution": record.get("attribution"),
        }
        lessons = [item for item in self._load() if item.get("id") != stored["id"]]
        lessons.append(stored)
        self._store.set(LESSONS_KEY, lessons)
        return stored

    def list_lessons(self) -> List[Dict[str, Any]]:
        lessons = self._load()
        return sorted(lessons, key=lambda item: item.get("createdAt", 0))


__all__ = [
    "KeyValueStore",
    "MemoryStore",
    "JsonFileStore",
    "ProjectStore",
    "SearchCache",
    "CachedSearch",
    "LessonStore",
    "STARTER_PROJECT",
    "PROJECT_KEY",
    "wall_clock_ms",
]
