from __future__ import annotations

import json
from pathlib import Path

import pytest

from litelab_engine.buffer import Snapshot
from litelab_engine.errors import StorageError
from litelab_engine.runtime import EngineConfig
from litelab_engine.runtime.config import WEEK_MS
from litelab_engine.services import (
    STARTER_PROJECT,
    CachedSearch,
    JsonFileStore,
    LessonStore,
    MemoryStore,
    ProjectStore,
    SearchCache,
)
from litelab_engine.services.storage import PROJECT_KEY


class Ticker:
    def __init__(self, start: int = 1_000) -> None:
        self.now = start

    def __call__(self) -> int:
        self.now += 1
        return self.now


def test_memory_store_rejects_unserializable_values() -> None:
    store = MemoryStore()

    with pytest.raises(StorageError):
        store.set("bad", object())


def test_json_file_store_round_trips(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "store.json"
    store = JsonFileStore(path)
    store.set("answer", {"value": 42})

    reopened = JsonFileStore(path)

    assert reopened.get("answer") == {"value": 42}
    assert json.loads(path.read_text(encoding="utf-8")) == {"answer": {"value": 42}}


def test_json_file_store_failed_set_keeps_file_and_later_writes(tmp_path: Path) -> None:
    path = tmp_path / "store.json"
    store = JsonFileStore(path)
    store.set("a", {"x": 1})

    with pytest.raises(StorageError):
        store.set("b", object())

    assert json.loads(path.read_text(encoding="utf-8")) == {"a": {"x": 1}}
    assert store.get("b") is None

    store.set("c", 1)

    assert JsonFileStore(path).get("c") == 1
    assert json.loads(path.read_text(encoding="utf-8")) == {"a": {"x": 1}, "c": 1}
    assert not (tmp_path / "store.json.tmp").exists()


def test_json_file_store_unwritable_path_rolls_back(tmp_path: Path) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("", encoding="utf-8")
    store = JsonFileStore(blocker / "store.json")

    with pytest.raises(StorageError):
        store.set("a", 1)

    assert store.get("a") is None


def test_json_file_store_remove_persists(tmp_path: Path) -> None:
    path = tmp_path / "store.json"
    store = JsonFileStore(path)
    store.set("a", 1)
    store.set("b", 2)

    store.remove("a")

    assert JsonFileStore(path).get("a") is None
    assert JsonFileStore(path).get("b") == 2


def test_json_file_store_ignores_corrupt_file(tmp_path: Path) -> None:
    path = tmp_path / "store.json"
    path.write_text("{not json", encoding="utf-8")

    store = JsonFileStore(path)

    assert store.get("anything") is None


def test_project_store_saves_under_versioned_key() -> None:
    backing = MemoryStore()
    projects = ProjectStore(backing)

    projects.save_project(Snapshot(markup="<p>", style="a{}", script="x()"))

    assert backing.get(PROJECT_KEY) == {"html": "<p>", "css": "a{}", "js": "x()"}
    assert projects.load_project() == Snapshot(markup="<p>", style="a{}", script="x()")


def test_project_store_keeps_memory_copy_when_save_fails() -> None:
    class ReadOnlyStore(MemoryStore):
        def set(self, key, value):
            raise StorageError("read only")

    projects = ProjectStore(ReadOnlyStore())

    with pytest.raises(StorageError):
        projects.save_project(Snapshot(markup="draft"))

    assert projects.load_project() == Snapshot(markup="draft")
    assert projects.reset() == STARTER_PROJECT


def test_cached_search_freshness() -> None:
    entry = CachedSearch(query="flex", items=[], timestamp=0)

    assert entry.is_fresh(WEEK_MS - 1)
    assert not entry.is_fresh(WEEK_MS)


def test_search_cache_round_trip() -> None:
    cache = SearchCache(MemoryStore(), clock=lambda: 123)

    cache.set_cached_search("flex", [{"question_id": 1}])
    entry = cache.get_cached_search("flex")

    assert entry is not None
    assert entry.timestamp == 123
    assert list(entry.items) == [{"question_id": 1}]
    assert cache.get_cached_search("grid") is None


def test_lessons_listed_by_creation_time() -> None:
    lessons = LessonStore(MemoryStore(), clock=Ticker())

    lessons.save_lesson({"id": "b", "title": "B"})
    lessons.save_lesson({"id": "a", "title": "A"})
    lessons.save_lesson({"id": "b", "title": "B2"})

    assert [item["title"] for item in lessons.list_lessons()] == ["A", "B2"]


def test_lessons_require_id() -> None:
    with pytest.raises(StorageError):
        LessonStore(MemoryStore()).save_lesson({"title": "no id"})


def test_engine_config_defaults() -> None:
    config = EngineConfig()

    assert config.history_limit == 60
    assert config.propagation_delay_ms == 400
    assert config.diagnostics_delay_ms == 600
    assert config.diagnostics_limit == 6
    assert config.cache_ttl_ms == 604_800_000


def test_engine_config_from_env() -> None:
    config = EngineConfig.from_env(
        {
            "LITELAB_ENGINE_HISTORY_LIMIT": "10",
            "LITELAB_ENGINE_MAC_SHORTCUTS": "yes",
        }
    )

    assert config.history_limit == 10
    assert config.mac_shortcuts is True


def test_engine_config_rejects_bad_values() -> None:
    with pytest.raises(ValueError):
        EngineConfig.from_env({"LITELAB_ENGINE_SEARCH_DELAY_MS": "soon"})
    with pytest.raises(ValueError):
        EngineConfig(history_limit=0)
