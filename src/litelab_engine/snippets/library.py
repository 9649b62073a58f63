"""Favorites and recents, persisted through a key/value store."""

from __future__ import annotations

from typing import Any, List, Optional, Sequence

from litelab_engine.errors import StorageError
from litelab_engine.runtime import telemetry

from .catalogue import CATALOGUE
from .models import Snippet

FAVORITES_KEY = "editor_snippet_favs_v1"
RECENTS_KEY = "editor_snippet_recent_v1"
FAVORITES_LIMIT = 30
RECENTS_LIMIT = 8


def _decode(raw: Any) -> List[Snippet]:
    if not isinstance(raw, list):
        return []
    items: List[Snippet] = []
    for entry in raw:
        try:
            items.append(Snippet.from_json(entry))
        except (TypeError, ValueError, AttributeError):
            continue
    return items


def _dedupe(items: Sequence[Snippet]) -> List[Snippet]:
    seen: set[str] = set()
    result: List[Snippet] = []
    for item in items:
        if item.body not in seen:
            seen.add(item.body)
            result.append(item)
    return result


class SnippetLibrary:
    """User-curated pools next to the read-only catalogue.

    Both lists are newest first and deduplicated by body. Storage failures
    keep the in-memory lists and are only logged.
    """

    def __init__(
        self,
        store: Optional[Any] = None,
        *,
        catalogue: Sequence[Snippet] = CATALOGUE,
        favorites_limit: int = FAVORITES_LIMIT,
        recents_limit: int = RECENTS_LIMIT,
    ) -> None:
        self._store = store
        self.catalogue: tuple[Snippet, ...] = tuple(catalogue)
        self.favorites_limit = favorites_limit
        self.recents_limit = recents_limit
        self._favorites: List[Snippet] = []
        self._recents: List[Snippet] = []
        self.load()

    @property
    def favorites(self) -> tuple[Snippet, ...]:
        return tuple(self._favorites)

    @property
    def recents(self) -> tuple[Snippet, ...]:
        return tuple(self._recents)

    def load(self) -> None:
        if self._store is None:
            return
        try:
            favorites = self._store.get(FAVORITES_KEY)
            recents = self._store.get(RECENTS_KEY)
        except StorageError as exc:
            telemetry.record_failure("snippets.load_failed", exc)
            return
        self._favorites = _dedupe(_decode(favorites))[: self.favorites_limit]
        self._recents = _dedupe(_decode(recents))[: self.recents_limit]

    def pool(self) -> tuple[Snippet, ...]:
        """Search pool: catalogue first, then favorites."""

        return self.catalogue + tuple(self._favorites)

    def is_favorite(self, snippet: Snippet) -> bool:
        return any(item.body == snippet.body for item in self._favorites)

    def toggle_favorite(self, snippet: Snippet) -> bool:
        """Add or remove ``snippet``; return True if it is now a favorite."""

        if self.is_favorite(snippet):
            self._favorites = [f for f in self._favorites if f.body != snippet.body]
            added = False
        else:
            self._favorites = [snippet.with_id(), *self._favorites][
                : self.favorites_limit
            ]
            added = True
        self._persist(FAVORITES_KEY, self._favorites)
        return added

    def add_recent(self, snippet: Snippet) -> None:
        merged = [snippet, *(r for r in self._recents if r.body != snippet.body)]
        self._recents = merged[: self.recents_limit]
        self._persist(RECENTS_KEY, self._recents)

    def _persist(self, key: str, items: Sequence[Snippet]) -> None:
        if self._store is None:
            return
        try:
            self._store.set(key, [item.to_json() for item in items])
        except StorageError as exc:
            telemetry.record_failure("snippets.persist_failed", exc, data={"key": key})


__all__ = ["SnippetLibrary", "FAVORITES_KEY", "RECENTS_KEY"]
