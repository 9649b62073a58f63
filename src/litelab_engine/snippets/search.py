"""Ranking of snippet pools against the active buffer and a query."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Sequence

from litelab_engine.buffer import BufferKind

from .models import Snippet, SnippetKind

KIND_MATCH_SCORE = 50
ALL_KIND_SCORE = 30
FAVORITE_SCORE = 10
LABEL_PREFIX_SCORE = 20
SUBSTRING_SCORE = 10
QUERY_THRESHOLD = 5


@dataclass(frozen=True, slots=True)
class ScoredSnippet:
    snippet: Snippet
    score: int


def score_snippet(
    snippet: Snippet,
    active: BufferKind,
    query: str,
    favorite_bodies: frozenset[str],
) -> int:
    score = 0
    if snippet.kind.value == active.value:
        score += KIND_MATCH_SCORE
    if snippet.kind is SnippetKind.ALL:
        score += ALL_KIND_SCORE
    if snippet.body in favorite_bodies:
        score += FAVORITE_SCORE
    if query:
        if snippet.label.lower().startswith(query):
            score += LABEL_PREFIX_SCORE
        if query in snippet.haystack:
            score += SUBSTRING_SCORE
    return score


def rank(
    pool: Sequence[Snippet],
    active: BufferKind,
    query: str = "",
    *,
    favorites: Iterable[Snippet] = (),
) -> list[ScoredSnippet]:
    needle = query.strip().lower()
    favorite_bodies = frozenset(item.body for item in favorites)
    scored = [
        ScoredSnippet(item, score_snippet(item, active, needle, favorite_bodies))
        for item in pool
    ]
    if needle:
        scored = [item for item in scored if item.score > QUERY_THRESHOLD]
    else:
        scored = [item for item in scored if item.score >= 0]
    # list.sort is stable, so pool order breaks ties.
    scored.sort(key=lambda item: -item.score)
    seen: set[str] = set()
    ranked: list[ScoredSnippet] = []
    for item in scored:
        if item.snippet.body in seen:
            continue
        seen.add(item.snippet.body)
        ranked.append(item)
    return ranked


def search(
    pool: Sequence[Snippet],
    active: BufferKind,
    query: str = "",
    *,
    favorites: Iterable[Snippet] = (),
) -> list[Snippet]:
    """Return ``pool`` filtered and ordered for the snippet panel."""

    return [item.snippet for item in rank(pool, active, query, favorites=favorites)]


__all__ = ["ScoredSnippet", "rank", "score_snippet", "search"]
