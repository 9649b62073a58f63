"""Snippet catalogue, favorites/recents, ranking, and normalization."""

from .assistant import generate_snippet
from .catalogue import CATALOGUE
from .library import SnippetLibrary
from .models import Snippet, SnippetKind
from .normalize import VOID_TAGS, normalize
from .search import ScoredSnippet, rank, search

__all__ = [
    "CATALOGUE",
    "Snippet",
    "SnippetKind",
    "SnippetLibrary",
    "ScoredSnippet",
    "generate_snippet",
    "normalize",
    "rank",
    "search",
    "VOID_TAGS",
]
