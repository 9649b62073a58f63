"""Editing verbs bound to shortcuts."""

from .core import (
    close_panels,
    insert_top_snippet,
    redo,
    switch_buffer,
    toggle_docs,
    toggle_snippets,
    undo,
)

__all__ = [
    "toggle_snippets",
    "toggle_docs",
    "close_panels",
    "switch_buffer",
    "undo",
    "redo",
    "insert_top_snippet",
]
