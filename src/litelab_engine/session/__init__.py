"""Editing session glue: snapshot, history, diagnostics, propagation, snippets."""

from .editor import SETTLE_CHANNEL, EditingSession
from .propagation import PropagationChannel, Sink

__all__ = ["EditingSession", "PropagationChannel", "Sink", "SETTLE_CHANNEL"]
