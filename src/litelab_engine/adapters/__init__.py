"""Adapters exposing the editing session to host UI toolkits."""

from .host import HostAdapter, HostUIHooks

__all__ = ["HostAdapter", "HostUIHooks"]
