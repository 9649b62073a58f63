"""Key routing, shortcut dispatch, and panel state."""

from .base import DispatchResult, KeyInput, Panel
from .coordinator import InputCoordinator, key_to_token

__all__ = ["DispatchResult", "KeyInput", "Panel", "InputCoordinator", "key_to_token"]
