"""Terminal presentation: dashboard rendering and key handling."""

from .dashboard import Dashboard, parse_color, render_state
from .keys import Action, KeyDispatcher

__all__ = ["Action", "Dashboard", "KeyDispatcher", "parse_color", "render_state"]
