"""Interaction loop: session state, transitions, and the raw-mode event loop."""

from .loop import RESIZE_POLL_MS, run_interactive
from .session import InteractiveSession
from .state import SessionState

__all__ = ["InteractiveSession", "RESIZE_POLL_MS", "SessionState", "run_interactive"]
