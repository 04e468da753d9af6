"""Upload session progress tracking."""

from .session_tracker import SessionTracker, summarize_session

__all__ = ["SessionTracker", "summarize_session"]
