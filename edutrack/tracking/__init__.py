"""Clickstream event recording."""

from edutrack.tracking.recorder import EventRecorder, new_session_id

__all__ = [
    "EventRecorder",
    "new_session_id",
]
