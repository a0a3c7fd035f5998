# ==============================================================================
# Event Recorder
# ==============================================================================
"""
Timestamps and labels user actions and hands them to an EventStore.

One recorder corresponds to one browser load: it carries a single session id
for every event it records. Recorders are constructed explicitly and passed to
whatever needs them.

Send failures are logged and otherwise invisible to the caller; tracking
must never break the flow it observes.
"""

import logging
import uuid
from datetime import datetime, timezone
from typing import Any

from edutrack.base import EduTrackError, EventStore
from edutrack.core.models import ActionType, ClickstreamEvent

logger = logging.getLogger(__name__)


def new_session_id() -> str:
    """Generate a session id for a fresh browser load."""
    return f"session_{uuid.uuid4().hex}"


class EventRecorder:
    """
    Records clickstream events for one user and one session.

    With batch_size == 1 every event is sent as soon as it is tracked.
    Larger batch sizes buffer events until the buffer is full or flush()
    is called.
    """

    def __init__(
        self,
        store: EventStore,
        user_id: str,
        session_id: str | None = None,
        batch_size: int = 1,
    ):
        """
        Initialize the recorder.

        Args:
            store: EventStore that receives recorded events
            user_id: Identifier of the tracked user
            session_id: Session id (generated if None)
            batch_size: Events buffered before an automatic flush

        Raises:
            ValueError: If batch_size is less than 1
        """
        if batch_size < 1:
            raise ValueError("batch_size must be at least 1")

        self._store = store
        self.user_id = str(user_id)
        self.session_id = session_id or new_session_id()
        self.batch_size = batch_size
        self._buffer: list[ClickstreamEvent] = []

        # Lifetime counters
        self.sent = 0
        self.failed = 0

    @property
    def pending(self) -> int:
        """Number of buffered events not yet handed to the store."""
        return len(self._buffer)

    def track(self, action: str, details: dict[str, Any] | None = None) -> ClickstreamEvent:
        """
        Record one user action.

        Args:
            action: Action name (usually an ActionType value)
            details: Free-form payload

        Returns:
            The recorded event
        """
        event = ClickstreamEvent(
            id=str(uuid.uuid4()),
            session_id=self.session_id,
            user_id=self.user_id,
            action=action.value if isinstance(action, ActionType) else action,
            details=dict(details or {}),
            timestamp=datetime.now(timezone.utc),
        )
        self._buffer.append(event)
        logger.debug("Tracked %s for user %s", event.action, self.user_id)

        if len(self._buffer) >= self.batch_size:
            self.flush()
        return event

    def flush(self) -> int:
        """
        Hand every buffered event to the store.

        Events that fail to send are logged and dropped.

        Returns:
            Number of events stored successfully
        """
        batch, self._buffer = self._buffer, []
        stored = 0
        for event in batch:
            try:
                self._store.append(event)
            except EduTrackError as e:
                self.failed += 1
                logger.warning("Failed to record %s event %s: %s", event.action, event.id, e)
                continue
            stored += 1

        self.sent += stored
        if batch:
            logger.debug("Flushed %d/%d events", stored, len(batch))
        return stored

    def close(self) -> None:
        """Flush any buffered events."""
        self.flush()

    def __enter__(self) -> "EventRecorder":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # ==========================================================================
    # Convenience Trackers
    # ==========================================================================

    def track_navigation(self, from_page: str, to_page: str) -> ClickstreamEvent:
        return self.track(ActionType.NAVIGATION, {"from": from_page, "to": to_page})

    def track_button_click(
        self, button_id: str, details: dict[str, Any] | None = None
    ) -> ClickstreamEvent:
        return self.track(ActionType.BUTTON_CLICK, {"buttonId": button_id, **(details or {})})

    def track_course_view(
        self, course_id: str, course_title: str | None = None, course_type: str | None = None
    ) -> ClickstreamEvent:
        return self.track(
            ActionType.COURSE_VIEW,
            {"courseId": course_id, "courseTitle": course_title, "courseType": course_type},
        )

    def track_quiz_start(self, course_id: str) -> ClickstreamEvent:
        return self.track(ActionType.QUIZ_START, {"courseId": course_id})

    def track_quiz_complete(self, course_id: str, score: float | None = None) -> ClickstreamEvent:
        return self.track(ActionType.QUIZ_COMPLETE, {"courseId": course_id, "score": score})

    def track_video_play(self, course_id: str, video_id: str | None = None) -> ClickstreamEvent:
        return self.track(ActionType.VIDEO_PLAY, {"courseId": course_id, "videoId": video_id})

    def track_logout(self, username: str | None = None) -> ClickstreamEvent:
        return self.track(ActionType.LOGOUT, {"user": username or self.user_id})
