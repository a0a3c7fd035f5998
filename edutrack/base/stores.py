# ==============================================================================
# Store Abstract Base Classes
# ==============================================================================
"""
Store ABCs for the remote services the toolkit talks to.

These define the "what" (append an event, fetch a history, list courses) not
the "how" (HTTP, in-process fake, ...). Concrete implementations live in
infrastructure/.

Includes:
- EventStore: append-only clickstream event log
- ContentSource: course catalog
"""

from abc import ABC, abstractmethod

from edutrack.core.models import ClickstreamEvent, Course


class EventStore(ABC):
    """Append-only store of clickstream events."""

    @abstractmethod
    def append(self, event: ClickstreamEvent) -> None:
        """
        Persist one event.

        Raises:
            EduTrackError: If the event could not be stored
        """
        ...

    @abstractmethod
    def fetch_user_events(self, user_id: str) -> list[ClickstreamEvent]:
        """
        Fetch the complete history of one user.

        Args:
            user_id: User identifier

        Returns:
            Events ordered by arrival (may be empty)

        Raises:
            EduTrackError: If the history could not be fetched
        """
        ...


class ContentSource(ABC):
    """Source of the course catalog."""

    @abstractmethod
    def fetch_courses(self) -> list[Course]:
        """
        Fetch every listed course.

        Raises:
            EduTrackError: If the catalog could not be fetched
        """
        ...
