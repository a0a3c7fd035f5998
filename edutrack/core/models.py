# ==============================================================================
# EduTrack Domain Models
# ==============================================================================
"""
Pydantic models for clickstream events, courses and dashboard statistics.

These models are used for:
- Validating payloads returned by the collection and content endpoints
- Serializing events for the write path
- Type safety throughout the application

Wire payloads use camelCase keys (sessionId, userId, coursesEnrolled, ...).
Python code uses snake_case attribute names; aliases bridge the two.

This module is part of the core domain layer and has no external dependencies
beyond Pydantic.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, field_validator


class ActionType(str, Enum):
    """Known clickstream action names.

    The action field of an event is a plain string so that actions added by
    newer clients pass through untouched. Compare against these members.
    """

    COURSE_VIEW = "course_view"
    QUIZ_START = "quiz_start"
    QUIZ_COMPLETE = "quiz_complete"
    VIDEO_PLAY = "video_play"
    NAVIGATION = "navigation"
    BUTTON_CLICK = "button_click"
    PAGE_VIEW = "page_view"
    LOGOUT = "logout"


class ContentType(str, Enum):
    """Course content types served by the content endpoint."""

    TEXT = "text"
    VIDEO = "video"
    QUIZ = "quiz"


class Rank(str, Enum):
    """Learner rank derived from the achievement count."""

    BEGINNER = "Beginner"
    INTERMEDIATE = "Intermediate"
    ADVANCED = "Advanced"
    EXPERT = "Expert"


def _to_str(value: Any) -> Any:
    # Identifiers arrive as numbers from some clients
    if value is None or isinstance(value, str):
        return value
    return str(value)


class ClickstreamEvent(BaseModel):
    """
    A single recorded user interaction.

    Events are immutable once recorded; the collection service only appends.

    Attributes:
        id: Unique event identifier
        session_id: Client-generated id of the browser load that emitted it
        user_id: Identifier of the learner (username or numeric id)
        action: Action name, usually one of ActionType
        details: Free-form key/value payload (courseId, courseTitle, ...)
        timestamp: When the interaction happened (timezone-aware)
    """

    id: str = Field(..., description="Event identifier")
    session_id: str | None = Field(None, alias="sessionId", description="Session identifier")
    user_id: str | None = Field(None, alias="userId", description="User identifier")
    action: str = Field(..., description="Action name")
    details: dict[str, Any] = Field(default_factory=dict, description="Free-form payload")
    timestamp: datetime = Field(..., description="Event time")

    model_config = {"populate_by_name": True, "frozen": True}

    @field_validator("id", "session_id", "user_id", mode="before")
    @classmethod
    def _coerce_identifier(cls, value: Any) -> Any:
        return _to_str(value)

    @field_validator("details", mode="before")
    @classmethod
    def _default_details(cls, value: Any) -> Any:
        return {} if value is None else value

    @field_validator("timestamp")
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        """Naive timestamps are taken as UTC."""
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    @property
    def course_id(self) -> Any:
        """The courseId detail, or None when absent."""
        return self.details.get("courseId")

    def to_api_payload(self) -> dict:
        """Serialize the event for the collection endpoint (camelCase keys)."""
        return self.model_dump(by_alias=True, mode="json")

    @classmethod
    def from_api_payload(cls, data: dict) -> "ClickstreamEvent":
        """Deserialize an event returned by the collection endpoint."""
        return cls.model_validate(data)


class Course(BaseModel):
    """A course as listed by the content endpoint."""

    id: str = Field(..., description="Course identifier")
    title: str = Field(..., description="Course title")
    description: str = Field(default="", description="Course description")
    type: str = Field(..., description="Content type (text, video, quiz)")
    category: str | None = Field(None, description="Course category")
    level: str | None = Field(None, description="Difficulty level")
    tags: list[str] = Field(default_factory=list, description="Free-form tags")
    duration: int | str | None = Field(None, description="Duration as reported by the service")
    created_at: datetime | None = Field(None, alias="createdAt", description="Creation time")

    model_config = {"populate_by_name": True}

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_identifier(cls, value: Any) -> Any:
        return _to_str(value)

    @field_validator("tags", mode="before")
    @classmethod
    def _default_tags(cls, value: Any) -> Any:
        return [] if value is None else value


class RecentActivity(BaseModel):
    """One entry of the dashboard's recent-activity feed."""

    id: str
    action: str
    details: dict[str, Any] = Field(default_factory=dict)
    timestamp: datetime

    @classmethod
    def from_event(cls, event: ClickstreamEvent) -> "RecentActivity":
        return cls(
            id=event.id,
            action=event.action,
            details=dict(event.details),
            timestamp=event.timestamp,
        )


class DerivedStatistics(BaseModel):
    """
    Dashboard statistics derived from one user's full event history.

    Computed on demand, never stored. See StatisticsAggregator for the
    derivation of each field.
    """

    courses_enrolled: int = Field(0, alias="coursesEnrolled")
    courses_completed: int = Field(0, alias="coursesCompleted")
    study_hours: int = Field(0, alias="studyHours")
    achievements: int = 0
    recent_activities: list[RecentActivity] = Field(
        default_factory=list, alias="recentActivities"
    )
    weekly_hours: int = Field(0, alias="weeklyHours")
    streak: int = 0
    rank: Rank = Rank.BEGINNER
    overall_progress: int = Field(0, alias="overallProgress")

    model_config = {"populate_by_name": True}

    def to_dict(self) -> dict:
        """Serialize with the dashboard's camelCase keys (JSON-safe)."""
        return self.model_dump(by_alias=True, mode="json")


class SessionSummary(BaseModel):
    """
    Summary of the events sharing one client-generated session id.

    Attributes:
        session_id: Session identifier
        user_id: User identifier (from the first event seen)
        session_start: Time of the earliest event in the session
        session_end: Time of the latest event in the session
        event_count: Number of events in the session
        action_counts: Number of events per action name
        courses_viewed: Distinct course ids seen in course_view events
    """

    session_id: str
    user_id: str | None = None
    session_start: datetime
    session_end: datetime
    event_count: int = 0
    action_counts: dict[str, int] = Field(default_factory=dict)
    courses_viewed: list[str] = Field(default_factory=list)

    @property
    def duration_seconds(self) -> int:
        """Calculate session duration in seconds."""
        return int((self.session_end - self.session_start).total_seconds())
