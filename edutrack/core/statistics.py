# ==============================================================================
# Statistics Aggregator - Pure Domain Logic
# ==============================================================================
"""
Pure dashboard statistics logic with no external dependencies.

This module reduces one user's complete event history into DerivedStatistics:
- Distinct courses viewed, quizzes completed and overall progress
- Study hours and weekly hours from fixed per-course/per-action time budgets
- Achievement milestones and the rank they map to
- Daily activity streak ending today
- Recent activity feed

Nothing here performs I/O, so the same history and reference time always
produce the same statistics. Events are read, never modified.
"""

import hashlib
import json
from collections.abc import Iterable, Sequence
from datetime import date, datetime, timedelta, timezone, tzinfo
from typing import Any
from zoneinfo import ZoneInfo

from edutrack.core.models import (
    ActionType,
    ClickstreamEvent,
    DerivedStatistics,
    Rank,
    RecentActivity,
)

# ==============================================================================
# Constants
# ==============================================================================

# Time assumed per distinct course viewed (not measured duration)
MINUTES_PER_COURSE = 30
# Time assumed per event within the weekly window
MINUTES_PER_ACTION = 5
WEEKLY_WINDOW_DAYS = 7
RECENT_ACTIVITY_LIMIT = 10
COURSE_EXPLORER_THRESHOLD = 5

# Evaluated in ascending order; the last threshold reached wins
RANK_THRESHOLDS: tuple[tuple[int, Rank], ...] = (
    (3, Rank.INTERMEDIATE),
    (5, Rank.ADVANCED),
    (7, Rank.EXPERT),
)

WELCOME_COURSE_TITLE = "Welcome to EduTrack Pro"
WELCOME_ACTIVITY_ID = "welcome-1"
SAMPLE_ACTIVITY_ID = "sample-1"


def resolve_timezone(name: str | None) -> tzinfo | None:
    """
    Resolve an IANA zone name.

    Args:
        name: Zone name such as "Europe/Paris", or None/"" for host-local time

    Returns:
        ZoneInfo for the name, or None meaning "host-local zone"

    Raises:
        zoneinfo.ZoneInfoNotFoundError: If the name is unknown
    """
    if not name:
        return None
    return ZoneInfo(name)


def _course_key(course_id: Any) -> Any:
    """Hashable identity for a courseId; objects and arrays compare by content."""
    if isinstance(course_id, (dict, list)):
        return json.dumps(course_id, sort_keys=True, default=str)
    return course_id


def fingerprint(events: Sequence[ClickstreamEvent]) -> str:
    """
    Digest of an event list's length and ids.

    Two histories with the same length and the same ids in the same order
    share a fingerprint. Appending an event always changes it.
    """
    digest = hashlib.sha256()
    digest.update(str(len(events)).encode())
    for event in events:
        digest.update(b"\x00")
        digest.update(event.id.encode())
    return digest.hexdigest()


def rank_for(achievements: int) -> Rank:
    """Map an achievement count to a rank."""
    rank = Rank.BEGINNER
    for threshold, candidate in RANK_THRESHOLDS:
        if achievements >= threshold:
            rank = candidate
    return rank


def welcome_statistics(
    activity_id: str = WELCOME_ACTIVITY_ID, now: datetime | None = None
) -> DerivedStatistics:
    """
    Default statistics shown when no history can be loaded.

    All counters are zero and the activity feed holds a single synthetic
    welcome entry.

    Args:
        activity_id: Id of the synthetic entry ("welcome-1" after a failed
            fetch, "sample-1" when the fetch succeeded with no data)
        now: Timestamp for the entry (defaults to the current UTC time)
    """
    timestamp = now or datetime.now(timezone.utc)
    welcome = RecentActivity(
        id=activity_id,
        action=ActionType.COURSE_VIEW.value,
        details={"courseTitle": WELCOME_COURSE_TITLE},
        timestamp=timestamp,
    )
    return DerivedStatistics(recent_activities=[welcome])


class StatisticsAggregator:
    """
    Pure statistics computation over one user's event history.

    Calendar-day logic (streak) uses the configured time zone. With no zone
    configured, the host's local zone is used.
    """

    def __init__(self, tz: tzinfo | None = None):
        """
        Initialize the aggregator.

        Args:
            tz: Zone used to decide an event's calendar date. None means the
                host's local zone.
        """
        self.tz = tz

    def now(self) -> datetime:
        """Current time as an aware datetime in the configured zone."""
        if self.tz is None:
            return datetime.now().astimezone()
        return datetime.now(self.tz)

    def local_date(self, moment: datetime) -> date:
        """Calendar date of a moment in the configured zone."""
        return moment.astimezone(self.tz).date()

    def distinct_courses(self, events: Iterable[ClickstreamEvent]) -> list:
        """Unique truthy courseId values across course_view events, first-seen order."""
        seen: dict = {}
        for event in events:
            if event.action != ActionType.COURSE_VIEW:
                continue
            course_id = event.course_id
            if course_id:
                seen.setdefault(_course_key(course_id), course_id)
        return list(seen.values())

    def count_action(self, events: Iterable[ClickstreamEvent], action: ActionType) -> int:
        """Number of events with the given action."""
        return sum(1 for event in events if event.action == action)

    def achievements(
        self,
        distinct_courses: int,
        quiz_starts: int,
        video_plays: int,
        quiz_completes: int,
    ) -> int:
        """Count of satisfied milestone predicates (0-5)."""
        milestones = (
            distinct_courses >= 1,
            quiz_starts >= 1,
            video_plays >= 1,
            quiz_completes >= 1,
            distinct_courses >= COURSE_EXPLORER_THRESHOLD,
        )
        return sum(milestones)

    def weekly_hours(self, events: Iterable[ClickstreamEvent], now: datetime) -> int:
        """Whole hours of activity in the trailing week, at a fixed time per event.

        The window starts seven calendar days back at the same wall-clock time
        in the configured zone, so it spans 167 or 169 hours across a DST change.
        """
        window_start = now.astimezone(self.tz) - timedelta(days=WEEKLY_WINDOW_DAYS)
        weekly = sum(1 for event in events if event.timestamp >= window_start)
        return weekly * MINUTES_PER_ACTION // 60

    def streak(self, events: Iterable[ClickstreamEvent], now: datetime) -> int:
        """Consecutive active calendar days ending today; 0 if today is inactive."""
        active_days = {self.local_date(event.timestamp) for event in events}
        day = self.local_date(now)
        streak = 0
        while day in active_days:
            streak += 1
            day -= timedelta(days=1)
        return streak

    def overall_progress(self, quiz_completes: int, distinct_courses: int) -> int:
        """Completed quizzes per distinct course viewed, as a percentage capped at 100."""
        return min(100, 100 * quiz_completes // max(1, distinct_courses))

    def recent_activities(self, events: Sequence[ClickstreamEvent]) -> list[RecentActivity]:
        """The last events in arrival order, newest first."""
        tail = events[-RECENT_ACTIVITY_LIMIT:]
        return [RecentActivity.from_event(event) for event in reversed(tail)]

    def compute(
        self, events: Sequence[ClickstreamEvent], now: datetime | None = None
    ) -> DerivedStatistics:
        """
        Derive dashboard statistics from a user's full event history.

        Args:
            events: All of the user's events, ordered by arrival
            now: Reference time (defaults to the current time). Naive values
                are taken as UTC.

        Returns:
            DerivedStatistics for the history
        """
        if now is None:
            now = self.now()
        elif now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)

        events = list(events)
        courses = len(self.distinct_courses(events))
        quiz_starts = self.count_action(events, ActionType.QUIZ_START)
        quiz_completes = self.count_action(events, ActionType.QUIZ_COMPLETE)
        video_plays = self.count_action(events, ActionType.VIDEO_PLAY)
        achievements = self.achievements(courses, quiz_starts, video_plays, quiz_completes)

        return DerivedStatistics(
            courses_enrolled=courses,
            courses_completed=quiz_completes,
            study_hours=courses * MINUTES_PER_COURSE // 60,
            achievements=achievements,
            recent_activities=self.recent_activities(events),
            weekly_hours=self.weekly_hours(events, now),
            streak=self.streak(events, now),
            rank=rank_for(achievements),
            overall_progress=self.overall_progress(quiz_completes, courses),
        )
