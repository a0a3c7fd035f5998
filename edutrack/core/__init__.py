# ==============================================================================
# Core Domain Logic
# ==============================================================================
"""
Pure domain logic with no external dependencies.

This module contains:
- Domain models (ClickstreamEvent, Course, DerivedStatistics, ...)
- Statistics aggregation (courses, hours, achievements, streak, rank)
- Session grouping by client-generated session id

All code here is framework-agnostic and easily unit-testable.
"""

from edutrack.core.models import (
    ActionType,
    ClickstreamEvent,
    ContentType,
    Course,
    DerivedStatistics,
    Rank,
    RecentActivity,
    SessionSummary,
)
from edutrack.core.sessions import SessionProcessor
from edutrack.core.statistics import (
    StatisticsAggregator,
    fingerprint,
    rank_for,
    welcome_statistics,
)

__all__ = [
    "ActionType",
    "ClickstreamEvent",
    "ContentType",
    "Course",
    "DerivedStatistics",
    "Rank",
    "RecentActivity",
    "SessionProcessor",
    "SessionSummary",
    "StatisticsAggregator",
    "fingerprint",
    "rank_for",
    "welcome_statistics",
]
