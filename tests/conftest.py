# ==============================================================================
# Shared Test Fixtures
# ==============================================================================
"""
Pytest fixtures shared across all test modules.

Provides:
- fakeredis-backed ValkeyCache instances
- An in-memory EventStore/ContentSource double
- A factory for clickstream events with deterministic timestamps
"""

import itertools
from datetime import datetime, timedelta, timezone

import fakeredis
import pytest

from edutrack.base import ApiError, ContentSource, EventStore
from edutrack.core.models import ClickstreamEvent, Course
from edutrack.infrastructure.cache import ValkeyCache

# Reference "now" for deterministic tests (UTC, mid-day)
NOW = datetime(2026, 10, 16, 12, 0, tzinfo=timezone.utc)


class InMemoryStore(EventStore, ContentSource):
    """EventStore and ContentSource backed by plain lists.

    Set ``fail`` to make every call raise ApiError.
    """

    def __init__(self, events=None, courses=None):
        self.events: list[ClickstreamEvent] = list(events or [])
        self.courses: list[Course] = list(courses or [])
        self.fail = False
        self.fetch_calls = 0

    def append(self, event):
        if self.fail:
            raise ApiError("store unavailable", status_code=503)
        self.events.append(event)

    def fetch_user_events(self, user_id):
        self.fetch_calls += 1
        if self.fail:
            raise ApiError("store unavailable", status_code=503)
        return [e for e in self.events if e.user_id == str(user_id)]

    def fetch_courses(self):
        if self.fail:
            raise ApiError("HTTP 500: Internal Server Error", status_code=500)
        return list(self.courses)

    def close(self):
        pass


@pytest.fixture()
def make_event():
    """Factory building events for user 'alice'.

    ``days_ago`` / ``hours_ago`` offset the timestamp from NOW.
    """
    counter = itertools.count(1)

    def _make(action, course_id=None, days_ago=0, hours_ago=0, session_id="s1", user_id="alice", **details):
        if course_id is not None:
            details["courseId"] = course_id
        return ClickstreamEvent(
            id=f"evt-{next(counter)}",
            session_id=session_id,
            user_id=user_id,
            action=action,
            details=details,
            timestamp=NOW - timedelta(days=days_ago, hours=hours_ago),
        )

    return _make


@pytest.fixture()
def store():
    """An empty in-memory store."""
    return InMemoryStore()


@pytest.fixture()
def fake_redis():
    """A clean fakeredis instance for each test.

    Uses decode_responses=True to match the real ValkeyCache behavior.
    """
    server = fakeredis.FakeServer()
    client = fakeredis.FakeRedis(server=server, decode_responses=True)
    yield client
    client.flushall()
    client.close()


@pytest.fixture()
def fake_cache(fake_redis):
    """A ValkeyCache with its internal client replaced by fakeredis."""
    cache = ValkeyCache.__new__(ValkeyCache)
    cache._client = fake_redis
    cache._url = "redis://fake:6379"
    return cache
