# ==============================================================================
# Tests for DashboardService
# ==============================================================================
"""
Unit tests for statistics loading, degradation and memoization.

Tests cover:
- Failed and empty fetches degrade to a single synthetic activity
- Memoized results are reused until the history changes
- The shared Valkey cache (fakeredis) stores and serves results
- The settle delay is honoured before loading
"""

from datetime import timedelta, timezone
from unittest.mock import MagicMock

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from conftest import NOW
from edutrack.core.statistics import StatisticsAggregator
from edutrack.infrastructure.api import LearningApiClient
from edutrack.services.dashboard import STATS_KEY_PREFIX, DashboardService


@pytest.fixture()
def aggregator():
    return StatisticsAggregator(tz=timezone.utc)


@pytest.fixture()
def service(store, aggregator):
    return DashboardService(store, aggregator=aggregator)


class TestDegradation:
    """Tests for fetch failures and empty histories."""

    def test_failed_fetch_yields_welcome(self, store, service):
        store.fail = True
        stats = service.load_statistics("alice", NOW)

        assert len(stats.recent_activities) == 1
        assert stats.recent_activities[0].id == "welcome-1"
        assert stats.recent_activities[0].details["courseTitle"] == "Welcome to EduTrack Pro"
        assert stats.courses_enrolled == 0

    def test_empty_history_yields_sample(self, service):
        stats = service.load_statistics("alice", NOW)

        assert len(stats.recent_activities) == 1
        assert stats.recent_activities[0].id == "sample-1"

    def test_history_computed(self, store, service, make_event):
        store.events = [
            make_event("course_view", "A"),
            make_event("course_view", "B"),
            make_event("course_view", "A"),
            make_event("quiz_complete", "A"),
        ]
        stats = service.load_statistics("alice", NOW)

        assert stats.courses_enrolled == 2
        assert stats.courses_completed == 1
        assert stats.overall_progress == 50
        assert len(stats.recent_activities) == 4

    def test_unsuccessful_response_yields_sample(self, aggregator):
        session = MagicMock()
        session.request.return_value.ok = True
        session.request.return_value.json.return_value = {"success": False, "data": []}
        client = LearningApiClient(base_url="http://api.test/api", session=session, retries=1)

        stats = DashboardService(client, aggregator=aggregator).load_statistics("alice", NOW)

        assert [a.id for a in stats.recent_activities] == ["sample-1"]

    def test_structured_course_ids(self, store, service, make_event):
        store.events = [
            make_event("course_view", {"id": "c1"}),
            make_event("course_view", "c2"),
        ]
        stats = service.load_statistics("alice", NOW)
        assert stats.courses_enrolled == 2

    def test_only_requested_user(self, store, service, make_event):
        store.events = [make_event("course_view", "A", user_id="bob")]
        stats = service.load_statistics("alice", NOW)
        assert stats.recent_activities[0].id == "sample-1"


class TestMemoization:
    """Tests for fingerprint-keyed memoization."""

    def test_reuses_result_for_same_history(self, store, service, make_event):
        store.events = [make_event("course_view", "A")]
        first = service.load_statistics("alice", NOW)
        second = service.load_statistics("alice", NOW)

        assert second == first
        assert service.misses == 1
        assert service.hits == 1

    def test_caller_mutation_does_not_leak_into_memo(self, store, service, make_event):
        store.events = [make_event("course_view", "A")]
        first = service.load_statistics("alice", NOW)
        first.streak = 99
        first.recent_activities.clear()

        second = service.load_statistics("alice", NOW)
        assert service.hits == 1
        assert second.streak == 1
        assert len(second.recent_activities) == 1

    def test_recomputes_after_new_event(self, store, service, make_event):
        store.events = [make_event("course_view", "A")]
        first = service.load_statistics("alice", NOW)

        store.events.append(make_event("course_view", "B"))
        second = service.load_statistics("alice", NOW)

        assert first.courses_enrolled == 1
        assert second.courses_enrolled == 2
        assert service.misses == 2

    def test_recomputes_on_new_day(self, store, service, make_event):
        store.events = [make_event("navigation")]
        today = service.load_statistics("alice", NOW)
        tomorrow = service.load_statistics("alice", NOW + timedelta(days=1))

        assert today.streak == 1
        assert tomorrow.streak == 0

    def test_expired_memo_recomputed(self, store, aggregator, make_event):
        service = DashboardService(store, aggregator=aggregator, cache_ttl_seconds=0)
        store.events = [make_event("navigation")]
        service.load_statistics("alice", NOW)
        service.load_statistics("alice", NOW)
        assert service.misses == 2

    def test_invalidate(self, store, service, make_event):
        store.events = [make_event("navigation")]
        service.load_statistics("alice", NOW)
        service.invalidate("alice")
        service.load_statistics("alice", NOW)
        assert service.misses == 2

    def test_memo_is_per_instance(self, store, aggregator, make_event):
        store.events = [make_event("navigation")]
        DashboardService(store, aggregator=aggregator).load_statistics("alice", NOW)
        other = DashboardService(store, aggregator=aggregator)
        other.load_statistics("alice", NOW)
        assert other.misses == 1


class TestSharedCache:
    """Tests for the optional Valkey cache."""

    def test_result_stored_with_ttl(self, store, aggregator, fake_cache, fake_redis, make_event):
        service = DashboardService(store, aggregator=aggregator, cache=fake_cache, cache_ttl_seconds=60)
        store.events = [make_event("course_view", "A")]
        service.load_statistics("alice", NOW)

        keys = fake_redis.keys(f"{STATS_KEY_PREFIX}alice:*")
        assert len(keys) == 1
        assert "2026-10-16" in keys[0]
        assert 0 < fake_redis.ttl(keys[0]) <= 60

    def test_served_from_cache_in_new_instance(self, store, aggregator, fake_cache, make_event):
        store.events = [make_event("course_view", "A"), make_event("quiz_start", "A")]
        first = DashboardService(store, aggregator=aggregator, cache=fake_cache)
        expected = first.load_statistics("alice", NOW)

        second = DashboardService(store, aggregator=aggregator, cache=fake_cache)
        cached = second.load_statistics("alice", NOW)

        assert second.hits == 1
        assert second.misses == 0
        assert cached == expected

    def test_invalidate_clears_cache(self, store, aggregator, fake_cache, fake_redis, make_event):
        service = DashboardService(store, aggregator=aggregator, cache=fake_cache)
        store.events = [make_event("navigation")]
        service.load_statistics("alice", NOW)
        service.invalidate("alice")
        assert fake_redis.keys(f"{STATS_KEY_PREFIX}alice:*") == []

    def test_malformed_cache_entry_ignored(self, store, aggregator, fake_cache, make_event):
        service = DashboardService(store, aggregator=aggregator, cache=fake_cache)
        store.events = [make_event("navigation")]
        key = service.cache_key("alice", store.events, NOW)
        fake_cache.set(key, {"streak": "not-a-number"})

        stats = service.load_statistics("alice", NOW)
        assert stats.streak == 1
        assert service.misses == 1

    def test_unreachable_cache_degrades(self, store, aggregator, make_event):
        cache = MagicMock()
        cache.get.side_effect = RedisConnectionError("down")
        cache.set.side_effect = RedisConnectionError("down")
        service = DashboardService(store, aggregator=aggregator, cache=cache)
        store.events = [make_event("course_view", "A")]

        assert service.load_statistics("alice", NOW).courses_enrolled == 1


class TestSettleDelay:
    """Tests for load_statistics_after_settle()."""

    def test_sleeps_before_loading(self, store, aggregator):
        calls = []
        sleep = MagicMock(side_effect=lambda s: calls.append(("sleep", s)))
        original = store.fetch_user_events

        def fetch(user_id):
            calls.append(("fetch", user_id))
            return original(user_id)

        store.fetch_user_events = fetch
        service = DashboardService(
            store, aggregator=aggregator, settle_delay_seconds=0.5, sleep=sleep
        )
        service.load_statistics_after_settle("alice", NOW)

        assert calls == [("sleep", 0.5), ("fetch", "alice")]

    def test_no_delay_configured(self, store, aggregator):
        sleep = MagicMock()
        service = DashboardService(store, aggregator=aggregator, sleep=sleep)
        service.load_statistics_after_settle("alice", NOW)
        sleep.assert_not_called()
