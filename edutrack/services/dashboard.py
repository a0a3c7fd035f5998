# ==============================================================================
# Dashboard Service
# ==============================================================================
"""
Loads a user's history and turns it into dashboard statistics.

Composes an EventStore with the StatisticsAggregator:
- Fetch failures and empty histories degrade to welcome statistics
- Results are memoized per user, keyed by a fingerprint of the history
  (length + ids) and the reference calendar date
- An optional shared Cache (Valkey) lets several processes reuse results

A new event changes the fingerprint, so the next load recomputes.
"""

import logging
import time
from collections.abc import Callable, Sequence
from datetime import datetime, timezone

from pydantic import ValidationError

from edutrack.base import Cache, EduTrackError, EventStore
from edutrack.core.models import ClickstreamEvent, DerivedStatistics
from edutrack.core.statistics import (
    SAMPLE_ACTIVITY_ID,
    WELCOME_ACTIVITY_ID,
    StatisticsAggregator,
    fingerprint,
    welcome_statistics,
)
from edutrack.utils.retry import REDIS_RETRY_EXCEPTIONS

logger = logging.getLogger(__name__)

STATS_KEY_PREFIX = "edutrack:stats:"


class DashboardService:
    """
    Statistics loader with failure degradation and memoization.

    Each instance owns its memo; nothing is shared between instances except
    through the optional cache.
    """

    def __init__(
        self,
        store: EventStore,
        aggregator: StatisticsAggregator | None = None,
        cache: Cache | None = None,
        cache_ttl_seconds: int = 300,
        settle_delay_seconds: float = 0.0,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """
        Initialize the service.

        Args:
            store: Source of user histories
            aggregator: Statistics computation (default: host-local zone)
            cache: Optional shared cache for computed statistics
            cache_ttl_seconds: Lifetime of memoized and cached results
            settle_delay_seconds: Delay used by load_statistics_after_settle()
            sleep: Sleep function (injectable for tests)
        """
        self._store = store
        self._aggregator = aggregator or StatisticsAggregator()
        self._cache = cache
        self._cache_ttl = cache_ttl_seconds
        self._settle_delay = settle_delay_seconds
        self._sleep = sleep

        # user_id -> (key, statistics, stored_at monotonic)
        self._memo: dict[str, tuple[str, DerivedStatistics, float]] = {}
        self.hits = 0
        self.misses = 0

    @property
    def aggregator(self) -> StatisticsAggregator:
        return self._aggregator

    def cache_key(
        self, user_id: str, events: Sequence[ClickstreamEvent], now: datetime
    ) -> str:
        """Memo key for a history as seen on the reference date."""
        day = self._aggregator.local_date(now).isoformat()
        return f"{STATS_KEY_PREFIX}{user_id}:{day}:{fingerprint(events)}"

    def load_statistics(self, user_id: str, now: datetime | None = None) -> DerivedStatistics:
        """
        Fetch a user's history and derive their statistics.

        Never raises for store failures: a failed fetch yields welcome
        statistics (activity id "welcome-1"), an empty history yields sample
        statistics (activity id "sample-1").

        Args:
            user_id: User identifier
            now: Reference time (defaults to the current time)
        """
        logger.info("Loading statistics for user %s", user_id)
        try:
            events = self._store.fetch_user_events(user_id)
        except EduTrackError as e:
            logger.info("Error loading statistics for %s, using defaults: %s", user_id, e)
            return welcome_statistics(WELCOME_ACTIVITY_ID, now)

        if not events:
            logger.info("No history for user %s, showing sample activity", user_id)
            return welcome_statistics(SAMPLE_ACTIVITY_ID, now)

        stats = self.statistics_for(user_id, events, now)
        logger.info(
            "Statistics loaded for %s: courses=%d achievements=%d study_hours=%d",
            user_id,
            stats.courses_enrolled,
            stats.achievements,
            stats.study_hours,
        )
        return stats

    def load_statistics_after_settle(
        self, user_id: str, now: datetime | None = None
    ) -> DerivedStatistics:
        """Wait for the settle delay, then load statistics.

        Gives a just-sent write time to land before the history is read.
        This is an ordering heuristic, not a synchronization guarantee.
        """
        if self._settle_delay > 0:
            self._sleep(self._settle_delay)
        return self.load_statistics(user_id, now)

    def statistics_for(
        self,
        user_id: str,
        events: Sequence[ClickstreamEvent],
        now: datetime | None = None,
    ) -> DerivedStatistics:
        """
        Memoized statistics for an already-fetched history.

        Args:
            user_id: User identifier (memo partition)
            events: The user's events ordered by arrival
            now: Reference time (defaults to the current time)
        """
        if now is None:
            now = self._aggregator.now()
        elif now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)

        key = self.cache_key(user_id, events, now)

        memo = self._memo.get(user_id)
        if memo is not None:
            memo_key, memo_stats, stored_at = memo
            if memo_key == key and time.monotonic() - stored_at < self._cache_ttl:
                self.hits += 1
                return memo_stats.model_copy(deep=True)

        stats = self._cache_get(key)
        if stats is not None:
            self.hits += 1
        else:
            self.misses += 1
            stats = self._aggregator.compute(events, now)
            self._cache_set(key, stats)

        self._memo[user_id] = (key, stats, time.monotonic())
        return stats.model_copy(deep=True)

    def invalidate(self, user_id: str) -> None:
        """Drop memoized results for a user (local memo and shared cache)."""
        self._memo.pop(user_id, None)
        if self._cache is None:
            return
        try:
            self._cache.delete_pattern(f"{STATS_KEY_PREFIX}{user_id}:*")
        except REDIS_RETRY_EXCEPTIONS as e:
            logger.warning("Failed to invalidate cached statistics for %s: %s", user_id, e)

    # ==========================================================================
    # Shared cache helpers
    # ==========================================================================

    def _cache_get(self, key: str) -> DerivedStatistics | None:
        if self._cache is None:
            return None
        try:
            cached = self._cache.get(key)
        except REDIS_RETRY_EXCEPTIONS as e:
            logger.warning("Statistics cache unavailable: %s", e)
            return None
        if cached is None:
            return None
        try:
            return DerivedStatistics.model_validate(cached)
        except ValidationError:
            logger.warning("Discarding malformed cached statistics at %s", key)
            return None

    def _cache_set(self, key: str, stats: DerivedStatistics) -> None:
        if self._cache is None:
            return
        try:
            self._cache.set(key, stats.to_dict(), ttl_seconds=self._cache_ttl)
        except REDIS_RETRY_EXCEPTIONS as e:
            logger.warning("Failed to cache statistics at %s: %s", key, e)
