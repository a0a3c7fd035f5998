# ==============================================================================
# Valkey Statistics Cache
# ==============================================================================
"""
Cache adapter that lets several dashboard processes share computed statistics.

DashboardService stores one JSON document per (user, local date, history
fingerprint) under ``edutrack:stats:*`` with the analytics TTL, and drops a
user's documents with a pattern delete when their memo is invalidated.
Connection and timeout errors propagate; the service decides to degrade.
"""

import json
import logging

import redis
from redis.backoff import ExponentialBackoff
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import TimeoutError as RedisTimeoutError
from redis.retry import Retry

from edutrack.base import Cache
from edutrack.utils.config import get_settings
from edutrack.utils.retry import REDIS_RETRY_EXCEPTIONS, VALKEY_RETRIES

logger = logging.getLogger(__name__)

# Keys removed per DEL call when invalidating a user's statistics
DELETE_CHUNK_SIZE = 500


class ValkeyCache(Cache):
    """Statistics documents in Valkey, stored as JSON strings."""

    def __init__(
        self,
        url: str | None = None,
        socket_timeout: float = 5,
        retries: int | None = None,
    ):
        """
        Connect lazily to Valkey.

        Args:
            url: Connection URL (default: built from VALKEY_* settings)
            socket_timeout: Connect and read timeout in seconds
            retries: Client-side retries on connection errors (default: VALKEY_RETRIES)
        """
        self._url = url or get_settings().valkey.url
        attempts = VALKEY_RETRIES if retries is None else retries
        self._client = redis.from_url(
            self._url,
            decode_responses=True,
            socket_timeout=socket_timeout,
            socket_connect_timeout=socket_timeout,
            retry=Retry(ExponentialBackoff(cap=4, base=0.5), retries=attempts),
            retry_on_error=[RedisConnectionError, RedisTimeoutError],
        )

    @property
    def client(self) -> redis.Redis:
        return self._client

    def get(self, key: str) -> dict | None:
        raw = self._client.get(key)
        if raw is None:
            return None
        try:
            document = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Ignoring non-JSON value at %s", key)
            return None
        if not isinstance(document, dict):
            logger.warning("Ignoring %s value at %s", type(document).__name__, key)
            return None
        return document

    def set(self, key: str, value: dict, ttl_seconds: int | None = None) -> None:
        # A TTL of zero or less would be rejected by SET EX; store without expiry
        expiry = ttl_seconds if ttl_seconds and ttl_seconds > 0 else None
        self._client.set(key, json.dumps(value), ex=expiry)

    def delete(self, key: str) -> bool:
        return bool(self._client.delete(key))

    def delete_pattern(self, pattern: str) -> int:
        # Collect before deleting so the SCAN cursor never runs over a shrinking keyspace
        keys = list(self._client.scan_iter(match=pattern, count=DELETE_CHUNK_SIZE))
        removed = 0
        for start in range(0, len(keys), DELETE_CHUNK_SIZE):
            removed += self._client.delete(*keys[start : start + DELETE_CHUNK_SIZE])
        if removed:
            logger.debug("Removed %d cached documents matching %s", removed, pattern)
        return removed

    def ping(self) -> bool:
        """True when the server answers PING."""
        try:
            return bool(self._client.ping())
        except REDIS_RETRY_EXCEPTIONS as e:
            logger.debug("Valkey ping to %s failed: %s", self._url, e)
            return False

    def close(self) -> None:
        self._client.close()


def check_valkey_connection(url: str | None = None) -> bool:
    """
    Probe Valkey once before wiring it into a DashboardService.

    Uses a two second timeout and no retries so a missing server costs at
    most one short wait.
    """
    cache = ValkeyCache(url=url, socket_timeout=2, retries=0)
    try:
        return cache.ping()
    finally:
        cache.close()
