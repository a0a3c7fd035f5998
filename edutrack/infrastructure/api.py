# ==============================================================================
# Learning API Client
# ==============================================================================
"""
HTTP implementation of the EventStore and ContentSource interfaces.

Endpoints (relative to the configured base URL):
- GET  /clickstream/user/{id}  -> {success, data: Event[], totalActions}
- POST /clickstream            -> {success}     (one Event per call)
- GET  /content                -> {success, content: Course[], message?}

Connection errors and timeouts are retried with light retry logic
(3 attempts, ~7 seconds). Everything else is raised immediately as an
ApiError or ApiResponseError.
"""

import logging
from typing import Any
from urllib.parse import quote

import requests
from pydantic import ValidationError

from edutrack.base import ApiError, ApiResponseError, ContentSource, EventStore
from edutrack.core.models import ClickstreamEvent, Course
from edutrack.utils.config import get_settings
from edutrack.utils.retry import HTTP_RETRY_EXCEPTIONS, RETRY_ATTEMPTS_LIGHT, retry_light

logger = logging.getLogger(__name__)


class LearningApiClient(EventStore, ContentSource):
    """
    Client for the learning API's clickstream and content endpoints.

    Explicitly constructed and injected; holds a requests.Session for
    connection reuse.
    """

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        session: requests.Session | None = None,
        retries: int = RETRY_ATTEMPTS_LIGHT,
    ):
        """
        Initialize the client.

        Args:
            base_url: API base URL. If None, uses settings.
            timeout: Request timeout in seconds. If None, uses settings.
            session: requests.Session to use (a new one is created if None)
            retries: Total attempts for connection errors and timeouts
        """
        if base_url is None or timeout is None:
            settings = get_settings()
            base_url = base_url or settings.api.base_url
            timeout = timeout if timeout is not None else settings.api.timeout_seconds

        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._session = session or requests.Session()
        self._send = retry_light(HTTP_RETRY_EXCEPTIONS, logger, attempts=retries)(
            self._send_once
        )

    @property
    def base_url(self) -> str:
        return self._base_url

    def _send_once(self, method: str, url: str, payload: dict | None) -> requests.Response:
        return self._session.request(method, url, json=payload, timeout=self._timeout)

    def _request(self, method: str, path: str, payload: dict | None = None) -> dict[str, Any]:
        """
        Perform a request and decode the JSON object it returns.

        Raises:
            ApiError: On transport failure or a non-2xx status
            ApiResponseError: If the body is not a JSON object
        """
        url = f"{self._base_url}{path}"
        try:
            response = self._send(method, url, payload)
        except requests.exceptions.RequestException as e:
            raise ApiError(f"{method} {url} failed: {e}") from e

        if not response.ok:
            raise ApiError(
                f"HTTP {response.status_code}: {response.reason}",
                status_code=response.status_code,
            )

        try:
            data = response.json()
        except ValueError as e:
            raise ApiResponseError(f"{method} {url} returned invalid JSON") from e

        if not isinstance(data, dict):
            raise ApiResponseError(f"{method} {url} returned {type(data).__name__}, expected object")
        return data

    @staticmethod
    def _require_success(data: dict[str, Any], default_message: str) -> None:
        if not data.get("success"):
            raise ApiResponseError(data.get("message") or default_message)

    # ==========================================================================
    # EventStore
    # ==========================================================================

    def append(self, event: ClickstreamEvent) -> None:
        """Send one event to the collection endpoint."""
        data = self._request("POST", "/clickstream", event.to_api_payload())
        # Older collectors answer with an empty object
        if data.get("success") is False:
            raise ApiResponseError(data.get("message") or "Failed to record event")
        logger.debug("Recorded %s event %s", event.action, event.id)

    def fetch_user_events(self, user_id: str) -> list[ClickstreamEvent]:
        """Fetch a user's full history from the collection endpoint.

        A response the server answered with ``success: false`` means there is
        no history to show, so it yields an empty list rather than an error.
        """
        data = self._request("GET", f"/clickstream/user/{quote(str(user_id), safe='')}")
        if not data.get("success"):
            logger.info(
                "No history returned for user %s: %s",
                user_id,
                data.get("message") or "success=false",
            )
            return []

        raw_events = data.get("data") or []
        try:
            events = [ClickstreamEvent.from_api_payload(item) for item in raw_events]
        except (ValidationError, TypeError) as e:
            raise ApiResponseError(f"Malformed event in history of {user_id}: {e}") from e

        logger.info(
            "Fetched %d events for user %s (totalActions=%s)",
            len(events),
            user_id,
            data.get("totalActions"),
        )
        return events

    # ==========================================================================
    # ContentSource
    # ==========================================================================

    def fetch_courses(self) -> list[Course]:
        """Fetch the course catalog from the content endpoint."""
        data = self._request("GET", "/content")
        self._require_success(data, "Failed to fetch courses")

        try:
            courses = [Course.model_validate(item) for item in data.get("content") or []]
        except (ValidationError, TypeError) as e:
            raise ApiResponseError(f"Malformed course in catalog: {e}") from e

        logger.info("Fetched %d courses", len(courses))
        return courses

    def close(self) -> None:
        """Close the underlying HTTP session."""
        self._session.close()
