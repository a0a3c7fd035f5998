# ==============================================================================
# Tests for LearningApiClient
# ==============================================================================
"""
Unit tests for the HTTP EventStore/ContentSource.

Tests cover:
- Request construction (URL, method, JSON body, timeout)
- Response decoding into events and courses
- Error mapping (HTTP errors, success=false, malformed payloads)
- Retry on connection errors

The requests.Session is replaced by a MagicMock, so no server is needed.
"""

from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest
import requests

from edutrack.base import ApiError, ApiResponseError
from edutrack.core.models import ClickstreamEvent
from edutrack.infrastructure.api import LearningApiClient

BASE_URL = "http://api.test/api"


def _response(payload=None, status=200, reason="OK", invalid_json=False):
    response = MagicMock()
    response.ok = 200 <= status < 300
    response.status_code = status
    response.reason = reason
    if invalid_json:
        response.json.side_effect = ValueError("no json")
    else:
        response.json.return_value = payload
    return response


def _client(session, retries=1):
    return LearningApiClient(base_url=BASE_URL + "/", timeout=3.0, session=session, retries=retries)


EVENT_PAYLOAD = {
    "id": "e1",
    "sessionId": "s1",
    "userId": "alice",
    "action": "course_view",
    "details": {"courseId": "c1"},
    "timestamp": "2026-10-16T09:30:00.000Z",
}


class TestFetchUserEvents:
    """Tests for GET /clickstream/user/{id}."""

    def test_decodes_events(self):
        session = MagicMock()
        session.request.return_value = _response(
            {"success": True, "data": [EVENT_PAYLOAD], "totalActions": 1}
        )
        events = _client(session).fetch_user_events("alice")

        session.request.assert_called_once_with(
            "GET", f"{BASE_URL}/clickstream/user/alice", json=None, timeout=3.0
        )
        assert len(events) == 1
        event = events[0]
        assert event.session_id == "s1"
        assert event.course_id == "c1"
        assert event.timestamp == datetime(2026, 10, 16, 9, 30, tzinfo=timezone.utc)

    def test_quotes_user_id(self):
        session = MagicMock()
        session.request.return_value = _response({"success": True, "data": []})
        _client(session).fetch_user_events("a b/c")

        url = session.request.call_args.args[1]
        assert url == f"{BASE_URL}/clickstream/user/a%20b%2Fc"

    def test_missing_data_is_empty(self):
        session = MagicMock()
        session.request.return_value = _response({"success": True, "data": None})
        assert _client(session).fetch_user_events("alice") == []

    def test_null_details_tolerated(self):
        session = MagicMock()
        payload = {**EVENT_PAYLOAD, "details": None, "userId": 5}
        session.request.return_value = _response({"success": True, "data": [payload]})
        (event,) = _client(session).fetch_user_events("5")

        assert event.details == {}
        assert event.user_id == "5"

    def test_success_false_is_empty_history(self):
        session = MagicMock()
        session.request.return_value = _response({"success": False, "message": "nope"})
        assert _client(session).fetch_user_events("alice") == []

    def test_http_error(self):
        session = MagicMock()
        session.request.return_value = _response(status=404, reason="Not Found")
        with pytest.raises(ApiError) as excinfo:
            _client(session).fetch_user_events("alice")
        assert excinfo.value.status_code == 404
        assert "HTTP 404: Not Found" in str(excinfo.value)

    def test_invalid_json(self):
        session = MagicMock()
        session.request.return_value = _response(invalid_json=True)
        with pytest.raises(ApiResponseError, match="invalid JSON"):
            _client(session).fetch_user_events("alice")

    def test_non_object_body(self):
        session = MagicMock()
        session.request.return_value = _response([1, 2, 3])
        with pytest.raises(ApiResponseError, match="expected object"):
            _client(session).fetch_user_events("alice")

    def test_malformed_event(self):
        session = MagicMock()
        bad = {k: v for k, v in EVENT_PAYLOAD.items() if k != "timestamp"}
        session.request.return_value = _response({"success": True, "data": [bad]})
        with pytest.raises(ApiResponseError, match="Malformed event"):
            _client(session).fetch_user_events("alice")

    def test_connection_error_wrapped(self):
        session = MagicMock()
        session.request.side_effect = requests.exceptions.ConnectionError("refused")
        with pytest.raises(ApiError, match="refused"):
            _client(session).fetch_user_events("alice")

    def test_retries_connection_errors(self, monkeypatch):
        # Skip backoff sleeps
        monkeypatch.setattr("tenacity.nap.time.sleep", lambda _: None)
        session = MagicMock()
        session.request.side_effect = [
            requests.exceptions.ConnectionError("refused"),
            _response({"success": True, "data": [EVENT_PAYLOAD]}),
        ]
        events = _client(session, retries=3).fetch_user_events("alice")

        assert len(events) == 1
        assert session.request.call_count == 2


class TestAppend:
    """Tests for POST /clickstream."""

    def _event(self):
        return ClickstreamEvent.from_api_payload(EVENT_PAYLOAD)

    def test_posts_camel_case_payload(self):
        session = MagicMock()
        session.request.return_value = _response({"success": True})
        _client(session).append(self._event())

        method, url = session.request.call_args.args
        body = session.request.call_args.kwargs["json"]
        assert (method, url) == ("POST", f"{BASE_URL}/clickstream")
        assert body["sessionId"] == "s1"
        assert body["userId"] == "alice"
        assert body["details"] == {"courseId": "c1"}
        assert body["timestamp"].startswith("2026-10-16T09:30:00")

    def test_empty_object_accepted(self):
        session = MagicMock()
        session.request.return_value = _response({})
        _client(session).append(self._event())

    def test_explicit_failure(self):
        session = MagicMock()
        session.request.return_value = _response({"success": False})
        with pytest.raises(ApiResponseError, match="Failed to record event"):
            _client(session).append(self._event())


class TestFetchCourses:
    """Tests for GET /content."""

    def test_decodes_courses(self):
        session = MagicMock()
        session.request.return_value = _response(
            {
                "success": True,
                "content": [
                    {
                        "id": 1,
                        "title": "Intro",
                        "description": "Basics",
                        "type": "video",
                        "category": "programming",
                        "level": "beginner",
                        "tags": ["python"],
                        "duration": 45,
                        "createdAt": "2026-01-01T00:00:00Z",
                    }
                ],
            }
        )
        (course,) = _client(session).fetch_courses()

        assert course.id == "1"
        assert course.type == "video"
        assert course.tags == ["python"]
        assert course.created_at.year == 2026

    def test_failure_message(self):
        session = MagicMock()
        session.request.return_value = _response({"success": False})
        with pytest.raises(ApiResponseError, match="Failed to fetch courses"):
            _client(session).fetch_courses()


def test_base_url_trailing_slash_stripped():
    assert _client(MagicMock()).base_url == BASE_URL
