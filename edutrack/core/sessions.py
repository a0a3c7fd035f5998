# ==============================================================================
# Session Processor - Pure Domain Logic
# ==============================================================================
"""
Pure session grouping logic with no external dependencies.

A session is the set of events tagged with the same client-generated session
id (one id per browser load). There is no inactivity timeout and no explicit
start/end protocol: the id is the only boundary.

All methods work with plain dicts so the logic can be unit tested without
mocks and fed from any source of events.
"""

from collections.abc import Iterable

from edutrack.core.models import ActionType, ClickstreamEvent, SessionSummary

# Sessions whose events carry no session id are grouped under this key
UNKNOWN_SESSION_ID = "unknown"


class SessionProcessor:
    """
    Groups events into per-session aggregates.

    Session dict structure:
        {
            "session_id": str,
            "user_id": str | None,
            "session_start": datetime,     # earliest event time
            "session_end": datetime,       # latest event time
            "event_count": int,
            "action_counts": dict[str, int],
            "courses_viewed": list[str],
        }
    """

    def create_session(self, event: ClickstreamEvent) -> dict:
        """
        Create a new empty session dict seeded from its first event.

        Args:
            event: First event seen for the session

        Returns:
            New session dict with initialized values
        """
        return {
            "session_id": event.session_id or UNKNOWN_SESSION_ID,
            "user_id": event.user_id,
            "session_start": event.timestamp,
            "session_end": event.timestamp,
            "event_count": 0,
            "action_counts": {},
            "courses_viewed": [],
        }

    def update_session(self, session: dict, event: ClickstreamEvent) -> dict:
        """
        Update session with event data.

        Mutates the session dict in place and returns it. Events may arrive
        out of order; start and end always bracket every event seen.
        """
        session["event_count"] += 1
        session["session_start"] = min(session["session_start"], event.timestamp)
        session["session_end"] = max(session["session_end"], event.timestamp)

        counts = session["action_counts"]
        counts[event.action] = counts.get(event.action, 0) + 1

        if event.action == ActionType.COURSE_VIEW and event.course_id:
            course_id = str(event.course_id)
            if course_id not in session["courses_viewed"]:
                session["courses_viewed"].append(course_id)

        return session

    def process_events(
        self,
        events: Iterable[ClickstreamEvent],
        existing_sessions: dict[str, dict],
    ) -> dict[str, dict]:
        """
        Fold events into existing sessions.

        Mutates existing_sessions in place.

        Args:
            events: Events in any order
            existing_sessions: Dict mapping session_id to session dict

        Returns:
            The updated sessions dict (same object as existing_sessions)
        """
        for event in events:
            session_id = event.session_id or UNKNOWN_SESSION_ID
            current = existing_sessions.get(session_id)
            if current is None:
                current = self.create_session(event)
                existing_sessions[session_id] = current
            self.update_session(current, event)

        return existing_sessions

    @staticmethod
    def to_record(session: dict) -> SessionSummary:
        """Convert a session dict to a SessionSummary."""
        return SessionSummary(
            session_id=session["session_id"],
            user_id=session["user_id"],
            session_start=session["session_start"],
            session_end=session["session_end"],
            event_count=session["event_count"],
            action_counts=dict(session["action_counts"]),
            courses_viewed=list(session["courses_viewed"]),
        )

    def summarize(self, events: Iterable[ClickstreamEvent]) -> list[SessionSummary]:
        """Group a full history into session summaries, oldest session first."""
        sessions = self.process_events(events, {})
        records = [self.to_record(s) for s in sessions.values()]
        return sorted(records, key=lambda r: r.session_start)
