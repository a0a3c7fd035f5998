# ==============================================================================
# Track Command
# ==============================================================================
"""
Record a single clickstream event from the command line.

Useful for seeding a collection service and for smoke-testing the write path.
"""

import json
from typing import Annotated, Any, Optional

import typer

from edutrack.cli import shared
from edutrack.cli.shared import C, I
from edutrack.tracking import EventRecorder
from edutrack.utils.config import get_settings


def _parse_details(pairs: list[str]) -> dict[str, Any]:
    """
    Parse key=value pairs into a details payload.

    Values that parse as JSON (numbers, booleans, null, quoted strings) keep
    their JSON type; anything else is taken as a plain string.

    Raises:
        typer.BadParameter: If a pair has no '='
    """
    details: dict[str, Any] = {}
    for pair in pairs:
        key, sep, raw = pair.partition("=")
        if not sep or not key:
            raise typer.BadParameter(f"Expected key=value, got '{pair}'", param_hint="--detail")
        try:
            details[key] = json.loads(raw)
        except ValueError:
            details[key] = raw
    return details


def track_event(
    action: Annotated[str, typer.Argument(help="Action name (course_view, quiz_start, ...)")],
    user: Annotated[
        Optional[str], typer.Option("--user", "-u", help="User id (default: TRACKING_USER_ID)")
    ] = None,
    session: Annotated[
        Optional[str],
        typer.Option("--session", "-s", help="Session id (default: TRACKING_SESSION_ID or new)"),
    ] = None,
    detail: Annotated[
        Optional[list[str]],
        typer.Option("--detail", "-d", help="Detail as key=value (repeatable)"),
    ] = None,
) -> None:
    """Record one clickstream event.

    Examples:
        edutrack track course_view -u alice -d courseId=c1 -d courseTitle=Intro
        edutrack track quiz_complete -u alice -d courseId=c1 -d score=90
    """
    settings = get_settings()
    user_id = user or settings.tracking.user_id
    if not user_id:
        raise typer.BadParameter("A user id is required", param_hint="--user")

    details = _parse_details(detail or [])

    client = shared.build_api_client()
    try:
        with EventRecorder(
            client,
            user_id=user_id,
            session_id=session or settings.tracking.session_id,
            batch_size=settings.tracking.batch_size,
        ) as recorder:
            event = recorder.track(action, details)
    finally:
        client.close()

    if recorder.failed:
        print(f"{C.BRIGHT_RED}{I.CROSS} Failed to record '{action}' for {user_id}{C.RESET}")
        raise typer.Exit(1)

    print(
        f"{C.BRIGHT_GREEN}{I.CHECK} Recorded '{action}' for {user_id} "
        f"(event {C.WHITE}{event.id}{C.RESET}{C.BRIGHT_GREEN}, "
        f"session {recorder.session_id}){C.RESET}"
    )
