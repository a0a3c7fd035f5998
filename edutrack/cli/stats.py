# ==============================================================================
# Statistics Commands
# ==============================================================================
"""
Dashboard statistics and session commands for the EduTrack CLI.
"""

import json
from typing import Annotated, Optional

import typer

from edutrack.base import EduTrackError
from edutrack.cli import shared
from edutrack.cli.shared import (
    BOX_WIDTH,
    C,
    I,
    _box_bottom,
    _box_header,
    _box_line,
    _empty_line,
    _section_header_plain,
    _truncate,
)
from edutrack.core.models import DerivedStatistics, RecentActivity
from edutrack.core.sessions import SessionProcessor


def _activity_label(activity: RecentActivity) -> str:
    details = activity.details
    label = details.get("courseTitle") or details.get("courseId") or details.get("to") or ""
    return str(label)


def _print_statistics(user_id: str, stats: DerivedStatistics) -> None:
    W = BOX_WIDTH

    print()
    print(_box_header(f"LEARNING DASHBOARD: {_truncate(user_id, 30)}", W))
    print(_empty_line(W))

    rows = [
        ("Courses Enrolled", stats.courses_enrolled),
        ("Courses Completed", stats.courses_completed),
        ("Overall Progress", f"{stats.overall_progress}%"),
        ("Study Hours", stats.study_hours),
        ("Weekly Hours", stats.weekly_hours),
        ("Day Streak", stats.streak),
        ("Achievements", f"{stats.achievements}/5"),
        ("Rank", stats.rank.value),
    ]
    for label, value in rows:
        print(_box_line(f"  {label:<26}{C.WHITE}{value!s:>12}{C.RESET}", W))

    print(_empty_line(W))
    print(_section_header_plain("Recent Activity", W))

    if not stats.recent_activities:
        print(_box_line(f"  {C.DIM}No activity yet{C.RESET}", W))
    for activity in stats.recent_activities:
        when = activity.timestamp.strftime("%Y-%m-%d %H:%M")
        label = _truncate(_activity_label(activity), 24)
        print(_box_line(f"  {when}  {activity.action:<15} {label}", W))

    print(_empty_line(W))
    print(_box_bottom(W))
    print()


# ==============================================================================
# Commands
# ==============================================================================


def show_stats(
    user_id: Annotated[str, typer.Argument(help="User id (username) to report on")],
    json_output: Annotated[
        bool, typer.Option("--json", "-j", help="Output as JSON for scripting")
    ] = False,
    timezone: Annotated[
        Optional[str],
        typer.Option("--timezone", "-t", help="IANA zone for streaks (default: host zone)"),
    ] = None,
    settle: Annotated[
        bool,
        typer.Option("--settle", help="Wait for the settle delay before reading the history"),
    ] = False,
) -> None:
    """Show dashboard statistics for a user.

    Statistics are derived from the user's full clickstream history. When the
    history cannot be fetched, default statistics with a welcome activity are
    shown.

    Examples:
        edutrack stats alice
        edutrack stats alice --json
        edutrack stats alice --timezone Europe/Paris
    """
    client = shared.build_api_client()
    try:
        service = shared.build_dashboard_service(client, timezone, settle=settle)
        if settle:
            stats = service.load_statistics_after_settle(user_id)
        else:
            stats = service.load_statistics(user_id)
    finally:
        client.close()

    if json_output:
        print(json.dumps(stats.to_dict(), indent=2))
        return

    _print_statistics(user_id, stats)


def show_sessions(
    user_id: Annotated[str, typer.Argument(help="User id (username) to report on")],
    json_output: Annotated[
        bool, typer.Option("--json", "-j", help="Output as JSON for scripting")
    ] = False,
) -> None:
    """Show a user's history grouped by session id.

    Examples:
        edutrack sessions alice
        edutrack sessions alice --json
    """
    client = shared.build_api_client()
    try:
        events = client.fetch_user_events(user_id)
    except EduTrackError as e:
        if json_output:
            print(json.dumps({"error": str(e)}))
        else:
            print(f"\n{C.BRIGHT_RED}{I.CROSS} Failed to load history: {e}{C.RESET}\n")
        raise typer.Exit(1)
    finally:
        client.close()

    summaries = SessionProcessor().summarize(events)

    if json_output:
        records = [
            {**s.model_dump(mode="json"), "duration_seconds": s.duration_seconds}
            for s in summaries
        ]
        print(json.dumps(records, indent=2))
        return

    W = BOX_WIDTH
    print()
    print(_box_header(f"SESSIONS: {_truncate(user_id, 40)}", W))
    print(_empty_line(W))

    if not summaries:
        print(_box_line(f"  {C.DIM}No sessions recorded{C.RESET}", W))

    for summary in summaries:
        start = summary.session_start.strftime("%Y-%m-%d %H:%M")
        print(_box_line(f"  {C.WHITE}{_truncate(summary.session_id, 40)}{C.RESET}", W))
        print(
            _box_line(
                f"    {start}  {summary.event_count:>4} events  "
                f"{summary.duration_seconds:>6}s  {len(summary.courses_viewed):>2} courses",
                W,
            )
        )

    print(_empty_line(W))
    print(_box_bottom(W))
    print()
