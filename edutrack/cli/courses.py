# ==============================================================================
# Courses Command
# ==============================================================================
"""
Course catalog command for the EduTrack CLI.
"""

import json
from typing import Annotated

import typer

from edutrack.cli import shared
from edutrack.cli.shared import (
    BOX_WIDTH,
    C,
    I,
    _box_bottom,
    _box_header,
    _box_line,
    _empty_line,
    _truncate,
)
from edutrack.services.catalog import ALL_CONTENT, ContentCatalog, content_type_info


def list_courses(
    content_type: Annotated[
        str,
        typer.Option("--type", "-t", help="Filter by content type (all, text, video, quiz)"),
    ] = ALL_CONTENT,
    json_output: Annotated[
        bool, typer.Option("--json", "-j", help="Output as JSON for scripting")
    ] = False,
    retries: Annotated[
        int, typer.Option("--retries", "-r", min=0, help="Extra attempts after a failed fetch")
    ] = 0,
) -> None:
    """List available courses.

    Exits with status 1 when the catalog cannot be fetched.

    Examples:
        edutrack courses
        edutrack courses --type video
        edutrack courses --json --retries 2
    """
    client = shared.build_api_client()
    try:
        try:
            listing = ContentCatalog(client).list_courses(content_type, attempts=retries + 1)
        except ValueError as e:
            raise typer.BadParameter(str(e), param_hint="--type") from e
    finally:
        client.close()

    if json_output:
        if listing.ok:
            print(json.dumps([c.model_dump(mode="json", by_alias=True) for c in listing.courses], indent=2))
        else:
            print(json.dumps({"error": listing.error}))
    elif not listing.ok:
        print(f"\n{C.BRIGHT_RED}{I.CROSS} Failed to load courses: {listing.error}{C.RESET}")
        print(f"  Try again with '{C.WHITE}edutrack courses --retries 2{C.RESET}'\n")
    else:
        W = BOX_WIDTH
        print()
        print(_box_header(f"COURSES ({content_type})", W))
        print(_empty_line(W))
        if not listing.courses:
            print(_box_line(f"  {C.DIM}No courses found{C.RESET}", W))
        for course in listing.courses:
            info = content_type_info(course.type)
            title = _truncate(course.title, 40)
            print(_box_line(f"  {info['label']:<8} {C.WHITE}{title}{C.RESET}", W))
            meta = " · ".join(str(v) for v in (course.category, course.level, course.duration) if v)
            if meta:
                print(_box_line(f"           {C.DIM}{_truncate(meta, 50)}{C.RESET}", W))
        print(_empty_line(W))
        print(_box_bottom(W))
        print()

    if not listing.ok:
        raise typer.Exit(1)
