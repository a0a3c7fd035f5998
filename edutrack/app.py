# ==============================================================================
# EduTrack CLI
# ==============================================================================
"""
Command-line interface for EduTrack clickstream analytics.

Usage:
    edutrack --help
    edutrack stats alice
    edutrack sessions alice --json
    edutrack courses --type video
    edutrack track course_view -u alice -d courseId=c1
    edutrack config show
"""

import os

import typer

from edutrack.cli.shared import configure_logging

# Set consistent terminal width for help output formatting
if "COLUMNS" not in os.environ:
    os.environ["COLUMNS"] = "115"

app = typer.Typer(
    name="edutrack",
    help="EduTrack clickstream analytics CLI",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


@app.callback()
def _main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    configure_logging("DEBUG" if verbose else None)


from edutrack.cli.stats import show_sessions, show_stats

app.command("stats")(show_stats)
app.command("sessions")(show_sessions)

from edutrack.cli.courses import list_courses

app.command("courses")(list_courses)

from edutrack.cli.track import track_event

app.command("track")(track_event)

config_app = typer.Typer(
    help="Configuration management",
    no_args_is_help=True,
)
app.add_typer(config_app, name="config")

from edutrack.cli.config import config_show

config_app.command("show")(config_show)


# ==============================================================================
# Entry Point
# ==============================================================================


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
