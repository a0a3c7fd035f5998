# ==============================================================================
# Config Commands
# ==============================================================================
"""
Configuration commands for the EduTrack CLI.
"""

import json
from typing import Annotated

import typer

from edutrack.cli.shared import C
from edutrack.utils.config import get_settings
from edutrack.utils.versions import get_edutrack_version


def config_show(
    json_output: Annotated[
        bool, typer.Option("--json", "-j", help="Output configuration as JSON")
    ] = False,
) -> None:
    """Display current configuration (includes secrets in JSON mode)."""
    settings = get_settings()

    if json_output:
        config = {
            "version": get_edutrack_version(),
            "api": {
                "base_url": settings.api.base_url,
                "timeout_seconds": settings.api.timeout_seconds,
            },
            "tracking": {
                "user_id": settings.tracking.user_id,
                "session_id": settings.tracking.session_id,
                "batch_size": settings.tracking.batch_size,
            },
            "analytics": {
                "timezone": settings.analytics.timezone,
                "cache_enabled": settings.analytics.cache_enabled,
                "cache_ttl_seconds": settings.analytics.cache_ttl_seconds,
                "settle_delay_ms": settings.analytics.settle_delay_ms,
            },
            "valkey": {
                "host": settings.valkey.host,
                "port": settings.valkey.port,
                "db": settings.valkey.db,
                "ssl": settings.valkey.ssl,
                "password": settings.valkey.password,
            },
            "log_level": settings.log_level,
        }
        print(json.dumps(config, indent=2))
        return

    def row(label: str, value) -> None:
        shown = "-" if value in (None, "") else value
        print(f"  {label:<22}{C.WHITE}{shown}{C.RESET}")

    print()
    print(f"  {C.BOLD}EduTrack v{get_edutrack_version()}{C.RESET}")
    print()
    row("API base URL", settings.api.base_url)
    row("API timeout", f"{settings.api.timeout_seconds:g}s")
    row("Tracking user", settings.tracking.user_id)
    row("Tracking batch size", settings.tracking.batch_size)
    row("Time zone", settings.analytics.timezone or "host-local")
    row("Statistics cache", "valkey" if settings.analytics.cache_enabled else "in-process")
    if settings.analytics.cache_enabled:
        row("Valkey", f"{settings.valkey.host}:{settings.valkey.port}/{settings.valkey.db}")
    row("Cache TTL", f"{settings.analytics.cache_ttl_seconds}s")
    row("Settle delay", f"{settings.analytics.settle_delay_ms}ms")
    row("Log level", settings.log_level)
    print()
