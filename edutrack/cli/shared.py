# ==============================================================================
# Shared Utilities for CLI Commands
# ==============================================================================
"""
Shared utilities, constants, and helper functions used across CLI command modules.

This module provides:
- ANSI color codes and box-drawing characters
- Box drawing helpers for formatted output
- Builders wiring settings into clients and services
"""

import logging
import re
from zoneinfo import ZoneInfoNotFoundError

import typer

from edutrack.core.statistics import StatisticsAggregator, resolve_timezone
from edutrack.infrastructure.api import LearningApiClient
from edutrack.services.dashboard import DashboardService
from edutrack.utils.config import get_settings

logger = logging.getLogger(__name__)

# ==============================================================================
# Constants
# ==============================================================================

# Box drawing width (unified for all commands)
BOX_WIDTH = 68


# ==============================================================================
# ANSI Colors and Box Drawing
# ==============================================================================


class Colors:
    """ANSI color codes for terminal output."""

    RESET = "\033[0m"
    BOLD = "\033[1m"
    DIM = "\033[2m"

    CYAN = "\033[36m"
    WHITE = "\033[37m"

    BRIGHT_RED = "\033[91m"
    BRIGHT_GREEN = "\033[92m"
    BRIGHT_YELLOW = "\033[93m"


class Box:
    """Unicode box-drawing characters."""

    H = "─"  # horizontal
    V = "│"  # vertical
    TL = "┌"  # top-left
    TR = "┐"  # top-right
    BL = "└"  # bottom-left
    BR = "┘"  # bottom-right
    LT = "├"  # left-tee
    RT = "┤"  # right-tee


class Icons:
    """Status icons using Unicode symbols."""

    CHECK = "✓"
    CROSS = "✗"
    BULLET = "•"
    ARROW = "→"


# Module-level aliases for convenience
C, B, I = Colors, Box, Icons

_ANSI_ESCAPE_PATTERN = re.compile(r"\x1b\[[0-9;]*m")


def _visible_len(s: str) -> int:
    """Calculate visible length of string, ignoring ANSI escape codes."""
    return len(_ANSI_ESCAPE_PATTERN.sub("", s))


def _truncate(s: str, width: int) -> str:
    """Shorten plain text to at most width characters."""
    if len(s) <= width:
        return s
    return s[: max(0, width - 1)] + "…"


def _box_header(title: str, width: int = BOX_WIDTH) -> str:
    """Create a single-line box header."""
    inner_width = width - 2
    title_padded = f" {title} "
    left_bar = (inner_width - len(title_padded)) // 2
    right_bar = inner_width - left_bar - len(title_padded)
    return (
        f"{C.CYAN}{B.TL}{B.H * left_bar}{C.BOLD}{C.WHITE}{title_padded}"
        f"{C.RESET}{C.CYAN}{B.H * right_bar}{B.TR}{C.RESET}"
    )


def _section_header_plain(title: str, width: int = BOX_WIDTH) -> str:
    """Create a section header without icon."""
    inner_width = width - 2
    title_padded = f" {title} "
    bar_len = inner_width - len(title_padded) - 1  # -1 for the first H after LT
    return (
        f"{C.CYAN}{B.LT}{B.H}{C.BOLD}{title_padded}{C.RESET}{C.CYAN}{B.H * bar_len}{B.RT}{C.RESET}"
    )


def _box_line(content: str, width: int = BOX_WIDTH) -> str:
    """Create a line inside the box with proper padding to right border."""
    inner_width = width - 2
    padding = inner_width - _visible_len(content)
    return f"{C.CYAN}{B.V}{C.RESET}{content}{' ' * padding}{C.CYAN}{B.V}{C.RESET}"


def _empty_line(width: int = BOX_WIDTH) -> str:
    """Create an empty line inside the box."""
    return f"{C.CYAN}{B.V}{' ' * (width - 2)}{B.V}{C.RESET}"


def _box_bottom(width: int = BOX_WIDTH) -> str:
    """Create a box bottom border with centered attribution."""
    text = " EduTrack Analytics "
    remaining = width - 2 - len(text)  # -2 for corners
    left_pad = remaining // 2
    right_pad = remaining - left_pad
    return f"{C.CYAN}{B.BL}{B.H * left_pad}{text}{B.H * right_pad}{B.BR}{C.RESET}"


# ==============================================================================
# Builders
# ==============================================================================


def configure_logging(level: str | None = None) -> None:
    """Configure root logging for CLI runs (stderr, level from settings)."""
    level_name = (level or get_settings().log_level).upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    # Suppress noisy third-party loggers
    logging.getLogger("urllib3").setLevel(logging.WARNING)


def build_api_client() -> LearningApiClient:
    """Create an API client from settings."""
    return LearningApiClient()


def build_aggregator(timezone_name: str | None = None) -> StatisticsAggregator:
    """
    Create a StatisticsAggregator for a zone name (settings when None).

    Raises:
        typer.BadParameter: If the zone name is unknown
    """
    name = timezone_name or get_settings().analytics.timezone
    try:
        return StatisticsAggregator(tz=resolve_timezone(name))
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise typer.BadParameter(f"Unknown time zone: '{name}'") from e


def build_dashboard_service(
    store, timezone_name: str | None = None, settle: bool = False
) -> DashboardService:
    """
    Create a DashboardService wired from settings.

    The Valkey cache is attached only when ANALYTICS_CACHE_ENABLED is set
    and the server answers a ping.
    """
    settings = get_settings()
    cache = None
    if settings.analytics.cache_enabled:
        from edutrack.infrastructure.cache import ValkeyCache, check_valkey_connection

        if check_valkey_connection():
            cache = ValkeyCache()
        else:
            logger.warning(
                "Valkey not reachable at %s:%s, statistics cache disabled",
                settings.valkey.host,
                settings.valkey.port,
            )

    return DashboardService(
        store,
        aggregator=build_aggregator(timezone_name),
        cache=cache,
        cache_ttl_seconds=settings.analytics.cache_ttl_seconds,
        settle_delay_seconds=settings.settle_delay_seconds if settle else 0.0,
    )
