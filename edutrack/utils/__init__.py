# ==============================================================================
# EduTrack Utilities
# ==============================================================================
"""
Shared utilities: configuration, retry policies and version lookup.
"""

from edutrack.utils.config import (
    AnalyticsSettings,
    ApiSettings,
    Settings,
    TrackingSettings,
    ValkeySettings,
    get_settings,
)
from edutrack.utils.versions import get_edutrack_version

__all__ = [
    # Config
    "AnalyticsSettings",
    "ApiSettings",
    "Settings",
    "TrackingSettings",
    "ValkeySettings",
    "get_settings",
    # Versions
    "get_edutrack_version",
]
