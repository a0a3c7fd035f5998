# ==============================================================================
# Version Utilities
# ==============================================================================
"""
Utilities for retrieving package versions.
"""

from importlib.metadata import version, PackageNotFoundError


def get_edutrack_version() -> str:
    """
    Get the edutrack-analytics package version.

    Returns:
        Version string (e.g., "0.1.0")
    """
    try:
        return version("edutrack-analytics")
    except PackageNotFoundError:
        return "0.1.0"
