# ==============================================================================
# Base Abstract Classes
# ==============================================================================
"""
Abstract base classes defining the ports of the ports-and-adapters layout.

Stores and caches are injected into services; nothing in the toolkit reaches
for process-wide singletons.
"""

from edutrack.base.cache import Cache
from edutrack.base.errors import ApiError, ApiResponseError, EduTrackError
from edutrack.base.stores import ContentSource, EventStore

__all__ = [
    "ApiError",
    "ApiResponseError",
    "Cache",
    "ContentSource",
    "EduTrackError",
    "EventStore",
]
