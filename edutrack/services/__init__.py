"""Application services composing stores with the core domain logic."""

from edutrack.services.catalog import (
    ContentCatalog,
    CourseListing,
    content_type_info,
)
from edutrack.services.dashboard import DashboardService

__all__ = [
    "ContentCatalog",
    "CourseListing",
    "DashboardService",
    "content_type_info",
]
