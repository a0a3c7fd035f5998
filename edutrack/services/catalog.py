# ==============================================================================
# Content Catalog
# ==============================================================================
"""
Course listing with content-type filtering.

A failed fetch is not an exception for callers: the listing comes back with
its error message set and no courses, which front ends render as a generic
error state with a retry option.
"""

import logging

from pydantic import BaseModel, Field

from edutrack.base import ContentSource, EduTrackError
from edutrack.core.models import ContentType, Course

logger = logging.getLogger(__name__)

ALL_CONTENT = "all"

CONTENT_TYPE_INFO: dict[str, dict[str, str]] = {
    ContentType.TEXT.value: {"label": "Reading", "icon": "📄"},
    ContentType.VIDEO.value: {"label": "Video", "icon": "🎥"},
    ContentType.QUIZ.value: {"label": "Quiz", "icon": "📝"},
}
DEFAULT_CONTENT_INFO = {"label": "Content", "icon": "📚"}


def content_type_info(content_type: str) -> dict[str, str]:
    """Display label and icon for a content type."""
    return dict(CONTENT_TYPE_INFO.get(content_type, DEFAULT_CONTENT_INFO))


class CourseListing(BaseModel):
    """Result of a catalog request."""

    content_type: str = ALL_CONTENT
    courses: list[Course] = Field(default_factory=list)
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class ContentCatalog:
    """Lists courses from a ContentSource."""

    def __init__(self, source: ContentSource):
        self._source = source

    def list_courses(self, content_type: str = ALL_CONTENT, attempts: int = 1) -> CourseListing:
        """
        List courses, optionally restricted to one content type.

        Args:
            content_type: "all" or one of text, video, quiz
            attempts: Times to try the fetch before reporting the error

        Returns:
            CourseListing with courses, or with error set on failure

        Raises:
            ValueError: If content_type is not recognised
        """
        valid = {ALL_CONTENT, *(t.value for t in ContentType)}
        if content_type not in valid:
            raise ValueError(
                f"Unknown content type: '{content_type}'. "
                f"Valid options are: {', '.join(sorted(valid))}"
            )

        error: str | None = None
        for attempt in range(1, max(1, attempts) + 1):
            try:
                courses = self._source.fetch_courses()
            except EduTrackError as e:
                error = str(e) or type(e).__name__
                logger.error("Failed to fetch courses (attempt %d): %s", attempt, error)
                continue

            if content_type != ALL_CONTENT:
                courses = [c for c in courses if c.type == content_type]
            logger.info("Listing %d %s courses", len(courses), content_type)
            return CourseListing(content_type=content_type, courses=courses)

        return CourseListing(content_type=content_type, error=error)
