# ==============================================================================
# Exceptions
# ==============================================================================
"""
Exception hierarchy shared by stores and services.

Transport code raises these; services catch them at the fetch boundary and
degrade to default output.
"""


class EduTrackError(Exception):
    """Base class for all toolkit errors."""


class ApiError(EduTrackError):
    """The remote service could not be reached or answered with an HTTP error."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class ApiResponseError(EduTrackError):
    """The remote service answered, but with success=false or a malformed payload."""
