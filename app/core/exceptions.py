"""
Error taxonomy shared by the services and the HTTP layer.

Services raise these; endpoints translate them into HTTPException.
"""


class InterviewBackendError(Exception):
    """Base class for all expected failures of a single request."""


class NotFoundError(InterviewBackendError, LookupError):
    """Interview, resume, round or question does not exist."""


class InvalidInputError(InterviewBackendError, ValueError):
    """A required field is missing or malformed."""


class UpstreamServiceError(InterviewBackendError, RuntimeError):
    """The content generator or the object storage failed."""
