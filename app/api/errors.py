from fastapi import HTTPException

from app.core.exceptions import InterviewBackendError, InvalidInputError, NotFoundError


def to_http_exception(exc: InterviewBackendError, failure_detail: str) -> HTTPException:
    """Map a service error onto the client-visible outcome.

    Upstream failures stay opaque: the client only sees `failure_detail`.
    """
    if isinstance(exc, NotFoundError):
        return HTTPException(status_code=404, detail=str(exc))
    if isinstance(exc, InvalidInputError):
        return HTTPException(status_code=400, detail=str(exc))
    return HTTPException(status_code=500, detail=failure_detail)
