"""
Domain errors raised by the service layer.

Routes translate these into HTTP responses with `to_http_exception`.
"""
from fastapi import HTTPException, status


class CareerpilotError(Exception):
    """Base class for all domain errors."""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str = ""):
        super().__init__(message)
        self.message = message or self.__class__.__doc__ or "Request failed"


class InvalidInput(CareerpilotError):
    """Malformed input."""
    status_code = status.HTTP_400_BAD_REQUEST


class SessionNotFound(CareerpilotError):
    """Session not found."""
    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, message: str = "Session not found"):
        # Same message whether the id is unknown or owned by someone else
        super().__init__(message)


class ApplicationNotFound(CareerpilotError):
    """Application not found."""
    status_code = status.HTTP_404_NOT_FOUND


class InvalidSessionState(CareerpilotError):
    """The session does not accept this operation in its current state."""
    status_code = status.HTTP_409_CONFLICT


class ConcurrentSubmission(CareerpilotError):
    """The session was modified by another request."""
    status_code = status.HTTP_409_CONFLICT


class UpstreamUnavailable(CareerpilotError):
    """An external AI or speech service failed."""
    status_code = status.HTTP_502_BAD_GATEWAY


def to_http_exception(error: CareerpilotError) -> HTTPException:
    """Map a domain error onto the HTTPException the routes raise."""
    return HTTPException(status_code=error.status_code, detail=error.message)
