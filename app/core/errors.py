# app/core/errors.py
from enum import Enum
from fastapi import status
from google.api_core.exceptions import Conflict, Forbidden, GoogleAPICallError, NotFound


class ErrorKind(str, Enum):
    """Failure taxonomy shared by every façade, each kind pinned to one HTTP status."""

    BAD_REQUEST = "bad_request"
    FORBIDDEN = "forbidden"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    UPSTREAM_ERROR = "upstream_error"
    GENERIC_ERROR = "generic_error"

    @property
    def status_code(self) -> int:
        return _STATUS_CODES[self]


_STATUS_CODES = {
    ErrorKind.BAD_REQUEST: status.HTTP_400_BAD_REQUEST,
    ErrorKind.FORBIDDEN: status.HTTP_403_FORBIDDEN,
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.CONFLICT: status.HTTP_409_CONFLICT,
    ErrorKind.UPSTREAM_ERROR: status.HTTP_500_INTERNAL_SERVER_ERROR,
    ErrorKind.GENERIC_ERROR: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


class ServiceError(Exception):
    """Raised at the HTTP edge when a façade operation did not succeed."""

    def __init__(self, kind: ErrorKind, message: str):
        super().__init__(message)
        self.kind = kind
        self.message = message

    @property
    def status_code(self) -> int:
        return self.kind.status_code


def classify_google_error(error: GoogleAPICallError) -> ErrorKind:
    """
    Maps a Google API client exception onto the failure taxonomy.
    Only access, absence and conflict are distinguished; the rest is an upstream failure.
    """
    if isinstance(error, NotFound):
        return ErrorKind.NOT_FOUND
    if isinstance(error, Conflict):
        return ErrorKind.CONFLICT
    if isinstance(error, Forbidden):
        return ErrorKind.FORBIDDEN
    return ErrorKind.UPSTREAM_ERROR


def google_error_message(error: GoogleAPICallError) -> str:
    return getattr(error, "message", None) or str(error)
