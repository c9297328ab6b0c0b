# app/core/result.py
from typing import Any, Optional
from google.api_core.exceptions import GoogleAPICallError
from pydantic import BaseModel, ConfigDict
from app.core.errors import ErrorKind, ServiceError, classify_google_error, google_error_message


class OperationResult(BaseModel):
    """
    Outcome of a single façade operation.

    Either ``ok`` with a payload, or a failure carrying an ``ErrorKind`` and a
    caller-facing message. Endpoints turn it into a response with ``unwrap``.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    ok: bool
    payload: Any = None
    kind: Optional[ErrorKind] = None
    message: Optional[str] = None

    @classmethod
    def success(cls, payload: Any) -> "OperationResult":
        return cls(ok=True, payload=payload)

    @classmethod
    def failure(cls, kind: ErrorKind, message: str) -> "OperationResult":
        return cls(ok=False, kind=kind, message=message)

    @classmethod
    def from_google_error(cls, error: GoogleAPICallError, prefix: str = "") -> "OperationResult":
        return cls.failure(classify_google_error(error), f"{prefix}{google_error_message(error)}")

    def unwrap(self) -> Any:
        if not self.ok:
            raise ServiceError(self.kind, self.message)
        return self.payload
