"""Application exception types."""

from typing import Any, TypeVar

from speakerline.domain.errors import ErrorKind
from speakerline.domain.outcome import Failure, Outcome
from speakerline.schemas.error import ErrorResponse

T = TypeVar("T")

_STATUS_BY_KIND: dict[ErrorKind, int] = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.TRANSCRIPT_NOT_READY: 400,
    ErrorKind.TRANSCRIPTION_FAILED: 400,
    ErrorKind.INVALID_TRANSITION: 409,
    ErrorKind.DUPLICATE_ID: 409,
    ErrorKind.PROVIDER_UNAVAILABLE: 500,
    ErrorKind.STORAGE_UNAVAILABLE: 500,
}


class ApiError(Exception):
    """Structured API error that maps directly to contract error payloads."""

    def __init__(self, status_code: int, code: str, message: str, details: dict[str, Any] | None = None) -> None:
        self.status_code = status_code
        self.payload = ErrorResponse(error=message, code=code, details=details)
        super().__init__(message)

    @classmethod
    def from_failure(cls, failure: Failure) -> "ApiError":
        return cls(
            status_code=_STATUS_BY_KIND.get(failure.kind, 500),
            code=failure.kind.value,
            message=failure.message,
            details=failure.details,
        )


def unwrap(outcome: Outcome[T]) -> T:
    """Return the outcome's value or raise the matching ApiError."""
    if outcome.failure is not None:
        raise ApiError.from_failure(outcome.failure)
    return outcome.value


__all__ = ["ApiError", "unwrap"]
