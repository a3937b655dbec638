"""Domain error taxonomy for the transcription job lifecycle."""

from __future__ import annotations

from enum import Enum
from typing import Any


class ErrorKind(str, Enum):
    VALIDATION = "VALIDATION_ERROR"
    NOT_FOUND = "RESOURCE_NOT_FOUND"
    PROVIDER_UNAVAILABLE = "PROVIDER_UNAVAILABLE"
    TRANSCRIPTION_FAILED = "TRANSCRIPTION_FAILED"
    TRANSCRIPT_NOT_READY = "TRANSCRIPT_NOT_READY"
    INVALID_TRANSITION = "FSM_TRANSITION_INVALID"
    DUPLICATE_ID = "DUPLICATE_JOB_ID"
    STORAGE_UNAVAILABLE = "STORAGE_UNAVAILABLE"


class JobError(Exception):
    """Base class for errors raised inside the job lifecycle."""

    kind: ErrorKind = ErrorKind.PROVIDER_UNAVAILABLE

    def __init__(self, message: str, *, details: dict[str, Any] | None = None) -> None:
        self.message = message
        self.details = details
        super().__init__(message)


class ValidationError(JobError):
    """Incoming media was rejected (wrong type, too large, missing)."""

    kind = ErrorKind.VALIDATION


class JobNotFoundError(JobError):
    kind = ErrorKind.NOT_FOUND

    def __init__(self, job_id: str) -> None:
        self.job_id = job_id
        super().__init__("Transcription job not found")


class DuplicateJobError(JobError):
    kind = ErrorKind.DUPLICATE_ID

    def __init__(self, job_id: str) -> None:
        self.job_id = job_id
        super().__init__("Transcription job already registered")


class InvalidTransitionError(JobError):
    kind = ErrorKind.INVALID_TRANSITION


class ProviderUnavailableError(JobError):
    """Transport failure or non-success response from the transcription provider."""

    kind = ErrorKind.PROVIDER_UNAVAILABLE

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(message, details={"provider_status_code": status_code} if status_code else None)


class TranscriptionFailedError(JobError):
    """The provider finished the job with an error status."""

    kind = ErrorKind.TRANSCRIPTION_FAILED


class TranscriptNotReadyError(JobError):
    kind = ErrorKind.TRANSCRIPT_NOT_READY


__all__ = [
    "DuplicateJobError",
    "ErrorKind",
    "InvalidTransitionError",
    "JobError",
    "JobNotFoundError",
    "ProviderUnavailableError",
    "TranscriptNotReadyError",
    "TranscriptionFailedError",
    "ValidationError",
]
