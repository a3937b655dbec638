"""Explicit success-or-failure results returned by the service layer."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from speakerline.domain.errors import ErrorKind, JobError

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class Failure:
    kind: ErrorKind
    message: str
    details: dict[str, Any] | None = None

    @classmethod
    def from_error(cls, exc: JobError) -> "Failure":
        return cls(kind=exc.kind, message=exc.message, details=exc.details)


@dataclass(frozen=True, slots=True)
class Outcome(Generic[T]):
    value: T | None = None
    failure: Failure | None = None

    @classmethod
    def success(cls, value: T) -> "Outcome[T]":
        return cls(value=value)

    @classmethod
    def fail(cls, exc: JobError) -> "Outcome[T]":
        return cls(failure=Failure.from_error(exc))

    @property
    def ok(self) -> bool:
        return self.failure is None
