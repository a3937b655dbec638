"""Job registry interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timedelta
from pathlib import Path

from speakerline.schemas.job import JobStatus


@dataclass(slots=True)
class JobRecord:
    id: str
    status: JobStatus
    storage_path: Path
    created_at: datetime
    updated_at: datetime | None = None
    error: str | None = None


PurgeCallback = Callable[[JobRecord], None]


class JobRegistry(ABC):
    """Sole owner of job state; implementations must be safe for concurrent use."""

    @abstractmethod
    def create(self, job_id: str, storage_path: Path) -> JobRecord:
        """Insert a queued job. Raises DuplicateJobError if the id exists."""

    @abstractmethod
    def get(self, job_id: str) -> JobRecord:
        """Return a snapshot of the job. Raises JobNotFoundError."""

    @abstractmethod
    def set_status(self, job_id: str, status: JobStatus, error: str | None = None) -> JobRecord:
        """Apply an FSM-validated status write and return the new snapshot."""

    @abstractmethod
    def purge_expired(self, ttl: timedelta, now: datetime, on_purge: PurgeCallback) -> int:
        """Remove jobs older than ttl, calling on_purge once for each."""

    @abstractmethod
    def list_jobs(self) -> list[JobRecord]:
        """Return snapshots of all jobs ordered by creation time."""

    def __len__(self) -> int:
        return len(self.list_jobs())


__all__ = ["JobRecord", "JobRegistry", "PurgeCallback"]
