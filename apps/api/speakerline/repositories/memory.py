"""In-memory job registry used by the API and tests."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import replace
from datetime import UTC, datetime, timedelta
from pathlib import Path
import threading

from speakerline.domain.errors import DuplicateJobError, JobNotFoundError
from speakerline.domain.job_fsm import ensure_transition
from speakerline.repositories.base import JobRecord, JobRegistry, PurgeCallback
from speakerline.schemas.job import JobStatus


def _utcnow() -> datetime:
    return datetime.now(UTC)


class InMemoryJobRegistry(JobRegistry):
    """Process-local registry guarded by a single lock.

    Records never leave the lock by reference; every read returns a copy so
    callers cannot observe or produce a partially written record.
    """

    def __init__(self, clock: Callable[[], datetime] = _utcnow) -> None:
        self._jobs: dict[str, JobRecord] = {}
        self._lock = threading.Lock()
        self._clock = clock
        self.write_count = 0

    def create(self, job_id: str, storage_path: Path) -> JobRecord:
        now = self._clock()
        job = JobRecord(
            id=job_id,
            status=JobStatus.QUEUED,
            storage_path=Path(storage_path),
            created_at=now,
            updated_at=now,
        )
        with self._lock:
            if job_id in self._jobs:
                raise DuplicateJobError(job_id)
            self._jobs[job_id] = job
            self.write_count += 1
            return replace(job)

    def get(self, job_id: str) -> JobRecord:
        with self._lock:
            job = self._jobs.get(job_id)
            if job is None:
                raise JobNotFoundError(job_id)
            return replace(job)

    def set_status(self, job_id: str, status: JobStatus, error: str | None = None) -> JobRecord:
        with self._lock:
            job = self._jobs.get(job_id)
            if job is None:
                raise JobNotFoundError(job_id)

            ensure_transition(job.status, status)
            job.status = status
            job.error = error if status is JobStatus.ERROR else None
            job.updated_at = self._clock()
            self.write_count += 1
            return replace(job)

    def purge_expired(self, ttl: timedelta, now: datetime, on_purge: PurgeCallback) -> int:
        with self._lock:
            candidates = [job_id for job_id, job in self._jobs.items() if now - job.created_at > ttl]

        purged = 0
        for job_id in candidates:
            # Re-check under a short lock; a concurrent sweep may have taken it.
            with self._lock:
                job = self._jobs.get(job_id)
                if job is None or now - job.created_at <= ttl:
                    continue
                del self._jobs[job_id]
                self.write_count += 1
            on_purge(job)
            purged += 1
        return purged

    def list_jobs(self) -> list[JobRecord]:
        with self._lock:
            jobs = [replace(job) for job in self._jobs.values()]
        jobs.sort(key=lambda record: record.created_at)
        return jobs

    def __len__(self) -> int:
        with self._lock:
            return len(self._jobs)


__all__ = ["InMemoryJobRegistry"]
