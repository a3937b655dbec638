"""Reclamation of expired jobs and their temporary media."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from datetime import UTC, datetime, timedelta
import logging

from speakerline.core.logging_safety import safe_job_id
from speakerline.repositories.base import JobRecord, JobRegistry

logger = logging.getLogger(__name__)

DEFAULT_RETENTION_TTL = timedelta(hours=1)


def delete_job_media(job: JobRecord) -> None:
    """Remove a purged job's file; an already missing file is fine."""
    try:
        job.storage_path.unlink(missing_ok=True)
    except OSError as exc:
        logger.warning(
            "retention.delete_failed job_id=%s path=%s reason=%s",
            safe_job_id(job.id),
            job.storage_path.name,
            exc,
        )


class RetentionSweeper:
    def __init__(
        self,
        registry: JobRegistry,
        *,
        ttl: timedelta = DEFAULT_RETENTION_TTL,
        clock: Callable[[], datetime] | None = None,
        delete_file: Callable[[JobRecord], None] = delete_job_media,
    ) -> None:
        self._registry = registry
        self._ttl = ttl
        self._clock = clock or (lambda: datetime.now(UTC))
        self._delete_file = delete_file

    @property
    def ttl(self) -> timedelta:
        return self._ttl

    def sweep(self, ttl: timedelta | None = None) -> int:
        """Purge expired jobs. Safe to call repeatedly and concurrently; never raises."""
        effective_ttl = self._ttl if ttl is None else ttl
        try:
            purged = self._registry.purge_expired(effective_ttl, self._clock(), self._purge_one)
        except Exception:
            logger.exception("retention.sweep_failed ttl_seconds=%s", effective_ttl.total_seconds())
            return 0

        if purged:
            logger.info("retention.swept purged=%s ttl_seconds=%s", purged, effective_ttl.total_seconds())
        return purged

    def _purge_one(self, job: JobRecord) -> None:
        try:
            self._delete_file(job)
        except Exception:
            logger.exception("retention.delete_failed job_id=%s", safe_job_id(job.id))

    async def run_forever(self, interval_seconds: float) -> None:
        """Sweep on a fixed interval until cancelled."""
        logger.info("retention.loop_started interval_seconds=%s", interval_seconds)
        while True:
            await asyncio.sleep(interval_seconds)
            await asyncio.to_thread(self.sweep)


__all__ = ["DEFAULT_RETENTION_TTL", "RetentionSweeper", "delete_job_media"]
