"""Retention sweep tests."""

from __future__ import annotations

import asyncio
from datetime import UTC, datetime, timedelta
from pathlib import Path
import tempfile
import unittest

from speakerline.domain.errors import JobNotFoundError
from speakerline.repositories.base import JobRecord
from speakerline.repositories.memory import InMemoryJobRegistry
from speakerline.services.retention import RetentionSweeper, delete_job_media

_NOW = datetime(2026, 3, 1, 12, 0, tzinfo=UTC)


class RetentionSweeperTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.upload_dir = Path(self._tmp.name)
        self.created_at = _NOW
        self.registry = InMemoryJobRegistry(clock=lambda: self.created_at)

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def _create_job(self, job_id: str, *, age: timedelta, with_file: bool = True) -> Path:
        path = self.upload_dir / f"{job_id}.mp4"
        if with_file:
            path.write_bytes(b"media")
        self.created_at = _NOW - age
        self.registry.create(job_id, path)
        return path

    def test_sweep_purges_expired_job_and_deletes_its_file(self) -> None:
        old_path = self._create_job("old", age=timedelta(minutes=61))
        fresh_path = self._create_job("fresh", age=timedelta(minutes=10))
        sweeper = RetentionSweeper(self.registry, clock=lambda: _NOW)

        purged = sweeper.sweep(timedelta(minutes=60))

        self.assertEqual(purged, 1)
        self.assertFalse(old_path.exists())
        self.assertTrue(fresh_path.exists())
        with self.assertRaises(JobNotFoundError):
            self.registry.get("old")
        self.registry.get("fresh")

    def test_sweep_uses_configured_ttl_by_default(self) -> None:
        self._create_job("job", age=timedelta(minutes=3))
        sweeper = RetentionSweeper(self.registry, ttl=timedelta(minutes=2), clock=lambda: _NOW)

        self.assertEqual(sweeper.sweep(), 1)

    def test_missing_file_is_not_an_error(self) -> None:
        self._create_job("gone", age=timedelta(hours=2), with_file=False)
        sweeper = RetentionSweeper(self.registry, clock=lambda: _NOW)

        self.assertEqual(sweeper.sweep(), 1)
        self.assertEqual(len(self.registry), 0)

    def test_repeated_sweeps_delete_each_file_once(self) -> None:
        self._create_job("job", age=timedelta(hours=2))
        deleted: list[str] = []

        def record_delete(job: JobRecord) -> None:
            deleted.append(job.id)
            delete_job_media(job)

        sweeper = RetentionSweeper(self.registry, clock=lambda: _NOW, delete_file=record_delete)

        self.assertEqual(sweeper.sweep(), 1)
        self.assertEqual(sweeper.sweep(), 0)
        self.assertEqual(deleted, ["job"])

    def test_deletion_failure_is_logged_and_record_still_removed(self) -> None:
        directory = self.upload_dir / "not-a-file"
        directory.mkdir()
        self.created_at = _NOW - timedelta(hours=2)
        self.registry.create("job", directory)
        sweeper = RetentionSweeper(self.registry, clock=lambda: _NOW)

        with self.assertLogs("speakerline.services.retention", level="WARNING") as captured:
            purged = sweeper.sweep()

        self.assertEqual(purged, 1)
        self.assertEqual(len(self.registry), 0)
        self.assertIn("retention.delete_failed", captured.output[0])

    def test_unexpected_callback_error_never_reaches_caller(self) -> None:
        self._create_job("job", age=timedelta(hours=2))

        def explode(job: JobRecord) -> None:
            raise RuntimeError("disk on fire")

        sweeper = RetentionSweeper(self.registry, clock=lambda: _NOW, delete_file=explode)

        with self.assertLogs("speakerline.services.retention", level="ERROR"):
            purged = sweeper.sweep()

        self.assertEqual(purged, 1)
        self.assertEqual(len(self.registry), 0)


class RetentionLoopTests(unittest.IsolatedAsyncioTestCase):
    async def test_run_forever_sweeps_on_interval_until_cancelled(self) -> None:
        registry = InMemoryJobRegistry(clock=lambda: _NOW - timedelta(hours=2))
        registry.create("job", Path("/nonexistent/job.mp4"))
        sweeper = RetentionSweeper(registry, clock=lambda: _NOW)

        task = asyncio.create_task(sweeper.run_forever(0.01))
        for _ in range(100):
            if len(registry) == 0:
                break
            await asyncio.sleep(0.01)
        task.cancel()
        with self.assertRaises(asyncio.CancelledError):
            await task

        self.assertEqual(len(registry), 0)


if __name__ == "__main__":
    unittest.main()
