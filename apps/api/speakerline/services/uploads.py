"""Hand-off of stored media to the transcription provider."""

from collections.abc import Callable
import logging
from pathlib import Path

from speakerline.adapters.provider.base import TranscriptionProvider
from speakerline.core.logging_safety import safe_job_id
from speakerline.domain.errors import JobError
from speakerline.domain.outcome import Outcome
from speakerline.repositories.base import JobRegistry
from speakerline.services.retention import RetentionSweeper

logger = logging.getLogger(__name__)

Scheduler = Callable[[Callable[[], object]], None]


class UploadService:
    def __init__(
        self,
        registry: JobRegistry,
        provider: TranscriptionProvider,
        sweeper: RetentionSweeper,
        *,
        speakers_expected: int = 2,
    ) -> None:
        self._registry = registry
        self._provider = provider
        self._sweeper = sweeper
        self._speakers_expected = speakers_expected

    async def submit(self, storage_path: Path, *, schedule: Scheduler | None = None) -> Outcome[str]:
        """Upload, request a diarized transcription, and register the job.

        On failure nothing is registered and the file at storage_path still
        belongs to the caller. On success a retention sweep is handed to
        ``schedule`` so it runs after the response instead of before it.
        """
        try:
            audio_url = await self._provider.upload_media(storage_path)
            job_id = await self._provider.submit_transcription(
                audio_url,
                speakers_expected=self._speakers_expected,
            )
            self._registry.create(job_id, storage_path)
        except JobError as exc:
            logger.warning("upload.failed code=%s reason=%s", exc.kind.value, exc.message)
            return Outcome.fail(exc)

        logger.info("upload.registered job_id=%s", safe_job_id(job_id))
        if schedule is not None:
            schedule(self._sweeper.sweep)
        return Outcome.success(job_id)
