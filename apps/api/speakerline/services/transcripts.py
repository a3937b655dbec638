"""Retrieval of completed transcripts."""

import logging

from speakerline.adapters.provider.base import TranscriptionProvider
from speakerline.core.logging_safety import safe_job_id
from speakerline.domain.errors import JobError, TranscriptNotReadyError, TranscriptionFailedError
from speakerline.domain.outcome import Outcome
from speakerline.domain.transcript_format import format_utterances
from speakerline.repositories.base import JobRegistry
from speakerline.schemas.job import JobStatus, TranscriptSegment
from speakerline.services.status import apply_provider_state

logger = logging.getLogger(__name__)


class TranscriptService:
    def __init__(self, registry: JobRegistry, provider: TranscriptionProvider) -> None:
        self._registry = registry
        self._provider = provider

    async def fetch(self, job_id: str) -> Outcome[list[TranscriptSegment]]:
        """Return freshly formatted segments for a completed job."""
        try:
            job = self._registry.get(job_id)
            if job.status is JobStatus.ERROR:
                raise TranscriptionFailedError(job.error or "Transcription failed")

            transcript = await self._provider.fetch_transcript(job_id)
            job = apply_provider_state(self._registry, job, transcript)
            if job.status is JobStatus.ERROR:
                raise TranscriptionFailedError(job.error or "Transcription failed")
            if job.status is not JobStatus.COMPLETED or transcript.status != JobStatus.COMPLETED.value:
                raise TranscriptNotReadyError(
                    "Transcription is not yet complete",
                    details={"status": job.status.value},
                )
        except JobError as exc:
            return Outcome.fail(exc)

        utterances = transcript.utterances or []
        if not utterances:
            logger.info("transcript.empty job_id=%s", safe_job_id(job_id))
        return Outcome.success(format_utterances(utterances))
