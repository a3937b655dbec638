"""Reconciliation of provider-side job state into the registry."""

import logging

from speakerline.adapters.provider.base import TranscriptionProvider
from speakerline.core.logging_safety import safe_job_id
from speakerline.domain.errors import InvalidTransitionError, JobError, ProviderUnavailableError
from speakerline.domain.job_fsm import is_terminal
from speakerline.domain.outcome import Outcome
from speakerline.repositories.base import JobRecord, JobRegistry
from speakerline.schemas.job import JobStatus, JobStatusView
from speakerline.schemas.provider import ProviderTranscript

logger = logging.getLogger(__name__)


def parse_provider_status(transcript: ProviderTranscript) -> JobStatus:
    try:
        return JobStatus(transcript.status)
    except ValueError as exc:
        raise ProviderUnavailableError(f"Provider reported unknown status: {transcript.status}") from exc


def apply_provider_state(registry: JobRegistry, job: JobRecord, transcript: ProviderTranscript) -> JobRecord:
    """Write the provider's status into the registry, one way only.

    A report that would move the job backwards leaves the record untouched.
    """
    status = parse_provider_status(transcript)
    if status is job.status and is_terminal(status):
        return job

    error = (transcript.error or "Transcription failed") if status is JobStatus.ERROR else None
    try:
        return registry.set_status(job.id, status, error)
    except InvalidTransitionError:
        logger.warning(
            "status.backward_report_ignored job_id=%s current_status=%s reported_status=%s",
            safe_job_id(job.id),
            job.status.value,
            status.value,
        )
        return registry.get(job.id)


class StatusService:
    def __init__(self, registry: JobRegistry, provider: TranscriptionProvider) -> None:
        self._registry = registry
        self._provider = provider

    async def reconcile(self, job_id: str) -> Outcome[JobStatusView]:
        try:
            job = self._registry.get(job_id)
            if not is_terminal(job.status):
                transcript = await self._provider.fetch_transcript(job_id)
                previous = job.status
                job = apply_provider_state(self._registry, job, transcript)
                if job.status is not previous:
                    logger.info(
                        "status.transition job_id=%s prev_status=%s new_status=%s",
                        safe_job_id(job_id),
                        previous.value,
                        job.status.value,
                    )
        except JobError as exc:
            return Outcome.fail(exc)

        return Outcome.success(JobStatusView(status=job.status, error=job.error))
