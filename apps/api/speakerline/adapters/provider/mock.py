"""Deterministic in-process provider for local development and tests."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from uuid import uuid4

from speakerline.adapters.provider.base import TranscriptionProvider
from speakerline.domain.errors import ProviderUnavailableError
from speakerline.schemas.provider import ProviderTranscript, ProviderUtterance

DEFAULT_STATUS_SCRIPT = ("queued", "processing", "completed")
DEFAULT_UTTERANCES = (
    ProviderUtterance(speaker="A", text="Thanks for joining us today.", start=0, end=2400),
    ProviderUtterance(speaker="B", text="Happy to be here.", start=2400, end=3900),
)


@dataclass(slots=True)
class _MockJob:
    audio_url: str
    speakers_expected: int
    script: list[str]
    utterances: list[ProviderUtterance]
    error: str | None = None
    position: int = 0


@dataclass(slots=True)
class MockTranscriptionProvider(TranscriptionProvider):
    """Walks each job through a status script, one step per fetch.

    The last scripted status sticks. Failure messages are one-shot: the next
    matching call raises ProviderUnavailableError and the message is cleared.
    """

    status_script: tuple[str, ...] = DEFAULT_STATUS_SCRIPT
    utterances: tuple[ProviderUtterance, ...] = DEFAULT_UTTERANCES
    upload_failure_message: str | None = None
    submit_failure_message: str | None = None
    fetch_failure_message: str | None = None
    jobs: dict[str, _MockJob] = field(default_factory=dict)
    uploads: list[Path] = field(default_factory=list)
    fetch_count: int = 0

    async def upload_media(self, path: Path) -> str:
        if self.upload_failure_message is not None:
            message, self.upload_failure_message = self.upload_failure_message, None
            raise ProviderUnavailableError(message, status_code=502)
        self.uploads.append(Path(path))
        return f"mock://upload/{uuid4()}"

    async def submit_transcription(self, audio_url: str, *, speakers_expected: int) -> str:
        if self.submit_failure_message is not None:
            message, self.submit_failure_message = self.submit_failure_message, None
            raise ProviderUnavailableError(message, status_code=502)
        job_id = f"mock-{uuid4()}"
        self.jobs[job_id] = _MockJob(
            audio_url=audio_url,
            speakers_expected=speakers_expected,
            script=list(self.status_script),
            utterances=list(self.utterances),
        )
        return job_id

    async def fetch_transcript(self, job_id: str) -> ProviderTranscript:
        self.fetch_count += 1
        if self.fetch_failure_message is not None:
            message, self.fetch_failure_message = self.fetch_failure_message, None
            raise ProviderUnavailableError(message, status_code=503)

        job = self.jobs.get(job_id)
        if job is None:
            raise ProviderUnavailableError("Status check failed with status: 404", status_code=404)

        status = job.script[min(job.position, len(job.script) - 1)]
        job.position += 1
        return ProviderTranscript(
            id=job_id,
            status=status,
            utterances=list(job.utterances) if status == "completed" else None,
            error=job.error if status == "error" else None,
        )

    def script_job(
        self,
        job_id: str,
        statuses: list[str],
        *,
        utterances: list[ProviderUtterance] | None = None,
        error: str | None = None,
    ) -> None:
        """Replace the remaining status script of a submitted job."""
        job = self.jobs[job_id]
        job.script = list(statuses)
        job.position = 0
        if utterances is not None:
            job.utterances = list(utterances)
        job.error = error


__all__ = ["DEFAULT_STATUS_SCRIPT", "DEFAULT_UTTERANCES", "MockTranscriptionProvider"]
