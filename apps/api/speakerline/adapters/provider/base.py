"""Transcription provider interface."""

from abc import ABC, abstractmethod
from pathlib import Path

from speakerline.schemas.provider import ProviderTranscript


class TranscriptionProvider(ABC):
    """Provider-neutral speech-to-text interface.

    Every method raises ProviderUnavailableError on transport failure or a
    non-success response.
    """

    @abstractmethod
    async def upload_media(self, path: Path) -> str:
        """Upload raw media bytes and return the provider's content handle URL."""

    @abstractmethod
    async def submit_transcription(self, audio_url: str, *, speakers_expected: int) -> str:
        """Request a diarized transcription of audio_url and return the provider job id."""

    @abstractmethod
    async def fetch_transcript(self, job_id: str) -> ProviderTranscript:
        """Return the provider's current view of a job."""

    async def aclose(self) -> None:
        """Release network resources."""


__all__ = ["TranscriptionProvider"]
