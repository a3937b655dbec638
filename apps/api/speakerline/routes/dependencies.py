"""Dependency wiring for routes."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request

from speakerline.adapters.provider import AssemblyAIProvider, MockTranscriptionProvider, TranscriptionProvider
from speakerline.core.config import Settings, get_settings
from speakerline.repositories.base import JobRegistry
from speakerline.services.retention import RetentionSweeper
from speakerline.services.status import StatusService
from speakerline.services.transcripts import TranscriptService
from speakerline.services.uploads import UploadService


def build_provider(settings: Settings) -> TranscriptionProvider:
    """Resolve provider adapter from configuration."""
    if settings.provider == "assemblyai":
        return AssemblyAIProvider(
            settings.assemblyai_api_key or "",
            base_url=settings.assemblyai_base_url,
            timeout=settings.provider_timeout_seconds,
        )
    return MockTranscriptionProvider()


def get_registry(request: Request) -> JobRegistry:
    return request.app.state.registry


def get_provider(request: Request) -> TranscriptionProvider:
    return request.app.state.provider


def get_sweeper(request: Request) -> RetentionSweeper:
    return request.app.state.sweeper


def get_upload_service(
    registry: Annotated[JobRegistry, Depends(get_registry)],
    provider: Annotated[TranscriptionProvider, Depends(get_provider)],
    sweeper: Annotated[RetentionSweeper, Depends(get_sweeper)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> UploadService:
    return UploadService(registry, provider, sweeper, speakers_expected=settings.speakers_expected)


def get_status_service(
    registry: Annotated[JobRegistry, Depends(get_registry)],
    provider: Annotated[TranscriptionProvider, Depends(get_provider)],
) -> StatusService:
    return StatusService(registry, provider)


def get_transcript_service(
    registry: Annotated[JobRegistry, Depends(get_registry)],
    provider: Annotated[TranscriptionProvider, Depends(get_provider)],
) -> TranscriptService:
    return TranscriptService(registry, provider)
