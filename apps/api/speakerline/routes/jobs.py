"""Job status and transcript routes."""

from typing import Annotated

from fastapi import APIRouter, Depends, Path

from speakerline.errors import unwrap
from speakerline.routes.dependencies import get_status_service, get_transcript_service
from speakerline.schemas.error import ErrorResponse
from speakerline.schemas.job import JobStatusView, TranscriptResponse
from speakerline.services.status import StatusService
from speakerline.services.transcripts import TranscriptService

router = APIRouter(tags=["Jobs"])


@router.get(
    "/status/{jobId}",
    response_model=JobStatusView,
    response_model_exclude_none=True,
    responses={404: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def get_status(
    job_id: Annotated[str, Path(alias="jobId")],
    service: Annotated[StatusService, Depends(get_status_service)],
) -> JobStatusView:
    return unwrap(await service.reconcile(job_id))


@router.get(
    "/transcript/{jobId}",
    response_model=TranscriptResponse,
    responses={
        400: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
async def get_transcript(
    job_id: Annotated[str, Path(alias="jobId")],
    service: Annotated[TranscriptService, Depends(get_transcript_service)],
) -> TranscriptResponse:
    return TranscriptResponse(transcript=unwrap(await service.fetch(job_id)))
