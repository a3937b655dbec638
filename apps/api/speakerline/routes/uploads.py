"""Media upload route."""

import logging
from typing import Annotated

from fastapi import APIRouter, BackgroundTasks, Depends, File, UploadFile

from speakerline.core.config import Settings, get_settings
from speakerline.domain.errors import ErrorKind, ValidationError
from speakerline.errors import ApiError, unwrap
from speakerline.routes.dependencies import get_upload_service
from speakerline.schemas.error import ErrorResponse
from speakerline.schemas.job import UploadResponse
from speakerline.services.media import discard_media, store_upload
from speakerline.services.uploads import UploadService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Uploads"])


@router.post(
    "/upload",
    response_model=UploadResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def upload_media(
    background_tasks: BackgroundTasks,
    settings: Annotated[Settings, Depends(get_settings)],
    service: Annotated[UploadService, Depends(get_upload_service)],
    video: Annotated[UploadFile | None, File()] = None,
) -> UploadResponse:
    try:
        storage_path = await store_upload(video, upload_dir=settings.upload_dir, max_bytes=settings.max_upload_bytes)
    except ValidationError as exc:
        raise ApiError(status_code=400, code=exc.kind.value, message=exc.message, details=exc.details) from exc
    except OSError as exc:
        logger.error("upload.storage_failed reason=%s", exc)
        raise ApiError(
            status_code=500,
            code=ErrorKind.STORAGE_UNAVAILABLE.value,
            message="Failed to store uploaded video",
        ) from exc

    outcome = await service.submit(storage_path, schedule=background_tasks.add_task)
    if not outcome.ok:
        discard_media(storage_path)
    return UploadResponse(transcription_id=unwrap(outcome))
