"""Health check route."""

from typing import Annotated

from fastapi import APIRouter, Depends

from speakerline import __version__
from speakerline.repositories.base import JobRegistry
from speakerline.routes.dependencies import get_registry
from speakerline.schemas.job import HealthResponse

router = APIRouter(tags=["Health"])


@router.get("/health", response_model=HealthResponse)
async def health_check(registry: Annotated[JobRegistry, Depends(get_registry)]) -> HealthResponse:
    return HealthResponse(status="ok", version=__version__, jobs=len(registry))
