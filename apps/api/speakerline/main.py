"""FastAPI application entrypoint."""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager, suppress
from datetime import timedelta
import logging

from fastapi import FastAPI, Request
from fastapi.exception_handlers import request_validation_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
import uvicorn

from speakerline import __version__
from speakerline.adapters.provider.base import TranscriptionProvider
from speakerline.core.config import get_settings
from speakerline.domain.errors import ErrorKind
from speakerline.errors import ApiError
from speakerline.repositories.base import JobRegistry
from speakerline.repositories.memory import InMemoryJobRegistry
from speakerline.routes import health_router, jobs_router, uploads_router
from speakerline.routes.dependencies import build_provider
from speakerline.schemas.error import ErrorResponse
from speakerline.services.retention import RetentionSweeper

logger = logging.getLogger(__name__)

_UPLOAD_VALIDATION_PATHS: set[tuple[str, str]] = {
    ("POST", "/upload"),
}


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Run the periodic sweep when configured and release the provider on shutdown."""
    interval = get_settings().sweep_interval_seconds
    sweep_task: asyncio.Task | None = None
    if interval > 0:
        sweep_task = asyncio.create_task(app.state.sweeper.run_forever(interval))
    try:
        yield
    finally:
        if sweep_task is not None:
            sweep_task.cancel()
            with suppress(asyncio.CancelledError):
                await sweep_task
        await app.state.provider.aclose()


def create_app(
    *,
    registry: JobRegistry | None = None,
    provider: TranscriptionProvider | None = None,
) -> FastAPI:
    settings = get_settings()
    app = FastAPI(title="Speakerline API", version=__version__, lifespan=lifespan)
    app.state.registry = registry if registry is not None else InMemoryJobRegistry()
    app.state.provider = provider if provider is not None else build_provider(settings)
    app.state.sweeper = RetentionSweeper(
        app.state.registry,
        ttl=timedelta(seconds=settings.retention_ttl_seconds),
    )

    @app.exception_handler(ApiError)
    async def handle_api_error(_, exc: ApiError) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content=exc.payload.model_dump(mode="json", exclude_none=True),
        )

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        # Malformed multipart bodies are a client input problem, reported like any other rejected file.
        route = request.scope.get("route")
        route_key = (request.method.upper(), getattr(route, "path", request.url.path))
        if route_key in _UPLOAD_VALIDATION_PATHS:
            payload = ErrorResponse(error="No video file uploaded", code=ErrorKind.VALIDATION.value)
            return JSONResponse(status_code=400, content=payload.model_dump(exclude_none=True))

        return await request_validation_exception_handler(request, exc)

    app.include_router(uploads_router)
    app.include_router(jobs_router)
    app.include_router(health_router)

    return app


def serve() -> None:
    """Run the API with uvicorn using the configured host and port."""
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
    settings.upload_dir.mkdir(parents=True, exist_ok=True)
    logger.info("server.starting host=%s port=%s provider=%s", settings.host, settings.port, settings.provider)
    uvicorn.run(create_app(), host=settings.host, port=settings.port)


if __name__ == "__main__":
    serve()
