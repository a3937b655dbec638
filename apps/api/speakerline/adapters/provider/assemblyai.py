"""AssemblyAI v2 REST adapter."""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator
import logging
from pathlib import Path
from typing import Any

import httpx
from pydantic import ValidationError as PydanticValidationError

from speakerline.adapters.provider.base import TranscriptionProvider
from speakerline.core.logging_safety import safe_job_id
from speakerline.domain.errors import ProviderUnavailableError
from speakerline.schemas.provider import ProviderTranscript

logger = logging.getLogger(__name__)

_UPLOAD_CHUNK_BYTES = 1024 * 1024


async def _iter_file(path: Path) -> AsyncIterator[bytes]:
    with path.open("rb") as handle:
        while chunk := await asyncio.to_thread(handle.read, _UPLOAD_CHUNK_BYTES):
            yield chunk


class AssemblyAIProvider(TranscriptionProvider):
    """Talks to AssemblyAI with a single static API key.

    The key goes into the ``Authorization`` header verbatim; AssemblyAI
    rejects a ``Bearer`` prefix.
    """

    def __init__(
        self,
        api_key: str,
        *,
        base_url: str = "https://api.assemblyai.com/v2",
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            headers={"Authorization": api_key},
            timeout=timeout,
            transport=transport,
        )

    async def upload_media(self, path: Path) -> str:
        path = Path(path)
        logger.info("provider.upload_started bytes=%s", path.stat().st_size)
        data = await self._request(
            "upload",
            "POST",
            "/upload",
            content=_iter_file(path),
            headers={"Content-Type": "application/octet-stream"},
        )
        upload_url = data.get("upload_url")
        if not upload_url:
            raise ProviderUnavailableError("Upload failed: provider returned no upload_url")
        return upload_url

    async def submit_transcription(self, audio_url: str, *, speakers_expected: int) -> str:
        data = await self._request(
            "submit",
            "POST",
            "/transcript",
            json={
                "audio_url": audio_url,
                "speaker_labels": True,
                "speakers_expected": speakers_expected,
            },
        )
        job_id = data.get("id")
        if not job_id:
            raise ProviderUnavailableError("Transcription request failed: provider returned no id")
        logger.info("provider.submitted job_id=%s", safe_job_id(job_id))
        return str(job_id)

    async def fetch_transcript(self, job_id: str) -> ProviderTranscript:
        data = await self._request("fetch", "GET", f"/transcript/{job_id}")
        try:
            return ProviderTranscript.model_validate(data)
        except PydanticValidationError as exc:
            logger.warning(
                "provider.malformed_response operation=fetch job_id=%s errors=%s",
                safe_job_id(job_id),
                exc.error_count(),
            )
            raise ProviderUnavailableError("Status check failed: malformed provider response") from exc

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(self, operation: str, method: str, url: str, **kwargs: Any) -> dict[str, Any]:
        try:
            response = await self._client.request(method, url, **kwargs)
        except httpx.HTTPError as exc:
            logger.warning("provider.transport_failed operation=%s reason=%s", operation, type(exc).__name__)
            raise ProviderUnavailableError(f"Provider {operation} request failed: {exc}") from exc

        if not response.is_success:
            # Body is logged for operators and never forwarded to clients.
            logger.error(
                "provider.rejected operation=%s status_code=%s body=%s",
                operation,
                response.status_code,
                response.text[:500],
            )
            raise ProviderUnavailableError(
                f"Provider {operation} failed with status: {response.status_code}",
                status_code=response.status_code,
            )

        try:
            payload = response.json()
        except ValueError as exc:
            raise ProviderUnavailableError(f"Provider {operation} returned a non-JSON body") from exc
        if not isinstance(payload, dict):
            raise ProviderUnavailableError(f"Provider {operation} returned an unexpected body")
        return payload


__all__ = ["AssemblyAIProvider"]
