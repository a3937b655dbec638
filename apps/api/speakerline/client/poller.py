"""Upload-then-poll state machine for consumers of the HTTP API."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from enum import Enum
import logging
import mimetypes
from pathlib import Path
from typing import Any

import httpx
from pydantic import ValidationError as PydanticValidationError

from speakerline.client.timer import AsyncioPollTimer, PollTimer
from speakerline.core.config import MAX_UPLOAD_BYTES
from speakerline.schemas.job import JobStatus, TranscriptSegment

logger = logging.getLogger(__name__)

DEFAULT_POLL_PERIOD_SECONDS = 3.0
UPLOADED_PROGRESS = 30

_STATUS_PROGRESS: dict[str, tuple[int, str]] = {
    JobStatus.QUEUED.value: (40, "Queued for transcription..."),
    JobStatus.PROCESSING.value: (60, "Processing transcription..."),
    JobStatus.COMPLETED.value: (100, "Transcription complete!"),
}
_UNKNOWN_STATUS_PROGRESS = (50, "Processing...")

ProgressCallback = Callable[[int, str], None]
TranscriptCallback = Callable[[list[TranscriptSegment]], None]
ErrorCallback = Callable[[str], None]


class PollerState(str, Enum):
    IDLE = "idle"
    UPLOADING = "uploading"
    POLLING = "polling"
    DONE = "done"
    FAILED = "failed"


class PollerBusyError(RuntimeError):
    """Raised when a submission is attempted while one is in progress."""


class _RequestFailed(Exception):
    pass


class TranscriptionPoller:
    """Submits one media file and follows its job until a terminal state.

    Progress only ever increases. Stopping the timer is the sole cancellation
    primitive: a response that arrives after the poller has left ``polling``
    is dropped.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        *,
        timer: PollTimer | None = None,
        period: float = DEFAULT_POLL_PERIOD_SECONDS,
        max_upload_bytes: int = MAX_UPLOAD_BYTES,
        on_progress: ProgressCallback | None = None,
        on_transcript: TranscriptCallback | None = None,
        on_error: ErrorCallback | None = None,
    ) -> None:
        self._client = client
        self._timer = timer or AsyncioPollTimer()
        self._period = period
        self._max_upload_bytes = max_upload_bytes
        self._on_progress = on_progress
        self._on_transcript = on_transcript
        self._on_error = on_error
        self._finished = asyncio.Event()

        self.state = PollerState.IDLE
        self.job_id: str | None = None
        self.progress = 0
        self.message = ""
        self.error: str | None = None
        self.transcript: list[TranscriptSegment] | None = None

    @property
    def submit_enabled(self) -> bool:
        return self.state not in (PollerState.UPLOADING, PollerState.POLLING)

    async def submit(self, path: Path, content_type: str | None = None) -> None:
        """Validate and upload a file, then start polling its job."""
        if not self.submit_enabled:
            raise PollerBusyError("A transcription is already in progress")

        path = Path(path)
        content_type = content_type or mimetypes.guess_type(path.name)[0]
        problem = self._validate_local_file(path, content_type)
        if problem is not None:
            self.error = problem
            self._emit_error(problem)
            return

        self._finished.clear()
        self.state = PollerState.UPLOADING
        self.job_id = None
        self.progress = 0
        self.error = None
        self.transcript = None
        self._update_progress(0, "Uploading video...")

        try:
            with path.open("rb") as handle:
                data = await self._request(
                    "POST",
                    "/upload",
                    default_error="Failed to upload video",
                    files={"video": (path.name, handle, content_type)},
                )
        except _RequestFailed as exc:
            if self.state is PollerState.UPLOADING:
                self._fail(str(exc))
            return

        if self.state is not PollerState.UPLOADING:
            return
        job_id = data.get("transcriptionId")
        if not job_id:
            self._fail("Upload response did not include a transcription id")
            return

        self.job_id = str(job_id)
        self.state = PollerState.POLLING
        self._update_progress(UPLOADED_PROGRESS, "Transcribing video...")
        self._timer.start(self.poll_once, self._period)

    async def poll_once(self) -> None:
        """Query job status once; the timer calls this on every tick."""
        if self.state is not PollerState.POLLING:
            return

        try:
            data = await self._request(
                "GET",
                f"/status/{self.job_id}",
                default_error="Failed to check transcription status",
            )
        except _RequestFailed as exc:
            if self.state is PollerState.POLLING:
                self._fail(str(exc))
            return

        if self.state is not PollerState.POLLING:
            return

        status = data.get("status")
        if status == JobStatus.ERROR.value:
            self._fail(data.get("error") or "Transcription failed")
            return

        progress, message = _STATUS_PROGRESS.get(status, _UNKNOWN_STATUS_PROGRESS)
        self._update_progress(progress, message)
        if status == JobStatus.COMPLETED.value:
            self._timer.stop()
            await self._fetch_transcript()

    def stop(self) -> None:
        """Stop polling and return to idle; any in-flight response is ignored."""
        self._timer.stop()
        if self.state in (PollerState.UPLOADING, PollerState.POLLING):
            self.state = PollerState.IDLE
            self._finished.set()

    async def wait(self) -> PollerState:
        await self._finished.wait()
        return self.state

    async def _fetch_transcript(self) -> None:
        try:
            data = await self._request(
                "GET",
                f"/transcript/{self.job_id}",
                default_error="Failed to retrieve transcript",
            )
        except _RequestFailed as exc:
            if self.state is PollerState.POLLING:
                self._fail(str(exc))
            return

        if self.state is not PollerState.POLLING:
            return

        try:
            segments = [TranscriptSegment.model_validate(item) for item in data.get("transcript") or []]
        except (PydanticValidationError, TypeError) as exc:
            logger.warning("poller.transcript_malformed reason=%s", exc)
            self._fail("Failed to retrieve transcript")
            return

        self.transcript = segments
        self.state = PollerState.DONE
        self._finished.set()
        logger.info("poller.done segments=%s", len(self.transcript))
        if self._on_transcript is not None:
            self._on_transcript(self.transcript)

    async def _request(self, method: str, url: str, *, default_error: str, **kwargs: Any) -> dict[str, Any]:
        try:
            response = await self._client.request(method, url, **kwargs)
        except httpx.HTTPError as exc:
            raise _RequestFailed(f"{default_error}: {exc}") from exc

        try:
            data = response.json()
        except ValueError:
            data = {}
        if not isinstance(data, dict):
            data = {}
        if not response.is_success:
            raise _RequestFailed(data.get("error") or default_error)
        return data

    def _validate_local_file(self, path: Path, content_type: str | None) -> str | None:
        if not content_type or not content_type.startswith("video/"):
            return "Please select a valid video file"
        try:
            size = path.stat().st_size
        except OSError:
            return "Please select a video file"
        if size > self._max_upload_bytes:
            return "File size exceeds the upload limit"
        return None

    def _update_progress(self, value: int, message: str) -> None:
        self.progress = max(self.progress, value)
        self.message = message
        if self._on_progress is not None:
            self._on_progress(self.progress, message)

    def _fail(self, message: str) -> None:
        self._timer.stop()
        self.state = PollerState.FAILED
        self.error = message
        self._finished.set()
        logger.warning("poller.failed job_id_present=%s reason=%s", self.job_id is not None, message)
        self._emit_error(message)

    def _emit_error(self, message: str) -> None:
        if self._on_error is not None:
            self._on_error(message)
