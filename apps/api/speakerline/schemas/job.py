"""Job API schemas."""

from enum import Enum

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class JobStatus(str, Enum):
    QUEUED = "queued"
    PROCESSING = "processing"
    COMPLETED = "completed"
    ERROR = "error"


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class TranscriptSegment(_CamelModel):
    speaker_label: str
    text: str
    start_seconds: float
    end_seconds: float


class UploadResponse(_CamelModel):
    transcription_id: str


class JobStatusView(_CamelModel):
    status: JobStatus
    error: str | None = None


class TranscriptResponse(_CamelModel):
    transcript: list[TranscriptSegment]


class HealthResponse(BaseModel):
    status: str
    version: str
    jobs: int
