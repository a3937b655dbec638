"""Payload shapes returned by the transcription provider."""

from pydantic import BaseModel, ConfigDict, Field


class _ProviderModel(BaseModel):
    model_config = ConfigDict(extra="ignore")


class ProviderUtterance(_ProviderModel):
    speaker: str
    text: str
    start: int = Field(description="Offset in milliseconds")
    end: int = Field(description="Offset in milliseconds")


class ProviderTranscript(_ProviderModel):
    id: str | None = None
    status: str
    utterances: list[ProviderUtterance] | None = None
    error: str | None = None
