"""Transcription provider adapters."""

from .assemblyai import AssemblyAIProvider
from .base import TranscriptionProvider
from .mock import MockTranscriptionProvider

__all__ = [
    "AssemblyAIProvider",
    "MockTranscriptionProvider",
    "TranscriptionProvider",
]
