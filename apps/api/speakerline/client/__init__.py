"""Consumer-side client for the Speakerline HTTP API."""

from .poller import PollerState, TranscriptionPoller
from .timer import AsyncioPollTimer, PollTimer

__all__ = ["AsyncioPollTimer", "PollTimer", "PollerState", "TranscriptionPoller"]
