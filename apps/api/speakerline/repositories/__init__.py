"""Job record storage."""

from .base import JobRecord, JobRegistry
from .memory import InMemoryJobRegistry

__all__ = ["InMemoryJobRegistry", "JobRecord", "JobRegistry"]
