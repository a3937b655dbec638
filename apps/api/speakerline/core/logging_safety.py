"""Utilities for safe structured logging fields."""

from __future__ import annotations

import hashlib
from typing import Any


def safe_log_identifier(value: Any, *, prefix: str, length: int = 12) -> str:
    """Return a deterministic non-reversible token for log correlation fields."""
    text = str(value or "").strip()
    if not text:
        return f"{prefix}-missing"

    digest = hashlib.sha256(text.encode("utf-8")).hexdigest()[:length]
    return f"{prefix}-{digest}"


def safe_job_id(job_id: str | None) -> str:
    """Provider job ids double as fetch handles, so they never hit the logs raw."""
    return safe_log_identifier(job_id, prefix="jid")
