"""Job lifecycle transition rules."""

from speakerline.domain.errors import InvalidTransitionError
from speakerline.schemas.job import JobStatus

TERMINAL_STATES: frozenset[JobStatus] = frozenset({JobStatus.COMPLETED, JobStatus.ERROR})

# Repeating a non-terminal status is allowed: every poll re-reports it.
_ALLOWED_TRANSITIONS: dict[JobStatus, set[JobStatus]] = {
    JobStatus.QUEUED: {JobStatus.QUEUED, JobStatus.PROCESSING, JobStatus.COMPLETED, JobStatus.ERROR},
    JobStatus.PROCESSING: {JobStatus.PROCESSING, JobStatus.COMPLETED, JobStatus.ERROR},
    JobStatus.COMPLETED: set(),
    JobStatus.ERROR: set(),
}


def is_terminal(status: JobStatus) -> bool:
    return status in TERMINAL_STATES


def allowed_next_statuses(status: JobStatus) -> list[JobStatus]:
    """Return deterministically ordered allowed successors for a status."""
    return sorted(_ALLOWED_TRANSITIONS.get(status, set()), key=lambda s: s.value)


def ensure_transition(old_status: JobStatus, new_status: JobStatus) -> None:
    """Validate transition according to lifecycle rules."""
    if old_status in TERMINAL_STATES:
        raise InvalidTransitionError(
            "Terminal state cannot be mutated",
            details={
                "current_status": old_status.value,
                "attempted_status": new_status.value,
                "allowed_next_statuses": [],
            },
        )

    if new_status not in _ALLOWED_TRANSITIONS.get(old_status, set()):
        raise InvalidTransitionError(
            "Invalid status transition",
            details={
                "current_status": old_status.value,
                "attempted_status": new_status.value,
                "allowed_next_statuses": [s.value for s in allowed_next_statuses(old_status)],
            },
        )
