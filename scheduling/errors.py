"""Typed failures raised by the scheduling core.

Every error carries an HTTP-ish ``status_code`` and a stable ``code`` so the
transport layer can translate it without inspecting messages.
"""
from __future__ import annotations

from typing import Any, Dict, Optional


class SchedulingError(RuntimeError):
    """Base class for scheduler failures."""

    status_code = 400
    code = "scheduling_error"
    retryable = False

    def details(self) -> Dict[str, Any]:
        return {}


class NotFound(SchedulingError):
    """Interview is absent or owned by someone else."""

    status_code = 404
    code = "not_found"

    def __init__(self, interview_id: str) -> None:
        super().__init__("Interview not found")
        self.interview_id = interview_id


class JobNotFound(SchedulingError):
    status_code = 404
    code = "job_not_found"

    def __init__(self, job_id: str) -> None:
        super().__init__("Job not found")
        self.job_id = job_id


class NotApplied(SchedulingError):
    code = "not_applied"

    def __init__(self, job_id: str) -> None:
        super().__init__("You must apply to this job before scheduling an interview")
        self.job_id = job_id


class InvalidTime(SchedulingError):
    code = "invalid_time"

    def __init__(self, message: str = "Interview must be scheduled for a future time") -> None:
        super().__init__(message)


class InvalidDuration(SchedulingError):
    code = "invalid_duration"

    def __init__(self, maximum: int) -> None:
        super().__init__(f"Duration must be between 1 and {maximum} minutes")
        self.maximum = maximum


class SlotConflict(SchedulingError):
    status_code = 409
    code = "slot_conflict"

    def __init__(self, conflicting_id: Optional[str] = None) -> None:
        super().__init__("Time slot is already booked. Please choose a different time.")
        self.conflicting_id = conflicting_id


class InvalidTransition(SchedulingError):
    """A lifecycle guard rejected ``event`` while the interview sat in ``status``."""

    status_code = 409
    code = "invalid_transition"

    def __init__(self, event: str, status: str, message: Optional[str] = None) -> None:
        super().__init__(message or f"Cannot {event} an interview that is {status}")
        self.event = event
        self.status = status

    def details(self) -> Dict[str, Any]:
        return {"event": self.event, "status": self.status}


class TooEarly(InvalidTransition):
    code = "too_early"

    def __init__(self, time_until_start_ms: int) -> None:
        super().__init__("start", "scheduled", "Interview has not started yet")
        self.time_until_start_ms = time_until_start_ms

    def details(self) -> Dict[str, Any]:
        payload = super().details()
        payload["time_until_start"] = self.time_until_start_ms
        return payload


class WindowExpired(InvalidTransition):
    code = "window_expired"

    def __init__(self) -> None:
        super().__init__("start", "scheduled", "Interview time has expired")


class PermissionDenied(SchedulingError):
    status_code = 403
    code = "forbidden"

    def __init__(self, action: str) -> None:
        super().__init__(f"Role not allowed to {action}")
        self.action = action


class StoreUnavailable(SchedulingError):
    """Backing store timed out or failed; the caller may retry."""

    status_code = 503
    code = "store_unavailable"
    retryable = True

    def __init__(self, message: str = "Interview store unavailable") -> None:
        super().__init__(message)

    def details(self) -> Dict[str, Any]:
        return {"retryable": True}


__all__ = [
    "InvalidDuration",
    "InvalidTime",
    "InvalidTransition",
    "JobNotFound",
    "NotApplied",
    "NotFound",
    "PermissionDenied",
    "SchedulingError",
    "SlotConflict",
    "StoreUnavailable",
    "TooEarly",
    "WindowExpired",
]
