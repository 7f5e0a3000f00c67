"""Interview slot domain: clock, models, conflicts, lifecycle and errors."""
from .clock import Clock, ManualClock, SystemClock
from .conflicts import ConflictDetector, first_conflict, intervals_overlap
from .errors import (
    InvalidDuration,
    InvalidTime,
    InvalidTransition,
    JobNotFound,
    NotApplied,
    NotFound,
    PermissionDenied,
    SchedulingError,
    SlotConflict,
    StoreUnavailable,
    TooEarly,
    WindowExpired,
)
from .lifecycle import LifecycleEvent
from .models import Interview, InterviewStatus, InterviewType, Job, JobApplication, Slot

__all__ = [
    "Clock",
    "ConflictDetector",
    "Interview",
    "InterviewStatus",
    "InterviewType",
    "InvalidDuration",
    "InvalidTime",
    "InvalidTransition",
    "Job",
    "JobApplication",
    "JobNotFound",
    "LifecycleEvent",
    "ManualClock",
    "NotApplied",
    "NotFound",
    "PermissionDenied",
    "SchedulingError",
    "SlotConflict",
    "Slot",
    "StoreUnavailable",
    "SystemClock",
    "TooEarly",
    "WindowExpired",
    "first_conflict",
    "intervals_overlap",
]
