"""Interview state machine.

Transitions are pure: each function validates its guard against the supplied
``now`` and returns an updated copy of the interview. Persisting the copy is
the store's job and must be conditional on the prior status so that racing
transitions cannot both succeed.

    scheduled   --start-->    in-progress   (scheduled_at <= now < end_time)
    scheduled   --expire-->   expired       (now >= end_time, sweeper only)
    in-progress --complete--> completed
    scheduled   --cancel-->   cancelled
    in-progress --cancel-->   cancelled
"""
from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Dict, Optional, Tuple

from .clock import as_utc
from .errors import InvalidTime, InvalidTransition, TooEarly, WindowExpired
from .models import Interview, InterviewStatus


class LifecycleEvent(str, Enum):
    START = "start"
    COMPLETE = "complete"
    CANCEL = "cancel"
    EXPIRE = "expire"


TRANSITIONS: Dict[Tuple[InterviewStatus, LifecycleEvent], InterviewStatus] = {
    (InterviewStatus.SCHEDULED, LifecycleEvent.START): InterviewStatus.IN_PROGRESS,
    (InterviewStatus.SCHEDULED, LifecycleEvent.EXPIRE): InterviewStatus.EXPIRED,
    (InterviewStatus.IN_PROGRESS, LifecycleEvent.COMPLETE): InterviewStatus.COMPLETED,
    (InterviewStatus.SCHEDULED, LifecycleEvent.CANCEL): InterviewStatus.CANCELLED,
    (InterviewStatus.IN_PROGRESS, LifecycleEvent.CANCEL): InterviewStatus.CANCELLED,
}


def target_status(status: InterviewStatus, event: LifecycleEvent) -> InterviewStatus:
    """Return the state ``event`` leads to from ``status`` or raise ``InvalidTransition``."""

    try:
        return TRANSITIONS[(status, event)]
    except KeyError:
        raise InvalidTransition(event.value, status.value) from None


def ensure_schedulable(scheduled_at: datetime, now: datetime) -> None:
    if as_utc(scheduled_at) <= as_utc(now):
        raise InvalidTime()


def start(interview: Interview, now: datetime) -> Interview:
    now = as_utc(now)
    nxt = target_status(interview.status, LifecycleEvent.START)
    if now < interview.scheduled_at:
        raise TooEarly(interview.time_until_start_ms(now))
    if now >= interview.end_time:
        raise WindowExpired()
    return interview.model_copy(update={"status": nxt, "started_at": now, "updated_at": now})


def complete(interview: Interview, now: datetime, notes: Optional[str] = None) -> Interview:
    now = as_utc(now)
    nxt = target_status(interview.status, LifecycleEvent.COMPLETE)
    update = {"status": nxt, "completed_at": now, "updated_at": now}
    if notes is not None:
        update["notes"] = notes
    return interview.model_copy(update=update)


def cancel(interview: Interview, now: datetime) -> Interview:
    nxt = target_status(interview.status, LifecycleEvent.CANCEL)
    return interview.model_copy(update={"status": nxt, "updated_at": as_utc(now)})


def expire(interview: Interview, now: datetime) -> Interview:
    now = as_utc(now)
    nxt = target_status(interview.status, LifecycleEvent.EXPIRE)
    if now < interview.end_time:
        raise InvalidTransition(LifecycleEvent.EXPIRE.value, interview.status.value, "Interview window is still open")
    return interview.model_copy(update={"status": nxt, "updated_at": now})


__all__ = [
    "LifecycleEvent",
    "TRANSITIONS",
    "cancel",
    "complete",
    "ensure_schedulable",
    "expire",
    "start",
    "target_status",
]
