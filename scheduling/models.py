from __future__ import annotations  # Interview and job data models

from datetime import datetime, timedelta
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field

from .clock import as_utc


class InterviewStatus(str, Enum):  # Explicit lifecycle state
    SCHEDULED = "scheduled"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    EXPIRED = "expired"


ACTIVE_STATUSES = (InterviewStatus.SCHEDULED, InterviewStatus.IN_PROGRESS)
TERMINAL_STATUSES = (InterviewStatus.COMPLETED, InterviewStatus.CANCELLED, InterviewStatus.EXPIRED)


class InterviewType(str, Enum):
    AI = "ai-interview"
    HR = "hr-interview"


def to_millis(dt: datetime) -> int:
    return int(as_utc(dt).timestamp() * 1000)


def truncate_to_millis(dt: datetime) -> datetime:  # Stored instants have millisecond precision
    dt = as_utc(dt)
    return dt.replace(microsecond=(dt.microsecond // 1000) * 1000)


def _millis_between(start: datetime, end: datetime) -> int:
    return int((end - start) / timedelta(milliseconds=1))


class Slot(BaseModel):  # Half-open [start, end) interval claimed by a booking
    start: datetime
    duration_minutes: int = Field(gt=0)

    @property
    def end(self) -> datetime:
        return self.start + timedelta(minutes=self.duration_minutes)


class Interview(BaseModel):  # Stored interview booking
    id: str
    candidate_id: str
    job_id: str
    scheduled_at: datetime
    duration_minutes: int = Field(default=10, gt=0)
    status: InterviewStatus = InterviewStatus.SCHEDULED
    type: InterviewType = InterviewType.AI
    meeting_room: Optional[str] = None
    notes: Optional[str] = None
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime

    @property
    def slot(self) -> Slot:
        return Slot(start=self.scheduled_at, duration_minutes=self.duration_minutes)

    @property
    def end_time(self) -> datetime:
        return self.scheduled_at + timedelta(minutes=self.duration_minutes)

    @property
    def is_active(self) -> bool:
        return self.status in ACTIVE_STATUSES

    def is_expired(self, now: datetime) -> bool:
        return as_utc(now) > self.end_time and self.status is InterviewStatus.SCHEDULED

    def time_until_start_ms(self, now: datetime) -> int:
        return max(0, _millis_between(as_utc(now), self.scheduled_at))

    def time_remaining_ms(self, now: datetime) -> int:
        if self.status is not InterviewStatus.IN_PROGRESS or self.started_at is None:
            return 0
        ends = self.started_at + timedelta(minutes=self.duration_minutes)
        return max(0, _millis_between(as_utc(now), ends))


class JobApplication(BaseModel):  # Application record attached to a job
    user_id: str


class Job(BaseModel):  # Job posting as seen by the scheduler
    job_id: str
    title: str
    company: str
    location: str
    applications: List[JobApplication] = Field(default_factory=list)

    def has_applicant(self, user_id: str) -> bool:
        return any(app.user_id == user_id for app in self.applications)


__all__ = [
    "ACTIVE_STATUSES",
    "TERMINAL_STATUSES",
    "Interview",
    "InterviewStatus",
    "InterviewType",
    "Job",
    "JobApplication",
    "Slot",
    "to_millis",
    "truncate_to_millis",
]
