"""Pydantic schemas for the interview scheduling API."""
from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from scheduling.models import Interview, InterviewStatus, InterviewType, Job


class ScheduleReq(BaseModel):
    job_id: str = Field(min_length=1)
    scheduled_at: datetime
    duration: Optional[int] = Field(default=None, ge=1)
    type: InterviewType = InterviewType.AI


class CompleteReq(BaseModel):
    notes: Optional[str] = None


class JobSummary(BaseModel):
    job_id: str
    title: str
    company: str
    location: str

    @classmethod
    def from_job(cls, job: Job) -> "JobSummary":
        return cls(job_id=job.job_id, title=job.title, company=job.company, location=job.location)


class InterviewView(BaseModel):
    id: str
    candidate_id: str
    job_id: str
    job: Optional[JobSummary] = None
    scheduled_at: datetime
    duration: int
    status: InterviewStatus
    type: InterviewType
    meeting_room: Optional[str] = None
    notes: Optional[str] = None
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    end_time: datetime
    time_until_start: int
    time_remaining: int
    is_expired: bool
    created_at: datetime
    updated_at: datetime

    @classmethod
    def build(cls, interview: Interview, now: datetime, job: Optional[Job] = None) -> "InterviewView":
        return cls(
            id=interview.id,
            candidate_id=interview.candidate_id,
            job_id=interview.job_id,
            job=JobSummary.from_job(job) if job else None,
            scheduled_at=interview.scheduled_at,
            duration=interview.duration_minutes,
            status=interview.status,
            type=interview.type,
            meeting_room=interview.meeting_room,
            notes=interview.notes,
            started_at=interview.started_at,
            completed_at=interview.completed_at,
            end_time=interview.end_time,
            time_until_start=interview.time_until_start_ms(now),
            time_remaining=interview.time_remaining_ms(now),
            is_expired=interview.is_expired(now),
            created_at=interview.created_at,
            updated_at=interview.updated_at,
        )


class InterviewResp(BaseModel):
    success: bool = True
    message: Optional[str] = None
    interview: InterviewView


class InterviewListResp(BaseModel):
    success: bool = True
    interviews: List[InterviewView] = Field(default_factory=list)


class StartResp(BaseModel):
    success: bool = True
    message: str = "Interview started successfully"
    interview_id: str
    time_remaining: int
    duration: int


class AckResp(BaseModel):
    success: bool = True
    message: str


class SweepResp(BaseModel):
    success: bool = True
    message: str
    count: int
