"""Scheduling façade composing the store, conflict detector, lifecycle and sweeper."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import List, Optional, Protocol, Sequence
from uuid import uuid4

from config.settings import settings
from observability import log_event, span
from scheduling import lifecycle
from scheduling.clock import Clock, SystemClock
from scheduling.conflicts import ConflictDetector
from scheduling.errors import (
    InvalidDuration,
    InvalidTime,
    InvalidTransition,
    JobNotFound,
    NotApplied,
    NotFound,
    PermissionDenied,
    SlotConflict,
)
from scheduling.lifecycle import LifecycleEvent
from scheduling.models import Interview, InterviewType, Job, Slot, truncate_to_millis
from services.expiry import ExpirySweeper
from storage.interviews import InterviewStore


class JobDirectory(Protocol):  # Job lookup collaborator
    def find_job(self, job_id: str) -> Optional[Job]: ...


@dataclass(frozen=True)
class StartResult:
    interview: Interview
    time_remaining_ms: int
    duration_minutes: int


class SchedulingService:  # Entry point for booking and lifecycle operations
    def __init__(
        self,
        store: InterviewStore,
        jobs: JobDirectory,
        clock: Optional[Clock] = None,
        admin_roles: Optional[Sequence[str]] = None,
    ) -> None:
        self._store = store
        self._jobs = jobs
        self._clock = clock or SystemClock()
        self._admin_roles = admin_roles
        self._detector = ConflictDetector(store)
        self.sweeper = ExpirySweeper(store, self._clock)

    @property
    def clock(self) -> Clock:
        return self._clock

    def _now(self) -> datetime:
        return truncate_to_millis(self._clock.now())

    def _require_role(self, role: Optional[str], action: str) -> None:
        allowed = self._admin_roles if self._admin_roles is not None else settings.ADMIN_ROLES
        if role not in allowed:
            raise PermissionDenied(action)

    def _load(self, interview_id: str, candidate_id: str) -> Interview:
        interview = self._store.get_for_candidate(interview_id, candidate_id)
        if interview is None:
            raise NotFound(interview_id)
        return interview

    def _commit(self, before: Interview, after: Interview, event: LifecycleEvent) -> Interview:
        if not self._store.transition(after, expected=before.status):
            current = self._store.get(before.id)
            status = current.status.value if current else "missing"
            raise InvalidTransition(event.value, status)
        log_event(
            event.value,
            after.id,
            candidate_id=after.candidate_id,
            job_id=after.job_id,
            status=after.status.value,
        )
        return after

    def schedule(
        self,
        candidate_id: str,
        job_id: str,
        scheduled_at: datetime,
        duration_minutes: Optional[int] = None,
        interview_type: InterviewType = InterviewType.AI,
    ) -> Interview:
        """Book a slot for ``candidate_id`` on ``job_id``.

        Guards run in order and stop at the first failure: job exists, the
        candidate applied, the start is in the future, the duration is in
        range, the slot is free.
        """

        job = self._jobs.find_job(job_id)
        if job is None:
            raise JobNotFound(job_id)
        if not job.has_applicant(candidate_id):
            raise NotApplied(job_id)

        now = self._now()
        scheduled_at = truncate_to_millis(scheduled_at)
        lifecycle.ensure_schedulable(scheduled_at, now)

        duration = settings.DEFAULT_DURATION_MINUTES if duration_minutes is None else duration_minutes
        if duration < 1 or duration > settings.MAX_DURATION_MINUTES:
            raise InvalidDuration(settings.MAX_DURATION_MINUTES)

        try:
            scheduled_at + timedelta(minutes=duration)
        except OverflowError:
            raise InvalidTime("Interview end time is out of range") from None
        slot = Slot(start=scheduled_at, duration_minutes=duration)
        conflict = self._detector.find_conflict(candidate_id, slot)
        if conflict is not None:
            raise SlotConflict(conflict.id)

        interview = Interview(
            id=uuid4().hex,
            candidate_id=candidate_id,
            job_id=job_id,
            scheduled_at=scheduled_at,
            duration_minutes=duration,
            type=interview_type,
            created_at=now,
            updated_at=now,
        )
        # The store re-runs the overlap scan inside its write transaction.
        created = self._store.create_if_no_conflict(interview)
        log_event(
            "schedule",
            created.id,
            candidate_id=candidate_id,
            job_id=job_id,
            status=created.status.value,
        )
        return created

    def start(self, interview_id: str, candidate_id: str) -> StartResult:
        interview = self._load(interview_id, candidate_id)
        now = self._now()
        started = self._commit(interview, lifecycle.start(interview, now), LifecycleEvent.START)
        return StartResult(
            interview=started,
            time_remaining_ms=started.time_remaining_ms(now),
            duration_minutes=started.duration_minutes,
        )

    def complete(self, interview_id: str, candidate_id: str, notes: Optional[str] = None) -> Interview:
        interview = self._load(interview_id, candidate_id)
        updated = lifecycle.complete(interview, self._now(), notes)
        return self._commit(interview, updated, LifecycleEvent.COMPLETE)

    def cancel(self, interview_id: str, candidate_id: str) -> Interview:
        interview = self._load(interview_id, candidate_id)
        updated = lifecycle.cancel(interview, self._now())
        return self._commit(interview, updated, LifecycleEvent.CANCEL)

    def get(self, interview_id: str, candidate_id: str) -> Interview:
        return self._load(interview_id, candidate_id)

    def list_mine(self, candidate_id: str) -> List[Interview]:
        """Sweep stale bookings, then return the caller's active interviews by start time."""

        self.sweeper.sweep()
        return self._store.list_for_candidate(candidate_id)

    def list_for_job(self, job_id: str, role: Optional[str]) -> List[Interview]:
        self._require_role(role, "list interviews for a job")
        return self._store.list_for_job(job_id)

    def sweep_expired(self, role: Optional[str]) -> int:
        self._require_role(role, "clean up expired interviews")
        with span("sweep_expired") as info:
            count = self.sweeper.sweep()
            info["count"] = count
        return count


__all__ = ["JobDirectory", "SchedulingService", "StartResult"]
