"""FastAPI routes for interview slot scheduling."""
from __future__ import annotations

import logging
from typing import Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException

from api.deps import Principal, current_principal, get_job_store, get_service
from api.schemas import (
    AckResp,
    CompleteReq,
    InterviewListResp,
    InterviewResp,
    InterviewView,
    ScheduleReq,
    StartResp,
    SweepResp,
)
from scheduling.errors import SchedulingError, StoreUnavailable
from scheduling.models import Interview, Job
from services.scheduling import SchedulingService
from storage.jobs import JobStore


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/interviews")


def _http_error(exc: SchedulingError) -> HTTPException:
    detail = {"success": False, "error": exc.code, "message": str(exc)}
    detail.update(exc.details())
    headers = {"Retry-After": "1"} if isinstance(exc, StoreUnavailable) else None
    return HTTPException(status_code=exc.status_code, detail=detail, headers=headers)


def _unexpected(action: str) -> HTTPException:
    logger.exception("Unexpected error while trying to %s", action)
    return HTTPException(status_code=500, detail=f"Failed to {action}")


def _views(
    service: SchedulingService,
    jobs: JobStore,
    interviews: List[Interview],
) -> List[InterviewView]:  # Attach job summaries, looking each job up once
    now = service.clock.now()
    cache: Dict[str, Optional[Job]] = {}
    views: List[InterviewView] = []
    for interview in interviews:
        if interview.job_id not in cache:
            cache[interview.job_id] = jobs.find_job(interview.job_id)
        views.append(InterviewView.build(interview, now, cache[interview.job_id]))
    return views


@router.get("/my-interviews", response_model=InterviewListResp)
def my_interviews(
    principal: Principal = Depends(current_principal),
    service: SchedulingService = Depends(get_service),
    jobs: JobStore = Depends(get_job_store),
) -> InterviewListResp:
    try:
        interviews = service.list_mine(principal.user_id)
        return InterviewListResp(interviews=_views(service, jobs, interviews))
    except SchedulingError as exc:
        raise _http_error(exc) from exc
    except Exception as exc:  # noqa: BLE001
        raise _unexpected("fetch interviews") from exc


@router.post("/schedule", response_model=InterviewResp, status_code=201)
def schedule(
    req: ScheduleReq,
    principal: Principal = Depends(current_principal),
    service: SchedulingService = Depends(get_service),
    jobs: JobStore = Depends(get_job_store),
) -> InterviewResp:
    try:
        interview = service.schedule(
            principal.user_id,
            req.job_id,
            req.scheduled_at,
            duration_minutes=req.duration,
            interview_type=req.type,
        )
        view = _views(service, jobs, [interview])[0]
        return InterviewResp(message="Interview scheduled successfully", interview=view)
    except SchedulingError as exc:
        raise _http_error(exc) from exc
    except Exception as exc:  # noqa: BLE001
        raise _unexpected("schedule interview") from exc


@router.get("/jobs/{job_id}", response_model=InterviewListResp)
def job_interviews(
    job_id: str,
    principal: Principal = Depends(current_principal),
    service: SchedulingService = Depends(get_service),
    jobs: JobStore = Depends(get_job_store),
) -> InterviewListResp:
    try:
        interviews = service.list_for_job(job_id, principal.role)
        return InterviewListResp(interviews=_views(service, jobs, interviews))
    except SchedulingError as exc:
        raise _http_error(exc) from exc
    except Exception as exc:  # noqa: BLE001
        raise _unexpected("fetch job interviews") from exc


@router.post("/cleanup", response_model=SweepResp)
def cleanup(
    principal: Principal = Depends(current_principal),
    service: SchedulingService = Depends(get_service),
) -> SweepResp:
    try:
        count = service.sweep_expired(principal.role)
    except SchedulingError as exc:
        raise _http_error(exc) from exc
    except Exception as exc:  # noqa: BLE001
        raise _unexpected("clean up interviews") from exc
    return SweepResp(message=f"Cleaned up {count} expired interviews", count=count)


@router.post("/{interview_id}/start", response_model=StartResp)
def start(
    interview_id: str,
    principal: Principal = Depends(current_principal),
    service: SchedulingService = Depends(get_service),
) -> StartResp:
    try:
        result = service.start(interview_id, principal.user_id)
    except SchedulingError as exc:
        raise _http_error(exc) from exc
    except Exception as exc:  # noqa: BLE001
        raise _unexpected("start interview") from exc
    return StartResp(
        interview_id=result.interview.id,
        time_remaining=result.time_remaining_ms,
        duration=result.duration_minutes,
    )


@router.post("/{interview_id}/complete", response_model=AckResp)
def complete(
    interview_id: str,
    req: Optional[CompleteReq] = None,
    principal: Principal = Depends(current_principal),
    service: SchedulingService = Depends(get_service),
) -> AckResp:
    notes = req.notes if req else None
    try:
        service.complete(interview_id, principal.user_id, notes)
    except SchedulingError as exc:
        raise _http_error(exc) from exc
    except Exception as exc:  # noqa: BLE001
        raise _unexpected("complete interview") from exc
    return AckResp(message="Interview completed successfully")


@router.delete("/{interview_id}", response_model=AckResp)
def cancel(
    interview_id: str,
    principal: Principal = Depends(current_principal),
    service: SchedulingService = Depends(get_service),
) -> AckResp:
    try:
        service.cancel(interview_id, principal.user_id)
    except SchedulingError as exc:
        raise _http_error(exc) from exc
    except Exception as exc:  # noqa: BLE001
        raise _unexpected("cancel interview") from exc
    return AckResp(message="Interview cancelled successfully")


@router.get("/{interview_id}", response_model=InterviewResp)
def get_interview(
    interview_id: str,
    principal: Principal = Depends(current_principal),
    service: SchedulingService = Depends(get_service),
    jobs: JobStore = Depends(get_job_store),
) -> InterviewResp:
    try:
        interview = service.get(interview_id, principal.user_id)
        return InterviewResp(interview=_views(service, jobs, [interview])[0])
    except SchedulingError as exc:
        raise _http_error(exc) from exc
    except Exception as exc:  # noqa: BLE001
        raise _unexpected("fetch interview details") from exc
