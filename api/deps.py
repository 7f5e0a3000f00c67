"""Request dependencies: the authenticated principal and the scheduling service."""
from __future__ import annotations

from typing import Optional

from fastapi import Depends, Header, HTTPException
from pydantic import BaseModel

from services.scheduling import SchedulingService
from storage.interviews import InterviewStore
from storage.jobs import JobStore


class Principal(BaseModel):  # Identity already verified upstream
    user_id: str
    role: Optional[str] = None


def current_principal(
    x_user_id: Optional[str] = Header(default=None),
    x_user_role: Optional[str] = Header(default=None),
) -> Principal:
    if not x_user_id:
        raise HTTPException(status_code=401, detail="Authentication required")
    return Principal(user_id=x_user_id, role=x_user_role or None)


def get_job_store() -> JobStore:
    return JobStore()


def get_service(jobs: JobStore = Depends(get_job_store)) -> SchedulingService:
    return SchedulingService(InterviewStore(), jobs)


__all__ = ["Principal", "current_principal", "get_job_store", "get_service"]
