from __future__ import annotations  # Job lookup collaborator backed by SQLite

import sqlite3
from datetime import datetime, timezone
from typing import Optional
from uuid import uuid4

from scheduling.models import Job, JobApplication

from .sqlite import get_conn


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="seconds")


class JobStore:  # Minimal job and application records the scheduler reads
    def __init__(self, db_path: Optional[str] = None) -> None:
        self._db_path = db_path

    def create_job(
        self,
        *,
        title: str,
        company: str,
        location: str,
        job_id: Optional[str] = None,
    ) -> Job:  # Persist a job posting
        job_id = job_id or uuid4().hex
        with get_conn(self._db_path) as conn:
            conn.execute(
                "INSERT INTO jobs (job_id, title, company, location, created_at) VALUES (?, ?, ?, ?, ?)",
                (job_id, title, company, location, _now_iso()),
            )
        return Job(job_id=job_id, title=title, company=company, location=location)

    def add_application(self, job_id: str, user_id: str) -> None:  # Record that user applied to job
        with get_conn(self._db_path) as conn:
            try:
                conn.execute(
                    "INSERT OR IGNORE INTO job_applications (job_id, user_id, applied_at) VALUES (?, ?, ?)",
                    (job_id, user_id, _now_iso()),
                )
            except sqlite3.IntegrityError as exc:
                raise KeyError(job_id) from exc

    def withdraw_application(self, job_id: str, user_id: str) -> None:
        with get_conn(self._db_path) as conn:
            conn.execute(
                "DELETE FROM job_applications WHERE job_id = ? AND user_id = ?",
                (job_id, user_id),
            )

    def find_job(self, job_id: str) -> Optional[Job]:  # Load job with its applications
        with get_conn(self._db_path) as conn:
            row = conn.execute(
                "SELECT job_id, title, company, location FROM jobs WHERE job_id = ?",
                (job_id,),
            ).fetchone()
            if row is None:
                return None
            applicants = conn.execute(
                "SELECT user_id FROM job_applications WHERE job_id = ? ORDER BY applied_at, user_id",
                (job_id,),
            ).fetchall()
        return Job(
            job_id=row["job_id"],
            title=row["title"],
            company=row["company"],
            location=row["location"],
            applications=[JobApplication(user_id=item["user_id"]) for item in applicants],
        )


__all__ = ["JobStore"]
