from __future__ import annotations  # Interview persistence with atomic booking and conditional updates

import sqlite3
from datetime import datetime, timezone
from typing import List, Optional, Sequence

from scheduling.conflicts import first_conflict
from scheduling.errors import SlotConflict
from scheduling.lifecycle import LifecycleEvent, target_status
from scheduling.models import (
    ACTIVE_STATUSES,
    Interview,
    InterviewStatus,
    InterviewType,
    Slot,
    to_millis,
)

from .sqlite import get_conn, write_transaction


_COLUMNS = """
    id, candidate_id, job_id, scheduled_at_ms, end_at_ms, duration_minutes, status, type,
    meeting_room, notes, started_at_ms, completed_at_ms, created_at_ms, updated_at_ms
"""


def _from_millis(value: Optional[int]) -> Optional[datetime]:
    if value is None:
        return None
    return datetime.fromtimestamp(value / 1000, tz=timezone.utc)


def _opt_millis(value: Optional[datetime]) -> Optional[int]:
    return to_millis(value) if value is not None else None


def _row_to_interview(row: sqlite3.Row) -> Interview:
    return Interview(
        id=row["id"],
        candidate_id=row["candidate_id"],
        job_id=row["job_id"],
        scheduled_at=_from_millis(row["scheduled_at_ms"]),
        duration_minutes=row["duration_minutes"],
        status=InterviewStatus(row["status"]),
        type=InterviewType(row["type"]),
        meeting_room=row["meeting_room"],
        notes=row["notes"],
        started_at=_from_millis(row["started_at_ms"]),
        completed_at=_from_millis(row["completed_at_ms"]),
        created_at=_from_millis(row["created_at_ms"]),
        updated_at=_from_millis(row["updated_at_ms"]),
    )


def _status_params(statuses: Sequence[InterviewStatus]) -> tuple[str, List[str]]:
    marks = ", ".join("?" for _ in statuses)
    return marks, [status.value for status in statuses]


class InterviewStore:  # SQLite-backed interview storage
    def __init__(self, db_path: Optional[str] = None) -> None:  # Defaults to settings.DB_PATH at call time
        self._db_path = db_path

    def _active_overlapping(
        self,
        conn: sqlite3.Connection,
        candidate_id: str,
        slot: Slot,
    ) -> List[Interview]:  # Active rows for the candidate whose range touches the slot
        marks, values = _status_params(ACTIVE_STATUSES)
        rows = conn.execute(
            f"""
            SELECT {_COLUMNS} FROM interviews
            WHERE candidate_id = ?
              AND status IN ({marks})
              AND scheduled_at_ms < ?
              AND end_at_ms > ?
            ORDER BY scheduled_at_ms
            """,
            (candidate_id, *values, to_millis(slot.end), to_millis(slot.start)),
        ).fetchall()
        return [_row_to_interview(row) for row in rows]

    def list_active_overlapping(self, candidate_id: str, slot: Slot) -> List[Interview]:
        with get_conn(self._db_path) as conn:
            return self._active_overlapping(conn, candidate_id, slot)

    def create_if_no_conflict(self, interview: Interview) -> Interview:  # Conflict scan and insert in one write transaction
        with get_conn(self._db_path) as conn:
            try:
                with write_transaction(conn):
                    existing = self._active_overlapping(conn, interview.candidate_id, interview.slot)
                    conflict = first_conflict(interview.slot, existing)
                    if conflict is not None:
                        raise SlotConflict(conflict.id)
                    conn.execute(
                        f"INSERT INTO interviews ({_COLUMNS}) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
                        (
                            interview.id,
                            interview.candidate_id,
                            interview.job_id,
                            to_millis(interview.scheduled_at),
                            to_millis(interview.end_time),
                            interview.duration_minutes,
                            interview.status.value,
                            interview.type.value,
                            interview.meeting_room,
                            interview.notes,
                            _opt_millis(interview.started_at),
                            _opt_millis(interview.completed_at),
                            to_millis(interview.created_at),
                            to_millis(interview.updated_at),
                        ),
                    )
            except sqlite3.IntegrityError as exc:
                if "slot conflict" in str(exc):
                    raise SlotConflict() from exc
                raise
        return interview

    def get(self, interview_id: str) -> Optional[Interview]:
        with get_conn(self._db_path) as conn:
            row = conn.execute(
                f"SELECT {_COLUMNS} FROM interviews WHERE id = ?",
                (interview_id,),
            ).fetchone()
        return _row_to_interview(row) if row else None

    def get_for_candidate(self, interview_id: str, candidate_id: str) -> Optional[Interview]:
        with get_conn(self._db_path) as conn:
            row = conn.execute(
                f"SELECT {_COLUMNS} FROM interviews WHERE id = ? AND candidate_id = ?",
                (interview_id, candidate_id),
            ).fetchone()
        return _row_to_interview(row) if row else None

    def list_for_candidate(
        self,
        candidate_id: str,
        statuses: Sequence[InterviewStatus] = ACTIVE_STATUSES,
    ) -> List[Interview]:  # Ordered by scheduled start
        marks, values = _status_params(statuses)
        with get_conn(self._db_path) as conn:
            rows = conn.execute(
                f"""
                SELECT {_COLUMNS} FROM interviews
                WHERE candidate_id = ? AND status IN ({marks})
                ORDER BY scheduled_at_ms ASC, id ASC
                """,
                (candidate_id, *values),
            ).fetchall()
        return [_row_to_interview(row) for row in rows]

    def list_for_job(self, job_id: str) -> List[Interview]:
        with get_conn(self._db_path) as conn:
            rows = conn.execute(
                f"SELECT {_COLUMNS} FROM interviews WHERE job_id = ? ORDER BY scheduled_at_ms ASC, id ASC",
                (job_id,),
            ).fetchall()
        return [_row_to_interview(row) for row in rows]

    def list_in_range(
        self,
        start: datetime,
        end: datetime,
        statuses: Sequence[InterviewStatus] = ACTIVE_STATUSES,
    ) -> List[Interview]:  # Interviews whose slot overlaps [start, end)
        marks, values = _status_params(statuses)
        with get_conn(self._db_path) as conn:
            rows = conn.execute(
                f"""
                SELECT {_COLUMNS} FROM interviews
                WHERE status IN ({marks}) AND scheduled_at_ms < ? AND end_at_ms > ?
                ORDER BY scheduled_at_ms ASC, id ASC
                """,
                (*values, to_millis(end), to_millis(start)),
            ).fetchall()
        return [_row_to_interview(row) for row in rows]

    def list_recent(self, limit: int = 20) -> List[Interview]:
        with get_conn(self._db_path) as conn:
            rows = conn.execute(
                f"SELECT {_COLUMNS} FROM interviews ORDER BY updated_at_ms DESC, id DESC LIMIT ?",
                (limit,),
            ).fetchall()
        return [_row_to_interview(row) for row in rows]

    def transition(self, updated: Interview, expected: InterviewStatus) -> bool:
        """Persist ``updated`` only if the row still has status ``expected``.

        Returns ``False`` when a concurrent writer moved the row first.
        """

        with get_conn(self._db_path) as conn:
            cur = conn.execute(
                """
                UPDATE interviews
                SET status = ?, started_at_ms = ?, completed_at_ms = ?, notes = ?, updated_at_ms = ?
                WHERE id = ? AND status = ?
                """,
                (
                    updated.status.value,
                    _opt_millis(updated.started_at),
                    _opt_millis(updated.completed_at),
                    updated.notes,
                    to_millis(updated.updated_at),
                    updated.id,
                    expected.value,
                ),
            )
            return cur.rowcount == 1

    def expire_overdue(self, now: datetime) -> int:
        """Mark every ``scheduled`` interview whose slot ended before ``now`` as expired."""

        source = InterviewStatus.SCHEDULED
        target = target_status(source, LifecycleEvent.EXPIRE)
        now_ms = to_millis(now)
        with get_conn(self._db_path) as conn:
            cur = conn.execute(
                """
                UPDATE interviews
                SET status = ?, updated_at_ms = ?
                WHERE status = ? AND end_at_ms < ?
                """,
                (target.value, now_ms, source.value, now_ms),
            )
            return cur.rowcount


__all__ = ["InterviewStore"]
