"""Interval overlap checks for interview bookings.

Bookings are half-open ``[scheduled_at, scheduled_at + duration)`` slots, so
two interviews that abut (one ends exactly when the next starts) never
conflict. Exclusivity is per candidate across every job.
"""
from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Iterable, Optional

from .models import Interview, Slot

if TYPE_CHECKING:  # pragma: no cover
    from storage.interviews import InterviewStore


def intervals_overlap(start_a: datetime, end_a: datetime, start_b: datetime, end_b: datetime) -> bool:
    return start_a < end_b and start_b < end_a


def first_conflict(
    slot: Slot,
    existing: Iterable[Interview],
    *,
    exclude_id: Optional[str] = None,
) -> Optional[Interview]:
    """Return the first active interview in ``existing`` overlapping ``slot``."""

    for interview in existing:
        if exclude_id is not None and interview.id == exclude_id:
            continue
        if not interview.is_active:
            continue
        if intervals_overlap(slot.start, slot.end, interview.scheduled_at, interview.end_time):
            return interview
    return None


class ConflictDetector:  # Read-only conflict queries against the interview store
    def __init__(self, store: "InterviewStore") -> None:
        self._store = store

    def find_conflict(
        self,
        candidate_id: str,
        slot: Slot,
        exclude_id: Optional[str] = None,
    ) -> Optional[Interview]:
        candidates = self._store.list_active_overlapping(candidate_id, slot)
        return first_conflict(slot, candidates, exclude_id=exclude_id)

    def has_conflict(self, candidate_id: str, slot: Slot, exclude_id: Optional[str] = None) -> bool:
        return self.find_conflict(candidate_id, slot, exclude_id) is not None


__all__ = ["ConflictDetector", "first_conflict", "intervals_overlap"]
