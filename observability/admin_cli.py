"""Lightweight CLI helpers for inspecting and maintaining interview bookings."""
from __future__ import annotations

import argparse

from config.settings import settings
from scheduling.clock import SystemClock
from services.expiry import ExpirySweeper
from storage.interviews import InterviewStore
from storage.migrate import migrate


def tail_interviews(limit: int = 20) -> None:
    store = InterviewStore()
    for interview in store.list_recent(limit):
        print(
            f"[{interview.updated_at.isoformat()}] {interview.id} {interview.candidate_id}/{interview.job_id} "
            f"at={interview.scheduled_at.isoformat()} dur={interview.duration_minutes}m -> {interview.status.value}"
        )


def sweep() -> int:
    count = ExpirySweeper(InterviewStore(), SystemClock()).sweep()
    print(f"Expired {count} interviews")
    return count


def main() -> None:
    parser = argparse.ArgumentParser()
    parser.add_argument("--migrate", action="store_true", help="Apply schema migrations")
    parser.add_argument("--sweep", action="store_true", help="Expire scheduled interviews whose window has passed")
    parser.add_argument("--tail-interviews", type=int, help="Show the most recently updated interviews")
    args = parser.parse_args()

    if args.migrate:
        migrate(settings.DB_PATH)
    if args.sweep:
        sweep()
    if args.tail_interviews:
        tail_interviews(args.tail_interviews)


if __name__ == "__main__":
    main()
