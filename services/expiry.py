"""Expiry sweeper for interviews whose window passed without a start."""
from __future__ import annotations

import logging
import threading
from datetime import datetime
from typing import Optional

from observability import log_event
from scheduling.clock import Clock, as_utc
from scheduling.errors import StoreUnavailable
from storage.interviews import InterviewStore


logger = logging.getLogger(__name__)


def sweep_expired(store: InterviewStore, now: datetime) -> int:
    """Move every overdue ``scheduled`` interview to ``expired`` and return the count.

    The update is conditional on the row still being ``scheduled``, so rows a
    concurrent start or cancel already moved are left alone and a repeated
    sweep is a no-op.
    """

    count = store.expire_overdue(as_utc(now))
    if count:
        log_event("sweep", "-", count=count)
    return count


class ExpirySweeper:  # Clock-bound sweep entry point
    def __init__(self, store: InterviewStore, clock: Clock) -> None:
        self._store = store
        self._clock = clock

    def sweep(self, now: Optional[datetime] = None) -> int:
        return sweep_expired(self._store, now or self._clock.now())


class SweepLoop:  # Background thread running the sweeper on an interval
    def __init__(self, sweeper: ExpirySweeper, interval_s: float) -> None:
        self._sweeper = sweeper
        self._interval_s = interval_s
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._failing = False

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def run_once(self) -> Optional[int]:
        """Run one sweep; a store failure is logged once until the store recovers."""

        try:
            count = self._sweeper.sweep()
        except StoreUnavailable as exc:
            self._report_failure(exc)
            return None
        except Exception as exc:  # noqa: BLE001
            logger.exception("Unexpected expiry sweep failure")
            self._report_failure(exc)
            return None
        if self._failing:
            logger.info("Expiry sweep recovered")
            self._failing = False
        return count

    def _report_failure(self, exc: Exception) -> None:
        if not self._failing:
            logger.warning("Expiry sweep failed, will retry: %s", exc)
            log_event("sweep_failed", "-", level=logging.WARNING, error=str(exc))
        self._failing = True

    def start(self) -> None:
        if self.running:
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self._run, name="expiry-sweeper", daemon=True)
        self._thread.start()

    def stop(self, timeout: Optional[float] = 5.0) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None

    def _run(self) -> None:
        while not self._stop.wait(self._interval_s):
            self.run_once()


__all__ = ["ExpirySweeper", "SweepLoop", "sweep_expired"]
