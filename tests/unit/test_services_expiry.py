import time
from datetime import timedelta

import pytest

from scheduling.errors import StoreUnavailable
from scheduling.models import Interview, InterviewStatus
from services.expiry import ExpirySweeper, SweepLoop, sweep_expired


@pytest.fixture()
def booked(store, clock):
    now = clock.now()
    return store.create_if_no_conflict(
        Interview(
            id="i1",
            candidate_id="cand-1",
            job_id="job-1",
            scheduled_at=now + timedelta(hours=1),
            created_at=now,
            updated_at=now,
        )
    )


def test_nothing_to_sweep_before_window_ends(store, clock, booked):
    assert sweep_expired(store, clock.now()) == 0
    assert sweep_expired(store, booked.end_time) == 0
    assert store.get("i1").status is InterviewStatus.SCHEDULED


def test_sweep_expires_and_is_idempotent(store, clock, booked):
    sweeper = ExpirySweeper(store, clock)
    clock.set(booked.end_time + timedelta(seconds=1))
    assert sweeper.sweep() == 1
    assert sweeper.sweep() == 0
    assert store.get("i1").status is InterviewStatus.EXPIRED


def test_sweep_explicit_now_overrides_clock(store, clock, booked):
    sweeper = ExpirySweeper(store, clock)
    assert sweeper.sweep(booked.end_time + timedelta(minutes=1)) == 1


class _FlakySweeper:
    def __init__(self, outcomes):
        self.outcomes = list(outcomes)
        self.calls = 0

    def sweep(self):
        self.calls += 1
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


def test_loop_reports_store_failure_once(monkeypatch):
    events = []
    monkeypatch.setattr("services.expiry.log_event", lambda kind, *_, **__: events.append(kind))
    flaky = _FlakySweeper([StoreUnavailable("locked"), StoreUnavailable("locked"), 3, StoreUnavailable("again")])
    loop = SweepLoop(flaky, interval_s=60)

    assert loop.run_once() is None
    assert loop.run_once() is None
    assert events == ["sweep_failed"]
    assert loop.run_once() == 3
    assert loop.run_once() is None
    assert events == ["sweep_failed", "sweep_failed"]


def test_loop_runs_in_background_and_stops():
    flaky = _FlakySweeper([0] * 1000)
    loop = SweepLoop(flaky, interval_s=0.01)
    loop.start()
    try:
        deadline = time.time() + 2
        while flaky.calls == 0 and time.time() < deadline:
            time.sleep(0.01)
        assert loop.running
    finally:
        loop.stop()
    assert flaky.calls > 0
    assert not loop.running


def test_loop_survives_corrupt_store(tmp_db, store, clock, monkeypatch):
    events = []
    monkeypatch.setattr("services.expiry.log_event", lambda kind, *_, **__: events.append(kind))
    with open(tmp_db, "wb") as fh:
        fh.write(b"not a sqlite database" * 100)

    loop = SweepLoop(ExpirySweeper(store, clock), interval_s=60)
    assert loop.run_once() is None
    assert events == ["sweep_failed"]


def test_loop_keeps_running_after_unexpected_error():
    flaky = _FlakySweeper([RuntimeError("boom")] + [0] * 1000)
    loop = SweepLoop(flaky, interval_s=0.01)
    loop.start()
    try:
        deadline = time.time() + 2
        while flaky.calls < 2 and time.time() < deadline:
            time.sleep(0.01)
        assert flaky.calls >= 2
        assert loop.running
    finally:
        loop.stop()
