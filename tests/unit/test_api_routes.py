from __future__ import annotations

from datetime import timedelta

from scheduling.errors import StoreUnavailable


CANDIDATE = {"X-User-Id": "cand-1"}
HR = {"X-User-Id": "recruiter-1", "X-User-Role": "hr"}


def _schedule(client, clock, minutes_ahead=60, job_id="job-1", **extra):
    body = {"job_id": job_id, "scheduled_at": (clock.now() + timedelta(minutes=minutes_ahead)).isoformat()}
    body.update(extra)
    return client.post("/api/interviews/schedule", json=body, headers=CANDIDATE)


def test_requires_principal(client):
    resp = client.get("/api/interviews/my-interviews")
    assert resp.status_code == 401


def test_schedule_returns_created_interview(client, clock, job):
    resp = _schedule(client, clock, duration=15, type="hr-interview")
    assert resp.status_code == 201
    payload = resp.json()
    assert payload["success"] is True
    interview = payload["interview"]
    assert interview["status"] == "scheduled"
    assert interview["duration"] == 15
    assert interview["type"] == "hr-interview"
    assert interview["time_until_start"] == 3_600_000
    assert interview["job"]["title"] == "Backend Engineer"
    assert interview["is_expired"] is False


def test_schedule_error_payloads(client, clock, job):
    missing_job = _schedule(client, clock, job_id="unknown")
    assert missing_job.status_code == 404
    assert missing_job.json()["detail"]["error"] == "job_not_found"

    past = _schedule(client, clock, minutes_ahead=-5)
    assert past.status_code == 400
    assert past.json()["detail"]["error"] == "invalid_time"

    assert _schedule(client, clock).status_code == 201
    clash = _schedule(client, clock, minutes_ahead=65)
    assert clash.status_code == 409
    assert clash.json()["detail"]["error"] == "slot_conflict"

    bad_duration = _schedule(client, clock, duration=0)
    assert bad_duration.status_code == 422

    far_future = client.post(
        "/api/interviews/schedule",
        json={"job_id": "job-1", "scheduled_at": "9999-12-31T23:55:00Z"},
        headers=CANDIDATE,
    )
    assert far_future.status_code == 400
    assert far_future.json()["detail"]["error"] == "invalid_time"


def test_not_applied(client, clock, jobs, job):
    resp = client.post(
        "/api/interviews/schedule",
        json={"job_id": "job-1", "scheduled_at": (clock.now() + timedelta(hours=1)).isoformat()},
        headers={"X-User-Id": "cand-9"},
    )
    assert resp.status_code == 400
    assert resp.json()["detail"]["error"] == "not_applied"


def test_start_complete_get_cycle(client, clock, job):
    interview_id = _schedule(client, clock).json()["interview"]["id"]

    early = client.post(f"/api/interviews/{interview_id}/start", headers=CANDIDATE)
    assert early.status_code == 409
    assert early.json()["detail"]["error"] == "too_early"
    assert early.json()["detail"]["time_until_start"] == 3_600_000

    clock.advance(hours=1)
    started = client.post(f"/api/interviews/{interview_id}/start", headers=CANDIDATE)
    assert started.status_code == 200
    assert started.json()["time_remaining"] == 600_000
    assert started.json()["duration"] == 10

    clock.advance(minutes=4)
    detail = client.get(f"/api/interviews/{interview_id}", headers=CANDIDATE).json()["interview"]
    assert detail["status"] == "in-progress"
    assert detail["time_remaining"] == 360_000
    assert detail["started_at"] is not None

    done = client.post(f"/api/interviews/{interview_id}/complete", json={"notes": "solid"}, headers=CANDIDATE)
    assert done.status_code == 200
    again = client.post(f"/api/interviews/{interview_id}/complete", headers=CANDIDATE)
    assert again.status_code == 409
    assert again.json()["detail"]["status"] == "completed"

    detail = client.get(f"/api/interviews/{interview_id}", headers=CANDIDATE).json()["interview"]
    assert detail["status"] == "completed"
    assert detail["notes"] == "solid"
    assert detail["completed_at"] is not None

    cancel = client.delete(f"/api/interviews/{interview_id}", headers=CANDIDATE)
    assert cancel.status_code == 409


def test_cancel_and_owner_scoping(client, clock, job):
    interview_id = _schedule(client, clock).json()["interview"]["id"]

    stranger = {"X-User-Id": "cand-2"}
    assert client.get(f"/api/interviews/{interview_id}", headers=stranger).status_code == 404
    assert client.delete(f"/api/interviews/{interview_id}", headers=stranger).status_code == 404

    resp = client.delete(f"/api/interviews/{interview_id}", headers=CANDIDATE)
    assert resp.status_code == 200
    assert resp.json()["message"] == "Interview cancelled successfully"
    detail = client.get(f"/api/interviews/{interview_id}", headers=CANDIDATE).json()["interview"]
    assert detail["status"] == "cancelled"
    assert client.get("/api/interviews/my-interviews", headers=CANDIDATE).json()["interviews"] == []


def test_cleanup_is_role_gated(client, clock, job):
    _schedule(client, clock, minutes_ahead=5)
    assert client.post("/api/interviews/cleanup", headers=CANDIDATE).status_code == 403

    clock.advance(minutes=20)
    resp = client.post("/api/interviews/cleanup", headers=HR)
    assert resp.status_code == 200
    assert resp.json()["count"] == 1
    assert resp.json()["message"] == "Cleaned up 1 expired interviews"


def test_job_interviews_for_recruiters(client, clock, job):
    _schedule(client, clock)
    assert client.get("/api/interviews/jobs/job-1", headers=CANDIDATE).status_code == 403
    listed = client.get("/api/interviews/jobs/job-1", headers=HR).json()["interviews"]
    assert [item["candidate_id"] for item in listed] == ["cand-1"]


def test_store_outage_is_retryable(client, clock, job, service, monkeypatch):
    def unavailable(*_args, **_kwargs):
        raise StoreUnavailable("database is locked")

    monkeypatch.setattr(service, "list_mine", unavailable)
    resp = client.get("/api/interviews/my-interviews", headers=CANDIDATE)
    assert resp.status_code == 503
    assert resp.json()["detail"]["retryable"] is True
    assert resp.headers["retry-after"] == "1"


def test_unexpected_errors_become_500(client, service, monkeypatch):
    def boom(*_args, **_kwargs):
        raise RuntimeError("boom")

    monkeypatch.setattr(service, "get", boom)
    resp = client.get("/api/interviews/anything", headers=CANDIDATE)
    assert resp.status_code == 500
    assert resp.json()["detail"] == "Failed to fetch interview details"
