from datetime import timedelta


CANDIDATE = {"X-User-Id": "cand-1"}
ADMIN = {"X-User-Id": "ops", "X-User-Role": "admin"}


def _book(client, at, job_id="job-1", duration=10):
    return client.post(
        "/api/interviews/schedule",
        json={"job_id": job_id, "scheduled_at": at.isoformat(), "duration": duration},
        headers=CANDIDATE,
    )


def test_started_interview_is_untouched_by_sweep_but_idle_one_expires(client, clock, job, other_jobs):
    t = clock.now()
    booked = _book(client, t + timedelta(hours=1))
    assert booked.status_code == 201
    interview_id = booked.json()["interview"]["id"]
    assert booked.json()["interview"]["status"] == "scheduled"

    idle = _book(client, t + timedelta(hours=2), job_id="job-2")
    idle_id = idle.json()["interview"]["id"]

    clock.set(t + timedelta(hours=1))
    started = client.post(f"/api/interviews/{interview_id}/start", headers=CANDIDATE)
    assert started.status_code == 200
    assert started.json()["time_remaining"] == 600_000

    clock.set(t + timedelta(hours=1, minutes=10, seconds=1))
    assert client.post("/api/interviews/cleanup", headers=ADMIN).json()["count"] == 0
    detail = client.get(f"/api/interviews/{interview_id}", headers=CANDIDATE).json()["interview"]
    assert detail["status"] == "in-progress"
    assert detail["time_remaining"] == 0

    clock.set(t + timedelta(hours=2, minutes=10, seconds=1))
    mine = client.get("/api/interviews/my-interviews", headers=CANDIDATE).json()["interviews"]
    assert [item["id"] for item in mine] == [interview_id]
    expired = client.get(f"/api/interviews/{idle_id}", headers=CANDIDATE).json()["interview"]
    assert expired["status"] == "expired"
    assert expired["is_expired"] is False

    late_start = client.post(f"/api/interviews/{idle_id}/start", headers=CANDIDATE)
    assert late_start.status_code == 409
    assert late_start.json()["detail"]["status"] == "expired"


def test_overlap_across_jobs_conflicts(client, clock, job, other_jobs):
    t = clock.now()
    assert _book(client, t + timedelta(hours=1)).status_code == 201
    clash = _book(client, t + timedelta(hours=1, minutes=5), job_id="job-2")
    assert clash.status_code == 409
    assert clash.json()["detail"]["error"] == "slot_conflict"


def test_abutting_slots_are_allowed(client, clock, job, other_jobs):
    t = clock.now()
    assert _book(client, t + timedelta(hours=1)).status_code == 201
    assert _book(client, t + timedelta(hours=1, minutes=10), job_id="job-3").status_code == 201

    mine = client.get("/api/interviews/my-interviews", headers=CANDIDATE).json()["interviews"]
    assert [item["job_id"] for item in mine] == ["job-1", "job-3"]


def test_booking_without_application_is_refused(client, clock, jobs, job):
    jobs.create_job(title="Designer", company="Acme", location="Paris", job_id="job-9")
    resp = _book(client, clock.now() + timedelta(hours=1), job_id="job-9")
    assert resp.status_code == 400
    assert resp.json()["detail"]["error"] == "not_applied"
