import os
import sys
import tempfile
from datetime import datetime, timezone
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

os.environ.setdefault("ENABLE_FILE_LOGS", "0")

from fastapi import FastAPI
from fastapi.testclient import TestClient

from api.deps import get_service
from api.routes import router
from config.settings import settings
from scheduling.clock import ManualClock
from services.scheduling import SchedulingService
from storage.interviews import InterviewStore
from storage.jobs import JobStore
from storage.migrate import migrate


T0 = datetime(2030, 1, 7, 9, 0, tzinfo=timezone.utc)


@pytest.fixture(autouse=True)
def tmp_db(monkeypatch):
    td = tempfile.TemporaryDirectory()
    db_path = os.path.join(td.name, "test.db")
    monkeypatch.setattr(settings, "DB_PATH", db_path, raising=False)
    migrate(db_path)
    try:
        yield db_path
    finally:
        td.cleanup()


@pytest.fixture
def clock():
    return ManualClock(T0)


@pytest.fixture
def store():
    return InterviewStore()


@pytest.fixture
def jobs():
    return JobStore()


@pytest.fixture
def job(jobs):
    created = jobs.create_job(title="Backend Engineer", company="Acme", location="Remote", job_id="job-1")
    jobs.add_application("job-1", "cand-1")
    return created


@pytest.fixture
def other_jobs(jobs):
    for job_id, title in (("job-2", "Data Engineer"), ("job-3", "SRE")):
        jobs.create_job(title=title, company="Acme", location="Berlin", job_id=job_id)
        jobs.add_application(job_id, "cand-1")
    return ["job-2", "job-3"]


@pytest.fixture
def service(store, jobs, clock):
    return SchedulingService(store, jobs, clock)


@pytest.fixture
def client(service):
    app = FastAPI()
    app.include_router(router)
    app.dependency_overrides[get_service] = lambda: service
    return TestClient(app)
