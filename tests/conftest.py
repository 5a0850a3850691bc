"""
Shared fixtures for the JobHub tests.

- Keeps logs on the console only (no logs/ directory written by tests)
- Isolates JOBHUB_* environment variables so a developer .env never leaks in
- Provides a job factory, the two reference jobs used across modules, a
  temporary store and a stub job source
"""

import os

import pytest

os.environ["JOBHUB_LOG_FILE"] = "false"

from jobhub.models import FetchResult, Job
from jobhub.sources.base import JobSource
from jobhub.storage import LocalStore


_JOBHUB_ENV = (
    "JOBHUB_API_URL",
    "JOBHUB_API_KEY",
    "JOBHUB_FETCH_TIMEOUT",
    "JOBHUB_FETCH_ATTEMPTS",
    "JOBHUB_DATA_DIR",
    "JOBHUB_USE_MOCK",
)


@pytest.fixture(autouse=True)
def isolate_environment(monkeypatch):
    for key in _JOBHUB_ENV:
        monkeypatch.delenv(key, raising=False)


def build_job(job_id, **overrides):
    fields = {
        "title": "Engineer",
        "company": "Acme",
        "location": "Berlin",
        "employment_type": "Full Time",
        "experience": "Mid",
        "salary_min": 90000,
        "salary_max": 150000,
        "tags": [],
        "description": "",
        "requirements": [],
        "benefits": [],
        "date": "2024-01-01T00:00:00Z",
    }
    fields.update(overrides)
    return Job(id=job_id, **fields)


@pytest.fixture
def make_job():
    return build_job


@pytest.fixture
def job_a():
    return build_job(
        "remote-a",
        title="Backend Engineer",
        company="Northwind",
        location="Berlin",
        employment_type="Remote",
        salary_min=100000,
        salary_max=140000,
        tags=["Python", "Django"],
        date="2024-01-01T00:00:00Z",
    )


@pytest.fixture
def job_b():
    return build_job(
        "remote-b",
        title="Frontend Dev",
        company="Contoso",
        location="London",
        employment_type="Full Time",
        salary_min=80000,
        salary_max=110000,
        tags=["React"],
        date="2024-02-01T00:00:00Z",
    )


@pytest.fixture
def store(tmp_path):
    return LocalStore(tmp_path / "data")


class StubSource(JobSource):
    """Returns a fixed FetchResult and counts calls."""

    name = "stub"

    def __init__(self, result):
        self.result = result
        self.calls = 0

    def fetch(self):
        self.calls += 1
        return self.result


@pytest.fixture
def stub_source(job_a, job_b):
    return StubSource(FetchResult(jobs=[job_a, job_b]))


@pytest.fixture
def make_source():
    return StubSource
