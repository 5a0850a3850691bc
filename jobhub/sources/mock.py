"""Offline job source with a handful of sample postings."""
from __future__ import annotations

from jobhub.log import get_logger
from jobhub.models import FetchResult
from jobhub.normalize import normalize_many
from jobhub.sources.base import JobSource

log = get_logger(__name__)

# Raw shapes deliberately vary, like a real upstream payload does.
SAMPLE_RECORDS: list[dict] = [
    {
        "id": 1,
        "title": "Backend Engineer",
        "company": "Northwind",
        "location": "Berlin, Germany",
        "type": "remote",
        "experience": "senior",
        "salary_min": 100000,
        "salary_max": 140000,
        "tags": ["Python", "PostgreSQL", "AWS"],
        "date": "2024-01-01T09:00:00Z",
    },
    {
        "id": 2,
        "position": "Frontend Developer",
        "company_name": "Contoso",
        "city": "London",
        "employment_type": "full-time",
        "experience": "Mid-level",
        "salary": {"min": 80000, "max": 110000},
        "skills": "React, TypeScript, CSS",
        "created_at": "2024-02-01T09:00:00Z",
    },
    {
        "id": 3,
        "title": "Data Analyst",
        "company": {"name": "Fabrikam"},
        "location": "New York",
        "type": "Part_Time",
        "experience": "junior",
        "salary_min": "60000",
        "salary_max": "75000",
        "tags": ["SQL", "Tableau"],
        "date": "2024-01-15T09:00:00Z",
    },
    {
        "id": 4,
        "title": "Platform Contractor",
        "company": "Northwind",
        "location": "San Francisco, CA",
        "type": "Contract",
        "tags": ["Kubernetes", "Terraform"],
        "date": "2023-12-10T09:00:00Z",
    },
]


class MockSource(JobSource):
    name = "mock"

    def fetch(self) -> FetchResult:
        log.info("MockSource serving %d sample jobs", len(SAMPLE_RECORDS))
        return FetchResult(jobs=normalize_many(SAMPLE_RECORDS))
