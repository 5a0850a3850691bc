"""Data models for jobs, queries and applications."""
from __future__ import annotations

from dataclasses import asdict, dataclass, field, replace
from typing import Any

from jobhub.errors import FetchError

REMOTE_PREFIX = "remote-"
LOCAL_PREFIX = "local-"

# Filter dimension -> allowed options. The first option is the default.
FILTER_OPTIONS: dict[str, list[str]] = {
    "type": ["Full Time", "Part Time", "Contract", "Remote"],
    "location": ["San Francisco", "New York", "London", "Berlin"],
    "experience": ["Entry", "Mid", "Senior"],
}

# Filter dimension -> Job attribute it constrains.
DIMENSION_FIELDS: dict[str, str] = {
    "type": "employment_type",
    "location": "location",
    "experience": "experience",
}

SORT_KEYS: tuple[str, ...] = ("dateDesc", "dateAsc", "salaryDesc", "salaryAsc", "titleAsc", "titleDesc")
APPLICATION_SORT_KEYS: tuple[str, ...] = ("dateDesc", "dateAsc", "titleAsc", "titleDesc")
DEFAULT_SORT = "dateDesc"
ALL_COMPANIES = "all"


@dataclass
class Job:
    id: str
    title: str
    company: str
    location: str
    employment_type: str
    experience: str
    salary_min: float | None
    salary_max: float | None
    tags: list[str] = field(default_factory=list)
    description: str = ""
    requirements: list[str] = field(default_factory=list)
    benefits: list[str] = field(default_factory=list)
    date: str = ""

    @property
    def is_remote(self) -> bool:
        return self.id.startswith(REMOTE_PREFIX)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Job":
        """Rebuild a job from its persisted shape; unknown keys are ignored."""
        return cls(
            id=str(data["id"]),
            title=data.get("title", ""),
            company=data.get("company", ""),
            location=data.get("location", ""),
            employment_type=data.get("employment_type", ""),
            experience=data.get("experience", ""),
            salary_min=data.get("salary_min"),
            salary_max=data.get("salary_max"),
            tags=list(data.get("tags") or []),
            description=data.get("description", ""),
            requirements=list(data.get("requirements") or []),
            benefits=list(data.get("benefits") or []),
            date=data.get("date", ""),
        )


@dataclass
class QueryDescriptor:
    """Active search, filters, sort and selection of one dashboard view."""

    search: str = ""
    sort: str = DEFAULT_SORT
    filters: dict[str, set[str]] = field(default_factory=dict)
    salary_min: float | None = None
    salary_max: float | None = None
    company: str | None = None
    selected_job_id: str | None = None

    def selected(self, dimension: str) -> set[str]:
        return self.filters.get(dimension) or set()

    def with_filter(self, dimension: str, value: str) -> "QueryDescriptor":
        filters = {k: set(v) for k, v in self.filters.items()}
        filters.setdefault(dimension, set()).add(value)
        return replace(self, filters=filters)

    def copy(self, **changes: Any) -> "QueryDescriptor":
        filters = changes.pop("filters", self.filters)
        return replace(self, filters={k: set(v) for k, v in filters.items()}, **changes)

    @property
    def company_filter(self) -> str | None:
        if not self.company or self.company == ALL_COMPANIES:
            return None
        return self.company

    def is_default(self) -> bool:
        return (
            not self.search
            and self.sort == DEFAULT_SORT
            and not any(self.filters.values())
            and self.salary_min is None
            and self.salary_max is None
            and self.company_filter is None
            and self.selected_job_id is None
        )


@dataclass
class ApplicationRecord:
    job_id: str
    applied_at: str

    def to_dict(self) -> dict[str, str]:
        return {"job_id": self.job_id, "applied_at": self.applied_at}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ApplicationRecord":
        return cls(job_id=str(data["job_id"]), applied_at=str(data.get("applied_at", "")))


@dataclass
class AppliedJob:
    job: Job
    applied_at: str


@dataclass
class ApplyResult:
    applied: bool


@dataclass
class FetchResult:
    """Outcome of one remote fetch: the jobs, or the error that replaced them."""

    jobs: list[Job] = field(default_factory=list)
    error: FetchError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def format_salary(salary_min: float | None, salary_max: float | None) -> str:
    if salary_min is None or salary_max is None:
        return "—"
    return f"${salary_min:,.0f} - ${salary_max:,.0f}"
