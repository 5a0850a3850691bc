"""
Dashboard controller.

Owns the application state (canonical job collection, active query,
selection, role) and is the only place it changes:

    load → merge(remote, local) → query(descriptor) → view

Every mutating method re-derives and returns the new view, so callers
(the Streamlit app, the CLI) never touch the collection directly.
"""
from __future__ import annotations

import time
from collections.abc import Mapping
from typing import Any, Callable

from jobhub.log import get_logger
from jobhub.merge import merge, remote_subset
from jobhub.models import (
    ALL_COMPANIES,
    DEFAULT_SORT,
    FILTER_OPTIONS,
    LOCAL_PREFIX,
    AppliedJob,
    ApplyResult,
    FetchResult,
    Job,
    QueryDescriptor,
)
from jobhub.normalize import (
    DEFAULT_COMPANY,
    DEFAULT_TITLE,
    map_to_enum,
    now_iso,
    parse_number,
    parse_string_list,
)
from jobhub.query import companies, counts_by_dimension, query
from jobhub.sources.base import JobSource
from jobhub.storage import LocalStore
from jobhub.tracker import ApplicationTracker
from jobhub import urlstate

log = get_logger(__name__)

SEEKER = "seeker"
RECRUITER = "recruiter"
ROLES: tuple[str, ...] = (SEEKER, RECRUITER)

_FORM_FIELDS: tuple[str, ...] = (
    "title", "company", "location", "employment_type", "experience",
    "salary_min", "salary_max", "tags", "description", "requirements", "benefits",
)


def new_local_id() -> str:
    return f"{LOCAL_PREFIX}{int(time.time() * 1000)}"


def _form_salary(fields: Mapping[str, Any], key: str) -> float | None:
    raw = fields.get(key)
    value = parse_number(raw)
    if value is None and raw not in (None, ""):
        log.warning("Ignoring non-numeric %s %r", key, raw)
    return value


def job_from_form(
    fields: Mapping[str, Any],
    *,
    clock: Callable[[], str] = now_iso,
    id_factory: Callable[[], str] = new_local_id,
) -> Job:
    """Build a job from recruiter form input, coercing permissively.

    Tags split on commas, requirements and benefits on newlines. Salaries
    that do not parse become ``None``. Missing experience means "Mid".
    """
    return Job(
        id=str(fields.get("id") or "").strip() or id_factory(),
        title=str(fields.get("title") or "").strip() or DEFAULT_TITLE,
        company=str(fields.get("company") or "").strip() or DEFAULT_COMPANY,
        location=map_to_enum(fields.get("location"), FILTER_OPTIONS["location"]),
        employment_type=map_to_enum(fields.get("employment_type"), FILTER_OPTIONS["type"]),
        experience=map_to_enum(fields.get("experience") or "Mid", FILTER_OPTIONS["experience"]),
        salary_min=_form_salary(fields, "salary_min"),
        salary_max=_form_salary(fields, "salary_max"),
        tags=list(dict.fromkeys(parse_string_list(fields.get("tags"), split=lambda s: s.split(",")) or [])),
        description=str(fields.get("description") or "").strip(),
        requirements=parse_string_list(fields.get("requirements"), split=str.splitlines) or [],
        benefits=parse_string_list(fields.get("benefits"), split=str.splitlines) or [],
        date=clock(),
    )


def _form_number(value: float | None) -> str:
    if value is None:
        return ""
    return str(int(value)) if float(value).is_integer() else str(value)


def job_to_form(job: Job | None) -> dict[str, str]:
    """Form field values for editing *job*; blank fields for a new posting."""
    if job is None:
        return {key: "" for key in _FORM_FIELDS}
    return {
        "title": job.title,
        "company": job.company,
        "location": job.location,
        "employment_type": job.employment_type,
        "experience": job.experience,
        "salary_min": _form_number(job.salary_min),
        "salary_max": _form_number(job.salary_max),
        "tags": ", ".join(job.tags),
        "description": job.description,
        "requirements": "\n".join(job.requirements),
        "benefits": "\n".join(job.benefits),
    }


class DashboardController:
    def __init__(
        self,
        store: LocalStore,
        source: JobSource,
        *,
        role: str = SEEKER,
        clock: Callable[[], str] = now_iso,
        id_factory: Callable[[], str] = new_local_id,
    ) -> None:
        self.store = store
        self.source = source
        self.tracker = ApplicationTracker(store, clock=clock)
        self.jobs: list[Job] = []
        self.descriptor = QueryDescriptor()
        self.last_fetch: FetchResult | None = None
        self._remote: list[Job] = []
        self._clock = clock
        self._id_factory = id_factory
        self.role = SEEKER
        self.set_role(role)

    # ── loading ──────────────────────────────────────────────────────────

    def load(self) -> list[Job]:
        """Fetch remote jobs once and merge them with the local store."""
        result = self.source.fetch()
        local = self.store.load_jobs()
        self.last_fetch = result
        self._remote = remote_subset(result.jobs)
        if len(self._remote) != len(result.jobs):
            log.warning("Dropped %d fetched job(s) without a remote id", len(result.jobs) - len(self._remote))
        self.jobs = merge(self._remote, local)
        log.info(
            "Loaded %d job(s): %d remote, %d local%s",
            len(self.jobs), len(self._remote), len(local),
            "" if result.ok else " (remote unavailable)",
        )
        return self.view()

    refresh = load

    def _remerge(self, local: list[Job]) -> None:
        self.jobs = merge(self._remote, local)

    def job(self, job_id: str) -> Job | None:
        job_id = str(job_id)
        return next((j for j in self.jobs if str(j.id) == job_id), None)

    # ── derived views ────────────────────────────────────────────────────

    def view(self) -> list[Job]:
        return query(self.jobs, self.descriptor)

    def counts(self) -> dict[str, dict[str, int]]:
        return {dim: counts_by_dimension(self.jobs, dim) for dim in FILTER_OPTIONS}

    def companies(self) -> list[str]:
        return companies(self.jobs)

    # ── query state ──────────────────────────────────────────────────────

    def update_query(self, **changes: Any) -> list[Job]:
        self.descriptor = self.descriptor.copy(**changes)
        return self.view()

    def set_filter(self, dimension: str, values: set[str] | list[str]) -> list[Job]:
        if dimension not in FILTER_OPTIONS:
            raise ValueError(f"Unknown filter dimension: {dimension!r}")
        filters = {k: set(v) for k, v in self.descriptor.filters.items()}
        filters[dimension] = set(values)
        return self.update_query(filters=filters)

    def clear_filters(self) -> list[Job]:
        return self.update_query(search="", filters={}, sort=DEFAULT_SORT)

    def set_salary_range(self, salary_min: Any = None, salary_max: Any = None) -> list[Job]:
        return self.update_query(salary_min=parse_number(salary_min), salary_max=parse_number(salary_max))

    def clear_salary(self) -> list[Job]:
        return self.update_query(salary_min=None, salary_max=None)

    def set_company(self, company: str | None) -> list[Job]:
        return self.update_query(company=None if company in (None, "", ALL_COMPANIES) else company)

    def add_search_token(self, token: str) -> list[Job]:
        current = self.descriptor.search.strip()
        return self.update_query(search=f"{current} {token}" if current else token)

    # ── selection ────────────────────────────────────────────────────────

    def select_job(self, job_id: str | None) -> Job | None:
        job = self.job(job_id) if job_id is not None else None
        self.descriptor = self.descriptor.copy(selected_job_id=job.id if job else None)
        return job

    def selected_job(self) -> Job | None:
        """The selected job, else the first job of the current view."""
        if self.descriptor.selected_job_id:
            job = self.job(self.descriptor.selected_job_id)
            if job is not None:
                return job
        view = self.view()
        return view[0] if view else None

    # ── URL sync ─────────────────────────────────────────────────────────

    def query_string(self) -> str:
        return urlstate.encode(self.descriptor)

    def hydrate(self, query_string: str) -> list[Job]:
        descriptor = urlstate.decode(query_string)
        if descriptor.selected_job_id and self.job(descriptor.selected_job_id) is None:
            log.debug("URL selects unknown job %s, ignoring", descriptor.selected_job_id)
            descriptor.selected_job_id = None
        self.descriptor = descriptor
        return self.view()

    # ── recruiter CRUD ───────────────────────────────────────────────────

    def set_role(self, role: str) -> None:
        if role not in ROLES:
            raise ValueError(f"Unknown role: {role!r}")
        self.role = role

    def _require_recruiter(self, action: str) -> None:
        if self.role != RECRUITER:
            raise PermissionError(f"Only recruiters can {action}.")

    def create_or_update_job(self, fields: Mapping[str, Any]) -> Job:
        self._require_recruiter("post jobs")
        job = job_from_form(fields, clock=self._clock, id_factory=self._id_factory)

        local = self.store.load_jobs()
        idx = next((i for i, j in enumerate(local) if str(j.id) == job.id), None)
        if idx is None:
            local.append(job)
        else:
            local[idx] = job
        self.store.save_jobs(local)

        self._remerge(local)
        self.select_job(job.id)
        log.info("%s job %s (%s)", "Created" if idx is None else "Updated", job.id, job.title)
        return job

    def delete_job(self, job_id: str) -> bool:
        """Remove a locally stored job; returns False when it was not stored locally."""
        self._require_recruiter("delete jobs")
        job_id = str(job_id)
        local = self.store.load_jobs()
        remaining = [j for j in local if str(j.id) != job_id]
        if len(remaining) == len(local):
            log.debug("Delete of %s ignored: not in the local store", job_id)
            return False
        self.store.save_jobs(remaining)

        self._remerge(remaining)
        if self.descriptor.selected_job_id == job_id and self.job(job_id) is None:
            self.descriptor = self.descriptor.copy(selected_job_id=None)
        log.info("Deleted job %s", job_id)
        return True

    # ── applications ─────────────────────────────────────────────────────

    def apply(self, job_id: str) -> ApplyResult:
        return self.tracker.apply(job_id)

    def applications(self, sort: str = "dateDesc") -> list[AppliedJob]:
        return self.tracker.list(self.jobs, sort)

    def clear_applications(self) -> None:
        self.tracker.clear()
