"""Track job applications in the local store."""
from __future__ import annotations

from typing import Callable, Iterable

from jobhub.log import get_logger
from jobhub.models import APPLICATION_SORT_KEYS, ApplicationRecord, AppliedJob, ApplyResult, Job
from jobhub.normalize import now_iso
from jobhub.query import parse_date, title_key
from jobhub.storage import LocalStore

log = get_logger(__name__)

_SORTERS: dict[str, tuple[Callable[[AppliedJob], object], bool]] = {
    "dateDesc": (lambda a: parse_date(a.applied_at), True),
    "dateAsc": (lambda a: parse_date(a.applied_at), False),
    "titleAsc": (lambda a: title_key(a.job.title), False),
    "titleDesc": (lambda a: title_key(a.job.title), True),
}


class ApplicationTracker:
    """At most one application record per job id."""

    def __init__(self, store: LocalStore, clock: Callable[[], str] = now_iso) -> None:
        self.store = store
        self._clock = clock

    def records(self) -> list[ApplicationRecord]:
        return self.store.load_applications()

    def applied_ids(self) -> set[str]:
        return {r.job_id for r in self.records()}

    def apply(self, job_id: str) -> ApplyResult:
        job_id = str(job_id)
        records = self.records()
        if any(r.job_id == job_id for r in records):
            log.info("Already applied to %s", job_id)
            return ApplyResult(applied=False)
        records.append(ApplicationRecord(job_id=job_id, applied_at=self._clock()))
        self.store.save_applications(records)
        log.info("Application recorded for %s", job_id)
        return ApplyResult(applied=True)

    def list(self, jobs: Iterable[Job], sort: str = "dateDesc") -> list[AppliedJob]:
        """Records joined to *jobs* by id; records whose job is gone are skipped."""
        by_id = {str(j.id): j for j in jobs}
        joined = [
            AppliedJob(job=by_id[r.job_id], applied_at=r.applied_at)
            for r in self.records()
            if r.job_id in by_id
        ]
        if sort not in APPLICATION_SORT_KEYS:
            return joined
        key, descending = _SORTERS[sort]
        return sorted(joined, key=key, reverse=descending)

    def clear(self) -> None:
        self.store.save_applications([])
        log.info("Cleared application history")
