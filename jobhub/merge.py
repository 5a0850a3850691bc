"""Merge remote jobs with locally stored jobs into the canonical collection."""
from __future__ import annotations

from typing import Iterable

from jobhub.models import REMOTE_PREFIX, Job


def merge(remote_jobs: Iterable[Job], local_jobs: Iterable[Job]) -> list[Job]:
    """Remote jobs keyed by id, then local jobs inserted over them.

    A local job always replaces a remote job with the same id. The result
    holds one job per distinct id.
    """
    by_id: dict[str, Job] = {str(j.id): j for j in remote_jobs}
    for job in local_jobs:
        by_id[str(job.id)] = job
    return list(by_id.values())


def remote_subset(jobs: Iterable[Job]) -> list[Job]:
    return [j for j in jobs if str(j.id).startswith(REMOTE_PREFIX)]
