"""Filter, search and sort the canonical job collection."""
from __future__ import annotations

import locale
import unicodedata
from datetime import datetime, timezone
from typing import Callable, Iterable

from jobhub.log import get_logger
from jobhub.models import DIMENSION_FIELDS, FILTER_OPTIONS, Job, QueryDescriptor

log = get_logger(__name__)

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


def parse_date(value: str) -> datetime:
    """ISO 8601 to an aware datetime; unparseable dates sort as the oldest."""
    try:
        dt = datetime.fromisoformat(str(value).strip().replace("Z", "+00:00"))
    except ValueError:
        return _EPOCH
    return dt if dt.tzinfo else dt.replace(tzinfo=timezone.utc)


def use_system_collation() -> None:
    """Collate titles by the LC_COLLATE of the environment instead of C."""
    try:
        locale.setlocale(locale.LC_COLLATE, "")
    except locale.Error as exc:
        log.warning("Could not set collation locale from the environment: %s", exc)


def _strip_accents(text: str) -> str:
    decomposed = unicodedata.normalize("NFKD", text)
    return "".join(c for c in decomposed if not unicodedata.combining(c))


def _collate(text: str) -> str:
    try:
        return locale.strxfrm(text)
    except (ValueError, OSError):
        return text


def title_key(title: str) -> tuple[str, str]:
    """Case-insensitive title key; accents only break ties between otherwise equal titles.

    "Éclair" sorts between "apple" and "Zeta" even under the C locale.
    """
    folded = title.casefold()
    return _collate(_strip_accents(folded)), _collate(folded)


def _salary(value: float | None) -> float:
    return value if value is not None else 0


def _search_fields(job: Job) -> list[str]:
    return [job.title, job.company, job.location, job.employment_type, *job.tags]


def _predicates(d: QueryDescriptor) -> list[Callable[[Job], bool]]:
    """Active predicates only; a job passes when every one holds."""
    preds: list[Callable[[Job], bool]] = []

    for dimension, attr in DIMENSION_FIELDS.items():
        allowed = d.selected(dimension)
        if allowed:
            preds.append(lambda j, attr=attr, allowed=allowed: getattr(j, attr) in allowed)

    text = d.search.strip().lower()
    if text:
        preds.append(lambda j: any(text in str(v).lower() for v in _search_fields(j)))

    # Salary bounds test range overlap, not containment.
    if d.salary_min is not None:
        lo = d.salary_min
        preds.append(lambda j: _salary(j.salary_max) >= lo)
    if d.salary_max is not None:
        hi = d.salary_max
        preds.append(lambda j: _salary(j.salary_min) <= hi)

    company = d.company_filter
    if company is not None:
        preds.append(lambda j: j.company == company)

    return preds


# sort key -> (key function, descending)
SORTERS: dict[str, tuple[Callable[[Job], object], bool]] = {
    "dateDesc": (lambda j: parse_date(j.date), True),
    "dateAsc": (lambda j: parse_date(j.date), False),
    "salaryDesc": (lambda j: _salary(j.salary_max), True),
    "salaryAsc": (lambda j: _salary(j.salary_min), False),
    "titleAsc": (lambda j: title_key(j.title), False),
    "titleDesc": (lambda j: title_key(j.title), True),
}


def sort_jobs(jobs: Iterable[Job], sort: str) -> list[Job]:
    """Stable sort; an unknown key keeps input order."""
    if sort not in SORTERS:
        log.debug("Unknown sort key %r, keeping input order", sort)
        return list(jobs)
    key, descending = SORTERS[sort]
    return sorted(jobs, key=key, reverse=descending)


def query(jobs: Iterable[Job], descriptor: QueryDescriptor) -> list[Job]:
    preds = _predicates(descriptor)
    matched = [j for j in jobs if all(p(j) for p in preds)]
    return sort_jobs(matched, descriptor.sort)


def counts_by_dimension(jobs: Iterable[Job], dimension: str) -> dict[str, int]:
    """Option -> number of jobs, over the whole (unfiltered) collection."""
    attr = DIMENSION_FIELDS[dimension]
    counts = {opt: 0 for opt in FILTER_OPTIONS[dimension]}
    for job in jobs:
        value = getattr(job, attr)
        counts[value] = counts.get(value, 0) + 1
    return counts


def companies(jobs: Iterable[Job]) -> list[str]:
    return sorted({j.company for j in jobs if j.company})
