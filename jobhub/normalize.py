"""Normalization of raw job records into the canonical Job schema.

Upstream payloads are untrusted and vary in shape: field names differ
(``company`` vs ``company_name``), salaries may be nested, categorical
values come in free form ("full-time", "Berlin, DE", "Senior level"). All of
that is resolved here so every other module only ever sees a ``Job``.

Everything in this module is deterministic; ``map_to_enum`` is total.
"""
from __future__ import annotations

import math
from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any, Callable, Sequence

from jobhub.errors import ParseError
from jobhub.log import get_logger
from jobhub.models import FILTER_OPTIONS, REMOTE_PREFIX, Job

log = get_logger(__name__)

DEFAULT_TITLE = "Untitled Role"
DEFAULT_COMPANY = "Company"
DEFAULT_SALARY_MIN = 90000
DEFAULT_SALARY_MAX = 150000
DEFAULT_TAGS = ["React", "TypeScript", "Nextjs"]
DEFAULT_DESCRIPTION = "No description provided."
DEFAULT_REQUIREMENTS = ["3+ years experience", "Strong JS/TS", "Good communication"]
DEFAULT_BENEFITS = ["Health insurance", "Flexible hours", "Remote friendly"]

# Fallback ids for records without one, kept apart from prefixed raw ids.
INDEX_ID_PREFIX = f"{REMOTE_PREFIX}idx-"

# Ordered heuristics tried after an exact match fails: (test, option).
_CONTAINS_RULES: list[tuple[str, str]] = [
    ("full", "Full Time"),
    ("part", "Part Time"),
    ("contract", "Contract"),
    ("remote", "Remote"),
]
_PREFIX_RULES: list[tuple[str, str]] = [
    ("entry", "Entry"),
    ("junior", "Entry"),
    ("mid", "Mid"),
    ("sen", "Senior"),
]


def now_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _simplify(value: str) -> str:
    s = value.lower().replace("-", " ").replace("_", " ")
    s = s.split(",", 1)[0]
    return s.strip()


def map_to_enum(value: Any, allowed: Sequence[str]) -> str:
    """Map a free-form categorical value onto one of *allowed*.

    Empty input gives the first (default) option. Never raises and never
    returns anything outside *allowed*.
    """
    default = allowed[0]
    if value is None:
        return default
    raw = value if isinstance(value, str) else str(value)
    if not raw.strip():
        return default

    simplified = _simplify(raw)
    for option in allowed:
        if option.lower() == simplified:
            return option

    for needle, option in _CONTAINS_RULES:
        if needle in simplified and option in allowed:
            return option
    for prefix, option in _PREFIX_RULES:
        if simplified.startswith(prefix) and option in allowed:
            return option
    for city in FILTER_OPTIONS["location"]:
        if simplified.startswith(city.lower()) and city in allowed:
            return city

    return raw if raw in allowed else default


def _first(raw: Mapping[str, Any], *paths: str) -> Any:
    """First present value across dotted alias paths (``salary.min``).

    ``None`` and whitespace-only strings count as absent, so ``{"title": ""}``
    still falls through to ``position``.
    """
    for path in paths:
        node: Any = raw
        for part in path.split("."):
            if not isinstance(node, Mapping):
                node = None
                break
            node = node.get(part)
        if node is None or (isinstance(node, str) and not node.strip()):
            continue
        return node
    return None


def _text(value: Any) -> str | None:
    if isinstance(value, Mapping):
        value = _first(value, "display_name", "name", "city")
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def parse_number(value: Any) -> float | int | None:
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        return value if math.isfinite(value) else None
    try:
        parsed = float(str(value).replace(",", "").replace("$", "").strip())
    except ValueError:
        return None
    if not math.isfinite(parsed):
        return None
    return int(parsed) if parsed.is_integer() else parsed


def parse_string_list(value: Any, split: Callable[[str], list[str]] | None = None) -> list[str] | None:
    if value is None:
        return None
    if isinstance(value, str):
        parts = split(value) if split else [value]
    elif isinstance(value, (list, tuple)):
        parts = [_text(v) or "" for v in value]
    else:
        return None
    return [p.strip() for p in parts if p and p.strip()]


def _remote_id(value: Any, index: int) -> str:
    if value is None or not str(value).strip():
        return f"{INDEX_ID_PREFIX}{index}"
    jid = str(value).strip()
    return jid if jid.startswith(REMOTE_PREFIX) else f"{REMOTE_PREFIX}{jid}"


def normalize(raw: Mapping[str, Any], index: int) -> Job:
    """Coerce one raw API record into a ``Job``; first non-null alias wins."""
    tags = parse_string_list(_first(raw, "tags", "skills"), split=lambda s: s.split(","))
    requirements = parse_string_list(_first(raw, "requirements"), split=str.splitlines)
    benefits = parse_string_list(_first(raw, "benefits"), split=str.splitlines)

    salary_min = parse_number(_first(raw, "salary_min", "salary.min", "salaryMin"))
    salary_max = parse_number(_first(raw, "salary_max", "salary.max", "salaryMax"))

    return Job(
        id=_remote_id(raw.get("id"), index),
        title=_text(_first(raw, "title", "position")) or DEFAULT_TITLE,
        company=_text(_first(raw, "company", "company_name")) or DEFAULT_COMPANY,
        location=map_to_enum(_text(_first(raw, "location", "city")), FILTER_OPTIONS["location"]),
        employment_type=map_to_enum(
            _text(_first(raw, "type", "employment_type", "employmentType")), FILTER_OPTIONS["type"]
        ),
        experience=map_to_enum(_text(_first(raw, "experience", "seniority")), FILTER_OPTIONS["experience"]),
        salary_min=DEFAULT_SALARY_MIN if salary_min is None else salary_min,
        salary_max=DEFAULT_SALARY_MAX if salary_max is None else salary_max,
        tags=tags if tags is not None else list(DEFAULT_TAGS),
        description=_text(raw.get("description")) or DEFAULT_DESCRIPTION,
        requirements=requirements if requirements is not None else list(DEFAULT_REQUIREMENTS),
        benefits=benefits if benefits is not None else list(DEFAULT_BENEFITS),
        date=_text(_first(raw, "date", "created_at", "posted_at")) or now_iso(),
    )


def normalize_many(payload: Any) -> list[Job]:
    """Normalize a whole API response: a list, or a mapping holding one."""
    if isinstance(payload, Mapping):
        records = payload.get("data")
        if records is None:
            records = payload.get("jobs")
    else:
        records = payload
    if not isinstance(records, list):
        raise ParseError(f"expected a list of jobs, got {type(records).__name__}")

    jobs: list[Job] = []
    for idx, record in enumerate(records):
        if not isinstance(record, Mapping):
            log.debug("Skipping non-object job record at index %d", idx)
            continue
        jobs.append(normalize(record, idx))
    log.debug("Normalized %d of %d raw job records", len(jobs), len(records))
    return jobs
