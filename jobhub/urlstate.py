"""Shareable URL query string <-> QueryDescriptor.

Parameters (all optional on decode):

    q        free-text search
    sort     sort key, always written
    f        comma-joined ``group:value`` filter pairs, value percent-encoded
    job      selected job id
    company  company filter
    min/max  salary bounds

Encoding is deterministic: filter pairs follow the option order of each
dimension, so encoding a decoded descriptor reproduces the same string.
"""
from __future__ import annotations

from urllib.parse import parse_qs, quote, unquote, urlencode

from jobhub.log import get_logger
from jobhub.models import DEFAULT_SORT, FILTER_OPTIONS, SORT_KEYS, QueryDescriptor

log = get_logger(__name__)

PAIR_SEP = ","
GROUP_SEP = ":"


def _format_number(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else repr(float(value))


def _parse_number(value: str | None) -> float | None:
    if value is None or not value.strip():
        return None
    try:
        number = float(value)
    except ValueError:
        log.debug("Ignoring non-numeric salary bound %r", value)
        return None
    return number if number == number else None  # NaN


def _ordered(dimension: str, values: set[str]) -> list[str]:
    options = FILTER_OPTIONS[dimension]
    known = [v for v in options if v in values]
    return known + sorted(v for v in values if v not in options)


def encode(descriptor: QueryDescriptor) -> str:
    params: list[tuple[str, str]] = []
    text = descriptor.search.strip()
    if text:
        params.append(("q", text))
    params.append(("sort", descriptor.sort or DEFAULT_SORT))

    pairs = [
        f"{dimension}{GROUP_SEP}{quote(value, safe='')}"
        for dimension in FILTER_OPTIONS
        for value in _ordered(dimension, descriptor.selected(dimension))
        if value
    ]
    if pairs:
        params.append(("f", PAIR_SEP.join(pairs)))
    if descriptor.selected_job_id:
        params.append(("job", descriptor.selected_job_id))
    if descriptor.company_filter is not None:
        params.append(("company", descriptor.company_filter))
    if descriptor.salary_min is not None:
        params.append(("min", _format_number(descriptor.salary_min)))
    if descriptor.salary_max is not None:
        params.append(("max", _format_number(descriptor.salary_max)))
    return urlencode(params, quote_via=quote)


def _decode_filters(raw: str) -> dict[str, set[str]]:
    filters: dict[str, set[str]] = {}
    for pair in raw.split(PAIR_SEP):
        group, sep, value = pair.partition(GROUP_SEP)
        if not sep or group not in FILTER_OPTIONS:
            log.debug("Ignoring malformed filter pair %r", pair)
            continue
        value = unquote(value)
        if value:
            filters.setdefault(group, set()).add(value)
    return filters


def decode(query_string: str) -> QueryDescriptor:
    params = parse_qs(query_string.lstrip("?"), keep_blank_values=True)

    def get(name: str) -> str | None:
        values = params.get(name)
        return values[0] if values else None

    sort = get("sort") or DEFAULT_SORT
    if sort not in SORT_KEYS:
        log.debug("Unknown sort key %r in URL, using %s", sort, DEFAULT_SORT)
        sort = DEFAULT_SORT

    company = get("company") or None
    if company == "all":
        company = None

    return QueryDescriptor(
        search=(get("q") or "").strip(),
        sort=sort,
        filters=_decode_filters(get("f") or ""),
        salary_min=_parse_number(get("min")),
        salary_max=_parse_number(get("max")),
        company=company,
        selected_job_id=get("job") or None,
    )
