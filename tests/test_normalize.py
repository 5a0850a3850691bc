"""
Unit tests for jobhub/normalize.py

Covers:
- map_to_enum exact matches, heuristics and fallbacks
- map_to_enum totality on garbage input
- normalize() alias resolution and defaults
- normalize_many() payload shapes
"""

import pytest

from jobhub.errors import ParseError
from jobhub.merge import merge
from jobhub.models import FILTER_OPTIONS
from jobhub.normalize import (
    DEFAULT_BENEFITS,
    DEFAULT_REQUIREMENTS,
    DEFAULT_TAGS,
    map_to_enum,
    normalize,
    normalize_many,
    parse_number,
)

TYPES = FILTER_OPTIONS["type"]
LOCATIONS = FILTER_OPTIONS["location"]
LEVELS = FILTER_OPTIONS["experience"]


class TestMapToEnum:
    """Tests for categorical value mapping."""

    @pytest.mark.parametrize(
        "value, allowed, expected",
        [
            ("Full Time", TYPES, "Full Time"),
            ("full-time", TYPES, "Full Time"),
            ("Part_time", TYPES, "Part Time"),
            ("Contractor", TYPES, "Contract"),
            ("100% remote", TYPES, "Remote"),
            ("Junior Developer", LEVELS, "Entry"),
            ("entry level", LEVELS, "Entry"),
            ("mid-level", LEVELS, "Mid"),
            ("Senior", LEVELS, "Senior"),
            ("SENIOR, staff track", LEVELS, "Senior"),
            ("Berlin, Germany", LOCATIONS, "Berlin"),
            ("LONDON", LOCATIONS, "London"),
            ("new york city", LOCATIONS, "New York"),
        ],
    )
    def test_maps_known_values(self, value, allowed, expected):
        assert map_to_enum(value, allowed) == expected

    @pytest.mark.parametrize("value", [None, "", "   "])
    def test_empty_value_returns_default(self, value):
        assert map_to_enum(value, TYPES) == "Full Time"
        assert map_to_enum(value, LEVELS) == "Entry"

    def test_unmatched_value_returns_default(self):
        assert map_to_enum("Paris", LOCATIONS) == "San Francisco"

    def test_heuristic_outside_allowed_set_is_not_returned(self):
        """'remote' is an employment type, not a location."""
        assert map_to_enum("remote", LOCATIONS) == "San Francisco"
        assert map_to_enum("Senegal", LOCATIONS) == "San Francisco"

    def test_contains_rules_run_before_prefix_rules(self):
        assert map_to_enum("part-time senior", TYPES) == "Part Time"

    @pytest.mark.parametrize(
        "garbage",
        [123, 4.5, True, {"a": 1}, ["Full Time"], "@@@", "-_-", ",,,", "🚀", "x" * 500],
    )
    @pytest.mark.parametrize("allowed", [TYPES, LOCATIONS, LEVELS])
    def test_always_returns_allowed_option(self, garbage, allowed):
        result = map_to_enum(garbage, allowed)
        assert result in allowed

    def test_deterministic(self):
        assert map_to_enum("Mid Senior", LEVELS) == map_to_enum("Mid Senior", LEVELS)


class TestNormalize:
    """Tests for raw record normalization."""

    def test_empty_record_gets_defaults(self):
        job = normalize({}, 7)

        assert job.id == "remote-idx-7"
        assert job.title == "Untitled Role"
        assert job.company == "Company"
        assert job.location == "San Francisco"
        assert job.employment_type == "Full Time"
        assert job.experience == "Entry"
        assert job.salary_min == 90000
        assert job.salary_max == 150000
        assert job.tags == DEFAULT_TAGS
        assert job.requirements == DEFAULT_REQUIREMENTS
        assert job.benefits == DEFAULT_BENEFITS
        assert job.description == "No description provided."
        assert job.date

    def test_default_lists_are_not_shared(self):
        first = normalize({}, 0)
        first.tags.append("Mutated")
        assert normalize({}, 1).tags == DEFAULT_TAGS

    def test_alias_fields(self):
        job = normalize(
            {
                "position": "Data Engineer",
                "company_name": "Fabrikam",
                "city": "New York",
                "employment_type": "part-time",
                "salary": {"min": 70000, "max": 95000},
                "skills": ["SQL", "dbt"],
                "created_at": "2024-03-01T10:00:00Z",
            },
            0,
        )

        assert job.title == "Data Engineer"
        assert job.company == "Fabrikam"
        assert job.location == "New York"
        assert job.employment_type == "Part Time"
        assert (job.salary_min, job.salary_max) == (70000, 95000)
        assert job.tags == ["SQL", "dbt"]
        assert job.date == "2024-03-01T10:00:00Z"

    def test_first_non_null_alias_wins(self):
        job = normalize({"title": None, "position": "Fallback Title", "company": "A", "company_name": "B"}, 0)
        assert job.title == "Fallback Title"
        assert job.company == "A"

    def test_zero_salary_is_kept(self):
        """Zero is a value, not an absence."""
        job = normalize({"salary_min": 0}, 0)
        assert job.salary_min == 0

    def test_salary_strings_are_parsed(self):
        job = normalize({"salary_min": "120,000", "salary_max": "not a number"}, 0)
        assert job.salary_min == 120000
        assert job.salary_max == 150000

    def test_company_mapping_is_unwrapped(self):
        job = normalize({"company": {"display_name": "Initech"}}, 0)
        assert job.company == "Initech"

    def test_comma_separated_tags_are_split(self):
        job = normalize({"tags": "Go, Rust ,, gRPC"}, 0)
        assert job.tags == ["Go", "Rust", "gRPC"]

    def test_present_id_gets_remote_prefix(self):
        assert normalize({"id": 42}, 0).id == "remote-42"
        assert normalize({"id": "remote-9"}, 0).id == "remote-9"

    def test_blank_id_falls_back_to_index(self):
        assert normalize({"id": "  "}, 3).id == "remote-idx-3"

    def test_blank_primary_alias_falls_through(self):
        job = normalize({"title": "", "position": "Dev", "company": "  ", "company_name": "Globex"}, 0)
        assert job.title == "Dev"
        assert job.company == "Globex"

    def test_blank_tags_use_defaults(self):
        assert normalize({"tags": ""}, 0).tags == DEFAULT_TAGS


class TestNormalizeMany:
    """Tests for whole-payload normalization."""

    def test_list_payload(self):
        jobs = normalize_many([{"title": "A"}, {"title": "B"}])
        assert [j.title for j in jobs] == ["A", "B"]

    @pytest.mark.parametrize("key", ["data", "jobs"])
    def test_wrapped_payload(self, key):
        jobs = normalize_many({key: [{"title": "A"}]})
        assert jobs[0].title == "A"

    def test_records_with_and_without_ids_keep_distinct_ids(self):
        jobs = normalize_many([{"id": 1, "title": "A"}, {"title": "B"}, {"id": "0", "title": "C"}])

        assert [j.id for j in jobs] == ["remote-1", "remote-idx-1", "remote-0"]
        assert len(merge(jobs, [])) == 3

    def test_non_object_records_are_skipped_keeping_positional_ids(self):
        jobs = normalize_many([{"title": "a"}, "junk", {"title": "b"}])
        assert [j.id for j in jobs] == ["remote-idx-0", "remote-idx-2"]

    @pytest.mark.parametrize("payload", [None, "text", 42, {"data": "nope"}, {"other": []}])
    def test_malformed_payload_raises_parse_error(self, payload):
        with pytest.raises(ParseError):
            normalize_many(payload)


class TestParseNumber:
    @pytest.mark.parametrize(
        "value, expected",
        [(5, 5), ("5", 5), ("$1,500.50", 1500.5), ("", None), ("abc", None), (None, None), (True, None), ("nan", None)],
    )
    def test_parse_number(self, value, expected):
        assert parse_number(value) == expected
