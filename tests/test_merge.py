"""
Unit tests for jobhub/merge.py
"""

from jobhub.merge import merge, remote_subset


class TestMerge:
    def test_local_job_replaces_remote_job_with_same_id(self, make_job):
        remote = make_job("remote-1", title="Remote version")
        local = make_job("remote-1", title="Local edit")

        merged = merge([remote], [local])

        assert merged == [local]

    def test_size_is_number_of_distinct_ids(self, make_job):
        remote = [make_job("remote-1"), make_job("remote-2"), make_job("remote-3")]
        local = [make_job("remote-2"), make_job("local-1"), make_job("local-2")]

        merged = merge(remote, local)

        assert len(merged) == len({j.id for j in remote + local}) == 5
        assert {j.id for j in merged} == {"remote-1", "remote-2", "remote-3", "local-1", "local-2"}

    def test_local_only_and_remote_only(self, make_job):
        assert merge([], [make_job("local-1")])[0].id == "local-1"
        assert merge([make_job("remote-1")], [])[0].id == "remote-1"
        assert merge([], []) == []

    def test_inputs_are_not_mutated(self, make_job):
        remote = [make_job("remote-1")]
        local = [make_job("remote-1", title="Edit")]

        merge(remote, local)

        assert remote[0].title == "Engineer"
        assert len(remote) == 1 and len(local) == 1

    def test_later_local_entry_wins_over_earlier_one(self, make_job):
        merged = merge([], [make_job("local-1", title="first"), make_job("local-1", title="second")])
        assert [j.title for j in merged] == ["second"]


class TestRemoteSubset:
    def test_keeps_only_remote_prefixed_ids(self, make_job):
        jobs = [make_job("remote-1"), make_job("local-1"), make_job("remote-x")]
        assert [j.id for j in remote_subset(jobs)] == ["remote-1", "remote-x"]
