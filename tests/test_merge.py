"""
Test reconciliation of remote candidates with the local collection.
"""

from mcp_roster.core.merge import equivalence_key, merge
from mcp_roster.core.models import ServerCandidate, ServerEntry, SyncStatus


class TestEquivalenceKey:
    """Test the deduplication key."""

    def test_name_is_normalized(self):
        a = ServerEntry(name="  Fetch ", base_url="https://x/sse")
        b = ServerCandidate(name="fetch", base_url="https://x/sse")
        assert equivalence_key(a) == equivalence_key(b)

    def test_trailing_slash_ignored(self):
        a = ServerEntry(name="fetch", base_url="https://x/sse/")
        b = ServerEntry(name="fetch", base_url="https://x/sse")
        assert equivalence_key(a) == equivalence_key(b)

    def test_different_url_differs(self):
        a = ServerEntry(name="fetch", base_url="https://x/sse")
        b = ServerEntry(name="fetch", base_url="https://y/sse")
        assert equivalence_key(a) != equivalence_key(b)

    def test_local_servers_use_command_and_args(self):
        a = ServerEntry(name="git", command="uvx", args=["mcp-server-git"])
        b = ServerCandidate(name="git", command="uvx", args=["mcp-server-git"])
        c = ServerCandidate(name="git", command="uvx", args=["mcp-server-time"])
        assert equivalence_key(a) == equivalence_key(b)
        assert equivalence_key(a) != equivalence_key(c)

    def test_same_name_different_kind_differs(self):
        remote = ServerEntry(name="git", base_url="https://x/sse")
        local = ServerEntry(name="git", command="uvx")
        assert equivalence_key(remote) != equivalence_key(local)

    def test_arguments_are_not_joined(self):
        joined = ServerEntry(name="foo", command="npx foo", args=[])
        split = ServerEntry(name="foo", command="npx", args=["foo"])
        assert equivalence_key(joined) != equivalence_key(split)

    def test_url_never_matches_command_text(self):
        remote = ServerEntry(name="x", base_url="npx")
        local = ServerEntry(name="x", command="npx")
        assert equivalence_key(remote) != equivalence_key(local)


class TestMerge:
    """Test merge outcomes."""

    def test_all_new(self, make_candidate):
        outcome = merge([make_candidate("A"), make_candidate("B")], [])

        assert outcome.status == SyncStatus.SUCCESS
        assert outcome.success is True
        assert [s.name for s in outcome.added_servers] == ["A", "B"]
        assert all(s.id for s in outcome.added_servers)
        assert len({s.id for s in outcome.added_servers}) == 2
        assert outcome.message == "Added 2 servers from ModelScope"

    def test_existing_entries_skipped(self, make_candidate):
        a = make_candidate("A")
        existing = [a.to_entry("local-a")]

        outcome = merge([a, make_candidate("B")], existing)

        assert [s.name for s in outcome.added_servers] == ["B"]
        assert outcome.message == "Added 1 server from ModelScope"

    def test_idempotent(self, make_candidate):
        candidates = [make_candidate("A"), make_candidate("B")]
        first = merge(candidates, [])

        second = merge(candidates, first.added_servers)

        assert second.success is True
        assert second.added_servers == []
        assert second.message == "No new servers to add from ModelScope"

    def test_duplicates_within_batch_added_once(self, make_candidate):
        outcome = merge([make_candidate("A"), make_candidate("a")], [])
        assert len(outcome.added_servers) == 1

    def test_does_not_mutate_existing(self, make_candidate):
        existing = [ServerEntry(id="1", name="local", command="node")]
        snapshot = [s.model_copy() for s in existing]

        merge([make_candidate("A")], existing)

        assert existing == snapshot

    def test_added_entries_carry_candidate_fields(self, make_candidate):
        candidate = make_candidate("A", description="desc", tags=["search"],
                                   provider_url="https://www.modelscope.cn/mcp/servers/@a")
        entry = merge([candidate], []).added_servers[0]

        assert entry.description == "desc"
        assert entry.base_url == candidate.base_url
        assert entry.tags == ["search"]
        assert entry.provider == "ModelScope"
        assert entry.is_active is False

    def test_rejected_count_in_message(self, make_candidate):
        outcome = merge([make_candidate("A")], [], rejected=2)
        assert outcome.message == "Added 1 server from ModelScope (2 malformed records skipped)"

    def test_rejected_count_when_nothing_added(self):
        outcome = merge([], [], rejected=1)
        assert outcome.success is True
        assert outcome.message == "No new servers to add from ModelScope (1 malformed record skipped)"

    def test_empty_candidates(self):
        outcome = merge([], [])
        assert outcome.success is True
        assert outcome.added_servers == []
