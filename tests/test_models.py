"""
Test data models.
"""

import pytest
from pydantic import ValidationError

from mcp_roster.core.models import (
    FetchOutcome,
    ServerCandidate,
    ServerEntry,
    ServerType,
    SyncOutcome,
    SyncStatus,
)


class TestServerEntry:
    """Test ServerEntry model."""

    def test_defaults(self):
        entry = ServerEntry()
        assert entry.id == ""
        assert entry.base_url == ""
        assert entry.args == []
        assert entry.env == {}
        assert entry.is_active is False

    def test_server_type(self):
        assert ServerEntry(base_url="https://x/sse").server_type == ServerType.SSE
        assert ServerEntry(command="npx").server_type == ServerType.STDIO
        assert ServerEntry().server_type == ServerType.STDIO

    def test_str(self):
        assert str(ServerEntry(name="fetch", command="uvx")) == "fetch (stdio)"


class TestServerCandidate:
    """Test ServerCandidate model."""

    def test_empty_name_rejected(self):
        with pytest.raises(ValidationError):
            ServerCandidate(name="   ", base_url="https://x")

    def test_name_trimmed(self):
        assert ServerCandidate(name=" fetch ").name == "fetch"

    def test_has_endpoint(self):
        assert ServerCandidate(name="a", base_url="https://x").has_endpoint
        assert ServerCandidate(name="a", command="npx").has_endpoint
        assert not ServerCandidate(name="a").has_endpoint

    def test_to_entry(self):
        candidate = ServerCandidate(name="a", command="npx", args=["-y", "pkg"], env={"K": "V"})
        entry = candidate.to_entry("id-1")

        assert entry.id == "id-1"
        assert entry.command == "npx"
        assert entry.args == ["-y", "pkg"]
        assert entry.env == {"K": "V"}

    def test_to_entry_generates_id(self):
        candidate = ServerCandidate(name="a", command="npx")
        assert candidate.to_entry().id != candidate.to_entry().id


class TestOutcomes:
    """Test outcome models."""

    def test_success_flag(self):
        assert FetchOutcome(status=SyncStatus.SUCCESS).success
        assert not FetchOutcome(status=SyncStatus.UNAUTHORIZED).success
        assert not SyncOutcome(status=SyncStatus.FAILURE).success

    def test_from_fetch(self):
        fetch = FetchOutcome(status=SyncStatus.UNAUTHORIZED, message="bad token",
                             error_details="Status: 401")
        outcome = SyncOutcome.from_fetch(fetch)

        assert outcome.status == SyncStatus.UNAUTHORIZED
        assert outcome.message == "bad token"
        assert outcome.error_details == "Status: 401"
        assert outcome.added_servers == []
