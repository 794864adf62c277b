"""Core MCP Roster functionality."""

from mcp_roster.core.exceptions import (
    RosterError,
    ServerError,
    DuplicateServerError,
    ValidationError,
    ConfigError,
)
from mcp_roster.core.models import (
    ServerEntry,
    ServerCandidate,
    FetchOutcome,
    SyncOutcome,
    SyncStatus,
)

__all__ = [
    "RosterError",
    "ServerError",
    "DuplicateServerError",
    "ValidationError",
    "ConfigError",
    "ServerEntry",
    "ServerCandidate",
    "FetchOutcome",
    "SyncOutcome",
    "SyncStatus",
]
