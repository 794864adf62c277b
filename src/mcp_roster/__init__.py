"""
MCP Roster - manage and sync an ordered collection of MCP servers.

Keeps a local, user-ordered list of MCP server profiles and merges in
servers published on ModelScope without creating duplicates.
"""

__version__ = "0.1.0"
__description__ = "Manage and sync an ordered collection of MCP servers"

from mcp_roster.core.exceptions import RosterError
from mcp_roster.core.models import ServerEntry, SyncOutcome, SyncStatus

__all__ = [
    "__version__",
    "__description__",
    "RosterError",
    "ServerEntry",
    "SyncOutcome",
    "SyncStatus",
]
