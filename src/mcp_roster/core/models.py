"""
Data models for MCP Roster.

Defines Pydantic models for server entries, remote candidates and the
outcomes of a synchronization attempt.
"""

import uuid
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, Field, field_validator


def generate_server_id() -> str:
    """Generate a fresh opaque server identifier."""
    return uuid.uuid4().hex


class ServerType(str, Enum):
    """How a server is reached."""

    STDIO = "stdio"  # Local command invocation
    SSE = "sse"      # Remote endpoint reached via base URL


class SyncStatus(str, Enum):
    """Outcome kind of a remote fetch or sync attempt."""

    SUCCESS = "success"
    UNAUTHORIZED = "unauthorized"
    FAILURE = "failure"


class ServerEntry(BaseModel):
    """A configured MCP server profile in the local collection."""

    id: str = Field(default="", description="Unique identifier, assigned on creation")
    name: str = Field(default="", description="Display label")
    description: str = Field(default="", description="Free text description")
    base_url: str = Field(default="", description="Remote endpoint address")
    command: str = Field(default="", description="Command used to start the server")
    args: List[str] = Field(default_factory=list, description="Command arguments")
    env: Dict[str, str] = Field(default_factory=dict, description="Environment variables")
    is_active: bool = Field(default=False, description="Liveness flag owned by runtime monitors")

    # Provider metadata for entries pulled from a remote provider
    provider: Optional[str] = Field(default=None, description="Name of the originating provider")
    provider_url: Optional[str] = Field(default=None, description="Provider page for this server")
    logo_url: Optional[str] = Field(default=None, description="Logo URL")
    tags: List[str] = Field(default_factory=list, description="Provider tags")

    @property
    def server_type(self) -> ServerType:
        """Remote entries have a base URL, everything else runs locally."""
        return ServerType.SSE if self.base_url else ServerType.STDIO

    def __str__(self) -> str:
        return f"{self.name or '<unnamed>'} ({self.server_type.value})"


class ServerCandidate(BaseModel):
    """A server definition returned by a remote provider, not yet reconciled."""

    remote_id: Optional[str] = Field(default=None, description="Identifier on the provider")
    name: str = Field(description="Display label")
    description: str = Field(default="")
    base_url: str = Field(default="")
    command: str = Field(default="")
    args: List[str] = Field(default_factory=list)
    env: Dict[str, str] = Field(default_factory=dict)
    provider: Optional[str] = None
    provider_url: Optional[str] = None
    logo_url: Optional[str] = None
    tags: List[str] = Field(default_factory=list)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Candidate name cannot be empty")
        return v.strip()

    @field_validator("base_url", "command")
    @classmethod
    def strip_value(cls, v: str) -> str:
        return v.strip()

    @property
    def has_endpoint(self) -> bool:
        """Whether the candidate can actually be reached or started."""
        return bool(self.base_url or self.command)

    def to_entry(self, server_id: Optional[str] = None) -> ServerEntry:
        """Convert the candidate into a local entry with a fresh id."""
        return ServerEntry(
            id=server_id or generate_server_id(),
            name=self.name,
            description=self.description,
            base_url=self.base_url,
            command=self.command,
            args=list(self.args),
            env=dict(self.env),
            is_active=False,
            provider=self.provider,
            provider_url=self.provider_url,
            logo_url=self.logo_url,
            tags=list(self.tags),
        )


class FetchOutcome(BaseModel):
    """Classified result of one remote fetch."""

    status: SyncStatus
    candidates: List[ServerCandidate] = Field(default_factory=list)
    message: str = ""
    rejected: int = Field(default=0, description="Malformed records dropped from the batch")
    error_details: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.status == SyncStatus.SUCCESS


class SyncOutcome(BaseModel):
    """Result of one synchronization attempt."""

    status: SyncStatus
    added_servers: List[ServerEntry] = Field(default_factory=list)
    message: str = ""
    error_details: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.status == SyncStatus.SUCCESS

    @classmethod
    def from_fetch(cls, fetch: FetchOutcome) -> "SyncOutcome":
        """Carry a failed fetch through as a sync outcome."""
        return cls(
            status=fetch.status,
            message=fetch.message,
            error_details=fetch.error_details,
        )
