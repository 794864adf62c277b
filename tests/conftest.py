"""
Pytest configuration and fixtures for MCP Roster testing.

Provides in-memory collaborators (credential store, notifier) and a
ModelScope client wired to an httpx mock transport, so no test touches
the network or the system keyring.
"""

import json
from typing import Any, Callable, List, Optional, Tuple
from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from mcp_roster.core.collection import ServerCollectionManager
from mcp_roster.core.credentials import MemoryCredentialStore
from mcp_roster.core.models import FetchOutcome, ServerCandidate, SyncStatus
from mcp_roster.core.notifications import Notifier
from mcp_roster.core.orchestrator import SyncOrchestrator
from mcp_roster.core.remote import ModelScopeClient
from mcp_roster.utils.config import ModelScopeConfig


class RecordingNotifier(Notifier):
    """Notifier that remembers every call."""

    def __init__(self):
        self.calls: List[Tuple[str, str, str]] = []

    def success(self, message: str, key: str) -> None:
        self.calls.append(("success", message, key))

    def error(self, message: str, key: str) -> None:
        self.calls.append(("error", message, key))

    def info(self, message: str, key: str) -> None:
        self.calls.append(("info", message, key))

    def loading(self, message: str, key: str) -> None:
        self.calls.append(("loading", message, key))

    @property
    def kinds(self) -> List[str]:
        return [kind for kind, _, _ in self.calls]

    @property
    def last(self) -> Optional[Tuple[str, str, str]]:
        return self.calls[-1] if self.calls else None


def modelscope_record(remote_id: str, name: str, url: Optional[str] = None, **extra: Any) -> dict:
    """Build a server record as the ModelScope listing returns it."""
    record = {
        "id": remote_id,
        "name": name,
        "description": f"{name} server",
        "operational_urls": [{"url": url or f"https://mcp.api-inference.modelscope.cn/sse/{remote_id}"}],
        "logo_url": "",
        "tags": [],
    }
    record.update(extra)
    return record


def modelscope_payload(records: List[Any]) -> dict:
    return {"Code": 200, "Data": {"Result": records, "Total": len(records)}}


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def token_store() -> MemoryCredentialStore:
    return MemoryCredentialStore()


@pytest.fixture
def collection() -> ServerCollectionManager:
    return ServerCollectionManager()


@pytest.fixture
def make_candidate() -> Callable[..., ServerCandidate]:
    def _make(name: str, base_url: str = "", **kwargs: Any) -> ServerCandidate:
        if not base_url and "command" not in kwargs:
            base_url = f"https://mcp.example.com/{name.lower()}/sse"
        return ServerCandidate(name=name, base_url=base_url, provider="ModelScope", **kwargs)
    return _make


@pytest.fixture
def fake_client() -> MagicMock:
    """Remote client whose fetch result is set per test."""
    client = MagicMock(spec=ModelScopeClient)
    client.fetch_candidates = AsyncMock(
        return_value=FetchOutcome(status=SyncStatus.SUCCESS, candidates=[])
    )
    return client


@pytest.fixture
def orchestrator(collection, token_store, fake_client, notifier) -> SyncOrchestrator:
    return SyncOrchestrator(
        collection=collection,
        credentials=token_store,
        client=fake_client,
        notifier=notifier,
    )


@pytest.fixture
def mock_modelscope() -> Callable[..., Tuple[ModelScopeClient, List[httpx.Request]]]:
    """
    Build a ModelScopeClient backed by a MockTransport.

    The factory takes either a JSON-able body or raw bytes plus a status
    code, and returns the client with the list of captured requests.
    """
    def _make(body: Any = None, status_code: int = 200,
              raise_error: Optional[Exception] = None):
        requests: List[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            if raise_error is not None:
                raise raise_error
            if isinstance(body, bytes):
                return httpx.Response(status_code, content=body)
            return httpx.Response(status_code, content=json.dumps(body).encode(),
                                  headers={"Content-Type": "application/json"})

        client = ModelScopeClient(ModelScopeConfig(), transport=httpx.MockTransport(handler))
        return client, requests

    return _make
