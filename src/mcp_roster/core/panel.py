"""
Non-visual side of the servers list panel.

Binds the menu actions (add local server, sync), drag reordering and
selection to the collection manager and the sync orchestrator.
"""

from typing import List, Optional

from mcp_roster.core.collection import ServerCollectionManager
from mcp_roster.core.models import ServerEntry
from mcp_roster.core.notifications import Notifier
from mcp_roster.core.orchestrator import SyncOrchestrator

LIST_KEY = "mcp-list"
NEW_SERVER_NAME = "New MCP Server"


class ServerPanel:
    """Actions available from the servers list."""

    def __init__(
        self,
        collection: ServerCollectionManager,
        orchestrator: SyncOrchestrator,
        notifier: Notifier,
    ):
        self.collection = collection
        self.orchestrator = orchestrator
        self.notifier = notifier

    @property
    def servers(self) -> List[ServerEntry]:
        return self.collection.servers

    @property
    def selected(self) -> Optional[ServerEntry]:
        return self.collection.selected

    @property
    def sync_enabled(self) -> bool:
        return self.orchestrator.can_sync

    @property
    def token_prompt_open(self) -> bool:
        return self.orchestrator.prompting

    def add_server(self, entry: ServerEntry) -> ServerEntry:
        """Add an entry, report it and select it for editing."""
        server_id = self.collection.add(entry)
        server = self.collection.get(server_id)
        self.notifier.success("Server added", LIST_KEY)
        self.collection.set_selected(server)
        return server

    def add_local_server(self) -> ServerEntry:
        """Create a blank local server."""
        return self.add_server(ServerEntry(name=NEW_SERVER_NAME))

    def select(self, server: Optional[ServerEntry]) -> None:
        self.collection.set_selected(server)

    def update_order(self, servers: List[ServerEntry]) -> None:
        self.collection.reorder(servers)

    def move(self, from_index: int, to_index: int) -> None:
        self.collection.move(from_index, to_index)

    async def sync(self) -> None:
        await self.orchestrator.request_sync()

    async def submit_token(self, text: str) -> bool:
        return await self.orchestrator.submit_token(text)

    def cancel_token_prompt(self) -> None:
        self.orchestrator.cancel_prompt()
