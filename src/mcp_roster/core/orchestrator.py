"""
Sync orchestration between the credential store, the remote provider and
the local collection.

One sync runs at a time. The flow is single-threaded and cooperative: the
remote fetch is the only await point, and the ``syncing`` flag (not a lock)
rejects re-entrant requests while it is pending.
"""

from enum import Enum
from typing import Callable, Optional

from mcp_roster.core.collection import ServerCollectionManager
from mcp_roster.core.credentials import CredentialStore
from mcp_roster.core.merge import merge
from mcp_roster.core.models import SyncOutcome, SyncStatus
from mcp_roster.core.notifications import Notifier
from mcp_roster.core.remote import FAILURE_MESSAGE, PROVIDER_NAME, ModelScopeClient
from mcp_roster.utils.logging import get_logger

logger = get_logger(__name__)

SYNC_KEY = "mcp-sync"


class SyncState(str, Enum):
    """Orchestrator states."""

    IDLE = "idle"
    CHECKING_CREDENTIAL = "checking_credential"
    PROMPTING_FOR_TOKEN = "prompting_for_token"
    SYNCING = "syncing"


class SyncOrchestrator:
    """Drives a sync cycle and reports its outcome."""

    def __init__(
        self,
        collection: ServerCollectionManager,
        credentials: CredentialStore,
        client: ModelScopeClient,
        notifier: Notifier,
        on_prompt: Optional[Callable[[], None]] = None,
    ):
        """
        Initialize orchestrator.

        Args:
            collection: Collection receiving new servers
            credentials: Token store
            client: Remote provider client
            notifier: Where status messages go
            on_prompt: Called whenever the token prompt opens
        """
        self.collection = collection
        self.credentials = credentials
        self.client = client
        self.notifier = notifier
        self.on_prompt = on_prompt
        self.state = SyncState.IDLE
        self.syncing = False
        self.last_outcome: Optional[SyncOutcome] = None

    @property
    def can_sync(self) -> bool:
        """Whether the sync menu entry should be enabled."""
        return not self.syncing

    @property
    def prompting(self) -> bool:
        return self.state == SyncState.PROMPTING_FOR_TOKEN

    async def request_sync(self) -> None:
        """Start a sync, asking for a token first if none is stored."""
        if self.syncing:
            logger.debug("Sync already in progress, ignoring request")
            return

        self.state = SyncState.CHECKING_CREDENTIAL
        token = self.credentials.get()
        if not token:
            logger.info("No sync token stored, prompting for one")
            self._open_prompt()
            return

        await self._sync(token)

    async def submit_token(self, text: str) -> bool:
        """
        Accept a token typed into the prompt.

        Only honoured while the prompt is open. Blank input is ignored and the
        prompt stays open. Otherwise the token is stored and a sync starts
        right away.

        Returns:
            True if the token was accepted
        """
        if not self.prompting:
            logger.debug(f"Token prompt is not open (state: {self.state.value}), ignoring token")
            return False
        token = text.strip()
        if not token:
            return False

        self.credentials.set(token)
        await self._sync(token)
        return True

    def cancel_prompt(self) -> None:
        if self.prompting:
            self.state = SyncState.IDLE

    def _open_prompt(self) -> None:
        self.state = SyncState.PROMPTING_FOR_TOKEN
        if self.on_prompt:
            self.on_prompt()

    async def _sync(self, token: str) -> None:
        self.state = SyncState.SYNCING
        self.syncing = True
        self.notifier.loading(f"Syncing servers from {PROVIDER_NAME}...", SYNC_KEY)

        try:
            fetch = await self.client.fetch_candidates(token)

            if fetch.status == SyncStatus.UNAUTHORIZED:
                self.last_outcome = SyncOutcome.from_fetch(fetch)
                self.notifier.error(fetch.message, SYNC_KEY)
                self._open_prompt()
                return

            if fetch.status == SyncStatus.FAILURE:
                self.last_outcome = SyncOutcome.from_fetch(fetch)
                logger.warning(f"Sync failed: {fetch.error_details}")
                self.notifier.error(fetch.message, SYNC_KEY)
                return

            # Manual adds may have landed while the fetch was pending
            outcome = merge(
                fetch.candidates, self.collection.servers, PROVIDER_NAME, rejected=fetch.rejected,
            )
            self.collection.add_many(outcome.added_servers)
            self.last_outcome = outcome

            if outcome.added_servers:
                self.collection.set_selected(outcome.added_servers[0])
                self.notifier.success(outcome.message, SYNC_KEY)
            else:
                self.notifier.info(outcome.message, SYNC_KEY)

        except Exception as e:
            logger.exception(f"Unexpected error syncing from {PROVIDER_NAME}: {e}")
            self.last_outcome = SyncOutcome(
                status=SyncStatus.FAILURE,
                message=FAILURE_MESSAGE,
                error_details=str(e),
            )
            self.notifier.error(FAILURE_MESSAGE, SYNC_KEY)

        finally:
            self.syncing = False
            if self.state == SyncState.SYNCING:
                self.state = SyncState.IDLE
