"""
Credential storage for the remote sync provider.

A store holds a single opaque token. The keyring-backed store persists it
in the system keyring, the memory store keeps it for the process lifetime.
"""

from abc import ABC, abstractmethod
from typing import Optional

import keyring
from keyring.errors import KeyringError

from mcp_roster.core.exceptions import CredentialError
from mcp_roster.utils.logging import get_logger

logger = get_logger(__name__)


class CredentialStore(ABC):
    """Holds the sync provider token."""

    @abstractmethod
    def get(self) -> Optional[str]:
        """Return the stored token, or None when absent."""

    @abstractmethod
    def set(self, token: str) -> None:
        """Store the token, overwriting any previous value."""


class MemoryCredentialStore(CredentialStore):
    """In-process token store."""

    def __init__(self, token: Optional[str] = None):
        self._token = token

    def get(self) -> Optional[str]:
        return self._token or None

    def set(self, token: str) -> None:
        self._token = token


class KeyringCredentialStore(CredentialStore):
    """Token store backed by the system keyring."""

    def __init__(self, service: str = "mcp-roster", username: str = "modelscope-token"):
        """
        Initialize keyring store.

        Args:
            service: Keyring service name
            username: Entry name under the service
        """
        self.service = service
        self.username = username

    def get(self) -> Optional[str]:
        try:
            token = keyring.get_password(self.service, self.username)
        except KeyringError as e:
            logger.warning(f"Could not read token from keyring: {e}")
            return None
        return token or None

    def set(self, token: str) -> None:
        try:
            keyring.set_password(self.service, self.username, token)
        except KeyringError as e:
            raise CredentialError(
                f"Could not store token in keyring: {e}",
                error_code="KEYRING_WRITE_FAILED",
                details={"service": self.service},
            )
        logger.debug(f"Stored sync token under keyring service '{self.service}'")
