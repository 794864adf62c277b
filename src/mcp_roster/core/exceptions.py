"""
Exception classes for MCP Roster.

Defines the exception hierarchy for errors raised while managing the
local server collection and synchronizing it with a remote provider.
"""

from typing import Any, Dict, List, Optional


class RosterError(Exception):
    """Base exception for all MCP Roster errors."""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        """
        Initialize RosterError.

        Args:
            message: Error message
            error_code: Optional error code for categorization
            details: Optional additional error details
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}

    def __str__(self) -> str:
        if self.error_code:
            return f"[{self.error_code}] {self.message}"
        return self.message

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary representation."""
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "error_code": self.error_code,
            "details": self.details,
        }


class ConfigError(RosterError):
    """Configuration-related errors."""
    pass


class ServerError(RosterError):
    """Server collection errors."""
    pass


class ValidationError(RosterError):
    """Invalid argument passed to a collection operation."""
    pass


class CredentialError(RosterError):
    """Credential storage errors."""
    pass


class DuplicateServerError(ServerError):
    """Raised when an entry with an already used id is added."""

    def __init__(
        self,
        message: str,
        server_ids: Optional[List[str]] = None,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, error_code, details)
        self.server_ids = server_ids or []
