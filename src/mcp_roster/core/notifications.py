"""
Notification surface used to report sync and collection status.

Every notification carries a key; a new notification with the same key
replaces the previous one instead of stacking.
"""

from abc import ABC, abstractmethod
from typing import Dict, Optional

from rich.console import Console
from rich.status import Status

from mcp_roster.utils.logging import get_logger

logger = get_logger(__name__)


class Notifier(ABC):
    """Keyed user notifications."""

    @abstractmethod
    def success(self, message: str, key: str) -> None:
        pass

    @abstractmethod
    def error(self, message: str, key: str) -> None:
        pass

    @abstractmethod
    def info(self, message: str, key: str) -> None:
        pass

    @abstractmethod
    def loading(self, message: str, key: str) -> None:
        """Show an in-progress indicator until replaced by the same key."""


class ConsoleNotifier(Notifier):
    """Prints notifications to a Rich console, loading shows a spinner."""

    STYLES = {
        "success": "[green]✓[/green] {}",
        "error": "[red]✗ {}[/red]",
        "info": "[blue]ℹ[/blue] {}",
    }

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()
        self._spinners: Dict[str, Status] = {}

    def success(self, message: str, key: str) -> None:
        self._show("success", message, key)

    def error(self, message: str, key: str) -> None:
        self._show("error", message, key)

    def info(self, message: str, key: str) -> None:
        self._show("info", message, key)

    def loading(self, message: str, key: str) -> None:
        self._clear(key)
        status = self.console.status(message)
        status.start()
        self._spinners[key] = status

    def close(self) -> None:
        """Stop any spinner still running."""
        for key in list(self._spinners):
            self._clear(key)

    def _show(self, kind: str, message: str, key: str) -> None:
        self._clear(key)
        self.console.print(self.STYLES[kind].format(message))

    def _clear(self, key: str) -> None:
        spinner = self._spinners.pop(key, None)
        if spinner is not None:
            spinner.stop()
