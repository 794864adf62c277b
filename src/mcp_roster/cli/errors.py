"""
Error handling utilities for CLI commands.
"""

import functools
import sys

import click
from rich.console import Console

from mcp_roster.core.exceptions import RosterError
from mcp_roster.utils.logging import get_logger

console = Console()
logger = get_logger(__name__)


def handle_errors(func):
    """Decorator turning errors into a red message and exit status 1."""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except (KeyboardInterrupt, click.Abort):
            console.print("\n[yellow]Operation cancelled by user[/yellow]")
            sys.exit(1)
        except RosterError as e:
            console.print(f"[red]Error: {e.message}[/red]")
            sys.exit(1)
        except Exception as e:
            logger.debug("Unhandled CLI error", exc_info=True)
            console.print(f"[red]Error: {e}[/red]")
            console.print("[dim]Use --debug for more details[/dim]")
            sys.exit(1)

    return wrapper
