"""Utility modules for MCP Roster."""

from mcp_roster.utils.logging import get_logger, setup_logging
from mcp_roster.utils.config import Config, get_config, load_config, reload_config

__all__ = [
    "get_logger",
    "setup_logging",
    "Config",
    "get_config",
    "load_config",
    "reload_config",
]
