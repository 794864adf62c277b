"""Command line interface for MCP Roster."""
