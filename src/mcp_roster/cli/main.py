"""
Command line interface for MCP Roster.

Stands in for the servers panel: list and reorder the collection, add
servers, and sync servers from ModelScope.
"""

import asyncio
import json
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.table import Table

from mcp_roster import __version__
from mcp_roster.cli.errors import handle_errors
from mcp_roster.core.collection import ServerCollectionManager
from mcp_roster.core.credentials import KeyringCredentialStore
from mcp_roster.core.exceptions import ServerError
from mcp_roster.core.models import ServerEntry
from mcp_roster.core.notifications import ConsoleNotifier
from mcp_roster.core.orchestrator import SyncOrchestrator
from mcp_roster.core.panel import NEW_SERVER_NAME, ServerPanel
from mcp_roster.core.remote import ModelScopeClient
from mcp_roster.core.storage import ServerStore
from mcp_roster.utils.config import Config, load_config, reload_config
from mcp_roster.utils.logging import get_logger, setup_logging

console = Console()
logger = get_logger(__name__)


class CLIContext:
    """Lazily wires the collection, store and sync services for a command."""

    def __init__(self, config: Config, servers_file: Optional[Path] = None):
        self.config = config
        self.servers_file = servers_file or config.get_servers_file()
        self._store: Optional[ServerStore] = None
        self._notifier: Optional[ConsoleNotifier] = None
        self._panel: Optional[ServerPanel] = None

    def get_store(self) -> ServerStore:
        if self._store is None:
            self._store = ServerStore(self.servers_file)
        return self._store

    def get_credentials(self) -> KeyringCredentialStore:
        return KeyringCredentialStore(
            service=self.config.credentials.keyring_service,
            username=self.config.credentials.keyring_username,
        )

    def get_notifier(self) -> ConsoleNotifier:
        if self._notifier is None:
            self._notifier = ConsoleNotifier(console)
        return self._notifier

    def get_panel(self) -> ServerPanel:
        if self._panel is None:
            store = self.get_store()
            collection = ServerCollectionManager(store.load())

            def persist(*_):
                store.save(collection.servers)

            collection.on_add = persist
            collection.on_update_order = persist

            orchestrator = SyncOrchestrator(
                collection=collection,
                credentials=self.get_credentials(),
                client=ModelScopeClient(self.config.modelscope),
                notifier=self.get_notifier(),
            )
            self._panel = ServerPanel(collection, orchestrator, self.get_notifier())
        return self._panel


def _parse_env(env: tuple) -> dict:
    env_dict = {}
    for env_var in env:
        if "=" not in env_var:
            raise click.BadParameter(f"Expected KEY=VALUE, got '{env_var}'", param_hint="--env")
        key, value = env_var.split("=", 1)
        env_dict[key] = value
    return env_dict


def _print_server(server: ServerEntry) -> None:
    console.print(f"[bold green]{server.name}[/bold green] [dim]{server.id}[/dim]")
    if server.description:
        console.print(f"  {server.description}")
    console.print(f"  Type: {server.server_type.value}")
    if server.base_url:
        console.print(f"  URL: {server.base_url}")
    if server.command:
        console.print(f"  Command: {' '.join([server.command, *server.args])}")
    if server.env:
        console.print(f"  Env: {', '.join(sorted(server.env))}")
    if server.provider:
        console.print(f"  Provider: {server.provider}")


@click.group()
@click.option("--debug", "-d", is_flag=True, help="Enable debug logging")
@click.option(
    "--config", "config_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Configuration file to load instead of the defaults",
)
@click.option(
    "--servers-file",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Server collection file",
)
@click.version_option(version=__version__, prog_name="MCP Roster")
@click.pass_context
def cli(ctx: click.Context, debug: bool, config_file: Optional[Path], servers_file: Optional[Path]):
    """Manage and sync an ordered collection of MCP servers."""
    config = reload_config([config_file]) if config_file else load_config()

    setup_logging(
        enabled=config.logging.enabled,
        level="DEBUG" if debug else config.logging.level,
        console_level="DEBUG" if debug else config.logging.console_level,
        log_file=config.get_log_file(),
        format_type=config.logging.format_type,
        enable_rich=config.logging.enable_rich,
        max_bytes=config.logging.max_bytes,
        backup_count=config.logging.backup_count,
    )

    ctx.obj = CLIContext(config, servers_file)


@cli.command("list")
@click.option(
    "--output-format", "-o",
    type=click.Choice(["table", "json"], case_sensitive=False),
    default="table",
    help="Output format",
)
@click.pass_obj
@handle_errors
def list_cmd(obj: CLIContext, output_format: str):
    """List servers in display order."""
    servers = obj.get_store().load()

    if output_format == "json":
        click.echo(json.dumps([s.model_dump(mode="json") for s in servers], indent=2))
        return

    if not servers:
        console.print("[yellow]No MCP servers configured[/yellow]")
        console.print("[dim]Add one with 'mcp-roster add' or pull from ModelScope with 'mcp-roster sync'[/dim]")
        return

    table = Table(
        title=f"MCP Servers ({len(servers)} total)",
        show_header=True,
        header_style="bold cyan",
    )
    table.add_column("#", style="dim", width=4)
    table.add_column("Name", style="green")
    table.add_column("Type", style="blue", width=6)
    table.add_column("Endpoint", style="dim")
    table.add_column("ID", style="dim")

    for position, server in enumerate(servers, start=1):
        endpoint = server.base_url or " ".join([server.command, *server.args])
        table.add_row(str(position), server.name, server.server_type.value, endpoint, server.id)

    console.print(table)


@cli.command()
@click.option("--name", "-n", help="Server name, defaults to 'New MCP Server'")
@click.option("--description", default="", help="Server description")
@click.option("--base-url", default="", help="Remote endpoint URL")
@click.option("--command", "-c", default="", help="Command that starts the server")
@click.option("--args", "-a", multiple=True, help="Command argument (repeatable)")
@click.option("--env", "-e", multiple=True, help="Environment variable as KEY=VALUE (repeatable)")
@click.pass_obj
@handle_errors
def add(obj: CLIContext, name: Optional[str], description: str, base_url: str,
        command: str, args: tuple, env: tuple):
    """Add a server to the end of the collection."""
    panel = obj.get_panel()

    if not any([name, description, base_url, command, args, env]):
        server = panel.add_local_server()
    else:
        server = panel.add_server(ServerEntry(
            name=name or NEW_SERVER_NAME,
            description=description,
            base_url=base_url,
            command=command,
            args=list(args),
            env=_parse_env(env),
        ))

    _print_server(server)


@cli.command()
@click.argument("position", type=int)
@click.argument("new_position", type=int)
@click.pass_obj
@handle_errors
def move(obj: CLIContext, position: int, new_position: int):
    """Move the server at POSITION to NEW_POSITION (1-based)."""
    panel = obj.get_panel()
    panel.move(position - 1, new_position - 1)
    moved = panel.servers[new_position - 1]
    console.print(f"[green]✓[/green] Moved '{moved.name}' to position {new_position}")


@cli.command()
@click.argument("server_id")
@click.pass_obj
@handle_errors
def show(obj: CLIContext, server_id: str):
    """Show details of one server."""
    panel = obj.get_panel()
    server = panel.collection.get(server_id)
    if server is None:
        raise ServerError(f"Server '{server_id}' not found", error_code="NOT_FOUND")
    panel.select(server)
    _print_server(panel.selected)


@cli.command()
@click.pass_obj
@handle_errors
def sync(obj: CLIContext):
    """Add servers published to your ModelScope account."""
    panel = obj.get_panel()
    try:
        asyncio.run(_run_sync(panel))
    finally:
        obj.get_notifier().close()

    outcome = panel.orchestrator.last_outcome
    if outcome is not None and outcome.added_servers:
        for server in outcome.added_servers:
            console.print(f"  • {server.name} [dim]{server.id}[/dim]")


async def _run_sync(panel: ServerPanel) -> None:
    await panel.sync()
    while panel.token_prompt_open:
        try:
            token = click.prompt("ModelScope API token", hide_input=True)
        except click.Abort:
            panel.cancel_token_prompt()
            raise
        await panel.submit_token(token)


@cli.group()
def token():
    """Manage the ModelScope API token."""


@token.command("set")
@click.argument("value", required=False)
@click.pass_obj
@handle_errors
def token_set(obj: CLIContext, value: Optional[str]):
    """Store the ModelScope API token."""
    if value is None:
        value = click.prompt("ModelScope API token", hide_input=True)
    value = value.strip()
    if not value:
        raise click.BadParameter("Token cannot be empty")
    obj.get_credentials().set(value)
    console.print("[green]✓[/green] Token saved")


@token.command("status")
@click.pass_obj
@handle_errors
def token_status(obj: CLIContext):
    """Report whether a token is stored."""
    if obj.get_credentials().get():
        console.print("[green]✓[/green] A ModelScope token is stored")
    else:
        console.print("[yellow]No ModelScope token stored[/yellow]")


def main():
    cli()


if __name__ == "__main__":
    main()
