"""Trashbin commands for cloudfiles CLI.

Commands:
- trashbin:restore: Restore items from the user's trash
"""

from __future__ import annotations

import sys
from urllib.parse import quote

import click
import httpx

from cloudfiles.client.actions import Node, View, get_file_action_registry
from cloudfiles.client.api import APIError
from cloudfiles.client.session import Session
from cloudfiles.client.trashbin import TRASHBIN_VIEW_ID
from cloudfiles.core.config import ServerConfig, load_config
from cloudfiles.core.permissions import Permission


@click.command("trashbin:restore")
@click.argument("names", nargs=-1, required=True)
@click.option("--server", default=None, help="Server URL (default: saved configuration).")
@click.option("--user", default=None, help="User id (default: saved configuration).")
@click.option("--token", default=None, help="App password (default: saved configuration).")
def trashbin_restore(
    names: tuple[str, ...],
    server: str | None,
    user: str | None,
    token: str | None,
) -> None:
    """Restore items from the trash.

    NAMES are trash entry names as listed by the server, e.g.
    "report.pdf.d1697040000".
    """
    config = load_config()
    server_url = server or config.get("server_url")
    user_id = user or config.get("user")
    app_password = token or config.get("token")
    if not server_url or not user_id or not app_password:
        click.echo(
            "Error: Server, user and token are required. Run 'cloudfiles config:server' first.",
            err=True,
        )
        sys.exit(1)

    server_config = ServerConfig(server_url=server_url, token=app_password, user=user_id)
    view = View(id=TRASHBIN_VIEW_ID, name="Deleted files")
    # Entries of the user's own trash are always readable
    nodes = [
        Node(
            source=server_config.remote_url(f"dav/trashbin/{user_id}/trash/{quote(name)}"),
            permissions=Permission.READ,
            owner=user_id,
        )
        for name in names
    ]

    action = get_file_action_registry().get("restore")
    if not action.is_enabled(nodes, view):
        click.echo("Error: Restore is not available for these items.", err=True)
        sys.exit(1)

    with Session.from_config(server_config) as session:
        for node in nodes:
            try:
                action.exec(node, view, session)
            except APIError as e:
                click.echo(f"Error: Could not restore {node.basename}: {e}", err=True)
                sys.exit(1)
            except httpx.RequestError as e:
                click.echo(f"Error: Request failed: {e}", err=True)
                sys.exit(1)
            click.echo(f"Restored {node.basename}")
