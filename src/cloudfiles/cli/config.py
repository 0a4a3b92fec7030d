"""Configuration commands for cloudfiles CLI.

Commands:
- config:server: Save the server connection used by client commands
"""

from __future__ import annotations

import click

from cloudfiles.core.config import get_config_file, load_config, save_config


@click.command("config:server")
@click.option("--server", required=True, help="Server URL (e.g., https://cloud.example.com).")
@click.option("--user", required=True, help="User id.")
@click.option("--token", prompt=True, hide_input=True, help="App password for the user.")
def config_server(server: str, user: str, token: str) -> None:
    """Save the server connection used by client commands."""
    config = load_config()
    config["server_url"] = server.rstrip("/")
    config["user"] = user
    config["token"] = token
    save_config(config)
    click.echo(f"Configuration saved to {get_config_file()}")
