"""Command-line interface for cloudfiles.

This module provides the main CLI entry point and assembles all commands.

Commands:
- config:server: Save the server connection
- trashbin:restore: Restore items from the trash
- debug:file: Get information for a file
"""

from __future__ import annotations

import logging

import click

from cloudfiles.cli.config import config_server
from cloudfiles.cli.debug import debug_file
from cloudfiles.cli.trashbin import trashbin_restore
from cloudfiles.core.log import setup_logging


@click.group()
@click.version_option(package_name="cloudfiles")
@click.option("--verbose", "-v", is_flag=True, help="Log debug messages to stderr.")
def cli(verbose: bool) -> None:
    """cloudfiles - trash restore and file diagnostics."""
    if verbose:
        setup_logging(logging.DEBUG)


# Client commands
cli.add_command(config_server)
cli.add_command(trashbin_restore)

# Admin commands
cli.add_command(debug_file)


def main() -> None:
    """Entry point for the CLI."""
    cli()


__all__ = ["cli", "main"]
