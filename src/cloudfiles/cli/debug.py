"""Diagnostic commands for cloudfiles CLI.

Commands:
- debug:file: Get information for a file
"""

from __future__ import annotations

import sys
from pathlib import Path

import click

from cloudfiles.core.config import get_db_path, get_timezone_name


@click.command("debug:file")
@click.argument("file")
@click.option(
    "--db-path",
    type=click.Path(),
    default=None,
    help="Path to metadata database (default: CLOUDFILES_DB_PATH or ./cloudfiles.db).",
)
def debug_file(file: str, db_path: str | None) -> None:
    """Get information for a file.

    FILE is a numeric file id or an absolute path such as
    /alice/files/report.pdf.
    """
    from cloudfiles.core.l10n import L10N
    from cloudfiles.server.database import Database
    from cloudfiles.server.debug import FileDebugger
    from cloudfiles.server.filesystem import RootFolder, UserMountCache

    db_file = Path(db_path) if db_path else get_db_path()
    if not db_file.exists():
        click.echo(f"Error: Database not found: {db_file}", err=True)
        sys.exit(1)

    db = Database(db_file)
    try:
        debugger = FileDebugger(
            RootFolder(db),
            UserMountCache(db),
            L10N("files", get_timezone_name()),
        )
        exit_code = debugger.run(file)
    finally:
        db.close()

    if exit_code:
        sys.exit(exit_code)
