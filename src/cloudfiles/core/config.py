"""Shared configuration for cloudfiles.

This module defines the server connection settings and the JSON config file
used by the CLI commands.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path


@dataclass
class ServerConfig:
    """Configuration for connecting to a file server.

    Attributes:
        server_url: Base URL of the server (e.g., "https://cloud.example.com").
        token: App password or token for the user.
        user: User id the token belongs to.
        timeout: Request timeout in seconds.
        verify_ssl: Whether to verify SSL certificates (default True).
    """

    server_url: str
    token: str
    user: str | None = None
    timeout: float = 30.0
    verify_ssl: bool = True

    def __post_init__(self) -> None:
        """Normalize server URL."""
        self.server_url = self.server_url.rstrip("/")

    def remote_url(self, path: str) -> str:
        """Build the URL of a remote service endpoint.

        Args:
            path: Service path, e.g. "dav/trashbin/alice/restore/a.txt".

        Returns:
            Absolute URL below <server>/remote.php/.
        """
        return f"{self.server_url}/remote.php/{path.lstrip('/')}"


def get_config_dir() -> Path:
    """Get the configuration directory for cloudfiles.

    Returns:
        Path to ~/.cloudfiles.
    """
    return Path.home() / ".cloudfiles"


def get_config_file() -> Path:
    """Get the path to the config file."""
    return get_config_dir() / "config.json"


def load_config() -> dict[str, str]:
    """Load configuration from config file."""
    config_file = get_config_file()
    if config_file.exists():
        return dict(json.loads(config_file.read_text()))
    return {}


def save_config(config: dict[str, str]) -> None:
    """Save configuration to config file."""
    config_file = get_config_file()
    config_file.parent.mkdir(parents=True, exist_ok=True)
    config_file.write_text(json.dumps(config, indent=2))


def get_db_path() -> Path:
    """Get the metadata database path (CLOUDFILES_DB_PATH or ./cloudfiles.db)."""
    return Path(os.environ.get("CLOUDFILES_DB_PATH", "cloudfiles.db"))


def get_timezone_name() -> str:
    """Get the timezone used for displayed dates (CLOUDFILES_TIMEZONE or UTC)."""
    return os.environ.get("CLOUDFILES_TIMEZONE", "UTC")
