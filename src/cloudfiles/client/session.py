"""Authenticated session passed to file actions."""

from __future__ import annotations

from dataclasses import dataclass

from cloudfiles.client.api import DavClient
from cloudfiles.core.config import ServerConfig


@dataclass
class User:
    """The authenticated user."""

    uid: str
    display_name: str | None = None


@dataclass
class Session:
    """Connection and identity of the acting user.

    Attributes:
        config: Server connection settings.
        client: HTTP client bound to those settings.
        user: Authenticated user, or None when anonymous.
    """

    config: ServerConfig
    client: DavClient
    user: User | None = None

    @classmethod
    def from_config(cls, config: ServerConfig) -> Session:
        """Open a session for the user configured in config."""
        user = User(uid=config.user) if config.user else None
        return cls(config=config, client=DavClient(config), user=user)

    def close(self) -> None:
        """Close the underlying HTTP client."""
        self.client.close()

    def __enter__(self) -> Session:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()
