"""Client module - WebDAV client and file actions."""

from cloudfiles.client.actions import (
    FileAction,
    FileActionRegistry,
    Node,
    View,
    get_file_action_registry,
    register_file_action,
)
from cloudfiles.client.api import (
    APIError,
    AuthenticationError,
    ConflictError,
    DavClient,
    NotFoundError,
)
from cloudfiles.client.session import Session, User

__all__ = [
    # Actions
    "FileAction",
    "FileActionRegistry",
    "Node",
    "View",
    "get_file_action_registry",
    "register_file_action",
    # HTTP client
    "APIError",
    "AuthenticationError",
    "ConflictError",
    "DavClient",
    "NotFoundError",
    # Session
    "Session",
    "User",
]
