"""Core module - Shared configuration, permissions and localization."""

from cloudfiles.core.config import ServerConfig
from cloudfiles.core.l10n import L10N, translate
from cloudfiles.core.permissions import Permission, format_permissions

__all__ = [
    # Config
    "ServerConfig",
    # Localization
    "L10N",
    "translate",
    # Permissions
    "Permission",
    "format_permissions",
]
