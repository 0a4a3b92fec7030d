"""Permission bits shared by files, mounts and shares."""

from __future__ import annotations

from enum import IntFlag


class Permission(IntFlag):
    """Access rights on a node.

    Each flag is independent; ALL is the union of the five rights.
    """

    NONE = 0
    READ = 1
    UPDATE = 2
    CREATE = 4
    DELETE = 8
    SHARE = 16
    ALL = READ | UPDATE | CREATE | DELETE | SHARE


# Display order for permission summaries
_PERMISSION_NAMES: tuple[tuple[Permission, str], ...] = (
    (Permission.READ, "read"),
    (Permission.UPDATE, "update"),
    (Permission.CREATE, "create"),
    (Permission.DELETE, "delete"),
    (Permission.SHARE, "share"),
)


def format_permissions(node_type: str, permissions: int) -> str:
    """Describe a permission bitmask.

    Files can never receive CREATE, so for them ALL minus CREATE also
    counts as full permissions.

    Args:
        node_type: "file" or "dir".
        permissions: Permission bitmask.

    Returns:
        "full permissions" or a comma separated list such as "read, share".
    """
    if permissions == Permission.ALL or (
        node_type == "file" and permissions == Permission.ALL & ~Permission.CREATE
    ):
        return "full permissions"

    return ", ".join(
        name for perm, name in _PERMISSION_NAMES if (permissions & perm) == perm
    )
