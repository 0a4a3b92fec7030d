"""Mount points binding storages into users' file trees.

Mounts form a closed set of kinds. Code that needs to tell them apart
dispatches on MountKind; each subclass carries the fields its kind needs.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from cloudfiles.core.permissions import Permission
from cloudfiles.server.sharing import Share
from cloudfiles.server.storage import Storage


class MountKind(str, Enum):
    """Kind of a mount point."""

    HOME = "home"
    LOCAL = "local"
    SHARED = "shared"
    GROUPFOLDER = "groupfolder"
    EXTERNAL = "external"
    CIRCLE = "circle"


@dataclass(kw_only=True)
class MountPoint:
    """A storage folder mounted at an absolute path.

    Attributes:
        mount_point: Absolute path with trailing slash, e.g. "/alice/".
        storage: Storage seen through the mount; paths are relative to the
            mounted folder.
        root_id: File id of the mounted folder.
        root_path: Path of the mounted folder in its source storage.
        user: User the mount belongs to.
        permissions: Mask applied to every node below the mount.
        mount_id: Database id of the mount.
        storage_numeric_id: Database id of the source storage.
    """

    mount_point: str
    storage: Storage
    root_id: int
    root_path: str = ""
    user: str
    permissions: int = Permission.ALL
    mount_id: int | None = None
    storage_numeric_id: int | None = None
    kind: MountKind = MountKind.LOCAL

    def internal_path(self, source_path: str) -> str | None:
        """Map a path of the source storage to a path inside this mount.

        Returns:
            The path relative to the mount root, or None when source_path
            lies outside the mounted folder.
        """
        if not self.root_path:
            return source_path
        if source_path == self.root_path:
            return ""
        if source_path.startswith(self.root_path + "/"):
            return source_path[len(self.root_path) + 1 :]
        return None

    def source_path(self, internal_path: str) -> str:
        """Map a path inside this mount back to the source storage."""
        internal_path = internal_path.strip("/")
        if not self.root_path:
            return internal_path
        return f"{self.root_path}/{internal_path}" if internal_path else self.root_path

    def node_path(self, internal_path: str) -> str:
        """Absolute path of a node inside this mount."""
        base = self.mount_point.rstrip("/")
        return f"{base}/{internal_path}" if internal_path else base


@dataclass(kw_only=True)
class SharedMount(MountPoint):
    """Mount of a node shared with the user.

    Several shares of the same node to the same user are grouped into a
    single mount; share is the one that created it.
    """

    share: Share
    grouped_shares: list[Share] = field(default_factory=list)
    kind: MountKind = field(default=MountKind.SHARED, init=False)

    def __post_init__(self) -> None:
        if not self.grouped_shares:
            self.grouped_shares = [self.share]


@dataclass(kw_only=True)
class GroupFolderMount(MountPoint):
    """Mount of a folder shared by a group of users."""

    folder_id: int
    kind: MountKind = field(default=MountKind.GROUPFOLDER, init=False)


@dataclass
class Backend:
    """External storage backend type."""

    identifier: str
    text: str


@dataclass
class ExternalStorageConfig:
    """Admin or user configuration of an external storage."""

    id: int
    backend: Backend


@dataclass(kw_only=True)
class ExternalMount(MountPoint):
    """Mount of an externally configured storage."""

    storage_config: ExternalStorageConfig
    kind: MountKind = field(default=MountKind.EXTERNAL, init=False)


@dataclass(kw_only=True)
class CircleMount(MountPoint):
    """Mount provided by a circle membership."""

    kind: MountKind = field(default=MountKind.CIRCLE, init=False)
