"""Node tree over the metadata database.

This module provides:
- File and Folder nodes resolved through mounts
- RootFolder for lookups by absolute path or by file id
- UserMountCache mapping file ids to the mounts that reach them
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from cloudfiles.server.database import DIRECTORY_MIMETYPE, Database
from cloudfiles.server.models import FileCacheEntry, MountRecord
from cloudfiles.server.mounts import (
    Backend,
    CircleMount,
    ExternalMount,
    ExternalStorageConfig,
    GroupFolderMount,
    MountKind,
    MountPoint,
    SharedMount,
)
from cloudfiles.server.sharing import Share
from cloudfiles.server.storage import FileHandle, JailStorage, Storage, create_storage

logger = logging.getLogger(__name__)


class NotFoundError(Exception):
    """Raised when a path or file id does not resolve to a node."""


@dataclass
class CachedMountInfo:
    """A mount through which a file is reachable."""

    user: str
    mount_point: str
    root_id: int
    storage_id: str
    mount_id: int


@dataclass(kw_only=True)
class Node:
    """A file or folder reached through a mount."""

    id: int
    path: str
    internal_path: str
    mimetype: str
    mtime: int
    size: int
    encrypted: bool
    permissions: int
    mount: MountPoint

    @property
    def name(self) -> str:
        return self.path.rstrip("/").rsplit("/", 1)[-1]

    @property
    def type(self) -> str:
        """"dir" for folders, "file" otherwise."""
        return "dir" if self.mimetype == DIRECTORY_MIMETYPE else "file"

    @property
    def storage(self) -> Storage:
        return self.mount.storage


@dataclass(kw_only=True)
class File(Node):
    """A plain file."""

    def fopen(self, mode: str = "r") -> FileHandle:
        """Open the file content for reading.

        Raises:
            ValueError: If mode is not a read mode.
        """
        if mode not in ("r", "rb"):
            raise ValueError(f"Unsupported mode: {mode}")
        return self.storage.fopen(self.internal_path)


@dataclass(kw_only=True)
class Folder(Node):
    """A folder, able to look up nodes below it."""

    root: RootFolder = field(repr=False, compare=False)

    def get(self, path: str) -> Node:
        """Get a node by path relative to this folder."""
        return self.root.get(f"{self.path}/{path.strip('/')}")

    def get_by_id(self, file_id: int | str) -> list[Node]:
        """All nodes with this file id below this folder, one per mount."""
        return self.root.get_by_id_in(self.path, int(file_id))


class _CacheView:
    """File cache of one storage, as needed by ObjectStoreStorage."""

    def __init__(self, db: Database, storage: int) -> None:
        self._db = db
        self._storage = storage

    def get_file_id(self, path: str) -> int | None:
        entry = self._db.get_file_by_path(self._storage, path)
        return entry.fileid if entry else None


def _path_contains(root_path: str, path: str) -> bool:
    return not root_path or path == root_path or path.startswith(root_path + "/")


class RootFolder:
    """Entry point for resolving nodes across all users' mounts."""

    def __init__(self, db: Database) -> None:
        self._db = db
        self._storages: dict[int, Storage] = {}

    def _storage(self, numeric_id: int) -> Storage:
        storage = self._storages.get(numeric_id)
        if storage is None:
            record = self._db.get_storage(numeric_id)
            if record is None:
                raise NotFoundError(f"Storage {numeric_id} not found")
            storage = create_storage(
                record.kind,
                record.storage_id,
                _CacheView(self._db, numeric_id),
                location=record.location,
                options=record.options,
            )
            self._storages[numeric_id] = storage
        return storage

    def _build_mount(self, record: MountRecord) -> MountPoint:
        root_entry = self._db.get_file(record.root_id)
        if root_entry is None:
            raise NotFoundError(f"Mount root {record.root_id} not found")
        root_path = root_entry.path
        storage = self._storage(record.storage)
        if root_path or record.mount_type == MountKind.SHARED.value:
            storage = JailStorage(storage, root_path)

        common = {
            "mount_point": record.mount_point,
            "storage": storage,
            "root_id": record.root_id,
            "root_path": root_path,
            "user": record.user_id,
            "permissions": record.permissions,
            "mount_id": record.id,
            "storage_numeric_id": record.storage,
        }
        kind = MountKind(record.mount_type)
        if kind is MountKind.SHARED:
            shares = [
                Share(
                    id=s.id,
                    share_type=s.share_type,
                    shared_by=s.shared_by,
                    shared_with=s.shared_with,
                    share_owner=s.share_owner,
                    file_id=s.file_id,
                    permissions=s.permissions,
                )
                for s in self._db.list_shares_for_mount(record.id)
            ]
            if not shares:
                raise NotFoundError(f"Shared mount {record.mount_point} has no share")
            return SharedMount(share=shares[0], grouped_shares=shares, **common)
        if kind is MountKind.GROUPFOLDER:
            return GroupFolderMount(folder_id=record.folder_id or 0, **common)
        if kind is MountKind.EXTERNAL:
            config = ExternalStorageConfig(
                id=record.external_config_id or 0,
                backend=Backend(
                    identifier=record.external_backend or "local",
                    text=record.external_backend or "Local",
                ),
            )
            return ExternalMount(storage_config=config, **common)
        if kind is MountKind.CIRCLE:
            return CircleMount(**common)
        return MountPoint(kind=kind, **common)

    def _mounts_for_user(self, user_id: str) -> list[MountPoint]:
        return [self._build_mount(r) for r in self._db.list_mounts(user_id)]

    def _node(self, mount: MountPoint, entry: FileCacheEntry, internal_path: str) -> Node:
        fields = {
            "id": entry.fileid,
            "path": mount.node_path(internal_path),
            "internal_path": internal_path,
            "mimetype": entry.mimetype,
            "mtime": entry.mtime,
            "size": entry.size,
            "encrypted": entry.encrypted,
            "permissions": entry.permissions & mount.permissions,
            "mount": mount,
        }
        if entry.mimetype == DIRECTORY_MIMETYPE:
            return Folder(root=self, **fields)
        return File(**fields)

    def get(self, path: str) -> Node:
        """Get a node by absolute path, e.g. "/alice/files/report.pdf".

        Raises:
            NotFoundError: If no mount or cache entry matches the path.
        """
        path = "/" + path.strip("/")
        user_id = path.split("/")[1]
        mounts = sorted(
            self._mounts_for_user(user_id), key=lambda m: len(m.mount_point), reverse=True
        )
        for mount in mounts:
            if not (path + "/").startswith(mount.mount_point):
                continue
            internal_path = path[len(mount.mount_point) :].strip("/")
            entry = self._db.get_file_by_path(
                mount.storage_numeric_id, mount.source_path(internal_path)
            )
            if entry is None:
                raise NotFoundError(f"{path} not found")
            return self._node(mount, entry, internal_path)
        raise NotFoundError(f"{path} not found")

    def get_user_folder(self, user_id: str) -> Folder:
        """Get the "files" folder of a user.

        Raises:
            NotFoundError: If the user has no home folder.
        """
        node = self.get(f"/{user_id}/files")
        if not isinstance(node, Folder):
            raise NotFoundError(f"/{user_id}/files is not a folder")
        return node

    def get_by_id_in(self, folder_path: str, file_id: int) -> list[Node]:
        """All nodes with file_id below folder_path, one per matching mount."""
        entry = self._db.get_file(file_id)
        if entry is None:
            return []
        user_id = folder_path.strip("/").split("/")[0]
        nodes = []
        for mount in self._mounts_for_user(user_id):
            if mount.storage_numeric_id != entry.storage:
                continue
            internal_path = mount.internal_path(entry.path)
            if internal_path is None:
                continue
            node = self._node(mount, entry, internal_path)
            if node.path == folder_path or node.path.startswith(folder_path.rstrip("/") + "/"):
                nodes.append(node)
        return nodes


class UserMountCache:
    """Index of which users' mounts reach a file."""

    def __init__(self, db: Database) -> None:
        self._db = db

    def get_mounts_for_file_id(self, file_id: int) -> list[CachedMountInfo]:
        """All mounts, across users, whose mounted folder contains file_id.

        Returns:
            Mount infos in mount creation order, empty if the id is unknown.
        """
        entry = self._db.get_file(file_id)
        if entry is None:
            return []
        storage = self._db.get_storage(entry.storage)
        if storage is None:
            return []

        result = []
        for record in self._db.list_mounts_for_storage(entry.storage):
            root_entry = self._db.get_file(record.root_id)
            if root_entry is None or not _path_contains(root_entry.path, entry.path):
                continue
            result.append(
                CachedMountInfo(
                    user=record.user_id,
                    mount_point=record.mount_point,
                    root_id=record.root_id,
                    storage_id=storage.storage_id,
                    mount_id=record.id,
                )
            )
        logger.debug("File %d reachable through %d mounts", file_id, len(result))
        return result
