"""Server module - file metadata, storages, mounts and diagnostics."""

from cloudfiles.server.database import Database
from cloudfiles.server.debug import FileDebugger, format_mount_type
from cloudfiles.server.filesystem import (
    CachedMountInfo,
    File,
    Folder,
    Node,
    NotFoundError,
    RootFolder,
    UserMountCache,
)

__all__ = [
    "CachedMountInfo",
    "Database",
    "File",
    "FileDebugger",
    "Folder",
    "Node",
    "NotFoundError",
    "RootFolder",
    "UserMountCache",
    "format_mount_type",
]
