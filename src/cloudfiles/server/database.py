"""File metadata database using SQLAlchemy with SQLite.

This module provides:
- Storage registration
- File cache entries
- Mount and share records
"""

from __future__ import annotations

import posixpath
from pathlib import Path
from typing import TYPE_CHECKING, Any

from sqlalchemy import create_engine, select
from sqlalchemy.orm import Session

from cloudfiles.core.permissions import Permission
from cloudfiles.server.models import (
    Base,
    FileCacheEntry,
    MountRecord,
    ShareRecord,
    StorageRecord,
)
from cloudfiles.server.mounts import MountKind
from cloudfiles.server.storage import STORAGE_KINDS

if TYPE_CHECKING:
    from sqlalchemy import Engine

DIRECTORY_MIMETYPE = "httpd/unix-directory"

MOUNT_TYPES = tuple(kind.value for kind in MountKind)


def normalize_mount_point(mount_point: str) -> str:
    """Return mount_point as "/a/b/" with exactly one leading and trailing slash."""
    return "/" + mount_point.strip("/") + "/"


class Database:
    """SQLAlchemy database for file metadata.

    Uses SQLite with WAL mode so diagnostics can read while the platform writes.
    """

    def __init__(self, db_path: Path) -> None:
        """Initialize the database.

        Args:
            db_path: Path to the SQLite database file.
        """
        self._db_path = Path(db_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)

        self._engine: Engine = create_engine(
            f"sqlite:///{self._db_path}",
            connect_args={"check_same_thread": False},
            echo=False,
        )

        with self._engine.connect() as conn:
            conn.exec_driver_sql("PRAGMA journal_mode=WAL")
            conn.exec_driver_sql("PRAGMA foreign_keys=ON")

        Base.metadata.create_all(self._engine)

    def close(self) -> None:
        """Close the database connection."""
        self._engine.dispose()

    def _session(self) -> Session:
        """Create a new database session."""
        return Session(self._engine)

    def _add(self, record: Any) -> Any:
        """Insert a record and return it detached."""
        with self._session() as session:
            session.add(record)
            session.commit()
            session.refresh(record)
            session.expunge(record)
            return record

    # === Storage operations ===

    def add_storage(
        self,
        storage_id: str,
        kind: str,
        location: str | None = None,
        options: dict[str, Any] | None = None,
    ) -> StorageRecord:
        """Register a storage and create its root cache entry.

        Args:
            storage_id: Unique storage identifier, e.g. "home::alice".
            kind: One of STORAGE_KINDS.
            location: Base directory for home and local storages.
            options: Object store configuration for object and home_object storages.

        Returns:
            Created StorageRecord.

        Raises:
            ValueError: If kind is unknown.
        """
        if kind not in STORAGE_KINDS:
            raise ValueError(f"Unknown storage kind: {kind}")
        storage: StorageRecord = self._add(
            StorageRecord(storage_id=storage_id, kind=kind, location=location, options=options)
        )
        self.add_file(storage.numeric_id, "", mimetype=DIRECTORY_MIMETYPE)
        return storage

    def get_storage(self, numeric_id: int) -> StorageRecord | None:
        """Get a storage by numeric id."""
        with self._session() as session:
            storage = session.get(StorageRecord, numeric_id)
            if storage:
                session.expunge(storage)
            return storage

    # === File cache operations ===

    def add_file(
        self,
        storage: int,
        path: str,
        mimetype: str = "application/octet-stream",
        size: int = 0,
        mtime: int = 0,
        permissions: int = Permission.ALL,
        encrypted: bool = False,
    ) -> FileCacheEntry:
        """Add a file cache entry.

        Args:
            storage: Numeric storage id.
            path: Path inside the storage, without leading slash.
            mimetype: MIME type, DIRECTORY_MIMETYPE for folders.
            size: Size in bytes.
            mtime: Modification time as a Unix timestamp.
            permissions: Permission bitmask.
            encrypted: Whether the content is encrypted.

        Returns:
            Created FileCacheEntry.
        """
        path = path.strip("/")
        entry = FileCacheEntry(
            storage=storage,
            path=path,
            name=posixpath.basename(path),
            mimetype=mimetype,
            size=size,
            mtime=mtime,
            permissions=int(permissions),
            encrypted=encrypted,
        )
        result: FileCacheEntry = self._add(entry)
        return result

    def add_folder(self, storage: int, path: str, mtime: int = 0) -> FileCacheEntry:
        """Add a folder cache entry."""
        return self.add_file(storage, path, mimetype=DIRECTORY_MIMETYPE, mtime=mtime)

    def get_file(self, fileid: int) -> FileCacheEntry | None:
        """Get a cache entry by file id."""
        with self._session() as session:
            entry = session.get(FileCacheEntry, fileid)
            if entry:
                session.expunge(entry)
            return entry

    def get_file_by_path(self, storage: int, path: str) -> FileCacheEntry | None:
        """Get a cache entry by storage and path."""
        with self._session() as session:
            stmt = select(FileCacheEntry).where(
                FileCacheEntry.storage == storage,
                FileCacheEntry.path == path.strip("/"),
            )
            entry = session.execute(stmt).scalar_one_or_none()
            if entry:
                session.expunge(entry)
            return entry

    def get_root_entry(self, storage: int) -> FileCacheEntry:
        """Get the root entry of a storage.

        Raises:
            LookupError: If the storage has no root entry.
        """
        entry = self.get_file_by_path(storage, "")
        if entry is None:
            raise LookupError(f"Storage {storage} has no root entry")
        return entry

    # === Mount operations ===

    def add_mount(
        self,
        user_id: str,
        mount_point: str,
        storage: int,
        root_id: int,
        mount_type: str = "local",
        permissions: int = Permission.ALL,
        folder_id: int | None = None,
        external_config_id: int | None = None,
        external_backend: str | None = None,
    ) -> MountRecord:
        """Mount a storage folder into a user's tree.

        Args:
            user_id: User the mount belongs to.
            mount_point: Absolute mount path, e.g. "/alice/files/Projects/".
            storage: Numeric storage id.
            root_id: File id of the folder (or file) mounted.
            mount_type: One of MOUNT_TYPES.
            permissions: Mask applied to everything below the mount.
            folder_id: Group folder id for groupfolder mounts.
            external_config_id: Configuration id for external mounts.
            external_backend: Backend display name for external mounts.

        Returns:
            Created MountRecord.

        Raises:
            ValueError: If mount_type is unknown.
        """
        if mount_type not in MOUNT_TYPES:
            raise ValueError(f"Unknown mount type: {mount_type}")
        record: MountRecord = self._add(
            MountRecord(
                user_id=user_id,
                mount_point=normalize_mount_point(mount_point),
                storage=storage,
                root_id=root_id,
                mount_type=mount_type,
                permissions=int(permissions),
                folder_id=folder_id,
                external_config_id=external_config_id,
                external_backend=external_backend,
            )
        )
        return record

    def list_mounts(self, user_id: str | None = None) -> list[MountRecord]:
        """List mounts, optionally for a single user, in creation order."""
        with self._session() as session:
            stmt = select(MountRecord).order_by(MountRecord.id)
            if user_id is not None:
                stmt = stmt.where(MountRecord.user_id == user_id)
            mounts = list(session.execute(stmt).scalars().all())
            for mount in mounts:
                session.expunge(mount)
            return mounts

    def list_mounts_for_storage(self, storage: int) -> list[MountRecord]:
        """List all users' mounts of a storage in creation order."""
        with self._session() as session:
            stmt = (
                select(MountRecord)
                .where(MountRecord.storage == storage)
                .order_by(MountRecord.id)
            )
            mounts = list(session.execute(stmt).scalars().all())
            for mount in mounts:
                session.expunge(mount)
            return mounts

    # === Share operations ===

    def add_share(
        self,
        mount_id: int,
        share_type: int,
        shared_by: str,
        shared_with: str,
        share_owner: str,
        file_id: int,
        permissions: int = Permission.READ,
    ) -> ShareRecord:
        """Attach a share to a shared mount.

        Returns:
            Created ShareRecord.
        """
        record: ShareRecord = self._add(
            ShareRecord(
                mount_id=mount_id,
                share_type=int(share_type),
                shared_by=shared_by,
                shared_with=shared_with,
                share_owner=share_owner,
                file_id=file_id,
                permissions=int(permissions),
            )
        )
        return record

    def list_shares_for_mount(self, mount_id: int) -> list[ShareRecord]:
        """List the shares grouped into a mount, oldest first."""
        with self._session() as session:
            stmt = (
                select(ShareRecord)
                .where(ShareRecord.mount_id == mount_id)
                .order_by(ShareRecord.id)
            )
            shares = list(session.execute(stmt).scalars().all())
            for share in shares:
                session.expunge(share)
            return shares
