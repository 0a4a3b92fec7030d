"""SQLAlchemy models for the file metadata database.

This module defines the schema for storages, the file cache, mounts and
shares.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import (
    JSON,
    Boolean,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from cloudfiles.core.permissions import Permission


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""


class StorageRecord(Base):
    """A storage backend.

    kind is "home", "local", "object" or "home_object". Local and home
    storages keep their files below location; object storages describe their
    store in options.
    """

    __tablename__ = "storages"

    numeric_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    storage_id: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    kind: Mapped[str] = mapped_column(String(32), nullable=False)
    location: Mapped[str | None] = mapped_column(Text, nullable=True)
    options: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)


class FileCacheEntry(Base):
    """Cached metadata of a file or folder inside a storage."""

    __tablename__ = "filecache"

    fileid: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    storage: Mapped[int] = mapped_column(
        Integer, ForeignKey("storages.numeric_id", ondelete="CASCADE"), nullable=False
    )
    # Path inside the storage, "" for the storage root
    path: Mapped[str] = mapped_column(Text, nullable=False)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    mimetype: Mapped[str] = mapped_column(String(255), nullable=False)
    size: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    mtime: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    encrypted: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    permissions: Mapped[int] = mapped_column(
        Integer, default=int(Permission.ALL), nullable=False
    )

    __table_args__ = (
        UniqueConstraint("storage", "path", name="uq_filecache_storage_path"),
        Index("idx_filecache_storage", "storage"),
    )


class MountRecord(Base):
    """A storage (or a folder inside one) mounted into a user's tree.

    mount_type is one of "home", "local", "shared", "groupfolder",
    "external" or "circle".
    """

    __tablename__ = "mounts"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(String(255), nullable=False)
    mount_point: Mapped[str] = mapped_column(Text, nullable=False)
    storage: Mapped[int] = mapped_column(
        Integer, ForeignKey("storages.numeric_id", ondelete="CASCADE"), nullable=False
    )
    root_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("filecache.fileid", ondelete="CASCADE"), nullable=False
    )
    mount_type: Mapped[str] = mapped_column(String(32), default="local", nullable=False)
    permissions: Mapped[int] = mapped_column(
        Integer, default=int(Permission.ALL), nullable=False
    )
    folder_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
    external_config_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
    external_backend: Mapped[str | None] = mapped_column(String(255), nullable=True)

    __table_args__ = (
        UniqueConstraint("user_id", "mount_point", name="uq_mounts_user_point"),
        Index("idx_mounts_storage", "storage"),
    )


class ShareRecord(Base):
    """A share backing a shared mount."""

    __tablename__ = "shares"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    mount_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("mounts.id", ondelete="CASCADE"), nullable=False
    )
    share_type: Mapped[int] = mapped_column(Integer, nullable=False)
    shared_by: Mapped[str] = mapped_column(String(255), nullable=False)
    shared_with: Mapped[str] = mapped_column(String(255), nullable=False)
    share_owner: Mapped[str] = mapped_column(String(255), nullable=False)
    file_id: Mapped[int] = mapped_column(Integer, nullable=False)
    permissions: Mapped[int] = mapped_column(
        Integer, default=int(Permission.READ), nullable=False
    )

    __table_args__ = (Index("idx_shares_mount", "mount_id"),)
