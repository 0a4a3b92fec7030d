"""Storage backends behind mounts.

This module provides:
- Storage interface with LocalStorage, HomeStorage and ObjectStoreStorage
- JailStorage exposing a subfolder of another storage
- ObjectStore interface with LocalObjectStore and S3ObjectStore
"""

from __future__ import annotations

import os
import posixpath
from abc import ABC, abstractmethod
from pathlib import Path
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from typing import Any, BinaryIO


class ObjectNotFoundError(Exception):
    """Raised when an object is missing from its store."""


class FileHandle:
    """Readable stream together with the live size of what it reads.

    The size comes from the backend (fstat for local files, the object's
    content length for object stores), not from the file cache.
    """

    def __init__(self, stream: BinaryIO | Any, size: int) -> None:
        self._stream = stream
        self.size = size

    def read(self, amount: int = -1) -> bytes:
        """Read up to amount bytes, everything when negative."""
        if amount < 0:
            data: bytes = self._stream.read()
        else:
            data = self._stream.read(amount)
        return data

    def close(self) -> None:
        """Release the underlying stream."""
        self._stream.close()

    def __enter__(self) -> FileHandle:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()


# === Object stores ===


class ObjectStore(ABC):
    """Abstract flat store of objects addressed by urn."""

    @property
    @abstractmethod
    def storage_id(self) -> str:
        """Identifier of the store, "<type>::<bucket or location>"."""

    @abstractmethod
    def read_object(self, urn: str) -> FileHandle:
        """Open an object for reading.

        Raises:
            ObjectNotFoundError: If the object doesn't exist.
        """

    @abstractmethod
    def write_object(self, urn: str, data: bytes) -> None:
        """Store an object, replacing any previous content."""


class LocalObjectStore(ObjectStore):
    """Object store kept in a local directory, for development and testing."""

    def __init__(self, base_path: Path | str) -> None:
        self._base_path = Path(base_path).resolve()
        self._base_path.mkdir(parents=True, exist_ok=True)

    @property
    def storage_id(self) -> str:
        return f"local::{self._base_path}"

    def _object_path(self, urn: str) -> Path:
        return self._base_path / urn.replace(":", "_")

    def read_object(self, urn: str) -> FileHandle:
        try:
            stream = self._object_path(urn).open("rb")
        except FileNotFoundError as e:
            raise ObjectNotFoundError(f"Object not found: {urn}") from e
        return FileHandle(stream, os.fstat(stream.fileno()).st_size)

    def write_object(self, urn: str, data: bytes) -> None:
        self._object_path(urn).write_bytes(data)


class S3ObjectStore(ObjectStore):
    """S3-compatible object store (AWS, OVH, MinIO, etc.)."""

    def __init__(
        self,
        bucket: str,
        endpoint_url: str | None = None,
        access_key: str | None = None,
        secret_key: str | None = None,
        region: str = "us-east-1",
    ) -> None:
        """Initialize the S3 client.

        Args:
            bucket: S3 bucket name.
            endpoint_url: Custom endpoint URL (for OVH, MinIO, etc.).
            access_key: AWS access key ID.
            secret_key: AWS secret access key.
            region: AWS region (default: us-east-1).
        """
        import boto3

        self._bucket = bucket
        self._client: Any = boto3.client(
            "s3",
            endpoint_url=endpoint_url,
            aws_access_key_id=access_key,
            aws_secret_access_key=secret_key,
            region_name=region,
        )

    @property
    def storage_id(self) -> str:
        return f"amazon::{self._bucket}"

    def read_object(self, urn: str) -> FileHandle:
        from botocore.exceptions import ClientError

        try:
            response = self._client.get_object(Bucket=self._bucket, Key=urn)
        except ClientError as e:
            if e.response["Error"]["Code"] == "NoSuchKey":
                raise ObjectNotFoundError(f"Object not found: {urn}") from e
            raise
        return FileHandle(response["Body"], int(response["ContentLength"]))

    def write_object(self, urn: str, data: bytes) -> None:
        self._client.put_object(Bucket=self._bucket, Key=urn, Body=data)


def create_object_store(config: dict[str, str | None]) -> ObjectStore:
    """Factory function to create an object store from configuration.

    Args:
        config: Store configuration dict with keys:
            - type: "local" or "s3"
            - For local: local_path
            - For S3: bucket, endpoint_url, access_key, secret_key, region

    Returns:
        Configured ObjectStore instance.

    Raises:
        ValueError: If the store type is unknown or misconfigured.
    """
    store_type = config.get("type", "local")

    if store_type == "local":
        return LocalObjectStore(config.get("local_path") or "./objects")

    if store_type == "s3":
        bucket = config.get("bucket")
        if not bucket:
            raise ValueError("S3 object store requires 'bucket' configuration")
        return S3ObjectStore(
            bucket=bucket,
            endpoint_url=config.get("endpoint_url"),
            access_key=config.get("access_key"),
            secret_key=config.get("secret_key"),
            region=config.get("region") or "us-east-1",
        )

    raise ValueError(f"Unknown object store type: {store_type}")


# === Storages ===

STORAGE_KINDS = ("home", "local", "object", "home_object")


class StorageCache(Protocol):
    """File cache lookups a storage needs to address its content."""

    def get_file_id(self, path: str) -> int | None:
        """Return the file id cached for path, or None."""


class Storage(ABC):
    """Abstract storage backend, addressed by paths relative to its root."""

    @property
    @abstractmethod
    def storage_id(self) -> str:
        """Unique storage identifier."""

    @property
    def is_home(self) -> bool:
        """Whether this is a user's home storage."""
        return False

    @property
    def object_store(self) -> ObjectStore | None:
        """The object store backing this storage, if any."""
        return None

    def get_urn(self, file_id: int) -> str | None:
        """Object urn of a file id, for object store backed storages."""
        return None

    @abstractmethod
    def file_exists(self, path: str) -> bool:
        """Check if path exists in the storage."""

    @abstractmethod
    def fopen(self, path: str) -> FileHandle:
        """Open path for reading.

        Raises:
            FileNotFoundError: For missing local files.
            ObjectNotFoundError: For missing objects.
        """


class LocalStorage(Storage):
    """Storage backed by a local directory."""

    def __init__(self, storage_id: str, datadir: Path | str) -> None:
        self._storage_id = storage_id
        self._datadir = Path(datadir).resolve()

    @property
    def storage_id(self) -> str:
        return self._storage_id

    def _source_path(self, path: str) -> Path:
        return self._datadir / path.strip("/")

    def file_exists(self, path: str) -> bool:
        return self._source_path(path).exists()

    def fopen(self, path: str) -> FileHandle:
        stream = self._source_path(path).open("rb")
        return FileHandle(stream, os.fstat(stream.fileno()).st_size)


class HomeStorage(LocalStorage):
    """A user's home storage."""

    @property
    def is_home(self) -> bool:
        return True


class ObjectStoreStorage(Storage):
    """Storage whose file contents live in an object store.

    Only the file cache knows the tree; each file's content is the object
    "urn:oid:<fileid>".
    """

    def __init__(self, storage_id: str, object_store: ObjectStore, cache: StorageCache) -> None:
        self._storage_id = storage_id
        self._object_store = object_store
        self._cache = cache

    @property
    def storage_id(self) -> str:
        return self._storage_id

    @property
    def object_store(self) -> ObjectStore:
        return self._object_store

    def get_urn(self, file_id: int) -> str:
        return f"urn:oid:{file_id}"

    def file_exists(self, path: str) -> bool:
        return self._cache.get_file_id(path.strip("/")) is not None

    def fopen(self, path: str) -> FileHandle:
        file_id = self._cache.get_file_id(path.strip("/"))
        if file_id is None:
            raise ObjectNotFoundError(f"No cache entry for {path}")
        return self._object_store.read_object(self.get_urn(file_id))


class HomeObjectStoreStorage(ObjectStoreStorage):
    """A user's home storage kept in an object store."""

    @property
    def is_home(self) -> bool:
        return True


class JailStorage(Storage):
    """A folder of another storage exposed as a storage root.

    Used for share mounts; a jail is never a home storage.
    """

    def __init__(self, wrapped: Storage, root: str) -> None:
        self._wrapped = wrapped
        self._root = root.strip("/")

    @property
    def storage_id(self) -> str:
        return self._wrapped.storage_id

    @property
    def object_store(self) -> ObjectStore | None:
        return self._wrapped.object_store

    def get_urn(self, file_id: int) -> str | None:
        return self._wrapped.get_urn(file_id)

    def source_path(self, path: str) -> str:
        """Path in the wrapped storage for a path inside the jail."""
        path = path.strip("/")
        if not path:
            return self._root
        return posixpath.join(self._root, path) if self._root else path

    def file_exists(self, path: str) -> bool:
        return self._wrapped.file_exists(self.source_path(path))

    def fopen(self, path: str) -> FileHandle:
        return self._wrapped.fopen(self.source_path(path))


def create_storage(
    kind: str,
    storage_id: str,
    cache: StorageCache,
    location: str | None = None,
    options: dict[str, str | None] | None = None,
) -> Storage:
    """Factory function to create a storage from its registration.

    Args:
        kind: One of STORAGE_KINDS.
        storage_id: Unique storage identifier.
        cache: File cache view of this storage.
        location: Base directory for home and local storages.
        options: Object store configuration for object and home_object storages.

    Returns:
        Configured Storage instance.

    Raises:
        ValueError: If kind is unknown or location is missing.
    """
    if kind in ("object", "home_object"):
        object_store = create_object_store(options or {})
        if kind == "home_object":
            return HomeObjectStoreStorage(storage_id, object_store, cache)
        return ObjectStoreStorage(storage_id, object_store, cache)

    if kind in ("home", "local"):
        if not location:
            raise ValueError(f"Storage {storage_id} requires a location")
        if kind == "home":
            return HomeStorage(storage_id, location)
        return LocalStorage(storage_id, location)

    raise ValueError(f"Unknown storage kind: {kind}")
