"""File diagnostics: metadata, storage checks and access listing.

All checks except resolving the requested file are advisory: problems are
printed as warnings and the report continues.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

import click

from cloudfiles.core.l10n import L10N
from cloudfiles.core.permissions import format_permissions
from cloudfiles.server.filesystem import File, Node, NotFoundError, RootFolder, UserMountCache
from cloudfiles.server.mounts import ExternalMount, GroupFolderMount, MountKind, MountPoint, SharedMount
from cloudfiles.server.sharing import Share, format_share_type

logger = logging.getLogger(__name__)


def _error(text: str) -> str:
    return click.style(text, fg="red")


def _describe_sharer(share: Share) -> str:
    share_type = format_share_type(share)
    if share_type:
        return f"{share.shared_by} (via {share_type} {share.shared_with})"
    return share.shared_by


def _format_shared(mount: SharedMount) -> str:
    share = mount.share
    description = "shared by " + ", ".join(_describe_sharer(s) for s in mount.grouped_shares)
    if share.shared_by != share.share_owner:
        description += f" owned by {share.share_owner}"
    return description


def _format_groupfolder(mount: GroupFolderMount) -> str:
    return f"groupfolder {mount.folder_id}"


def _format_external(mount: ExternalMount) -> str:
    return f"external storage {mount.storage_config.id}"


def _format_circle(mount: MountPoint) -> str:
    return "circle"


_MOUNT_TYPE_FORMATTERS: dict[MountKind, Callable[[Any], str]] = {
    MountKind.SHARED: _format_shared,
    MountKind.GROUPFOLDER: _format_groupfolder,
    MountKind.EXTERNAL: _format_external,
    MountKind.CIRCLE: _format_circle,
}


def format_mount_type(mount: MountPoint) -> str:
    """Describe how a mount gives access to its files.

    Home storage wins over the mount kind. Kinds without a description fall
    back to the mount class name.
    """
    if mount.storage.is_home:
        return "home storage"
    formatter = _MOUNT_TYPE_FORMATTERS.get(mount.kind)
    if formatter is None:
        return type(mount).__name__
    return formatter(mount)


class FileDebugger:
    """Prints diagnostic information about a file."""

    def __init__(
        self,
        root_folder: RootFolder,
        mount_cache: UserMountCache,
        l10n: L10N,
        echo: Callable[[str], Any] = click.echo,
    ) -> None:
        self._root_folder = root_folder
        self._mount_cache = mount_cache
        self._l10n = l10n
        self._echo = echo

    def run(self, file_input: str) -> int:
        """Print the full report for a file id or path.

        Returns:
            Exit code, 1 when the file cannot be resolved.
        """
        file = self.get_file(file_input)
        if file is None:
            self._echo(_error(f"file {file_input} not found"))
            return 1

        self._echo(file.name)
        self._echo(f"  fileid: {file.id}")
        self._echo(f"  mimetype: {file.mimetype}")
        self._echo(f"  modified: {self._l10n.localize('datetime', file.mtime)}")
        self._echo("  " + ("encrypted" if file.encrypted else "not encrypted"))
        self.storage_details(file.mount, file)

        files_per_user = self.get_files_by_user(file)
        self._echo("")
        self._echo("The following users have access to the file")
        self._echo("")
        for user, user_files in files_per_user.items():
            self._echo(f"{user}:")
            for user_file in user_files:
                self._echo(
                    f"  {user_file.path}: "
                    + format_permissions(user_file.type, user_file.permissions)
                )
                self._echo("    " + format_mount_type(user_file.mount))

        return 0

    def get_file(self, file_input: str) -> Node | None:
        """Resolve a numeric file id or an absolute path."""
        file_input = file_input.strip()
        if file_input.isascii() and file_input.isdigit():
            file_id = int(file_input)
            mounts = self._mount_cache.get_mounts_for_file_id(file_id)
            if not mounts:
                return None
            try:
                user_folder = self._root_folder.get_user_folder(mounts[0].user)
            except NotFoundError:
                logger.debug("No home folder for %s", mounts[0].user)
                return None
            nodes = user_folder.get_by_id(file_id)
            if not nodes:
                return None
            return nodes[0]

        try:
            return self._root_folder.get(file_input)
        except NotFoundError:
            logger.debug("No node at %s", file_input)
            return None

    def get_files_by_user(self, file: Node) -> dict[str, list[Node]]:
        """Nodes for file's id, grouped by every user that can reach it.

        Users without a home folder are reported and skipped.
        """
        result: dict[str, list[Node]] = {}
        seen: set[str] = set()
        for mount in self._mount_cache.get_mounts_for_file_id(file.id):
            if mount.user in seen:
                continue
            seen.add(mount.user)
            try:
                user_folder = self._root_folder.get_user_folder(mount.user)
            except NotFoundError:
                self._echo(_error(f"warning: no home folder for {mount.user}, skipping"))
                continue
            result[mount.user] = user_folder.get_by_id(file.id)
        return result

    def storage_details(self, mount: MountPoint, node: Node) -> None:
        """Print where node is stored and check that its content exists."""
        storage = mount.storage
        if not storage.is_home:
            self._echo(f"  mounted at: {mount.mount_point}")

        object_store = storage.object_store
        if object_store is not None:
            bucket = object_store.storage_id.split(":")[-1]
            self._echo(f"  bucket: {bucket}")
            if isinstance(node, File):
                self._echo(f"  object id: {storage.get_urn(node.id)}")
                self._check_object_size(node)
        elif not storage.file_exists(node.internal_path):
            self._echo("  " + _error("warning: file not found in storage"))

        if isinstance(mount, ExternalMount):
            self._echo(f"  external storage id: {mount.storage_config.id}")
            self._echo(f"  external type: {mount.storage_config.backend.text}")
        elif isinstance(mount, GroupFolderMount):
            self._echo(f"  groupfolder id: {mount.folder_id}")

    def _check_object_size(self, node: File) -> None:
        try:
            handle = node.fopen("r")
            try:
                size = handle.size
            finally:
                handle.close()
        except Exception:
            logger.debug("Reading object of file %d failed", node.id, exc_info=True)
            self._echo("  " + _error("warning: object not found in bucket"))
            return

        if size != node.size:
            self._echo(
                "  "
                + _error(
                    f"warning: object had a size of {size} but cache entry "
                    f"has a size of {node.size}"
                )
                + ". This should have been automatically repaired"
            )
