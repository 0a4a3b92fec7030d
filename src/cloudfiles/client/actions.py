"""File actions and their registry.

A file action is a command offered for selected nodes in a view. Actions
decide for themselves whether they apply (enabled) and run against an
explicit Session (exec), so no global user state is involved.
"""

from __future__ import annotations

import logging
import posixpath
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from urllib.parse import unquote, urlparse

from cloudfiles.client.session import Session
from cloudfiles.core.permissions import Permission

logger = logging.getLogger(__name__)


@dataclass
class View:
    """A listing context in the files UI."""

    id: str
    name: str = ""


@dataclass
class Node:
    """A file or folder as seen by the client.

    Attributes:
        source: Canonical remote URL of the node.
        permissions: Permission bitmask.
        mime: MIME type.
        owner: User id of the owner.
        mtime: Modification time as a Unix timestamp.
        size: Size in bytes.
    """

    source: str
    permissions: int = Permission.NONE
    mime: str = "application/octet-stream"
    owner: str | None = None
    mtime: int | None = None
    size: int | None = None

    @property
    def basename(self) -> str:
        """Decoded last path segment of the source URL."""
        path = unquote(urlparse(self.source).path).rstrip("/")
        return posixpath.basename(path)


@dataclass
class FileAction:
    """A command that can run on nodes.

    Attributes:
        id: Unique action id.
        display_name: Label for the given nodes and view.
        icon_svg_inline: Inline SVG for the given nodes and view.
        exec: Runs the action on one node.
        enabled: Whether the action applies; always true when unset.
        exec_batch: Runs the action on several nodes.
        order: Sort hint, lower first.
        inline: Whether to render the action next to the node.
    """

    id: str
    display_name: Callable[[Sequence[Node], View], str]
    icon_svg_inline: Callable[[Sequence[Node], View], str]
    exec: Callable[[Node, View, Session], bool | None]
    enabled: Callable[[Sequence[Node], View], bool] | None = None
    exec_batch: Callable[[Sequence[Node], View, Session], list[bool | None]] | None = None
    order: int = 0
    inline: Callable[[Node, View], bool] | None = field(default=None)

    def is_enabled(self, nodes: Sequence[Node], view: View) -> bool:
        """Evaluate the enabled predicate."""
        if self.enabled is None:
            return True
        return self.enabled(nodes, view)


class FileActionRegistry:
    """Ordered collection of file actions keyed by id."""

    def __init__(self) -> None:
        self._actions: dict[str, FileAction] = {}

    def register(self, action: FileAction) -> None:
        """Add an action; a second action with the same id is ignored."""
        if action.id in self._actions:
            logger.error("FileAction %s already registered", action.id)
            return
        self._actions[action.id] = action

    def get(self, action_id: str) -> FileAction:
        """Get an action by id.

        Raises:
            KeyError: If no action has this id.
        """
        return self._actions[action_id]

    def get_all(self) -> list[FileAction]:
        """All actions sorted by order."""
        return sorted(self._actions.values(), key=lambda a: a.order)

    def enabled_for(self, nodes: Sequence[Node], view: View) -> list[FileAction]:
        """Actions that apply to nodes in view, sorted by order."""
        return [a for a in self.get_all() if a.is_enabled(nodes, view)]


_registry = FileActionRegistry()


def get_file_action_registry() -> FileActionRegistry:
    """Return the default registry."""
    return _registry


def register_file_action(action: FileAction) -> None:
    """Register an action in the default registry."""
    _registry.register(action)
