"""Restore action for the trashbin view.

Importing this module registers the action in the default registry.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from urllib.parse import quote

from cloudfiles.client.actions import FileAction, Node, View, register_file_action
from cloudfiles.client.session import Session
from cloudfiles.core.l10n import translate
from cloudfiles.core.permissions import Permission

logger = logging.getLogger(__name__)

TRASHBIN_VIEW_ID = "trashbin"

# mdi "history" icon
HISTORY_ICON_SVG = (
    '<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 24 24">'
    '<path d="M13.5,8H12V13L16.28,15.54L17,14.33L13.5,12.25V8M13,3A9,9 0 0,0 '
    "4,12H1L4.96,16.03L9,12H6A7,7 0 0,1 13,5A7,7 0 0,1 20,12A7,7 0 0,1 13,19"
    "C11.07,19 9.32,18.21 8.06,16.94L6.64,18.36C8.27,20 10.5,21 13,21A9,9 0 0,0 "
    '22,12A9,9 0 0,0 13,3" /></svg>'
)


def restore_destination(session: Session, node: Node) -> str:
    """Build the URL a trashed node is moved to in order to restore it."""
    uid = session.user.uid if session.user else None
    if uid is None:
        logger.warning("No authenticated user, restore of %s will be rejected", node.basename)
    return session.config.remote_url(f"dav/trashbin/{uid}/restore/{quote(node.basename)}")


def _display_name(nodes: Sequence[Node], view: View) -> str:
    return translate("files_trashbin", "Restore")


def _icon(nodes: Sequence[Node], view: View) -> str:
    return HISTORY_ICON_SVG


def _enabled(nodes: Sequence[Node], view: View) -> bool:
    # Only available in the trashbin view
    if view.id != TRASHBIN_VIEW_ID:
        return False

    # Only available if all nodes have read permission
    return len(nodes) > 0 and all(
        (node.permissions & Permission.READ) != 0 for node in nodes
    )


def _exec(node: Node, view: View, session: Session) -> bool:
    # No error handling here, the caller reports failures
    session.client.move(node.source, restore_destination(session, node))
    logger.info("Restored %s", node.basename)
    return True


def _exec_batch(nodes: Sequence[Node], view: View, session: Session) -> list[bool | None]:
    return [_exec(node, view, session) for node in nodes]


restore_action = FileAction(
    id="restore",
    display_name=_display_name,
    icon_svg_inline=_icon,
    enabled=_enabled,
    exec=_exec,
    exec_batch=_exec_batch,
    order=1,
    inline=lambda node, view: True,
)

register_file_action(restore_action)
