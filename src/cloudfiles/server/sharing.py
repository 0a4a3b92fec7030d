"""Shares as seen by share mounts."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum

from cloudfiles.core.permissions import Permission


class ShareType(IntEnum):
    """Recipient kind of a share."""

    USER = 0
    GROUP = 1
    USERGROUP = 2
    LINK = 3
    EMAIL = 4
    REMOTE = 6
    CIRCLE = 7
    GUEST = 8
    REMOTE_GROUP = 9
    ROOM = 10
    DECK = 12


# Share types reaching the recipient through an intermediate entity
_MEDIATED_SHARE_TYPES = {
    ShareType.GROUP: "group",
    ShareType.CIRCLE: "circle",
    ShareType.DECK: "deck",
    ShareType.ROOM: "room",
}


@dataclass
class Share:
    """A sharing relation between a node and a recipient."""

    id: int
    share_type: int
    shared_by: str
    shared_with: str
    share_owner: str
    file_id: int
    permissions: int = Permission.READ


def format_share_type(share: Share) -> str | None:
    """Name of the group, circle, deck or room type of a share, else None."""
    return _MEDIATED_SHARE_TYPES.get(share.share_type)
