"""Tests for the trashbin restore action."""

from __future__ import annotations

from collections.abc import Generator

import httpx
import pytest

from cloudfiles.client.actions import Node, View, get_file_action_registry
from cloudfiles.client.api import ConflictError, DavClient
from cloudfiles.client.session import Session, User
from cloudfiles.client.trashbin import (
    HISTORY_ICON_SVG,
    TRASHBIN_VIEW_ID,
    restore_action,
    restore_destination,
)
from cloudfiles.core.config import ServerConfig
from cloudfiles.core.permissions import Permission

SOURCE = "http://test/remote.php/dav/trashbin/alice/trash/report.txt.d1700000000"
TRASH_VIEW = View(id=TRASHBIN_VIEW_ID, name="Deleted files")


def trashed(name: str = "report.txt.d1700000000", permissions: int = Permission.ALL) -> Node:
    """Create a node in alice's trash."""
    return Node(
        source=f"http://test/remote.php/dav/trashbin/alice/trash/{name}",
        permissions=permissions,
    )


@pytest.fixture
def session() -> Generator[Session, None, None]:
    """Session authenticated as alice."""
    config = ServerConfig(server_url="http://test", token="app-password", user="alice")
    with Session.from_config(config) as s:
        yield s


class TestRegistration:
    """Tests for the action metadata."""

    def test_registered_in_default_registry(self) -> None:
        """Importing the module should register the action."""
        assert get_file_action_registry().get("restore") is restore_action

    def test_display_metadata(self) -> None:
        """Label, icon, order and inline hint."""
        node = trashed()
        assert restore_action.display_name([node], TRASH_VIEW) == "Restore"
        assert restore_action.icon_svg_inline([node], TRASH_VIEW) == HISTORY_ICON_SVG
        assert restore_action.order == 1
        assert restore_action.inline is not None
        assert restore_action.inline(node, TRASH_VIEW) is True


class TestEnabled:
    """Tests for the enabled predicate."""

    def test_disabled_outside_trashbin(self) -> None:
        """Any other view disables the action, whatever the permissions."""
        assert restore_action.is_enabled([trashed()], View(id="files")) is False

    def test_disabled_for_empty_selection(self) -> None:
        """No nodes, no restore."""
        assert restore_action.is_enabled([], TRASH_VIEW) is False

    def test_enabled_when_all_readable(self) -> None:
        """Every node readable in the trashbin view enables the action."""
        nodes = [trashed("a"), trashed("b", Permission.READ)]
        assert restore_action.is_enabled(nodes, TRASH_VIEW) is True

    def test_disabled_when_one_not_readable(self) -> None:
        """A single node without READ disables the action."""
        nodes = [trashed("a"), trashed("b", Permission.UPDATE | Permission.DELETE)]
        assert restore_action.is_enabled(nodes, TRASH_VIEW) is False


class TestExec:
    """Tests for exec and exec_batch."""

    def test_moves_to_restore_folder(self, httpx_mock, session: Session) -> None:  # type: ignore[no-untyped-def]
        """exec should MOVE the source into the user's restore folder."""
        httpx_mock.add_response(method="MOVE", url=SOURCE, status_code=201)

        assert restore_action.exec(trashed(), TRASH_VIEW, session) is True

        request = httpx_mock.get_request()
        assert request.method == "MOVE"
        assert str(request.url) == SOURCE
        destination = request.headers["destination"]
        assert destination == (
            "http://test/remote.php/dav/trashbin/alice/restore/report.txt.d1700000000"
        )
        assert "/alice/" in destination
        assert destination.endswith("/restore/report.txt.d1700000000")

    def test_error_status_propagates(self, httpx_mock, session: Session) -> None:  # type: ignore[no-untyped-def]
        """HTTP errors should reach the caller."""
        httpx_mock.add_response(method="MOVE", url=SOURCE, status_code=409)

        with pytest.raises(ConflictError):
            restore_action.exec(trashed(), TRASH_VIEW, session)

    def test_transport_error_propagates(self, httpx_mock, session: Session) -> None:  # type: ignore[no-untyped-def]
        """Transport errors should not be swallowed."""
        httpx_mock.add_exception(httpx.ConnectError("Connection refused"))

        with pytest.raises(httpx.ConnectError):
            restore_action.exec(trashed(), TRASH_VIEW, session)

    def test_batch_restores_each_node(self, httpx_mock, session: Session) -> None:  # type: ignore[no-untyped-def]
        """exec_batch should restore nodes in order."""
        for name in ("a.d1", "b.d2"):
            httpx_mock.add_response(
                method="MOVE",
                url=f"http://test/remote.php/dav/trashbin/alice/trash/{name}",
                status_code=201,
            )

        assert restore_action.exec_batch is not None
        result = restore_action.exec_batch([trashed("a.d1"), trashed("b.d2")], TRASH_VIEW, session)

        assert result == [True, True]
        destinations = [r.headers["destination"] for r in httpx_mock.get_requests()]
        assert [d.rsplit("/", 1)[-1] for d in destinations] == ["a.d1", "b.d2"]


class TestRestoreDestination:
    """Tests for restore_destination()."""

    def test_uses_session_user(self) -> None:
        """The uid comes from the session, not from the node."""
        config = ServerConfig(server_url="https://cloud.test", token="t")
        session = Session(config=config, client=DavClient(config), user=User(uid="carol"))
        try:
            assert restore_destination(session, trashed("x.d1")) == (
                "https://cloud.test/remote.php/dav/trashbin/carol/restore/x.d1"
            )
        finally:
            session.close()

    def test_name_is_encoded(self) -> None:
        """Names with spaces are percent-encoded in the URL."""
        config = ServerConfig(server_url="https://cloud.test", token="t", user="alice")
        with Session.from_config(config) as session:
            node = Node(source="https://cloud.test/remote.php/dav/trashbin/alice/trash/My%20File.d1")
            assert restore_destination(session, node).endswith("/restore/My%20File.d1")

    def test_anonymous_session_is_malformed(self, caplog: pytest.LogCaptureFixture) -> None:
        """Without a user the destination cannot name a trashbin."""
        config = ServerConfig(server_url="https://cloud.test", token="t")
        with Session.from_config(config) as session:
            destination = restore_destination(session, trashed("x.d1"))

        assert destination == "https://cloud.test/remote.php/dav/trashbin/None/restore/x.d1"
        assert "No authenticated user" in caplog.text
