"""Tests for the WebDAV HTTP client."""

import httpx
import pytest

from cloudfiles.client.api import (
    APIError,
    AuthenticationError,
    ConflictError,
    DavClient,
    NotFoundError,
)
from cloudfiles.core.config import ServerConfig

SOURCE = "http://test/remote.php/dav/trashbin/alice/trash/a.txt.d1"
DESTINATION = "http://test/remote.php/dav/trashbin/alice/restore/a.txt.d1"


def make_config(user: str | None = "alice") -> ServerConfig:
    """Create a ServerConfig for testing."""
    return ServerConfig(server_url="http://test", token="app-password", user=user)


class TestDavClient:
    """Tests for DavClient."""

    def test_move_sends_destination(self, httpx_mock) -> None:  # type: ignore[no-untyped-def]
        """move() should send MOVE with the Destination header."""
        httpx_mock.add_response(method="MOVE", url=SOURCE, status_code=201)

        with DavClient(make_config()) as client:
            response = client.move(SOURCE, DESTINATION)

        assert response.status_code == 201
        request = httpx_mock.get_request()
        assert request.method == "MOVE"
        assert request.headers["destination"] == DESTINATION

    def test_basic_auth_with_user(self, httpx_mock) -> None:  # type: ignore[no-untyped-def]
        """A configured user should authenticate with basic auth."""
        httpx_mock.add_response(method="PROPFIND", url=SOURCE, status_code=207)

        with DavClient(make_config()) as client:
            client.request("PROPFIND", SOURCE)

        assert httpx_mock.get_request().headers["authorization"].startswith("Basic ")

    def test_bearer_without_user(self, httpx_mock) -> None:  # type: ignore[no-untyped-def]
        """Without a user the token should be sent as bearer token."""
        httpx_mock.add_response(method="GET", url=SOURCE)

        with DavClient(make_config(user=None)) as client:
            client.request("GET", SOURCE)

        assert httpx_mock.get_request().headers["authorization"] == "Bearer app-password"

    @pytest.mark.parametrize(
        ("status_code", "error"),
        [
            (401, AuthenticationError),
            (404, NotFoundError),
            (409, ConflictError),
            (412, ConflictError),
            (500, APIError),
        ],
    )
    def test_error_status_raises(self, httpx_mock, status_code: int, error: type[APIError]) -> None:  # type: ignore[no-untyped-def]
        """Error statuses should raise the matching APIError."""
        httpx_mock.add_response(method="MOVE", url=SOURCE, status_code=status_code)

        with DavClient(make_config()) as client, pytest.raises(error) as exc_info:
            client.move(SOURCE, DESTINATION)

        assert exc_info.value.status_code == status_code

    def test_transport_error_propagates(self, httpx_mock) -> None:  # type: ignore[no-untyped-def]
        """Transport failures should surface as httpx errors."""
        httpx_mock.add_exception(httpx.ConnectError("Connection refused"))

        with DavClient(make_config()) as client, pytest.raises(httpx.ConnectError):
            client.move(SOURCE, DESTINATION)
