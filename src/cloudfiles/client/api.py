"""WebDAV HTTP client for the file server.

This module provides:
- DavClient: HTTP client able to send arbitrary WebDAV methods
- Exception hierarchy mapping HTTP error statuses
"""

from __future__ import annotations

import logging

import httpx

from cloudfiles.core.config import ServerConfig

logger = logging.getLogger(__name__)


class APIError(Exception):
    """Base exception for API errors."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class AuthenticationError(APIError):
    """Authentication failed."""


class ConflictError(APIError):
    """Destination conflict or failed precondition."""


class NotFoundError(APIError):
    """Resource not found."""


class DavClient:
    """HTTP client for the server's remote.php endpoints."""

    def __init__(self, config: ServerConfig) -> None:
        """Initialize the client.

        Args:
            config: Server connection settings. When a user is set the token
                is sent as its app password, otherwise as a bearer token.
        """
        self._config = config
        if config.user:
            auth: httpx.Auth | None = httpx.BasicAuth(config.user, config.token)
            headers = {}
        else:
            auth = None
            headers = {"Authorization": f"Bearer {config.token}"}
        self._client = httpx.Client(
            timeout=config.timeout,
            verify=config.verify_ssl,
            auth=auth,
            headers=headers,
        )

    @property
    def config(self) -> ServerConfig:
        """Return the connection settings."""
        return self._config

    def close(self) -> None:
        """Close the HTTP client."""
        self._client.close()

    def __enter__(self) -> DavClient:
        """Context manager entry."""
        return self

    def __exit__(self, *args: object) -> None:
        """Context manager exit."""
        self.close()

    def _handle_response(self, response: httpx.Response) -> httpx.Response:
        """Raise the matching APIError for error statuses."""
        if response.status_code == 401:
            raise AuthenticationError("Invalid or expired credentials", 401)
        if response.status_code == 404:
            raise NotFoundError(f"Resource not found: {response.request.url}", 404)
        if response.status_code in (409, 412):
            raise ConflictError(
                f"Conflict on {response.request.url}", response.status_code
            )
        if response.status_code >= 400:
            raise APIError(
                f"{response.request.method} {response.request.url} failed "
                f"with status {response.status_code}",
                response.status_code,
            )
        return response

    def request(
        self,
        method: str,
        url: str,
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        """Send a request with any method.

        Args:
            method: HTTP or WebDAV method (GET, MOVE, PROPFIND...).
            url: Absolute URL.
            headers: Extra request headers.

        Returns:
            The response when its status is not an error.

        Raises:
            APIError: On error status codes.
            httpx.RequestError: On transport failures.
        """
        logger.debug("%s %s", method, url)
        response = self._client.request(method, url, headers=headers)
        return self._handle_response(response)

    def move(self, source: str, destination: str) -> httpx.Response:
        """Move a resource to a new location.

        Args:
            source: URL of the resource.
            destination: Target URL, sent in the Destination header.

        Returns:
            Server response.
        """
        return self.request("MOVE", source, headers={"Destination": destination})
