"""Synchronous client for the Jira MCP server.

:class:`MCPClient` wraps :class:`httpx.Client` and speaks the server's three
endpoints:

- ``POST /create_jira_issue`` -- expects ``201 Created``.
- ``POST /search_jira_issues`` -- expects ``200 OK``.
- ``GET /jira_issue/{key}`` -- expects ``200 OK``.

Any other status is mapped to :class:`~ticketron.exceptions.ServerError`,
using the ``{"error": "..."}`` body when the server sends one. Network
failures become :class:`~ticketron.exceptions.ConnectionError_`.
"""

from __future__ import annotations

from typing import Any, Optional, TypeVar
from urllib.parse import quote, urlsplit

import httpx
from pydantic import BaseModel, ValidationError

from ticketron.exceptions import ConfigError, ConnectionError_, ResponseDecodeError, ServerError
from ticketron.models import (
    CreateIssueRequest,
    CreateIssueResponse,
    ErrorResponse,
    Issue,
    SearchIssuesRequest,
    SearchIssuesResponse,
)
from ticketron.output import get_output

_Model = TypeVar("_Model", bound=BaseModel)


class MCPClient:
    """HTTP client for the Jira MCP server.

    Must be used as a context manager so that the underlying transport is
    properly opened and closed.

    Args:
        base_url: Server root, e.g. ``http://localhost:8080``.
        timeout: Request timeout in seconds.
        transport: Optional httpx transport, used by tests.

    Raises:
        ConfigError: If *base_url* is empty or lacks a scheme or host.

    Example::

        with MCPClient(config.mcp_server_url) as mcp:
            result = mcp.search_issues(SearchIssuesRequest(jql="project = BE"))
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        if not base_url:
            raise ConfigError("MCP server URL is not configured (mcp_server_url)")
        parts = urlsplit(base_url)
        if not parts.scheme or not parts.netloc:
            raise ConfigError(f"Invalid MCP server URL: {base_url!r}")
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport
        self._client: Optional[httpx.Client] = None

    def __enter__(self) -> MCPClient:
        self._client = httpx.Client(
            base_url=self._base_url,
            timeout=self._timeout,
            headers={"Accept": "application/json"},
            transport=self._transport,
        )
        return self

    def __exit__(self, *args: object) -> None:
        if self._client:
            self._client.close()
            self._client = None

    # ------------------------------------------------------------------ #
    # Endpoints
    # ------------------------------------------------------------------ #

    def create_issue(self, request: CreateIssueRequest) -> CreateIssueResponse:
        """Create a Jira issue.

        Raises:
            ServerError: If the server does not answer ``201``.
            ResponseDecodeError: If the success body cannot be decoded.
            ConnectionError_: On network failure.
        """
        response = self._send("POST", "/create_jira_issue", json_body=request.model_dump(by_alias=True))
        self._check_status(response, 201)
        return self._decode(response, CreateIssueResponse)

    def search_issues(self, request: SearchIssuesRequest) -> SearchIssuesResponse:
        """Run a JQL search. Unset paging fields are omitted from the body."""
        body = request.model_dump(by_alias=True, exclude_none=True)
        response = self._send("POST", "/search_jira_issues", json_body=body)
        self._check_status(response, 200)
        return self._decode(response, SearchIssuesResponse)

    def get_issue(self, key: str) -> Issue:
        """Fetch a single issue by key."""
        response = self._send("GET", f"/jira_issue/{quote(key, safe='')}")
        self._check_status(response, 200)
        return self._decode(response, Issue)

    # ------------------------------------------------------------------ #
    # Private helpers
    # ------------------------------------------------------------------ #

    def _send(self, method: str, path: str, json_body: Optional[Any] = None) -> httpx.Response:
        assert self._client is not None, "Client not initialised -- use as context manager"
        output = get_output()
        output.debug(f"{method} {self._base_url}{path} body={json_body}")
        try:
            response = self._client.request(method, path, json=json_body)
        except httpx.TransportError as exc:
            raise ConnectionError_(f"Cannot reach MCP server at {self._base_url}: {exc}") from exc
        output.debug(f"HTTP {response.status_code} {response.text[:500]}")
        return response

    @staticmethod
    def _check_status(response: httpx.Response, expected: int) -> None:
        """Raise a :class:`ServerError` unless the status is *expected*."""
        status = response.status_code
        if status == expected:
            return
        try:
            message = ErrorResponse.model_validate_json(response.content).error
        except ValidationError:
            message = ""
        if message:
            raise ServerError(f"MCP server error: {message} (status {status})", status_code=status)
        raise ServerError(
            f"MCP server returned an unparseable error (status {status})",
            status_code=status,
            unparseable=True,
        )

    @staticmethod
    def _decode(response: httpx.Response, model: type[_Model]) -> _Model:
        try:
            return model.model_validate_json(response.content)
        except ValidationError as exc:
            raise ResponseDecodeError(
                f"Failed to decode MCP server response: {exc}", status_code=response.status_code
            ) from exc
