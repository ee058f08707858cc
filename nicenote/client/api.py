"""
HTTP Client for the Notes API.

Provides the async transport used by the editor client and the CLI.
All requests include an X-Frontend-ID header for log routing.
"""

from typing import Any, TypeVar
from urllib.parse import quote

import httpx
from pydantic import BaseModel, ValidationError

from nicenote.backend.core.config import get_server_base_url
from nicenote.backend.core.logging import get_logger, log_with_source
from nicenote.client.models import Note, NotesPage

logger = get_logger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


class NotesClientError(Exception):
    """Base class for errors raised by NotesApiClient."""


class ApiRequestError(NotesClientError):
    """The server answered with an error status."""

    def __init__(self, status: int, message: str) -> None:
        self.status = status
        self.message = message
        super().__init__(f"{status}: {message}")


class ClientApiError(ApiRequestError):
    """4xx response. Retrying the same request will not help."""


class NotFoundApiError(ClientApiError):
    """404 response."""


class ServerApiError(ApiRequestError):
    """5xx response."""


class InvalidResponseError(NotesClientError):
    """The response body did not match the expected shape."""


def _note_path(note_id: str) -> str:
    return f"/notes/{quote(note_id, safe='')}"


def _error_message(response: httpx.Response) -> str:
    """Pull the display string out of an error body, if there is one."""
    try:
        body = response.json()
    except ValueError:
        return response.reason_phrase or f"HTTP {response.status_code}"
    if isinstance(body, dict) and isinstance(body.get("error"), str):
        return body["error"]
    return response.reason_phrase or f"HTTP {response.status_code}"


def raise_for_status(response: httpx.Response) -> None:
    """
    Convert an error response into the matching ApiRequestError subclass.

    Raises:
        NotFoundApiError: 404
        ClientApiError: Other 4xx
        ServerApiError: 5xx
    """
    status = response.status_code
    if status < 400:
        return
    message = _error_message(response)
    if status == 404:
        raise NotFoundApiError(status, message)
    if status < 500:
        raise ClientApiError(status, message)
    raise ServerApiError(status, message)


class NotesApiClient:
    """
    HTTP client for the Notes API.

    Features:
    - Base URL and timeout from application.yaml unless given explicitly
    - X-Frontend-ID header for log routing
    - Structured logging of requests/responses
    - Typed, validated responses

    Usage:
        async with NotesApiClient() as api:
            page = await api.list_notes()
            note = await api.update_note(page.data[0].id, {"title": "Renamed"})
    """

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        frontend: str = "client",
    ) -> None:
        """
        Initialize the API client.

        Args:
            base_url: API base URL. If None, reads from config/settings/application.yaml.
            timeout: Request timeout in seconds. If None, reads from config/settings/application.yaml.
            transport: Optional httpx transport (ASGITransport, MockTransport, ...)
            frontend: Value sent as X-Frontend-ID
        """
        if base_url is None or timeout is None:
            config_base_url, config_timeout = get_server_base_url()
            base_url = base_url or config_base_url
            timeout = timeout if timeout is not None else config_timeout

        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.frontend = frontend
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> "NotesApiClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                headers={"X-Frontend-ID": self.frontend},
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
        self._client = None

    async def request(
        self,
        method: str,
        path: str,
        **kwargs: Any,
    ) -> httpx.Response:
        """
        Make an HTTP request to the backend and return the raw response.

        Raises:
            httpx.TransportError: On connection or timeout failure
        """
        client = self._get_client()

        log_with_source(logger, "client", "debug", "API request", method=method, path=path)

        try:
            response = await client.request(method, path, **kwargs)
        except httpx.TransportError as e:
            log_with_source(
                logger,
                "client",
                "warning",
                "API request failed",
                method=method,
                path=path,
                error=str(e),
            )
            raise

        log_with_source(
            logger,
            "client",
            "debug",
            "API response",
            method=method,
            path=path,
            status_code=response.status_code,
        )
        return response

    async def _call(
        self,
        method: str,
        path: str,
        model: type[ModelT],
        **kwargs: Any,
    ) -> ModelT:
        """Send a request, map error statuses, and validate the body."""
        response = await self.request(method, path, **kwargs)
        raise_for_status(response)
        try:
            return model.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            raise InvalidResponseError(
                f"Invalid {model.__name__} from {method} {path}"
            ) from e

    async def list_notes(
        self,
        cursor: str | None = None,
        cursor_id: str | None = None,
        limit: int | None = None,
    ) -> NotesPage:
        """Fetch one page of notes. Omit the cursor for the first page."""
        params: dict[str, Any] = {}
        if cursor and cursor_id:
            params["cursor"] = cursor
            params["cursorId"] = cursor_id
        if limit is not None:
            params["limit"] = limit
        return await self._call("GET", "/notes", NotesPage, params=params)

    async def get_note(self, note_id: str) -> Note:
        """Fetch a single note."""
        return await self._call("GET", _note_path(note_id), Note)

    async def create_note(self, title: str | None = None, content: str | None = None) -> Note:
        """Create a note. Omitted fields take the server defaults."""
        body: dict[str, Any] = {}
        if title is not None:
            body["title"] = title
        if content is not None:
            body["content"] = content
        return await self._call("POST", "/notes", Note, json=body)

    async def update_note(self, note_id: str, updates: dict[str, Any]) -> Note:
        """Send a partial update (title and/or content)."""
        return await self._call("PATCH", _note_path(note_id), Note, json=updates)

    async def delete_note(self, note_id: str) -> bool:
        """Delete a note. Raises NotFoundApiError if it does not exist."""
        response = await self.request("DELETE", _note_path(note_id))
        raise_for_status(response)
        return True
