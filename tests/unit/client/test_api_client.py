"""
Unit Tests for NotesApiClient.

Every request goes through httpx.MockTransport; nothing touches the network.
"""

from unittest.mock import patch

import httpx
import pytest

from nicenote.client.api import (
    ClientApiError,
    InvalidResponseError,
    NotesApiClient,
    NotFoundApiError,
    ServerApiError,
    raise_for_status,
)

WIRE_NOTE = {
    "id": "n1",
    "title": "Groceries",
    "content": "- milk\n- eggs",
    "summary": "milk eggs",
    "createdAt": "2026-02-14T12:00:00+00:00",
    "updatedAt": "2026-02-14T12:00:00+00:00",
}


def _wire_note(**fields) -> dict:
    return {**WIRE_NOTE, **fields}


def _json(status: int, body) -> httpx.Response:
    return httpx.Response(status, json=body)


class TestRaiseForStatus:
    """Tests for mapping error statuses onto exception classes."""

    def test_success_passes(self):
        raise_for_status(httpx.Response(204))

    def test_not_found(self):
        with pytest.raises(NotFoundApiError) as exc_info:
            raise_for_status(_json(404, {"error": "Not found"}))

        assert exc_info.value.status == 404
        assert exc_info.value.message == "Not found"

    def test_client_error(self):
        with pytest.raises(ClientApiError) as exc_info:
            raise_for_status(_json(422, {"error": "Invalid request"}))

        assert not isinstance(exc_info.value, NotFoundApiError)
        assert exc_info.value.message == "Invalid request"

    def test_server_error(self):
        with pytest.raises(ServerApiError) as exc_info:
            raise_for_status(_json(500, {"error": "Internal server error"}))

        assert exc_info.value.status == 500

    def test_body_without_error_uses_reason(self):
        with pytest.raises(ServerApiError) as exc_info:
            raise_for_status(httpx.Response(502, text="<html>bad gateway</html>"))

        assert exc_info.value.message == "Bad Gateway"


class TestRequests:
    """Tests for request shape: paths, params, headers, bodies."""

    @pytest.mark.asyncio
    async def test_sends_frontend_header(self, mock_api):
        api, transport = mock_api(lambda request: _json(200, _wire_note()))

        await api.get_note("n1")

        assert transport.requests[0].headers["X-Frontend-ID"] == "client"

    @pytest.mark.asyncio
    async def test_escapes_note_id(self, mock_api):
        api, transport = mock_api(lambda request: _json(200, _wire_note()))

        await api.get_note("a/b")

        assert transport.requests[0].url.raw_path == b"/notes/a%2Fb"

    @pytest.mark.asyncio
    async def test_first_page_has_no_cursor(self, mock_api):
        body = {"data": [_wire_note()], "nextCursor": None, "nextCursorId": None}
        api, transport = mock_api(lambda request: _json(200, body))

        result = await api.list_notes(limit=20)

        params = transport.requests[0].url.params
        assert "cursor" not in params
        assert params["limit"] == "20"
        assert [item.id for item in result.data] == ["n1"]
        assert result.has_more is False

    @pytest.mark.asyncio
    async def test_cursor_pair_sent_verbatim(self, mock_api):
        body = {"data": [], "nextCursor": None, "nextCursorId": None}
        api, transport = mock_api(lambda request: _json(200, body))

        await api.list_notes("2026-02-14T12:00:00+00:00", "n9")

        params = transport.requests[0].url.params
        assert params["cursor"] == "2026-02-14T12:00:00+00:00"
        assert params["cursorId"] == "n9"

    @pytest.mark.asyncio
    async def test_half_cursor_is_dropped(self, mock_api):
        body = {"data": [], "nextCursor": None, "nextCursorId": None}
        api, transport = mock_api(lambda request: _json(200, body))

        await api.list_notes("2026-02-14T12:00:00+00:00", None)

        assert "cursor" not in transport.requests[0].url.params

    @pytest.mark.asyncio
    async def test_create_omits_unset_fields(self, mock_api):
        api, transport = mock_api(lambda request: _json(201, _wire_note()))

        await api.create_note(title="Groceries")

        assert transport.requests[0].method == "POST"
        assert transport.body() == {"title": "Groceries"}

    @pytest.mark.asyncio
    async def test_update_sends_patch(self, mock_api):
        api, transport = mock_api(lambda request: _json(200, _wire_note(title="New")))

        note = await api.update_note("n1", {"title": "New"})

        assert transport.requests[0].method == "PATCH"
        assert transport.body() == {"title": "New"}
        assert note.title == "New"

    @pytest.mark.asyncio
    async def test_delete_returns_true(self, mock_api):
        api, transport = mock_api(lambda request: _json(200, {"success": True}))

        assert await api.delete_note("n1") is True
        assert transport.requests[0].method == "DELETE"


class TestResponses:
    """Tests for error and validation handling of responses."""

    @pytest.mark.asyncio
    async def test_delete_missing_raises(self, mock_api):
        api, _ = mock_api(lambda request: _json(404, {"error": "Not found"}))

        with pytest.raises(NotFoundApiError):
            await api.delete_note("gone")

    @pytest.mark.asyncio
    async def test_malformed_body_raises(self, mock_api):
        api, _ = mock_api(lambda request: _json(200, {"id": "n1"}))

        with pytest.raises(InvalidResponseError):
            await api.get_note("n1")

    @pytest.mark.asyncio
    async def test_non_json_body_raises(self, mock_api):
        api, _ = mock_api(lambda request: httpx.Response(200, text="ok"))

        with pytest.raises(InvalidResponseError):
            await api.get_note("n1")

    @pytest.mark.asyncio
    async def test_transport_error_propagates(self, mock_api):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        api, _ = mock_api(handler)

        with pytest.raises(httpx.ConnectError):
            await api.list_notes()


class TestLifecycle:
    """Tests for construction and closing."""

    def test_defaults_come_from_config(self):
        with patch(
            "nicenote.client.api.get_server_base_url",
            return_value=("http://localhost:8000", 10.0),
        ):
            api = NotesApiClient()

        assert api.base_url == "http://localhost:8000"
        assert api.timeout == 10.0

    def test_strips_trailing_slash(self):
        assert NotesApiClient("http://test/", 1.0).base_url == "http://test"

    @pytest.mark.asyncio
    async def test_close_then_reuse(self, mock_api):
        api, transport = mock_api(lambda request: _json(200, _wire_note()))

        async with api:
            await api.get_note("n1")
        await api.get_note("n1")

        assert len(transport.requests) == 2
