"""
Integration Tests for Request Context Middleware.

Tests that request context is properly propagated through the API.
"""

import pytest
from httpx import AsyncClient


class TestRequestIdHeader:
    """Tests for X-Request-ID header handling."""

    @pytest.mark.asyncio
    async def test_generates_request_id(self, client: AsyncClient):
        """Should generate X-Request-ID when not provided."""
        response = await client.get("/health")

        assert response.status_code == 200
        # UUID format: 8-4-4-4-12 = 36 characters
        assert len(response.headers["X-Request-ID"]) == 36

    @pytest.mark.asyncio
    async def test_propagates_provided_request_id(self, client: AsyncClient):
        """Should use provided X-Request-ID header."""
        custom_id = "my-custom-request-id-12345"

        response = await client.get("/health", headers={"X-Request-ID": custom_id})

        assert response.headers["X-Request-ID"] == custom_id

    @pytest.mark.asyncio
    async def test_request_id_on_every_endpoint(self, client: AsyncClient):
        for endpoint in ["/", "/health", "/health/ready", "/notes"]:
            response = await client.get(endpoint)
            assert len(response.headers["X-Request-ID"]) == 36, endpoint


class TestResponseTimeHeader:
    """Tests for X-Response-Time header."""

    @pytest.mark.asyncio
    async def test_response_time_is_numeric(self, client: AsyncClient):
        response = await client.get("/health")

        time_header = response.headers["X-Response-Time"]
        assert time_header.endswith("ms")
        assert time_header[:-2].isdigit()

    @pytest.mark.asyncio
    async def test_response_time_on_error(self, client: AsyncClient):
        """Should include response time even on error responses."""
        response = await client.get("/notes/nonexistent-id")

        assert response.status_code == 404
        assert "X-Response-Time" in response.headers


class TestRequestContextInErrors:
    """Tests for request context on error responses."""

    @pytest.mark.asyncio
    async def test_error_response_echoes_request_id_header(self, client: AsyncClient, api):
        """Error bodies stay {"error": str}; the request ID travels in the header."""
        custom_id = "error-test-request-id"

        response = await client.get("/notes/nonexistent", headers={"X-Request-ID": custom_id})

        api.assert_error(response, 404, "Not found")
        assert response.headers["X-Request-ID"] == custom_id

    @pytest.mark.asyncio
    async def test_validation_error_echoes_request_id_header(self, client: AsyncClient, api):
        custom_id = "validation-error-request-id"

        response = await client.patch(
            "/notes/anything",
            json={},
            headers={"X-Request-ID": custom_id},
        )

        api.assert_validation_error(response)
        assert response.headers["X-Request-ID"] == custom_id

    @pytest.mark.asyncio
    async def test_error_message_follows_accept_language(self, client: AsyncClient, api):
        response = await client.get("/notes/missing", headers={"Accept-Language": "zh-CN"})

        api.assert_error(response, 404, "未找到")
