"""
Integration Test Fixtures.

Fixtures for integration tests - uses a real database and the real app.
These fixtures build on the root conftest.py database fixtures.
"""

from collections.abc import AsyncGenerator
from typing import Any

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from nicenote.backend.core.database import get_db_session
from nicenote.backend.main import create_app
from nicenote.client.api import NotesApiClient


# =============================================================================
# App and Client Fixtures
# =============================================================================


@pytest.fixture
def app(db_session: AsyncSession) -> FastAPI:
    """
    Create the application with the database session overridden.

    Every request in the test shares the test session, which is rolled back
    afterwards.
    """

    async def override_get_db_session() -> AsyncGenerator[AsyncSession, None]:
        yield db_session

    application = create_app()
    application.dependency_overrides[get_db_session] = override_get_db_session
    yield application
    application.dependency_overrides.clear()


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """
    Create a raw HTTP test client.

    Usage:
        async def test_health_endpoint(client: AsyncClient):
            response = await client.get("/health")
            assert response.status_code == 200
    """
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as test_client:
        yield test_client


@pytest.fixture
async def notes_api(app: FastAPI) -> AsyncGenerator[NotesApiClient, None]:
    """NotesApiClient talking to the in-process app."""
    api_client = NotesApiClient(
        base_url="http://test",
        timeout=5.0,
        transport=ASGITransport(app=app),
    )
    yield api_client
    await api_client.close()


# =============================================================================
# API Response Assertion Helpers
# =============================================================================


class ApiAssertions:
    """Helper class for API response assertions."""

    @staticmethod
    def assert_ok(response: Any, expected_status: int = 200) -> Any:
        """
        Assert API response is successful.

        Returns:
            Response JSON data
        """
        assert response.status_code == expected_status, (
            f"Expected status {expected_status}, got {response.status_code}: "
            f"{response.text}"
        )
        return response.json()

    @staticmethod
    def assert_error(
        response: Any,
        expected_status: int,
        expected_message: str | None = None,
    ) -> dict[str, Any]:
        """
        Assert API response is an error with the {"error": str} body.

        Returns:
            Response JSON data
        """
        assert response.status_code == expected_status, (
            f"Expected status {expected_status}, got {response.status_code}: "
            f"{response.text}"
        )
        data = response.json()
        assert set(data) == {"error"}, f"Unexpected error body: {data}"
        assert isinstance(data["error"], str)

        if expected_message:
            assert data["error"] == expected_message, (
                f"Expected error {expected_message!r}, got {data['error']!r}"
            )

        return data

    @staticmethod
    def assert_validation_error(response: Any) -> dict[str, Any]:
        """Assert API response is a request validation error (422)."""
        return ApiAssertions.assert_error(response, 422, "Invalid request")


@pytest.fixture
def api() -> ApiAssertions:
    """Provide API assertion helpers."""
    return ApiAssertions()
