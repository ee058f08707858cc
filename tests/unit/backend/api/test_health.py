"""
Unit Tests for Health Check Endpoints.

Tests the health check functionality including:
- Service banner (/)
- Liveness check (/health)
- Readiness check (/health/ready)
- Database connectivity check
"""

import json

import pytest
from unittest.mock import AsyncMock, patch

from fastapi.responses import JSONResponse
from sqlalchemy.exc import OperationalError


class TestRoot:
    """Tests for the service banner."""

    @pytest.mark.asyncio
    async def test_banner_names_the_service(self):
        from nicenote.backend.api.health import root

        result = await root()

        assert result == {"status": "ok", "message": "NiceNote API is running"}


class TestHealthCheck:
    """Tests for the liveness health check endpoint."""

    @pytest.mark.asyncio
    async def test_health_returns_healthy(self):
        from nicenote.backend.api.health import health_check

        assert await health_check() == {"status": "healthy"}


class TestCheckDatabase:
    """Tests for the database health check function."""

    @pytest.mark.asyncio
    async def test_returns_healthy_on_successful_query(self, mock_db_session):
        """Should return healthy with latency when the database answers."""
        from nicenote.backend.api.health import check_database

        result = await check_database(mock_db_session)

        assert result["status"] == "healthy"
        assert isinstance(result["latency_ms"], int)
        mock_db_session.execute.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_returns_unhealthy_on_database_error(self, mock_db_session):
        """Should return unhealthy with the error when the query fails."""
        from nicenote.backend.api.health import check_database

        mock_db_session.execute.side_effect = OperationalError(
            "SELECT 1", {}, Exception("unable to open database file")
        )

        result = await check_database(mock_db_session)

        assert result["status"] == "unhealthy"
        assert "unable to open database file" in result["error"]

    @pytest.mark.asyncio
    async def test_returns_unhealthy_on_os_error(self, mock_db_session):
        from nicenote.backend.api.health import check_database

        mock_db_session.execute.side_effect = OSError("disk I/O error")

        result = await check_database(mock_db_session)

        assert result["status"] == "unhealthy"


class TestReadinessCheck:
    """Tests for the readiness endpoint handler."""

    @pytest.mark.asyncio
    async def test_ready_when_database_healthy(self, mock_db_session):
        from nicenote.backend.api.health import readiness_check

        result = await readiness_check(mock_db_session)

        assert isinstance(result, dict)
        assert result["status"] == "healthy"
        assert result["checks"]["database"]["status"] == "healthy"
        assert result["timestamp"].endswith("+00:00")

    @pytest.mark.asyncio
    async def test_503_when_database_unhealthy(self, mock_db_session):
        from nicenote.backend.api.health import readiness_check

        mock_db_session.execute.side_effect = OSError("gone")

        result = await readiness_check(mock_db_session)

        assert isinstance(result, JSONResponse)
        assert result.status_code == 503
        body = json.loads(result.body)
        assert body["status"] == "unhealthy"
        assert body["checks"]["database"]["error"] == "gone"

    @pytest.mark.asyncio
    async def test_503_when_database_check_times_out(self, mock_db_session):
        from nicenote.backend.api.health import readiness_check

        with patch(
            "nicenote.backend.api.health.check_database",
            AsyncMock(side_effect=TimeoutError()),
        ):
            result = await readiness_check(mock_db_session)

        assert result.status_code == 503
        assert "timed out" in json.loads(result.body)["checks"]["database"]["error"]
