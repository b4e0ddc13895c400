"""Tests for health check endpoints."""

import pytest
from httpx import AsyncClient


class TestHealthEndpoint:
    """Tests for the health check endpoint."""

    @pytest.mark.asyncio
    async def test_health_returns_200(self, client: AsyncClient) -> None:
        """Test that health endpoint returns 200 OK."""
        response = await client.get("/health")

        assert response.status_code == 200

    @pytest.mark.asyncio
    async def test_health_returns_correct_structure(self, client: AsyncClient) -> None:
        """Test that health endpoint returns expected structure."""
        response = await client.get("/health")
        data = response.json()

        assert data["status"] == "healthy"
        assert data["version"] == "1.0.0"
        assert "timestamp" in data
        assert "environment" in data

    @pytest.mark.asyncio
    async def test_detailed_health_reports_cache(self, client: AsyncClient) -> None:
        """Detailed health includes the live cache size."""
        from api.dependencies.cards import get_profile_cache

        cache = get_profile_cache()
        cache.clear()
        cache.set("codeforces:tourist", object(), 60)

        response = await client.get("/health/detailed")
        data = response.json()

        assert response.status_code == 200
        assert data["cache_entries"] == 1
        assert data["codeforces_signing"] in (True, False)
        cache.clear()
