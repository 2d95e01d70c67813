"""Tests for POST /requests."""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest
from httpx import AsyncClient

from tiered_breaker.exceptions import StorageUnavailable


class TestSubmitRequest:
    """Tests for the service request endpoint."""

    async def test_clean_request_returns_200(self, client: AsyncClient) -> None:
        """GIVEN an empty breaker
        WHEN a request without the error flag is posted
        THEN the full capacity handler answers 200.
        """
        response = await client.post("/requests", json={"error": False})

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == 200
        assert body["tier"] == 1
        assert body["message"] == "Full Capacity"
        assert body["breaker"]["action"] == "SUCCESS"

    async def test_missing_body_is_clean_request(self, client: AsyncClient) -> None:
        response = await client.post("/requests")

        assert response.status_code == 200
        assert response.json()["message"] == "Full Capacity"

    async def test_extra_fields_are_ignored(self, client: AsyncClient) -> None:
        response = await client.post(
            "/requests", json={"message": "Test payload", "timestamp": "now", "error": False}
        )
        assert response.status_code == 200

    async def test_error_flag_returns_500_outcome(self, client: AsyncClient) -> None:
        response = await client.post("/requests", json={"error": True})

        assert response.status_code == 500
        body = response.json()
        assert body["message"] == "Internal Server Error"
        assert body["breaker"]["action"] == "FAILURE"
        assert body["breaker"]["error_count"] == 1

    @pytest.mark.parametrize("value", ["true", 1, "yes"])
    async def test_non_boolean_error_flag_rejected(self, client: AsyncClient, value) -> None:
        response = await client.post("/requests", json={"error": value})
        assert response.status_code == 422

    async def test_degrades_after_five_failures(self, client: AsyncClient) -> None:
        """GIVEN five failed requests
        WHEN another flagged request is posted
        THEN it is absorbed by the degraded handler.
        """
        for _ in range(5):
            await client.post("/requests", json={"error": True})

        response = await client.post("/requests", json={"error": True})

        assert response.status_code == 200
        body = response.json()
        assert body["tier"] == 2
        assert body["message"] == "Degraded Mode"

    async def test_maintenance_answers_503(self, client: AsyncClient) -> None:
        for _ in range(10):
            await client.post("/requests", json={"error": True})

        response = await client.post("/requests", json={"error": True})

        assert response.status_code == 503
        assert response.json()["message"] == "System under maintenance, try later"

    async def test_storage_failure_returns_500_detail(self, client: AsyncClient, db) -> None:
        db.fetch_breaker_row = AsyncMock(side_effect=StorageUnavailable("read", "disk I/O error"))

        response = await client.post("/requests", json={"error": False})

        assert response.status_code == 500
        assert response.json() == {"detail": "Storage unavailable"}
