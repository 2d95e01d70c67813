"""Tests for the tier handlers."""

from __future__ import annotations

from tiered_breaker.breaker_config import Tier
from tiered_breaker.exceptions import TierFailure
from tiered_breaker.models import ServiceRequest
from tiered_breaker.services import serve_degraded, serve_full_capacity


class TestServeFullCapacity:
    def test_success(self) -> None:
        result = serve_full_capacity(ServiceRequest(error=False))
        assert (result.status, result.tier, result.message) == (
            200,
            Tier.FULL_CAPACITY,
            "Full Capacity",
        )
        assert result.ok

    def test_error_flag_yields_failure_value(self) -> None:
        result = serve_full_capacity(ServiceRequest(error=True))
        assert result.status == 500
        assert isinstance(result.failure, TierFailure)
        assert result.failure.code == "CRITICAL_FAILURE"


class TestServeDegraded:
    def test_ignores_error_flag(self) -> None:
        for error in (False, True):
            result = serve_degraded(ServiceRequest(error=error))
            assert (result.status, result.tier, result.message) == (
                200,
                Tier.DEGRADED,
                "Degraded Mode",
            )
