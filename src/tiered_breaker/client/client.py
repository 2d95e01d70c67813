"""Async HTTP client for the tiered breaker REST API."""

from __future__ import annotations

from typing import Any

import httpx

from .errors import STORAGE_UNAVAILABLE_DETAIL, BreakerUnavailable, ClientError, ServerError

# Statuses a service request may legitimately answer with.
OUTCOME_STATUSES = frozenset({200, 500, 503})


class BreakerClient:
    """Async client wrapping the tiered breaker REST API.

    Usage::

        async with BreakerClient() as client:
            outcome = await client.send(error=True)
            state = await client.state()

    Args:
        base_url: Base URL of the breaker API server.
        timeout: Request timeout in seconds.
        transport: Optional httpx transport, mainly for tests.
    """

    def __init__(
        self,
        base_url: str = "http://127.0.0.1:8430",
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = base_url
        self._client = httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout,
            transport=transport,
        )

    async def __aenter__(self) -> BreakerClient:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: Any,
    ) -> None:
        """Exit the async context manager, closing the underlying HTTP client."""
        await self.close()

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    async def _request(
        self,
        method: str,
        path: str,
        *,
        outcome: bool = False,
        **kwargs: Any,
    ) -> dict[str, Any]:
        """Send an HTTP request and return the parsed JSON response.

        Args:
            method: HTTP method (GET, POST, etc.).
            path: URL path relative to ``base_url``.
            outcome: Accept 500 and 503 responses that carry a service outcome
                (a body with a ``status`` key) instead of raising.
            **kwargs: Extra keyword arguments forwarded to ``httpx.AsyncClient.request``.

        Returns:
            Parsed JSON response as a dictionary.

        Raises:
            BreakerUnavailable: If the server could not reach the breaker record.
            ServerError: If the server responds with a 5xx status code.
            ClientError: For any other non-2xx status code.
        """
        response = await self._client.request(method, path, **kwargs)

        if outcome and response.status_code in OUTCOME_STATUSES:
            body = self._json_body(response)
            if body is not None and "status" in body:
                return body

        if response.status_code >= 500:
            detail = self._extract_detail(response)
            if response.status_code == 503 or detail == STORAGE_UNAVAILABLE_DETAIL:
                raise BreakerUnavailable(status_code=response.status_code, message=detail)
            raise ServerError(status_code=response.status_code, message=detail)

        if response.status_code >= 400:
            detail = self._extract_detail(response)
            raise ClientError(status_code=response.status_code, message=detail)

        result: dict[str, Any] = response.json()
        return result

    @staticmethod
    def _json_body(response: httpx.Response) -> dict[str, Any] | None:
        """Return the JSON object body, or None if the body is not a JSON object."""
        try:
            body = response.json()
        except ValueError:
            return None
        return body if isinstance(body, dict) else None

    @classmethod
    def _extract_detail(cls, response: httpx.Response) -> str:
        """Extract the ``detail`` key of an error body, falling back to raw text."""
        body = cls._json_body(response)
        if body is not None and "detail" in body:
            return str(body["detail"])
        return response.text

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def send(self, error: bool = False) -> dict[str, Any]:
        """Submit one service request.

        Args:
            error: Ask the full capacity handler to fail.

        Returns:
            The outcome: status, tier, message and the breaker transition.
            A 500 or 503 outcome is returned, not raised.
        """
        return await self._request("POST", "/requests", outcome=True, json={"error": error})

    async def state(self) -> dict[str, Any]:
        """Get the current breaker record."""
        return await self._request("GET", "/breaker")

    async def reset(self) -> dict[str, Any]:
        """Force the breaker back to full capacity."""
        return await self._request("POST", "/breaker/reset")

    async def events(self, limit: int = 20) -> dict[str, Any]:
        """List recent tier changes and resets.

        Args:
            limit: Maximum number of events to return.

        Returns:
            Dictionary with ``events`` and ``total``.
        """
        return await self._request("GET", "/breaker/events", params={"limit": limit})

    async def health(self) -> dict[str, Any]:
        """Check API readiness."""
        return await self._request("GET", "/health/ready")
