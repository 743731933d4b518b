"""
HTTP Transport Module for the Gemini chat client

This module owns the pooled httpx client used for every call:
- Connection pooling and keep-alive settings
- A single timeout policy
- JSON POST for buffered responses and line streaming for SSE responses
- Uniform conversion of non-success statuses into GeminiAPIError

Requests are never retried; the first failure goes straight to the caller.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncGenerator
from typing import Any

import httpx
from pydantic import BaseModel

from .errors import ClientClosedError, GeminiAPIError

logger = logging.getLogger(__name__)


class HttpConfig(BaseModel):
    """Configuration for the pooled HTTP client."""

    timeout: float = 60.0
    max_keepalive_connections: int = 20
    max_connections: int = 100
    keepalive_expiry: float = 30.0


class HttpTransport:
    """
    Process-lifetime HTTP client shared by all calls of one chat client.

    Each call owns its request and response objects; the connection pool
    is the only shared state.
    """

    def __init__(
        self,
        base_url: str,
        headers: dict[str, str] | None = None,
        config: HttpConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Initialize the HTTP transport.

        Args:
            base_url: Base URL for all requests
            headers: Default headers to include with all requests
            config: HTTP configuration settings
            transport: Optional httpx transport, e.g. httpx.MockTransport
        """
        self.base_url = base_url.rstrip("/")
        self.config = config or HttpConfig()
        self._closed = False

        self.http = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=httpx.Timeout(self.config.timeout),
            headers=headers or {},
            limits=httpx.Limits(
                max_keepalive_connections=self.config.max_keepalive_connections,
                max_connections=self.config.max_connections,
                keepalive_expiry=self.config.keepalive_expiry,
            ),
            transport=transport,
        )

    @property
    def closed(self) -> bool:
        return self._closed

    def _ensure_open(self) -> None:
        if self._closed:
            raise ClientClosedError("HTTP transport has been closed")

    async def post_json(
        self,
        url: str,
        payload: dict[str, Any],
        params: dict[str, str] | None = None,
        headers: dict[str, str] | None = None,
    ) -> dict[str, Any]:
        """POST a JSON payload and return the decoded JSON body."""
        self._ensure_open()
        response = await self.http.post(
            url, params=params, headers=headers, json=payload
        )
        if not response.is_success:
            logger.error(
                "Gemini request to %s failed with status %d",
                url,
                response.status_code,
            )
            raise GeminiAPIError(response.status_code, response.text)
        return response.json()

    async def stream_lines(
        self,
        url: str,
        payload: dict[str, Any],
        params: dict[str, str] | None = None,
        headers: dict[str, str] | None = None,
    ) -> AsyncGenerator[str]:
        """
        POST a JSON payload and yield the response body line by line.

        The response is released when the generator finishes, fails or is
        closed by the consumer.
        """
        self._ensure_open()
        async with self.http.stream(
            "POST", url, params=params, headers=headers, json=payload
        ) as response:
            if not response.is_success:
                await response.aread()
                logger.error(
                    "Gemini stream request to %s failed with status %d",
                    url,
                    response.status_code,
                )
                raise GeminiAPIError(
                    response.status_code, response.text, streaming=True
                )
            async for line in response.aiter_lines():
                yield line

    async def close(self) -> None:
        """Close the HTTP client and clean up resources."""
        if self._closed:
            return
        self._closed = True
        await self.http.aclose()

    async def __aenter__(self) -> HttpTransport:
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Async context manager exit."""
        await self.close()


def create_http_config_from_dict(config_dict: dict[str, Any]) -> HttpConfig:
    """
    Create HttpConfig from a dictionary (e.g., from YAML config).

    Args:
        config_dict: Dictionary containing an optional "http" section

    Returns:
        HttpConfig instance with validated settings
    """
    http_config = config_dict.get("http", {}) or {}

    return HttpConfig(
        timeout=http_config.get("timeout", 60.0),
        max_keepalive_connections=http_config.get("max_keepalive_connections", 20),
        max_connections=http_config.get("max_connections", 100),
        keepalive_expiry=http_config.get("keepalive_expiry", 30.0),
    )
