from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncGenerator
from contextlib import aclosing
from typing import TYPE_CHECKING

import httpx

from ..chat.models import ChatOptions, ChatResponse, ChatResponseUpdate
from ..http_transport import HttpConfig, HttpTransport
from .base import MsgList, ProviderAdapter
from .providers import GeminiAdapter
from .streaming import decode_sse_stream, raise_if_cancelled

if TYPE_CHECKING:
    from ..config import Configuration

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com"


class GeminiChatClient:
    """
    Thin façade: build the request, send it, convert the reply.
    """

    def __init__(
        self,
        api_key: str,
        model: str,
        *,
        base_url: str = DEFAULT_BASE_URL,
        http_config: HttpConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        if not api_key or not api_key.strip():
            raise ValueError("API key cannot be empty or whitespace")
        if not model or not model.strip():
            raise ValueError("Model cannot be empty or whitespace")

        self.adapter: ProviderAdapter = GeminiAdapter(model, api_key)
        self.transport = HttpTransport(
            base_url, config=http_config, transport=transport
        )

    @classmethod
    def from_config(
        cls,
        config: Configuration,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> GeminiChatClient:
        """Create a client from the YAML/.env configuration."""
        llm_cfg = config.get_llm_config()
        model = llm_cfg.get("model")
        if not model:
            raise ValueError("Missing llm.model in configuration")
        return cls(
            config.gemini_api_key,
            model,
            base_url=llm_cfg.get("base_url") or DEFAULT_BASE_URL,
            http_config=config.get_http_config(),
            transport=transport,
        )

    async def __aenter__(self):
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()

    # ---------- public ----------
    @property
    def model(self) -> str:
        """Get the configured Gemini model name."""
        return self.adapter.model

    async def get_response(
        self,
        messages: MsgList,
        options: ChatOptions | None = None,
        cancel_event: asyncio.Event | None = None,
    ) -> ChatResponse:
        """Send the conversation and return the complete reply."""
        path, params, hdrs, payload = self.adapter.build_request(messages, options)
        raise_if_cancelled(cancel_event)

        logger.debug("POST %s (%d turns)", path, len(payload["contents"]))
        data = await self.transport.post_json(path, payload, params=params, headers=hdrs)
        return self.adapter.parse_response(data)

    async def get_streaming_response(
        self,
        messages: MsgList,
        options: ChatOptions | None = None,
        cancel_event: asyncio.Event | None = None,
    ) -> AsyncGenerator[ChatResponseUpdate]:
        """Send the conversation and yield updates as SSE events arrive."""
        path, params, hdrs, payload = self.adapter.build_request(
            messages, options, stream=True
        )
        raise_if_cancelled(cancel_event)

        logger.debug("POST %s (%d turns, streaming)", path, len(payload["contents"]))
        async with aclosing(
            self.transport.stream_lines(path, payload, params=params, headers=hdrs)
        ) as lines, aclosing(
            decode_sse_stream(lines, self.adapter, cancel_event)
        ) as updates:
            async for update in updates:
                yield update

    async def close(self) -> None:
        await self.transport.close()
