"""
Server-sent event decoding for streamed Gemini responses.

Gemini's ``alt=sse`` mode sends one complete JSON response per ``data:``
line, so every event is decoded on its own rather than as one document.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncGenerator, AsyncIterable

from ..chat.models import ChatResponseUpdate
from ..errors import RequestCancelledError
from .base import ProviderAdapter

logger = logging.getLogger(__name__)

SSE_DATA_PREFIX = "data: "


def raise_if_cancelled(cancel_event: asyncio.Event | None) -> None:
    if cancel_event is not None and cancel_event.is_set():
        raise RequestCancelledError("Request was cancelled")


async def decode_sse_stream(
    lines: AsyncIterable[str],
    adapter: ProviderAdapter,
    cancel_event: asyncio.Event | None = None,
) -> AsyncGenerator[ChatResponseUpdate]:
    """
    Turn SSE lines into chat updates, one event at a time.

    Lines without the ``data: `` prefix (blank separators, comments,
    keep-alives) are skipped. The cancellation event is checked before
    each line is consumed; updates already yielded are not retracted.
    """
    iterator = aiter(lines)
    events = 0
    while True:
        raise_if_cancelled(cancel_event)
        try:
            line = await anext(iterator)
        except StopAsyncIteration:
            break

        if not line.startswith(SSE_DATA_PREFIX):
            continue

        events += 1
        for update in adapter.parse_stream_chunk(line[len(SSE_DATA_PREFIX):]):
            yield update

    logger.debug("Stream finished after %d events", events)
