from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import Any

from ..chat.models import ChatMessage, ChatOptions, ChatResponse, ChatResponseUpdate

JSON = dict[str, Any]
MsgList = Sequence[ChatMessage]


class ProviderAdapter(ABC):
    """
    Strategy interface for each provider.
    Concrete adapters produce a request and normalize the response.
    """

    def __init__(self, model: str, api_key: str):
        self.model = model
        self.api_key = api_key     # each adapter decides where the key goes

    # ---------- interface ----------
    @abstractmethod
    def build_request(
        self, messages: MsgList, options: ChatOptions | None, stream: bool = False
    ) -> tuple[str, dict[str, str], dict[str, str], JSON]:
        """
        → (path, query_params, headers, json_payload)
        """
        ...

    @abstractmethod
    def parse_response(self, data: JSON) -> ChatResponse:
        """Convert a complete provider response body into a ChatResponse."""
        ...

    @abstractmethod
    def parse_stream_chunk(self, data: str) -> list[ChatResponseUpdate]:
        """Convert one streamed event payload into zero or more updates."""
        ...
