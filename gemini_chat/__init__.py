"""Gemini chat client: translates a generic chat abstraction to the Gemini REST API."""

from .chat import (
    ChatMessage,
    ChatOptions,
    ChatResponse,
    ChatResponseUpdate,
    DataContent,
    FunctionCallContent,
    FunctionResultContent,
    FunctionTool,
    ResponseFormat,
    TextContent,
    ToolMode,
    UriContent,
    Usage,
    UsageContent,
)
from .config import Configuration, setup_logging
from .errors import (
    ClientClosedError,
    GeminiAPIError,
    GeminiError,
    NoCandidatesError,
    RequestCancelledError,
)
from .http_transport import HttpConfig
from .llm import INCLUDE_THOUGHTS_KEY, THINKING_BUDGET_KEY, GeminiChatClient

__version__ = "0.1.0"

__all__ = [
    "ChatMessage",
    "ChatOptions",
    "ChatResponse",
    "ChatResponseUpdate",
    "ClientClosedError",
    "Configuration",
    "DataContent",
    "FunctionCallContent",
    "FunctionResultContent",
    "FunctionTool",
    "GeminiAPIError",
    "GeminiChatClient",
    "GeminiError",
    "HttpConfig",
    "INCLUDE_THOUGHTS_KEY",
    "NoCandidatesError",
    "RequestCancelledError",
    "ResponseFormat",
    "THINKING_BUDGET_KEY",
    "TextContent",
    "ToolMode",
    "UriContent",
    "Usage",
    "UsageContent",
    "setup_logging",
]
