from .models import (
    ChatMessage,
    ChatOptions,
    ChatResponse,
    ChatResponseUpdate,
    Content,
    DataContent,
    FinishReason,
    FunctionCallContent,
    FunctionResultContent,
    FunctionTool,
    ResponseFormat,
    Role,
    TextContent,
    ToolMode,
    UriContent,
    Usage,
    UsageContent,
)

__all__ = [
    "ChatMessage",
    "ChatOptions",
    "ChatResponse",
    "ChatResponseUpdate",
    "Content",
    "DataContent",
    "FinishReason",
    "FunctionCallContent",
    "FunctionResultContent",
    "FunctionTool",
    "ResponseFormat",
    "Role",
    "TextContent",
    "ToolMode",
    "UriContent",
    "Usage",
    "UsageContent",
]
