"""
Chat Message Models

This module defines the provider-agnostic chat abstraction that the Gemini
client translates to and from.

Key Components:
- ChatMessage: a role-tagged message made of typed content parts
- ChatOptions: generation settings, tools, tool mode and response format
- ChatResponse / ChatResponseUpdate: buffered and streamed replies

Content parts form a closed set discriminated on ``type``:
text, data, uri, function_call, function_result and usage.
"""
from __future__ import annotations

from typing import Annotated, Any, Literal

from pydantic import BaseModel, Field

# ---------- Canonical models (Pydantic v2) ----------

Role = Literal["system", "user", "assistant", "tool"]

FinishReason = Literal["stop", "length", "tool_calls", "content_filter"]


class Usage(BaseModel):
    prompt_tokens: int | None = None
    completion_tokens: int | None = None
    total_tokens: int | None = None


class TextContent(BaseModel):
    type: Literal["text"] = "text"
    text: str


class DataContent(BaseModel):
    """Inline binary payload with its media type."""
    type: Literal["data"] = "data"
    data: bytes
    media_type: str


class UriContent(BaseModel):
    """Reference to a remotely hosted file."""
    type: Literal["uri"] = "uri"
    uri: str
    media_type: str


class FunctionCallContent(BaseModel):
    type: Literal["function_call"] = "function_call"
    call_id: str
    name: str
    arguments: dict[str, Any] | None = None


class FunctionResultContent(BaseModel):
    type: Literal["function_result"] = "function_result"
    call_id: str
    result: Any = None


class UsageContent(BaseModel):
    type: Literal["usage"] = "usage"
    usage: Usage


Content = Annotated[
    TextContent
    | DataContent
    | UriContent
    | FunctionCallContent
    | FunctionResultContent
    | UsageContent,
    Field(discriminator="type"),
]


def _join_text(contents: list[Any]) -> str:
    return "".join(c.text for c in contents if isinstance(c, TextContent))


class ChatMessage(BaseModel):
    role: Role
    contents: list[Content] = Field(default_factory=list)

    @classmethod
    def from_text(cls, role: Role, text: str) -> ChatMessage:
        return cls(role=role, contents=[TextContent(text=text)])

    @property
    def text(self) -> str:
        return _join_text(self.contents)


# ---------- Options ----------

class FunctionTool(BaseModel):
    """A function the model may invoke, described by a JSON schema."""
    name: str
    description: str | None = None
    parameters: dict[str, Any] | None = None


class ToolMode(BaseModel):
    mode: Literal["none", "auto", "required"] = "auto"
    required_function_name: str | None = None


class ResponseFormat(BaseModel):
    type: Literal["text", "json"] = "text"
    json_schema: dict[str, Any] | None = None
    schema_name: str | None = None
    schema_description: str | None = None


class ChatOptions(BaseModel):
    temperature: float | None = None
    max_output_tokens: int | None = None
    top_p: float | None = None
    top_k: int | None = None
    stop_sequences: list[str] | None = None
    response_format: ResponseFormat | None = None
    tools: list[FunctionTool] = Field(default_factory=list)
    tool_mode: ToolMode | None = None
    # Provider-specific knobs keyed by well-known names
    additional_properties: dict[str, Any] = Field(default_factory=dict)


# ---------- Replies ----------

class ChatResponse(BaseModel):
    messages: list[ChatMessage] = Field(default_factory=list)
    model_id: str | None = None
    finish_reason: FinishReason | None = None
    usage: Usage | None = None
    raw_representation: Any = Field(default=None, exclude=True)

    @property
    def text(self) -> str:
        return "".join(m.text for m in self.messages)


class ChatResponseUpdate(BaseModel):
    role: Role | None = None
    contents: list[Content] = Field(default_factory=list)
    model_id: str | None = None
    finish_reason: FinishReason | None = None
    raw_representation: Any = Field(default=None, exclude=True)

    @property
    def text(self) -> str:
        return _join_text(self.contents)
