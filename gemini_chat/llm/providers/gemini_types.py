"""Gemini REST API wire models."""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class _WireModel(BaseModel):
    """Base for payload models: alias-keyed, unknown keys ignored."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    def to_wire(self) -> dict[str, Any]:
        """Dump with wire field names, omitting unset fields."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class SchemaType(StrEnum):
    STRING = "STRING"
    NUMBER = "NUMBER"
    INTEGER = "INTEGER"
    BOOLEAN = "BOOLEAN"
    ARRAY = "ARRAY"
    OBJECT = "OBJECT"


class FunctionCallingMode(StrEnum):
    AUTO = "AUTO"
    ANY = "ANY"
    NONE = "NONE"


# ============ Parts ============


class InlineData(_WireModel):
    mime_type: str = Field(
        alias="mime_type", validation_alias=AliasChoices("mime_type", "mimeType")
    )
    data: str


class FileData(_WireModel):
    mime_type: str | None = Field(
        default=None,
        alias="mime_type",
        validation_alias=AliasChoices("mime_type", "mimeType"),
    )
    file_uri: str = Field(
        alias="file_uri", validation_alias=AliasChoices("file_uri", "fileUri")
    )


class FunctionCall(_WireModel):
    name: str
    args: dict[str, Any] | None = None


class FunctionResponseData(_WireModel):
    name: str
    content: Any = None


class FunctionResponse(_WireModel):
    name: str
    response: FunctionResponseData


class Part(_WireModel):
    text: str | None = None
    inline_data: InlineData | None = Field(
        default=None,
        alias="inline_data",
        validation_alias=AliasChoices("inline_data", "inlineData"),
    )
    file_data: FileData | None = Field(
        default=None,
        alias="file_data",
        validation_alias=AliasChoices("file_data", "fileData"),
    )
    function_call: FunctionCall | None = Field(
        default=None,
        alias="functionCall",
        validation_alias=AliasChoices("functionCall", "function_call"),
    )
    function_response: FunctionResponse | None = Field(
        default=None,
        alias="functionResponse",
        validation_alias=AliasChoices("functionResponse", "function_response"),
    )


class Content(_WireModel):
    role: str | None = None
    parts: list[Part] = Field(default_factory=list)


class SystemInstruction(_WireModel):
    parts: list[Part] = Field(default_factory=list)


# ============ Schema & tools ============


class GeminiSchema(_WireModel):
    type: SchemaType | None = None
    description: str | None = None
    properties: dict[str, GeminiSchema] | None = None
    required: list[str] | None = None
    items: GeminiSchema | None = None


class FunctionDeclaration(_WireModel):
    name: str
    description: str | None = None
    parameters: GeminiSchema | None = None


class Tool(_WireModel):
    function_declarations: list[FunctionDeclaration] = Field(
        default_factory=list, alias="function_declarations"
    )


class FunctionCallingConfig(_WireModel):
    mode: FunctionCallingMode | None = None
    allowed_function_names: list[str] | None = Field(
        default=None, alias="allowed_function_names"
    )


class ToolConfig(_WireModel):
    function_calling_config: FunctionCallingConfig | None = Field(
        default=None, alias="function_calling_config"
    )


# ============ Generation config ============


class ThinkingConfig(_WireModel):
    thinking_budget: int | None = Field(default=None, alias="thinkingBudget")
    include_thoughts: bool | None = Field(default=None, alias="includeThoughts")


class GenerationConfig(_WireModel):
    temperature: float | None = None
    top_p: float | None = Field(default=None, alias="topP")
    top_k: int | None = Field(default=None, alias="topK")
    max_output_tokens: int | None = Field(default=None, alias="maxOutputTokens")
    stop_sequences: list[str] | None = Field(default=None, alias="stopSequences")
    response_mime_type: str | None = Field(default=None, alias="response_mime_type")
    response_schema: GeminiSchema | None = Field(
        default=None, alias="response_schema"
    )
    thinking_config: ThinkingConfig | None = Field(
        default=None, alias="thinkingConfig"
    )


class GeminiRequest(_WireModel):
    contents: list[Content] = Field(default_factory=list)
    tools: list[Tool] | None = None
    tool_config: ToolConfig | None = Field(default=None, alias="tool_config")
    system_instruction: SystemInstruction | None = Field(
        default=None, alias="system_instruction"
    )
    generation_config: GenerationConfig | None = Field(
        default=None, alias="generationConfig"
    )


# ============ Response ============


class Candidate(_WireModel):
    content: Content | None = None
    finish_reason: str | None = Field(default=None, alias="finishReason")


class UsageMetadata(_WireModel):
    prompt_token_count: int | None = Field(default=None, alias="promptTokenCount")
    candidates_token_count: int | None = Field(
        default=None, alias="candidatesTokenCount"
    )
    total_token_count: int | None = Field(default=None, alias="totalTokenCount")


class PromptFeedback(_WireModel):
    block_reason: str | None = Field(default=None, alias="blockReason")


class GeminiResponse(_WireModel):
    candidates: list[Candidate] | None = None
    usage_metadata: UsageMetadata | None = Field(default=None, alias="usageMetadata")
    prompt_feedback: PromptFeedback | None = Field(
        default=None, alias="promptFeedback"
    )
