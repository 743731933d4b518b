"""
Gemini adapter

Translates the chat abstraction into ``generateContent`` request bodies and
turns Gemini responses (buffered or streamed) back into chat replies.
"""

from __future__ import annotations

import base64
import logging
from typing import Any

from ...chat.models import (
    ChatMessage,
    ChatOptions,
    ChatResponse,
    ChatResponseUpdate,
    DataContent,
    FinishReason,
    FunctionCallContent,
    FunctionResultContent,
    FunctionTool,
    TextContent,
    ToolMode,
    UriContent,
    Usage,
    UsageContent,
)
from ...errors import NoCandidatesError
from ..base import JSON, MsgList, ProviderAdapter
from ..schema import to_gemini_schema
from . import gemini_types as gt

logger = logging.getLogger(__name__)

THINKING_BUDGET_KEY = "generationConfig.thinkingConfig.thinkingBudget"
INCLUDE_THOUGHTS_KEY = "generationConfig.thinkingConfig.includeThoughts"

JSON_MIME_TYPE = "application/json"

_ROLE_MAP = {
    "user": "user",
    "assistant": "model",
    # Gemini has no tool role; function responses go back as user turns
    "tool": "user",
}

_FINISH_REASON_MAP: dict[str, FinishReason] = {
    "STOP": "stop",
    "MAX_TOKENS": "length",
    "SAFETY": "content_filter",
    "RECITATION": "content_filter",
}


# ---------- outbound helpers ----------

def _convert_role(role: str) -> str:
    try:
        return _ROLE_MAP[role]
    except KeyError:
        raise ValueError(f"Unsupported chat role: {role}") from None


def _to_gemini_parts(contents: list[Any]) -> list[gt.Part]:
    parts: list[gt.Part] = []
    for content in contents:
        if isinstance(content, TextContent):
            parts.append(gt.Part(text=content.text))
        elif isinstance(content, DataContent):
            parts.append(gt.Part(inline_data=gt.InlineData(
                mime_type=content.media_type,
                data=base64.b64encode(content.data).decode("ascii"),
            )))
        elif isinstance(content, UriContent):
            parts.append(gt.Part(file_data=gt.FileData(
                mime_type=content.media_type, file_uri=content.uri
            )))
        elif isinstance(content, FunctionCallContent):
            parts.append(gt.Part(function_call=gt.FunctionCall(
                name=content.name, args=content.arguments
            )))
        elif isinstance(content, FunctionResultContent):
            parts.append(gt.Part(function_response=gt.FunctionResponse(
                name=content.call_id,
                response=gt.FunctionResponseData(
                    name=content.call_id, content=content.result
                ),
            )))
        # Usage and any other inbound-only content has no wire form
    return parts


def _build_contents(
    messages: MsgList,
) -> tuple[list[gt.Content], gt.SystemInstruction | None]:
    system_messages = [m for m in messages if m.role == "system"]
    if len(system_messages) > 1:
        raise ValueError("At most one system message is supported")

    system_instruction = None
    if system_messages:
        system_instruction = gt.SystemInstruction(
            parts=_to_gemini_parts(system_messages[0].contents)
        )

    # Gemini requires alternating user/model roles, so consecutive messages
    # from the same author are merged into one turn.
    contents: list[gt.Content] = []
    for message in messages:
        if message.role == "system":
            continue
        role = _convert_role(message.role)
        parts = _to_gemini_parts(message.contents)
        if contents and contents[-1].role == role:
            contents[-1].parts.extend(parts)
        else:
            contents.append(gt.Content(role=role, parts=parts))

    return contents, system_instruction


def _coerce_int(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return None
    return None


def _coerce_bool(value: Any) -> bool | None:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in ("true", "false"):
            return lowered == "true"
    return None


def _thinking_config(additional: dict[str, Any]) -> gt.ThinkingConfig | None:
    budget = include = None

    if THINKING_BUDGET_KEY in additional:
        budget = _coerce_int(additional[THINKING_BUDGET_KEY])
        if budget is None:
            logger.debug(
                "Ignoring %s value of type %s",
                THINKING_BUDGET_KEY,
                type(additional[THINKING_BUDGET_KEY]).__name__,
            )

    if INCLUDE_THOUGHTS_KEY in additional:
        include = _coerce_bool(additional[INCLUDE_THOUGHTS_KEY])
        if include is None:
            logger.debug(
                "Ignoring %s value of type %s",
                INCLUDE_THOUGHTS_KEY,
                type(additional[INCLUDE_THOUGHTS_KEY]).__name__,
            )

    if budget is None and include is None:
        return None
    return gt.ThinkingConfig(thinking_budget=budget, include_thoughts=include)


def _generation_config(options: ChatOptions) -> gt.GenerationConfig | None:
    config = gt.GenerationConfig(
        temperature=options.temperature,
        max_output_tokens=options.max_output_tokens,
        top_p=options.top_p,
        top_k=options.top_k,
        stop_sequences=list(options.stop_sequences) if options.stop_sequences else None,
    )

    fmt = options.response_format
    if fmt is not None and fmt.type == "json":
        config.response_mime_type = JSON_MIME_TYPE
        if fmt.json_schema is not None:
            config.response_schema = to_gemini_schema(
                fmt.json_schema, description=fmt.schema_description
            )

    config.thinking_config = _thinking_config(options.additional_properties)

    if not config.model_dump(exclude_none=True):
        return None
    return config


def _function_declaration(tool: FunctionTool) -> gt.FunctionDeclaration:
    declaration = gt.FunctionDeclaration(name=tool.name, description=tool.description)
    if tool.parameters is not None:
        declaration.parameters = to_gemini_schema(
            tool.parameters, default_type=gt.SchemaType.OBJECT
        )
    return declaration


def _tool_config(tool_mode: ToolMode) -> gt.ToolConfig:
    if tool_mode.mode == "none":
        calling = gt.FunctionCallingConfig(mode=gt.FunctionCallingMode.NONE)
    elif tool_mode.mode == "auto":
        calling = gt.FunctionCallingConfig(mode=gt.FunctionCallingMode.AUTO)
    else:
        name = tool_mode.required_function_name
        calling = gt.FunctionCallingConfig(
            mode=gt.FunctionCallingMode.ANY,
            allowed_function_names=[name] if name else None,
        )
    return gt.ToolConfig(function_calling_config=calling)


# ---------- inbound helpers ----------

def _from_gemini_parts(parts: list[gt.Part] | None) -> list[Any]:
    contents: list[Any] = []
    for part in parts or []:
        if part.text:
            contents.append(TextContent(text=part.text))
        elif part.function_call is not None:
            # Gemini does not issue call ids; the function name stands in
            contents.append(FunctionCallContent(
                call_id=part.function_call.name,
                name=part.function_call.name,
                arguments=part.function_call.args,
            ))
    return contents


def convert_finish_reason(
    reason: str | None, parts: list[gt.Part] | None
) -> FinishReason | None:
    # Some responses omit TOOL_CALLS even though they carry a function call
    if reason == "TOOL_CALLS" or any(p.function_call is not None for p in parts or []):
        return "tool_calls"
    return _FINISH_REASON_MAP.get(reason or "")


def _convert_usage(metadata: gt.UsageMetadata) -> Usage:
    return Usage(
        prompt_tokens=metadata.prompt_token_count,
        completion_tokens=metadata.candidates_token_count,
        total_tokens=metadata.total_token_count,
    )


class GeminiAdapter(ProviderAdapter):
    """Request builder and response converter for the Gemini REST API."""

    api_version = "v1beta"

    def build_gemini_request(
        self, messages: MsgList, options: ChatOptions | None
    ) -> gt.GeminiRequest:
        if messages is None:
            raise ValueError("messages cannot be None")

        contents, system_instruction = _build_contents(list(messages))
        request = gt.GeminiRequest(
            contents=contents, system_instruction=system_instruction
        )
        if options is None:
            return request

        request.generation_config = _generation_config(options)

        if options.tools:
            request.tools = [gt.Tool(
                function_declarations=[_function_declaration(t) for t in options.tools]
            )]

        if options.tool_mode is not None:
            request.tool_config = _tool_config(options.tool_mode)

        return request

    def build_request(
        self, messages: MsgList, options: ChatOptions | None, stream: bool = False
    ) -> tuple[str, dict[str, str], dict[str, str], JSON]:
        payload = self.build_gemini_request(messages, options).to_wire()

        method = "streamGenerateContent" if stream else "generateContent"
        path = f"/{self.api_version}/models/{self.model}:{method}"
        params = {"key": self.api_key}
        if stream:
            params["alt"] = "sse"
        headers = {"Content-Type": "application/json"}

        return (path, params, headers, payload)

    def parse_response(self, data: JSON) -> ChatResponse:
        return self.convert_response(gt.GeminiResponse.model_validate(data))

    def convert_response(self, response: gt.GeminiResponse) -> ChatResponse:
        candidate = response.candidates[0] if response.candidates else None
        if candidate is None:
            reason = response.prompt_feedback.block_reason if response.prompt_feedback else None
            logger.warning("Gemini returned no candidates (block reason: %s)", reason)
            raise NoCandidatesError(reason)

        parts = candidate.content.parts if candidate.content else None
        return ChatResponse(
            messages=[ChatMessage(role="assistant", contents=_from_gemini_parts(parts))],
            model_id=self.model,
            finish_reason=convert_finish_reason(candidate.finish_reason, parts),
            usage=_convert_usage(response.usage_metadata) if response.usage_metadata else None,
            raw_representation=response,
        )

    def parse_stream_chunk(self, data: str) -> list[ChatResponseUpdate]:
        return self.convert_updates(gt.GeminiResponse.model_validate_json(data))

    def convert_updates(self, response: gt.GeminiResponse) -> list[ChatResponseUpdate]:
        updates: list[ChatResponseUpdate] = []
        for candidate in response.candidates or []:
            parts = candidate.content.parts if candidate.content else None
            contents = _from_gemini_parts(parts)
            if not contents:
                continue
            updates.append(ChatResponseUpdate(
                role="assistant",
                contents=contents,
                model_id=self.model,
                finish_reason=convert_finish_reason(candidate.finish_reason, parts),
                raw_representation=response,
            ))

        if response.usage_metadata is not None:
            updates.append(ChatResponseUpdate(
                contents=[UsageContent(usage=_convert_usage(response.usage_metadata))]
            ))
        return updates
