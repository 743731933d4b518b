import asyncio
import json

import httpx
import pytest

from gemini_chat.chat.models import ChatMessage, ChatOptions, UsageContent
from gemini_chat.config import Configuration
from gemini_chat.errors import (
    ClientClosedError,
    GeminiAPIError,
    NoCandidatesError,
    RequestCancelledError,
)
from gemini_chat.http_transport import HttpConfig
from gemini_chat.llm import client as client_module
from gemini_chat.llm.client import DEFAULT_BASE_URL, GeminiChatClient

REPLY = {
    "candidates": [
        {"content": {"role": "model", "parts": [{"text": "Hi!"}]}, "finishReason": "STOP"}
    ],
    "usageMetadata": {"promptTokenCount": 2, "candidatesTokenCount": 1, "totalTokenCount": 3},
}


class RecordingHandler:
    """httpx.MockTransport handler that records requests and replays a response."""

    def __init__(self, response: httpx.Response):
        self.response = response
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.response


def _client(handler) -> GeminiChatClient:
    return GeminiChatClient(
        "secret", "gemini-test", transport=httpx.MockTransport(handler)
    )


def _sse(*payloads: dict) -> bytes:
    return "".join(f"data: {json.dumps(p)}\r\n\r\n" for p in payloads).encode()


@pytest.mark.asyncio
async def test_get_response_posts_to_generate_content():
    handler = RecordingHandler(httpx.Response(200, json=REPLY))

    async with _client(handler) as client:
        reply = await client.get_response(
            [ChatMessage.from_text("user", "Hello")], ChatOptions(temperature=0.2)
        )

    assert reply.text == "Hi!"
    assert reply.finish_reason == "stop"
    assert reply.usage.total_tokens == 3

    request = handler.requests[0]
    assert request.method == "POST"
    assert request.url.host == "generativelanguage.googleapis.com"
    assert request.url.path == "/v1beta/models/gemini-test:generateContent"
    assert request.url.params["key"] == "secret"
    assert json.loads(request.content) == {
        "contents": [{"role": "user", "parts": [{"text": "Hello"}]}],
        "generationConfig": {"temperature": 0.2},
    }


@pytest.mark.asyncio
async def test_error_status_surfaces_code_and_body():
    handler = RecordingHandler(httpx.Response(400, text='{"error": "bad key"}'))

    async with _client(handler) as client:
        with pytest.raises(GeminiAPIError) as excinfo:
            await client.get_response([ChatMessage.from_text("user", "Hello")])

    assert excinfo.value.status_code == 400
    assert excinfo.value.body == '{"error": "bad key"}'
    assert "status code 400" in str(excinfo.value)
    assert len(handler.requests) == 1


@pytest.mark.asyncio
async def test_redirect_status_is_not_treated_as_success():
    handler = RecordingHandler(httpx.Response(302, text="moved"))

    async with _client(handler) as client:
        with pytest.raises(GeminiAPIError) as excinfo:
            await client.get_response([ChatMessage.from_text("user", "Hello")])
        with pytest.raises(GeminiAPIError, match="stream request"):
            async for _ in client.get_streaming_response(
                [ChatMessage.from_text("user", "Hello")]
            ):
                pass

    assert excinfo.value.status_code == 302
    assert excinfo.value.body == "moved"


@pytest.mark.asyncio
async def test_stopping_a_stream_early_closes_the_decoder(monkeypatch):
    closed = []
    real_decoder = client_module.decode_sse_stream

    async def tracking_decoder(lines, adapter, cancel_event=None):
        try:
            async for update in real_decoder(lines, adapter, cancel_event):
                yield update
        finally:
            closed.append(True)

    monkeypatch.setattr(client_module, "decode_sse_stream", tracking_decoder)
    body = _sse(
        {"candidates": [{"content": {"parts": [{"text": "one"}]}}]},
        {"candidates": [{"content": {"parts": [{"text": "two"}]}}]},
    )
    handler = RecordingHandler(httpx.Response(200, content=body))

    async with _client(handler) as client:
        stream = client.get_streaming_response([ChatMessage.from_text("user", "Hello")])
        first = await anext(stream)
        await stream.aclose()

    assert first.text == "one"
    assert closed == [True]


@pytest.mark.asyncio
async def test_blocked_prompt_raises_no_candidates():
    handler = RecordingHandler(
        httpx.Response(200, json={"promptFeedback": {"blockReason": "SAFETY"}})
    )

    async with _client(handler) as client:
        with pytest.raises(NoCandidatesError, match="SAFETY"):
            await client.get_response([ChatMessage.from_text("user", "Hello")])


@pytest.mark.asyncio
async def test_invalid_input_fails_before_any_request():
    handler = RecordingHandler(httpx.Response(200, json=REPLY))
    bad = ChatMessage.model_construct(role="narrator", contents=[])

    async with _client(handler) as client:
        with pytest.raises(ValueError):
            await client.get_response([bad])

    assert handler.requests == []


@pytest.mark.asyncio
async def test_cancelled_before_send_issues_no_request():
    handler = RecordingHandler(httpx.Response(200, json=REPLY))
    cancel = asyncio.Event()
    cancel.set()

    async with _client(handler) as client:
        with pytest.raises(RequestCancelledError):
            await client.get_response(
                [ChatMessage.from_text("user", "Hello")], cancel_event=cancel
            )

    assert handler.requests == []


@pytest.mark.asyncio
async def test_streaming_response_yields_updates():
    body = _sse(
        {"candidates": [{"content": {"parts": [{"text": "Hel"}]}}]},
        {"candidates": [{"content": {"parts": [{"text": "lo"}]}, "finishReason": "STOP"}]},
        {"usageMetadata": {"promptTokenCount": 2, "totalTokenCount": 4}},
    )
    handler = RecordingHandler(httpx.Response(
        200, content=body, headers={"content-type": "text/event-stream"}
    ))

    async with _client(handler) as client:
        updates = [
            u async for u in client.get_streaming_response(
                [ChatMessage.from_text("user", "Hello")]
            )
        ]

    assert [u.text for u in updates[:2]] == ["Hel", "lo"]
    assert updates[1].finish_reason == "stop"
    assert isinstance(updates[2].contents[0], UsageContent)

    request = handler.requests[0]
    assert request.url.path == "/v1beta/models/gemini-test:streamGenerateContent"
    assert request.url.params["alt"] == "sse"
    assert request.url.params["key"] == "secret"


@pytest.mark.asyncio
async def test_streaming_error_status_surfaces_body():
    handler = RecordingHandler(httpx.Response(503, text="overloaded"))

    async with _client(handler) as client:
        with pytest.raises(GeminiAPIError, match="stream request") as excinfo:
            async for _ in client.get_streaming_response(
                [ChatMessage.from_text("user", "Hello")]
            ):
                pass

    assert excinfo.value.status_code == 503
    assert excinfo.value.body == "overloaded"


@pytest.mark.asyncio
async def test_closed_client_rejects_reuse():
    handler = RecordingHandler(httpx.Response(200, json=REPLY))
    client = _client(handler)

    await client.close()
    await client.close()

    with pytest.raises(ClientClosedError):
        await client.get_response([ChatMessage.from_text("user", "Hello")])
    with pytest.raises(ClientClosedError):
        async for _ in client.get_streaming_response(
            [ChatMessage.from_text("user", "Hello")]
        ):
            pass
    assert handler.requests == []


@pytest.mark.parametrize(("api_key", "model"), [("", "m"), ("   ", "m"), ("k", ""), ("k", " ")])
def test_blank_credentials_or_model_are_rejected(api_key, model):
    with pytest.raises(ValueError):
        GeminiChatClient(api_key, model)


@pytest.mark.asyncio
async def test_from_config_uses_yaml_and_env(tmp_path, monkeypatch):
    config_file = tmp_path / "config.yaml"
    config_file.write_text(
        "llm:\n"
        "  model: gemini-from-yaml\n"
        "  base_url: https://example.test/\n"
        "http:\n"
        "  timeout: 5\n"
    )
    monkeypatch.setenv("GEMINI_API_KEY", "env-key")
    handler = RecordingHandler(httpx.Response(200, json=REPLY))

    client = GeminiChatClient.from_config(
        Configuration(str(config_file)), transport=httpx.MockTransport(handler)
    )
    async with client:
        await client.get_response([ChatMessage.from_text("user", "Hello")])

    assert client.model == "gemini-from-yaml"
    assert client.transport.config == HttpConfig(timeout=5)
    request = handler.requests[0]
    assert request.url.host == "example.test"
    assert request.url.params["key"] == "env-key"


def test_default_base_url_points_at_gemini():
    assert DEFAULT_BASE_URL == "https://generativelanguage.googleapis.com"
