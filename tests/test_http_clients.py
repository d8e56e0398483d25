"""Tests for the OpenRouter vision adapter."""

import asyncio
import json

import httpx
import pytest

from calorie_tracker.adapters.openrouter_vision_client import OpenRouterVisionClient
from calorie_tracker.domain.errors import RecognitionError


def _completion(content: str | None) -> dict[str, object]:
    return {
        "id": "gen-1",
        "object": "chat.completion",
        "created": 1700000000,
        "model": "anthropic/claude-3-haiku",
        "choices": [
            {
                "index": 0,
                "message": {"role": "assistant", "content": content},
                "finish_reason": "stop",
            }
        ],
    }


def _client(handler) -> OpenRouterVisionClient:  # type: ignore[no-untyped-def]
    return OpenRouterVisionClient.create(
        api_key="key",
        base_url="https://openrouter.test/api/v1",
        referer="http://localhost:8000",
        title="Calorie Tracker",
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
    )


def test_openrouter_client_sends_prompt_image_and_headers() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=_completion('{"name": "Apple"}'))

    client = _client(handler)

    content = asyncio.run(
        client.complete(
            model="anthropic/claude-3-haiku",
            prompt="Analyze this food image",
            image_data_url="data:image/jpeg;base64,ZmFrZQ==",
        )
    )

    assert content == '{"name": "Apple"}'
    request = seen[0]
    assert request.url.path.endswith("/chat/completions")
    assert request.headers["Authorization"] == "Bearer key"
    assert request.headers["X-Title"] == "Calorie Tracker"
    assert request.headers["HTTP-Referer"] == "http://localhost:8000"
    body = json.loads(request.content.decode())
    parts = body["messages"][0]["content"]
    assert parts[0] == {"type": "text", "text": "Analyze this food image"}
    assert parts[1]["image_url"]["url"] == "data:image/jpeg;base64,ZmFrZQ=="


@pytest.mark.parametrize(
    ("status_code", "fragment"),
    [
        (401, "Invalid API key"),
        (429, "Too many requests"),
        (400, "Invalid request format"),
        (413, "too large"),
        (500, "clearer image"),
    ],
)
def test_openrouter_client_maps_error_status(status_code: int, fragment: str) -> None:
    calls: list[int] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(status_code)
        return httpx.Response(status_code, json={"error": {"message": "nope"}})

    client = _client(handler)

    with pytest.raises(RecognitionError) as exc_info:
        asyncio.run(
            client.complete(model="m", prompt="p", image_data_url="data:,")
        )

    assert exc_info.value.status_code == status_code
    assert fragment in exc_info.value.message
    assert len(calls) == 1


def test_openrouter_client_network_failure() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("offline", request=request)

    client = _client(handler)

    with pytest.raises(RecognitionError) as exc_info:
        asyncio.run(client.complete(model="m", prompt="p", image_data_url="data:,"))

    assert exc_info.value.reason == "network"


def test_openrouter_client_empty_content_fails() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=_completion(None))

    client = _client(handler)

    with pytest.raises(RecognitionError) as exc_info:
        asyncio.run(client.complete(model="m", prompt="p", image_data_url="data:,"))

    assert exc_info.value.reason.startswith("malformed")
