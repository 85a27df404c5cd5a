"""Shared fixtures for pr_reviewer tests."""

from __future__ import annotations

import asyncio
import json
from typing import Any

import httpx
import pytest

from pr_reviewer.core.config import Credentials, Options


def openai_completion(text: str | None, completion_id: str = "chatcmpl-1") -> dict[str, Any]:
    """Minimal chat.completion payload."""
    return {
        "id": completion_id,
        "object": "chat.completion",
        "created": 1_700_000_000,
        "model": "gpt-4.1",
        "choices": [
            {
                "index": 0,
                "finish_reason": "stop",
                "message": {"role": "assistant", "content": text},
            }
        ],
        "usage": {"prompt_tokens": 10, "completion_tokens": 5, "total_tokens": 15},
    }


def claude_message(text: str, message_id: str = "msg_1") -> dict[str, Any]:
    """Minimal Messages API payload."""
    return {
        "id": message_id,
        "type": "message",
        "role": "assistant",
        "model": "claude-sonnet-4",
        "content": [{"type": "text", "text": text}],
        "stop_reason": "end_turn",
        "stop_sequence": None,
        "usage": {"input_tokens": 10, "output_tokens": 5},
    }


def server_error() -> httpx.Response:
    return httpx.Response(500, json={"error": {"type": "api_error", "message": "boom"}})


class RecordingTransport:
    """
    Mock HTTP backend for the provider SDKs.

    Replays the queued responses in order (the last one repeats) and keeps
    every request it saw.
    """

    def __init__(self, *responses: dict[str, Any] | httpx.Response):
        self.responses = list(responses)
        self.requests: list[httpx.Request] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        item = self.responses.pop(0) if len(self.responses) > 1 else self.responses[0]
        if isinstance(item, httpx.Response):
            return item
        return httpx.Response(200, json=item)

    @property
    def bodies(self) -> list[dict[str, Any]]:
        return [json.loads(request.content) for request in self.requests]

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handler))


class GatedTransport(RecordingTransport):
    """
    RecordingTransport that holds every response until `release` is called.

    Lets a test start several exchanges and act while they are in flight.
    """

    def __init__(self, *responses: dict[str, Any] | httpx.Response):
        super().__init__(*responses)
        self.released = asyncio.Event()
        self._arrival = asyncio.Event()

    async def handler(self, request: httpx.Request) -> httpx.Response:
        response = super().handler(request)
        self._arrival.set()
        await self.released.wait()
        return response

    async def wait_for_requests(self, count: int) -> None:
        while len(self.requests) < count:
            await self._arrival.wait()
            self._arrival.clear()

    def release(self) -> None:
        self.released.set()


@pytest.fixture(autouse=True)
def sleeps(monkeypatch):
    """Skip retry backoff and record the requested delays."""
    delays: list[float] = []

    async def fake_sleep(delay, *args, **kwargs):
        delays.append(delay)

    monkeypatch.setattr("pr_reviewer.llm.retry.asyncio.sleep", fake_sleep)
    return delays


@pytest.fixture
def options():
    """OpenAI session options with two retries."""
    return Options(ai_provider="openai", retries=2, model_temperature=0.3, language="en-US")


@pytest.fixture
def claude_options():
    """Claude session options with two retries."""
    return Options(ai_provider="claude", retries=2, model_temperature=0.3, language="fr-FR")


@pytest.fixture
def credentials():
    """Credentials for both providers."""
    return Credentials(openai_api_key="sk-test", anthropic_api_key="sk-ant-test")
