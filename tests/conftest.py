"""Test fixtures for Flux AI."""

import json
import os
from collections.abc import Callable
from typing import Any

import httpx
import pytest

# Set test environment before importing app modules
os.environ.setdefault("APP_ENV", "testing")
os.environ["LANGFUSE_PUBLIC_KEY"] = ""

from src.core.config import Settings
from src.core.llm.gateway import AIGateway

GATEWAY_URL = "https://gateway.test/v1/chat/completions"
TEST_API_KEY = "test-key"

Handler = Callable[[httpx.Request], httpx.Response]


def tool_call_body(name: str, arguments: dict[str, Any] | str) -> dict[str, Any]:
    """Chat-completion body carrying one tool call."""
    raw = arguments if isinstance(arguments, str) else json.dumps(arguments)
    return {
        "choices": [
            {
                "message": {
                    "role": "assistant",
                    "tool_calls": [
                        {
                            "id": "call_1",
                            "type": "function",
                            "function": {"name": name, "arguments": raw},
                        }
                    ],
                }
            }
        ]
    }


def no_tool_call_body() -> dict[str, Any]:
    return {"choices": [{"message": {"role": "assistant", "content": "Sure!"}}]}


class RecordingHandler:
    """MockTransport handler that remembers every request it served."""

    def __init__(self, response: httpx.Response | Handler):
        self._response = response
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if callable(self._response):
            return self._response(request)
        return self._response

    @property
    def last_payload(self) -> dict[str, Any]:
        return json.loads(self.requests[-1].content)


@pytest.fixture
def make_gateway() -> Callable[[Handler], AIGateway]:
    """Gateway whose upstream is the given MockTransport handler."""

    def _make(handler: Handler) -> AIGateway:
        return AIGateway(
            api_key=TEST_API_KEY,
            url=GATEWAY_URL,
            timeout=5.0,
            transport=httpx.MockTransport(handler),
        )

    return _make


@pytest.fixture
def settings_with_key() -> Settings:
    return Settings(lovable_api_key=TEST_API_KEY, ai_gateway_url=GATEWAY_URL)


@pytest.fixture
def folder_context() -> dict[str, Any]:
    """Classification context with the user inside a finance folder."""
    return {
        "currentPage": "folder",
        "currentFolderId": "f-1",
        "currentFolderType": "finance",
        "currentFolderTitle": "Økonomi",
        "existingFolders": [
            {"id": "f-1", "title": "Økonomi", "type": "finance"},
            {"id": "f-2", "title": "Træning", "type": "fitness"},
        ],
    }


@pytest.fixture
def tool_call() -> Callable[..., dict[str, Any]]:
    """Builder for a chat-completion body carrying one tool call."""
    return tool_call_body


@pytest.fixture
def no_tool_call() -> dict[str, Any]:
    return no_tool_call_body()


@pytest.fixture
def recorder() -> type[RecordingHandler]:
    return RecordingHandler
