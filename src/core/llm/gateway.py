"""Client for the OpenAI-compatible chat-completion gateway, over httpx.

A gateway instance lives for one request only. Each call opens its own
``httpx.AsyncClient`` so nothing is shared between requests.
"""

import json
import logging
from collections.abc import AsyncIterator
from typing import Any

import anyio
import httpx

from src.core.exceptions import MalformedResponseError
from src.core.llm.errors import raise_for_upstream
from src.core.llm.prompts import PromptAdapter, forced_tool_choice, function_tool

logger = logging.getLogger(__name__)


class UpstreamStream:
    """An open streamed upstream response, already checked for errors."""

    def __init__(self, client: httpx.AsyncClient, response: httpx.Response) -> None:
        self._client = client
        self._response = response
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    async def relay(self) -> AsyncIterator[bytes]:
        """Yield upstream bytes as they arrive, then close the upstream.

        Runs the cleanup on cancellation too, so a caller that hangs up
        tears down the upstream stream.
        """
        try:
            async for chunk in self._response.aiter_bytes():
                yield chunk
        finally:
            await self.aclose()

    async def aclose(self) -> None:
        """Close the upstream response and client; safe to call more than once.

        Shielded so a cancelled caller cannot interrupt the teardown halfway.
        """
        if self._closed:
            return
        self._closed = True
        with anyio.CancelScope(shield=True):
            try:
                await self._response.aclose()
            finally:
                await self._client.aclose()


class AIGateway:
    """Thin client for the chat-completion endpoint of the AI gateway."""

    def __init__(
        self,
        api_key: str,
        url: str,
        timeout: float = 60.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._api_key = api_key
        self._url = url
        self._timeout = timeout
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            headers={
                "Authorization": f"Bearer {self._api_key}",
                "Content-Type": "application/json",
            },
            timeout=self._timeout,
            transport=self._transport,
        )

    async def complete_with_tool(
        self,
        *,
        mode: str,
        model: str,
        system: str,
        messages: list[dict[str, str]],
        tool_name: str,
        tool_description: str,
        parameters: dict[str, Any],
    ) -> dict[str, Any]:
        """Send a forced tool-call request and return the decoded response body."""
        payload = {
            "model": model,
            **PromptAdapter.for_openai(system, messages),
            "tools": [function_tool(tool_name, tool_description, parameters)],
            "tool_choice": forced_tool_choice(tool_name),
        }
        async with self._client() as client:
            response = await client.post(self._url, json=payload)
            await raise_for_upstream(response, mode)
            try:
                return response.json()
            except ValueError as e:
                raise MalformedResponseError(f"{mode}: response body is not JSON") from e

    async def open_stream(
        self,
        *,
        mode: str,
        model: str,
        system: str,
        messages: list[dict[str, str]],
    ) -> UpstreamStream:
        """Start a streamed completion.

        Upstream errors are raised here, before any byte reaches the caller.
        """
        payload = {
            "model": model,
            **PromptAdapter.for_openai(system, messages),
            "stream": True,
        }
        client = self._client()
        try:
            request = client.build_request("POST", self._url, json=payload)
            response = await client.send(request, stream=True)
        except BaseException:
            await client.aclose()
            raise

        try:
            await raise_for_upstream(response, mode)
        except BaseException:
            await response.aclose()
            await client.aclose()
            raise
        return UpstreamStream(client, response)


def extract_tool_arguments(data: Any, tool_name: str) -> dict[str, Any]:
    """Return the JSON-decoded arguments of the first tool call.

    Raises MalformedResponseError when the response carries no tool call,
    a call to a different tool, or arguments that are not a JSON object.
    """
    try:
        tool_call = data["choices"][0]["message"]["tool_calls"][0]
        function = tool_call["function"]
        raw_arguments = function["arguments"]
    except (KeyError, IndexError, TypeError) as e:
        raise MalformedResponseError(f"{tool_name}: no tool call in response") from e

    name = function.get("name")
    if name and name != tool_name:
        raise MalformedResponseError(f"{tool_name}: unexpected tool call {name!r}")

    if isinstance(raw_arguments, dict):
        arguments = raw_arguments
    else:
        try:
            arguments = json.loads(raw_arguments)
        except (TypeError, ValueError) as e:
            raise MalformedResponseError(f"{tool_name}: arguments are not valid JSON") from e

    if not isinstance(arguments, dict):
        raise MalformedResponseError(f"{tool_name}: arguments are not a JSON object")
    return arguments
