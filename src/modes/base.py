from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from src.core.llm.gateway import AIGateway, UpstreamStream
    from src.core.schemas.request import FluxRequest

DEFAULT_MODE = "chat"


@dataclass
class ModeResult:
    """Result of a mode: a JSON payload or an open upstream stream."""

    payload: dict[str, Any] | None = None
    stream: UpstreamStream | None = None


class BaseMode(Protocol):
    """Interface for all request modes."""

    name: str
    types: list[str]

    async def execute(
        self,
        request: FluxRequest,
        gateway: AIGateway,
        model: str,
    ) -> ModeResult: ...


class ModeRegistry:
    """Maps request ``type`` values to modes; anything unknown goes to chat."""

    def __init__(self):
        self._modes: dict[str, BaseMode] = {}

    def register(self, mode: BaseMode) -> None:
        for request_type in mode.types:
            self._modes[request_type] = mode

    def get(self, request_type: str | None) -> BaseMode:
        mode = self._modes.get(request_type or DEFAULT_MODE)
        if mode is None:
            mode = self._modes[DEFAULT_MODE]
        return mode

    def all_modes(self) -> list[BaseMode]:
        return list({id(m): m for m in self._modes.values()}.values())
