"""Chat mode — streams the assistant's answer back as the gateway sends it."""

from pathlib import Path

from src.core.llm.gateway import AIGateway
from src.core.schemas.request import FluxRequest
from src.modes.base import ModeResult
from src.modes.prompt_loader import aload_prompt


class ChatMode:
    name = "chat"
    types = ["chat"]

    async def execute(self, request: FluxRequest, gateway: AIGateway, model: str) -> ModeResult:
        prompts = await aload_prompt(Path(__file__).parent)
        stream = await gateway.open_stream(
            mode="chat",
            model=model,
            system=prompts["system_prompt"],
            messages=request.conversation(),
        )
        return ModeResult(stream=stream)


mode = ChatMode()
