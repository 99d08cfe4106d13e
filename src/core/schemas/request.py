from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator


class ConversationTurn(BaseModel):
    """One chat message, forwarded to the gateway untouched."""

    model_config = ConfigDict(extra="allow")

    role: str
    content: Any = ""


class FluxRequest(BaseModel):
    """Envelope accepted by the AI endpoint."""

    type: str | None = None
    messages: list[ConversationTurn] = []
    context: dict[str, Any] | None = None

    @field_validator("messages", mode="before")
    @classmethod
    def _none_to_empty(cls, v: Any) -> Any:
        return [] if v is None else v

    def conversation(self) -> list[dict[str, Any]]:
        return [turn.model_dump(exclude_none=True) for turn in self.messages]

    def latest_user_text(self) -> str:
        """Text content of the last turn, or an empty string."""
        if not self.messages:
            return ""
        content = self.messages[-1].content
        return content if isinstance(content, str) else ""
