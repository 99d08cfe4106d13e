from typing import Any


class PromptAdapter:
    """Adapts prompts for the OpenAI-compatible AI gateway."""

    @staticmethod
    def for_openai(
        system: str,
        messages: list[dict[str, str]],
    ) -> dict[str, Any]:
        """System prompt first, then the conversation as-is."""
        return {
            "messages": [
                {"role": "system", "content": system},
                *messages,
            ],
        }


def function_tool(name: str, description: str, parameters: dict[str, Any]) -> dict[str, Any]:
    """Wrap a JSON schema as an OpenAI function tool."""
    return {
        "type": "function",
        "function": {
            "name": name,
            "description": description,
            "parameters": parameters,
        },
    }


def forced_tool_choice(name: str) -> dict[str, Any]:
    """Force the model to answer through the named tool."""
    return {"type": "function", "function": {"name": name}}
