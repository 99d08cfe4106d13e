"""Council mode — five adversarial persona reviews of one idea."""

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from src.core.exceptions import MalformedResponseError
from src.core.llm.gateway import AIGateway, extract_tool_arguments
from src.core.observability import observe
from src.core.schemas.council import BIAS_AXES, PERSONAS, CouncilResult, Vote
from src.core.schemas.request import FluxRequest
from src.modes.base import ModeResult
from src.modes.prompt_loader import aload_prompt

logger = logging.getLogger(__name__)

COUNCIL_PARAMETERS: dict[str, Any] = {
    "type": "object",
    "properties": {
        "personas": {
            "type": "array",
            "description": (
                "Exactly 5 persona analyses in order: "
                + ", ".join(p.name for p in PERSONAS)
            ),
            "items": {
                "type": "object",
                "properties": {
                    "analysis": {
                        "type": "string",
                        "description": "80-150 word analysis from this persona's perspective",
                    },
                    "vote": {"type": "string", "enum": [v.value for v in Vote]},
                },
                "required": ["analysis", "vote"],
            },
        },
        "bias_radar": {
            "type": "array",
            "description": "5 radar chart data points",
            "items": {
                "type": "object",
                "properties": {
                    "axis": {"type": "string", "enum": list(BIAS_AXES)},
                    "value": {"type": "number", "description": "Score 0-10"},
                },
                "required": ["axis", "value"],
            },
        },
    },
    "required": ["personas", "bias_radar"],
}


def build_system_prompt(template: str) -> str:
    roster = "\n".join(
        f"{i}. THE {p.name.upper()} — {p.lens}" for i, p in enumerate(PERSONAS, start=1)
    )
    return template.format(personas=roster, axes=json.dumps(list(BIAS_AXES)))


def parse_council(data: Any, tool_name: str) -> CouncilResult:
    arguments = extract_tool_arguments(data, tool_name)
    try:
        result = CouncilResult.model_validate(arguments)
    except ValidationError as e:
        raise MalformedResponseError(f"{tool_name}: {e.error_count()} invalid field(s)") from e
    if result.is_empty:
        raise MalformedResponseError(f"{tool_name}: no persona analyses")
    return result


@observe(name="council")
async def debate(idea: str, gateway: AIGateway, model: str) -> CouncilResult:
    """Run the idea past the five personas.

    Anything short of five complete analyses and a full radar yields the
    empty result.
    """
    prompts = await aload_prompt(Path(__file__).parent)
    tool_name = prompts["tool_name"]

    data = await gateway.complete_with_tool(
        mode="council",
        model=model,
        system=build_system_prompt(prompts["system_prompt"]),
        messages=[{"role": "user", "content": idea}],
        tool_name=tool_name,
        tool_description=prompts["tool_description"],
        parameters=COUNCIL_PARAMETERS,
    )
    try:
        return parse_council(data, tool_name)
    except MalformedResponseError as e:
        logger.warning("council: returning empty analysis (%s)", e)
        return CouncilResult()


class CouncilMode:
    name = "council"
    types = ["council"]

    async def execute(self, request: FluxRequest, gateway: AIGateway, model: str) -> ModeResult:
        result = await debate(request.latest_user_text(), gateway, model)
        return ModeResult(payload=result.to_response())


mode = CouncilMode()
