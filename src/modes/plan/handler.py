"""Plan mode — tasks and goals into a time-ordered day of schedule blocks."""

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from src.core.exceptions import MalformedResponseError
from src.core.llm.gateway import AIGateway, extract_tool_arguments
from src.core.observability import observe
from src.core.schemas.plan import (
    DAY_END,
    DAY_START,
    BlockType,
    PlanItem,
    PlanRequest,
    PlanResult,
    ScheduleBlock,
    from_minutes,
    parse_duration_minutes,
    to_minutes,
)
from src.core.schemas.request import FluxRequest
from src.modes.base import ModeResult
from src.modes.prompt_loader import aload_prompt

logger = logging.getLogger(__name__)

PLAN_PARAMETERS: dict[str, Any] = {
    "type": "object",
    "properties": {
        "blocks": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "time": {"type": "string", "description": "24-hour HH:MM, e.g. 08:00, 10:30"},
                    "title": {"type": "string"},
                    "duration": {"type": "string", "description": "e.g. 30m, 45m, 60m, 90m"},
                    "type": {"type": "string", "enum": [t.value for t in BlockType]},
                    "task_id": {"type": "string", "description": "ID of linked task if applicable"},
                },
                "required": ["time", "title", "duration", "type"],
            },
        },
    },
    "required": ["blocks"],
}

# Checked in order; first match wins
TYPE_KEYWORDS: tuple[tuple[BlockType, tuple[str, ...]], ...] = (
    (BlockType.deep, ("video", "filming", "content", "strategy", "plan", "research", "design", "write", "build", "code")),
    (BlockType.meeting, ("call", "sync", "meeting", "standup", "review")),
    (BlockType.workout, ("run", "gym", "workout", "yoga", "walk")),
    (BlockType.reading, ("read", "study", "learn")),
)

DEFAULT_DURATIONS: dict[BlockType, str] = {
    BlockType.meeting: "30m",
    BlockType.break_: "15m",
}
DEFAULT_TASK_DURATION = "45m"


def classify_task_type(text: str) -> BlockType:
    """Keyword match on the task text; ``custom`` when nothing matches."""
    lowered = text.lower()
    for block_type, keywords in TYPE_KEYWORDS:
        if any(keyword in lowered for keyword in keywords):
            return block_type
    return BlockType.custom


def default_duration(block_type: BlockType) -> str:
    return DEFAULT_DURATIONS.get(block_type, DEFAULT_TASK_DURATION)


def _items_json(items: list[PlanItem]) -> str:
    return json.dumps([item.model_dump(exclude_none=True) for item in items], ensure_ascii=False)


def reconcile_blocks(blocks: list[ScheduleBlock], request: PlanRequest) -> list[ScheduleBlock]:
    """Enforce closed world and completeness, then sort by time.

    Blocks linked to unknown ids are dropped. Tasks left unlinked are
    appended after the last block with keyword-derived type and default
    duration.
    """
    known_ids = {item.id for item in request.tasks} | {item.id for item in request.goals}
    kept = [b for b in blocks if b.task_id is None or b.task_id in known_ids]
    if len(kept) != len(blocks):
        logger.warning("plan: dropped %d block(s) linked to unknown ids", len(blocks) - len(kept))

    linked = {b.task_id for b in kept if b.task_id}
    missing = [task for task in request.tasks if task.id not in linked]
    if missing:
        logger.warning("plan: scheduling %d task(s) the model skipped", len(missing))

    cursor = max((b.end_minutes for b in kept), default=to_minutes(DAY_START))
    for task in missing:
        block_type = classify_task_type(task.text)
        duration = default_duration(block_type)
        start = min(cursor, to_minutes(DAY_END))
        kept.append(
            ScheduleBlock(
                time=from_minutes(start),
                title=task.title or task.content or task.id,
                duration=duration,
                type=block_type,
                task_id=task.id,
            )
        )
        cursor = start + parse_duration_minutes(duration)

    return sorted(kept, key=lambda b: b.start_minutes)


def parse_plan(data: Any, tool_name: str) -> PlanResult:
    arguments = extract_tool_arguments(data, tool_name)
    try:
        return PlanResult.model_validate(arguments)
    except ValidationError as e:
        raise MalformedResponseError(f"{tool_name}: {e.error_count()} invalid field(s)") from e


@observe(name="plan")
async def plan(
    tasks: list[PlanItem],
    goals: list[PlanItem],
    gateway: AIGateway,
    model: str,
) -> PlanResult:
    """Build today's schedule from the caller's tasks and goals.

    An unusable model answer yields an empty plan, never an error.
    """
    request = PlanRequest(tasks=tasks, goals=goals)
    prompts = await aload_prompt(Path(__file__).parent)
    tool_name = prompts["tool_name"]
    user_prompt = prompts["user_prompt"].format(
        tasks=_items_json(request.tasks),
        goals=_items_json(request.goals),
    )

    data = await gateway.complete_with_tool(
        mode="plan",
        model=model,
        system=prompts["system_prompt"],
        messages=[{"role": "user", "content": user_prompt}],
        tool_name=tool_name,
        tool_description=prompts["tool_description"],
        parameters=PLAN_PARAMETERS,
    )
    try:
        result = parse_plan(data, tool_name)
    except MalformedResponseError as e:
        logger.warning("plan: returning empty plan (%s)", e)
        return PlanResult()
    return PlanResult(blocks=reconcile_blocks(result.blocks, request))


class PlanMode:
    name = "plan"
    types = ["plan"]

    async def execute(self, request: FluxRequest, gateway: AIGateway, model: str) -> ModeResult:
        plan_request = PlanRequest.from_context(request.context)
        result = await plan(plan_request.tasks, plan_request.goals, gateway, model)
        return ModeResult(payload=result.to_response())


mode = PlanMode()
