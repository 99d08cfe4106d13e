"""Classify mode — free text into one typed record, or a clarifying question."""

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from src.core.exceptions import MalformedResponseError
from src.core.llm.gateway import AIGateway, extract_tool_arguments
from src.core.observability import observe
from src.core.schemas.classification import (
    CATEGORY_OUTPUT_TYPES,
    CLARIFY_THRESHOLD,
    Category,
    ClassificationContext,
    ClassificationResult,
    FolderType,
    OutputType,
)
from src.core.schemas.request import FluxRequest
from src.modes.base import ModeResult
from src.modes.prompt_loader import aload_prompt

logger = logging.getLogger(__name__)

CLASSIFY_PARAMETERS: dict[str, Any] = {
    "type": "object",
    "properties": {
        "category": {
            "type": "string",
            "enum": [c.value for c in Category],
        },
        "title": {"type": "string", "description": "Short title (max 5 words)"},
        "folder_type": {
            "type": "string",
            "enum": [f.value for f in FolderType],
        },
        "output_type": {
            "type": "string",
            "enum": [o.value for o in OutputType],
            "description": "Determines which UI layout component to render",
        },
        "confidence_score": {
            "type": "number",
            "description": (
                "Confidence score 0-100 based on intent clarity, context match, "
                "domain certainty, and duplicate risk"
            ),
        },
        "budget_items": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "item": {"type": "string"},
                    "cost": {"type": "number"},
                    "category": {"type": "string"},
                },
                "required": ["item", "cost"],
            },
        },
        "target_amount": {"type": "number"},
        "currency": {"type": "string"},
        "deadline": {"type": "string"},
        "tasks": {
            "type": "array",
            "items": {"type": "string"},
        },
        "use_current_folder": {
            "type": "boolean",
            "description": "True if user explicitly wants to place content in the current active folder",
        },
    },
    "required": ["category", "title", "folder_type", "output_type", "confidence_score"],
}

# Cleared when a low-confidence answer is turned into a question
_PAYLOAD_FIELDS = ("budget_items", "target_amount", "currency", "deadline", "tasks")


def fallback_result() -> ClassificationResult:
    return ClassificationResult(
        category=Category.note,
        title="Note",
        folder_type=FolderType.notes,
        output_type=OutputType.note,
        confidence_score=50,
    )


def build_system_prompt(context: ClassificationContext, template: str) -> str:
    folders = (
        json.dumps(
            [f.model_dump(exclude_none=True) for f in context.existing_folders],
            ensure_ascii=False,
        )
        if context.existing_folders
        else "none"
    )
    return template.format(
        current_page=context.current_page or "stream",
        current_folder_id=context.current_folder_id or "none",
        current_folder_type=context.current_folder_type or "none",
        current_folder_title=context.current_folder_title or "none",
        existing_folders=folders,
    )


def apply_confidence_gate(result: ClassificationResult) -> ClassificationResult:
    """Turn anything below the clarify threshold into a question."""
    if result.category == Category.question or result.confidence_score >= CLARIFY_THRESHOLD:
        return result
    logger.info(
        "classify: confidence %.0f below %d, asking instead of %s",
        result.confidence_score,
        CLARIFY_THRESHOLD,
        result.category.value,
    )
    return result.model_copy(
        update={
            "category": Category.question,
            "output_type": CATEGORY_OUTPUT_TYPES[Category.question],
            **{name: None for name in _PAYLOAD_FIELDS},
        }
    )


def parse_classification(data: Any, tool_name: str) -> ClassificationResult:
    arguments = extract_tool_arguments(data, tool_name)
    try:
        result = ClassificationResult.model_validate(arguments)
    except ValidationError as e:
        raise MalformedResponseError(f"{tool_name}: {e.error_count()} invalid field(s)") from e
    return apply_confidence_gate(result)


@observe(name="classify")
async def classify(
    conversation: list[dict[str, Any]],
    context: ClassificationContext,
    gateway: AIGateway,
    model: str,
) -> ClassificationResult:
    """Classify the latest user turn against the context snapshot.

    Upstream 429/402/other errors propagate; a missing or invalid tool call
    yields the default note result.
    """
    prompts = await aload_prompt(Path(__file__).parent)
    tool_name = prompts["tool_name"]

    data = await gateway.complete_with_tool(
        mode="classify",
        model=model,
        system=build_system_prompt(context, prompts["system_prompt"]),
        messages=conversation,
        tool_name=tool_name,
        tool_description=prompts["tool_description"],
        parameters=CLASSIFY_PARAMETERS,
    )
    try:
        return parse_classification(data, tool_name)
    except MalformedResponseError as e:
        logger.warning("classify: falling back to default note (%s)", e)
        return fallback_result()


class ClassifyMode:
    name = "classify"
    types = ["classify"]

    async def execute(self, request: FluxRequest, gateway: AIGateway, model: str) -> ModeResult:
        context = ClassificationContext.model_validate(request.context or {})
        result = await classify(request.conversation(), context, gateway, model)
        return ModeResult(payload=result.to_response())


mode = ClassifyMode()
