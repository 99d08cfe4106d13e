from src.core.schemas.classification import (
    CATEGORY_OUTPUT_TYPES,
    BudgetItem,
    Category,
    ClassificationContext,
    ClassificationResult,
    FolderType,
    OutputType,
)
from src.core.schemas.council import BIAS_AXES, PERSONAS, CouncilResult, Vote
from src.core.schemas.plan import BlockType, PlanRequest, PlanResult, ScheduleBlock
from src.core.schemas.request import ConversationTurn, FluxRequest

__all__ = [
    "BIAS_AXES",
    "CATEGORY_OUTPUT_TYPES",
    "PERSONAS",
    "BlockType",
    "BudgetItem",
    "Category",
    "ClassificationContext",
    "ClassificationResult",
    "ConversationTurn",
    "CouncilResult",
    "FluxRequest",
    "FolderType",
    "OutputType",
    "PlanRequest",
    "PlanResult",
    "ScheduleBlock",
    "Vote",
]
