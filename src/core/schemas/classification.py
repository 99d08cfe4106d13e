"""Intent classification types.

The category of a result fixes its output type; see CATEGORY_OUTPUT_TYPES.
"""

import enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

MAX_TITLE_WORDS = 5

# Confidence bands (0-100)
AUTO_CLASSIFY_THRESHOLD = 85
CLARIFY_THRESHOLD = 70
ASK_THRESHOLD = 50


class Category(str, enum.Enum):
    savings_goal = "savings_goal"
    budget = "budget"
    fitness = "fitness"
    project = "project"
    note = "note"
    question = "question"


class OutputType(str, enum.Enum):
    dashboard = "dashboard"
    table = "table"
    tracker = "tracker"
    board = "board"
    note = "note"
    chat = "chat"


class FolderType(str, enum.Enum):
    finance = "finance"
    fitness = "fitness"
    project = "project"
    notes = "notes"


CATEGORY_OUTPUT_TYPES: dict[Category, OutputType] = {
    Category.savings_goal: OutputType.dashboard,
    Category.budget: OutputType.table,
    Category.fitness: OutputType.tracker,
    Category.project: OutputType.board,
    Category.note: OutputType.note,
    Category.question: OutputType.chat,
}

# Categories whose payload is a list of task titles
TASK_CATEGORIES = frozenset({Category.fitness, Category.project})


class FolderRef(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str | int | None = None
    title: str = ""
    type: str | None = None


class ClassificationContext(BaseModel):
    """Read-only snapshot of where the user is in the app."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    current_page: str | None = Field(default=None, alias="currentPage")
    current_folder_id: str | int | None = Field(default=None, alias="currentFolderId")
    current_folder_type: str | None = Field(default=None, alias="currentFolderType")
    current_folder_title: str | None = Field(default=None, alias="currentFolderTitle")
    existing_folders: list[FolderRef] = Field(default_factory=list, alias="existingFolders")

    @field_validator("existing_folders", mode="before")
    @classmethod
    def _none_to_empty(cls, v: Any) -> Any:
        return [] if v is None else v


class BudgetItem(BaseModel):
    item: str
    cost: float
    category: str | None = None


class ClassificationResult(BaseModel):
    category: Category
    title: str
    folder_type: FolderType
    output_type: OutputType
    confidence_score: float = Field(ge=0, le=100)
    use_current_folder: bool = False
    budget_items: list[BudgetItem] | None = None
    target_amount: float | None = None
    currency: str | None = None
    deadline: str | None = None
    tasks: list[str] | None = None

    @field_validator("title")
    @classmethod
    def _short_title(cls, v: str) -> str:
        words = v.split()
        if not words:
            raise ValueError("title must not be empty")
        return " ".join(words[:MAX_TITLE_WORDS])

    @field_validator("tasks")
    @classmethod
    def _drop_blank_tasks(cls, v: list[str] | None) -> list[str] | None:
        if v is None:
            return None
        return [t.strip() for t in v if t and t.strip()]

    @model_validator(mode="after")
    def _check_structure(self) -> "ClassificationResult":
        expected = CATEGORY_OUTPUT_TYPES[self.category]
        if self.output_type != expected:
            raise ValueError(
                f"output_type {self.output_type.value!r} does not match "
                f"category {self.category.value!r} (expected {expected.value!r})"
            )
        if self.category in TASK_CATEGORIES and not self.tasks:
            raise ValueError(f"category {self.category.value!r} requires tasks")
        return self

    def to_response(self) -> dict[str, Any]:
        return self.model_dump(mode="json", exclude_none=True)


def confidence_band(score: float) -> str:
    """Name the band a confidence score falls into."""
    if score >= AUTO_CLASSIFY_THRESHOLD:
        return "auto"
    if score >= CLARIFY_THRESHOLD:
        return "confirm"
    if score >= ASK_THRESHOLD:
        return "clarify"
    return "ask"


def needs_confirmation(result: ClassificationResult) -> bool:
    """True when the caller should offer a confirmation before acting."""
    return result.category != Category.question and confidence_band(result.confidence_score) == "confirm"
