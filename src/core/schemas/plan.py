"""Daily plan types and time helpers."""

import enum
import re
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator

DAY_START = "08:00"
DAY_END = "17:00"

_TIME_RE = re.compile(r"^(\d{1,2}):(\d{2})$")
_DURATION_RE = re.compile(r"^(\d+)\s*(m|min|h)$", re.IGNORECASE)


class BlockType(str, enum.Enum):
    deep = "deep"
    meeting = "meeting"
    break_ = "break"
    workout = "workout"
    reading = "reading"
    custom = "custom"


def to_minutes(hhmm: str) -> int:
    hours, minutes = hhmm.split(":")
    return int(hours) * 60 + int(minutes)


def from_minutes(total: int) -> str:
    return f"{total // 60:02d}:{total % 60:02d}"


def parse_duration_minutes(duration: str) -> int:
    """'45m' -> 45, '1h' -> 60, '30 min' -> 30."""
    match = _DURATION_RE.match(duration.strip())
    if not match:
        raise ValueError(f"invalid duration {duration!r}")
    amount, unit = int(match.group(1)), match.group(2).lower()
    return amount * 60 if unit == "h" else amount


def _coerce_id(v: Any) -> Any:
    if isinstance(v, int | float) and not isinstance(v, bool):
        return str(v)
    return v


class PlanItem(BaseModel):
    """A caller-owned task or goal; only id and text are read."""

    model_config = ConfigDict(extra="allow")

    id: str
    title: str | None = None
    content: str | None = None

    @field_validator("id", mode="before")
    @classmethod
    def _id_to_str(cls, v: Any) -> Any:
        return _coerce_id(v)

    @property
    def text(self) -> str:
        return " ".join(part for part in (self.title, self.content) if part)


class PlanRequest(BaseModel):
    tasks: list[PlanItem] = []
    goals: list[PlanItem] = []

    @field_validator("tasks", "goals", mode="before")
    @classmethod
    def _none_to_empty(cls, v: Any) -> Any:
        return [] if v is None else v

    @classmethod
    def from_context(cls, context: dict[str, Any] | None) -> "PlanRequest":
        context = context or {}
        return cls(tasks=context.get("tasks"), goals=context.get("goals"))


class ScheduleBlock(BaseModel):
    time: str
    title: str
    duration: str
    type: BlockType
    task_id: str | None = None

    @field_validator("task_id", mode="before")
    @classmethod
    def _task_id_to_str(cls, v: Any) -> Any:
        return _coerce_id(v)

    @field_validator("time")
    @classmethod
    def _normalise_time(cls, v: str) -> str:
        match = _TIME_RE.match(v.strip())
        if not match:
            raise ValueError(f"invalid time {v!r}")
        hours, minutes = int(match.group(1)), int(match.group(2))
        if minutes >= 60:
            raise ValueError(f"invalid time {v!r}")
        normalised = f"{hours:02d}:{minutes:02d}"
        if not to_minutes(DAY_START) <= to_minutes(normalised) <= to_minutes(DAY_END):
            raise ValueError(f"time {normalised} outside {DAY_START}-{DAY_END}")
        return normalised

    @field_validator("duration")
    @classmethod
    def _check_duration(cls, v: str) -> str:
        parse_duration_minutes(v)
        return v.strip()

    @field_validator("task_id")
    @classmethod
    def _blank_to_none(cls, v: str | None) -> str | None:
        return v or None

    @property
    def start_minutes(self) -> int:
        return to_minutes(self.time)

    @property
    def end_minutes(self) -> int:
        return self.start_minutes + parse_duration_minutes(self.duration)


class PlanResult(BaseModel):
    blocks: list[ScheduleBlock] = []

    def to_response(self) -> dict[str, Any]:
        return self.model_dump(mode="json", exclude_none=True)
