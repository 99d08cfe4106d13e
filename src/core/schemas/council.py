"""Council debate types, persona roster and vote conventions."""

import enum
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, Field, field_validator, model_validator


class Vote(str, enum.Enum):
    go = "GO"
    experiment = "EXPERIMENT"
    pivot = "PIVOT"
    kill = "KILL"


# Aggregation convention used by callers; never applied to the response.
VOTE_WEIGHTS: dict[Vote, int] = {
    Vote.go: 2,
    Vote.experiment: 1,
    Vote.pivot: 0,
    Vote.kill: -2,
}

STRONG_DISAGREEMENT_SPREAD = 3


@dataclass(frozen=True)
class Persona:
    key: str
    name: str
    lens: str


PERSONAS: tuple[Persona, ...] = (
    Persona("strategist", "Strategist", "Vision, positioning, 10x thinking, market opportunity, long-term moats."),
    Persona("operator", "Operator", "Execution feasibility, costs, bottlenecks, timeline, resource needs."),
    Persona("skeptic", "Skeptic", "Risks, failure points, competitors, market timing, blind spots."),
    Persona("advocate", "User Advocate", "UX, emotional impact, simplicity, user pain points, adoption barriers."),
    Persona("growth", "Growth Architect", "Scale potential, virality, momentum, distribution channels, growth loops."),
)

BIAS_AXES: tuple[str, ...] = (
    "Overconfidence",
    "Market Fit",
    "Execution Risk",
    "User Appeal",
    "Growth Potential",
)


class PersonaAnalysis(BaseModel):
    analysis: str
    vote: Vote

    @field_validator("analysis")
    @classmethod
    def _not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("analysis must not be empty")
        return v


class BiasPoint(BaseModel):
    axis: str
    value: float = Field(ge=0, le=10)


class CouncilResult(BaseModel):
    """Five persona analyses in roster order plus the five-axis radar.

    Both lists empty is the only other accepted shape (no analysis available).
    """

    personas: list[PersonaAnalysis] = []
    bias_radar: list[BiasPoint] = []

    @model_validator(mode="after")
    def _check_shape(self) -> "CouncilResult":
        if not self.personas and not self.bias_radar:
            return self
        if len(self.personas) != len(PERSONAS):
            raise ValueError(f"expected {len(PERSONAS)} personas, got {len(self.personas)}")
        if len(self.bias_radar) != len(BIAS_AXES):
            raise ValueError(f"expected {len(BIAS_AXES)} bias_radar points, got {len(self.bias_radar)}")

        by_axis = {point.axis.strip().casefold(): point for point in self.bias_radar}
        try:
            ordered = [by_axis[axis.casefold()] for axis in BIAS_AXES]
        except KeyError as e:
            raise ValueError(f"bias_radar axes must be exactly {list(BIAS_AXES)}") from e
        self.bias_radar = [BiasPoint(axis=axis, value=p.value) for axis, p in zip(BIAS_AXES, ordered)]
        return self

    @property
    def is_empty(self) -> bool:
        return not self.personas

    def to_response(self) -> dict[str, Any]:
        return self.model_dump(mode="json")


def consensus_score(result: CouncilResult) -> int:
    """Sum of the persona vote weights."""
    return sum(VOTE_WEIGHTS[p.vote] for p in result.personas)


def has_strong_disagreement(result: CouncilResult) -> bool:
    """True when the personas' vote weights spread by 3 or more."""
    if not result.personas:
        return False
    weights = [VOTE_WEIGHTS[p.vote] for p in result.personas]
    return max(weights) - min(weights) >= STRONG_DISAGREEMENT_SPREAD
