"""Pydantic models for evaluation input and output.

Field names are snake_case in Python and camelCase on the wire
(``suggestedTags``, ``estimatedTokens``), matching the JSON shape the
model is asked to produce and the records callers persist.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Annotated, Any

from pydantic import (
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    StrictStr,
)
from pydantic.alias_generators import to_camel

from promptscore.constants import (
    MAX_SCORE,
    MAX_SUGGESTED_TAGS,
    MIN_SCORE,
    ComplexityLevel,
    PromptCategory,
)


def _reject_non_numeric(v: Any) -> Any:
    """Refuse strings and booleans before pydantic's lax coercion."""
    if isinstance(v, (bool, str, bytes)):
        raise ValueError("must be a number")
    return v


Score = Annotated[
    int,
    BeforeValidator(_reject_non_numeric),
    Field(ge=MIN_SCORE, le=MAX_SCORE),
]
TokenCount = Annotated[
    int, BeforeValidator(_reject_non_numeric), Field(ge=0)
]
TagList = Annotated[
    list[StrictStr], Field(max_length=MAX_SUGGESTED_TAGS)
]


class _WireModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="ignore",
    )


class ScoreReasoning(_WireModel):
    """One justification string per scored dimension."""

    clarity: StrictStr
    structure: StrictStr
    usefulness: StrictStr
    overall: StrictStr


class PromptScore(_WireModel):
    """Evaluation outcome for one prompt."""

    clarity: Score
    structure: Score
    usefulness: Score
    overall: Score
    reasoning: ScoreReasoning
    suggested_tags: TagList
    category: PromptCategory
    complexity: ComplexityLevel
    estimated_tokens: TokenCount | None = None

    def unique_tags(self) -> list[str]:
        """Suggested tags with duplicates removed, first occurrence kept."""
        return list(dict.fromkeys(self.suggested_tags))


class AutoTagResult(_WireModel):
    """Tag suggestions for one prompt."""

    tags: TagList
    confidence: Annotated[
        float,
        BeforeValidator(_reject_non_numeric),
        Field(ge=0.0, le=1.0),
    ]
    reasoning: StrictStr


class BatchItem(_WireModel):
    """An identified prompt fed to the batch orchestrator.

    ``id`` is a correlation key only: it is neither validated nor
    deduplicated.
    """

    id: str
    content: str
    title: str | None = None
    description: str | None = None


class BatchResult(_WireModel):
    """Outcome for one BatchItem; ``error`` is set only on failure."""

    id: str
    score: PromptScore
    error: str | None = None


class ScoreAverages(_WireModel):
    clarity: float = 0.0
    structure: float = 0.0
    usefulness: float = 0.0
    overall: float = 0.0


class ScoreDistributions(_WireModel):
    """Per-dimension histograms keyed by bucket label ("1-2" ... "9-10")."""

    clarity: dict[str, int] = Field(default_factory=lambda: dict[str, int]())
    structure: dict[str, int] = Field(default_factory=lambda: dict[str, int]())
    usefulness: dict[str, int] = Field(
        default_factory=lambda: dict[str, int]()
    )
    overall: dict[str, int] = Field(default_factory=lambda: dict[str, int]())


class TagCount(_WireModel):
    tag: str
    count: int


class ScoringStats(_WireModel):
    """Aggregate view over a collection of PromptScores."""

    averages: ScoreAverages = Field(default_factory=ScoreAverages)
    distributions: ScoreDistributions = Field(
        default_factory=ScoreDistributions
    )
    top_tags: list[TagCount] = Field(
        default_factory=lambda: list[TagCount]()
    )
    category_distribution: dict[str, int] = Field(
        default_factory=lambda: dict[str, int]()
    )


@dataclass(frozen=True)
class BatchProgress:
    """Typed event emitted after each batch window completes."""

    completed: int
    total: int
    window: int
    windows: int
    failed: int = 0

    @property
    def percent(self) -> float:
        if self.total == 0:
            return 100.0
        return round((self.completed / self.total) * 100, 1)


type ProgressCallback = Callable[[BatchProgress], None]
