"""Shared constants: single source of truth for cross-module values.

StrEnum members are str-compatible, so JSON payloads and persisted
records work unchanged.
"""

from __future__ import annotations

import math
from enum import StrEnum

# ── String Enums ─────────────────────────────────────────


class PromptCategory(StrEnum):
    """Coarse subject category assigned by the evaluator."""

    CREATIVE = "creative"
    TECHNICAL = "technical"
    BUSINESS = "business"
    EDUCATIONAL = "educational"
    OTHER = "other"


class ComplexityLevel(StrEnum):
    """How much prompting experience the prompt assumes."""

    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


class ScoreDimension(StrEnum):
    """The four scored dimensions, in rubric order."""

    CLARITY = "clarity"
    STRUCTURE = "structure"
    USEFULNESS = "usefulness"
    OVERALL = "overall"


# ── Score Range ──────────────────────────────────────────

MIN_SCORE = 1
MAX_SCORE = 10
MAX_SUGGESTED_TAGS = 10

# ── Fallback Values ──────────────────────────────────────

FALLBACK_SCORE = 5
FALLBACK_REASONING = "Evaluation failed - default score assigned"
FALLBACK_TAGS = ("untagged",)

ERROR_SCORE = 1
ERROR_REASONING = "Evaluation failed"
ERROR_TAGS = ("error",)
UNKNOWN_ERROR_MESSAGE = "Unknown error"

FALLBACK_AUTO_TAGS = ("prompt", "untagged")
FALLBACK_AUTO_TAG_CONFIDENCE = 0.1
FALLBACK_AUTO_TAG_REASONING = "Auto-tagging failed - default tags assigned"

NO_TITLE_PLACEHOLDER = "No title provided"
NO_DESCRIPTION_PLACEHOLDER = "No description provided"

# ── Circuit Breaker Configuration ────────────────────────

CB_LLM_FAILURE_THRESHOLD = 5
CB_LLM_RECOVERY_TIMEOUT = 30

# ── Retry Strategy ───────────────────────────────────────

RETRY_MAX_ATTEMPTS = 3
RETRY_INITIAL_WAIT = 2
RETRY_MAX_WAIT = 30

# ── Statistics ───────────────────────────────────────────

TOP_TAGS_LIMIT = 20
SCORE_BUCKET_WIDTH = 2

# ── Misc ─────────────────────────────────────────────────

ERROR_TRUNCATION_CHARS = 200

# ── Token Estimation ────────────────────────────────────

CHARS_PER_TOKEN_ESTIMATE = 4


def estimate_tokens(text: str) -> int:
    """Rough token estimate using chars-per-token ratio, rounded up."""
    return math.ceil(len(text) / CHARS_PER_TOKEN_ESTIMATE)
