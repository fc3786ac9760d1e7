"""Score a single prompt with the completion API."""

from __future__ import annotations

import logging

from promptscore.config import Settings
from promptscore.constants import (
    FALLBACK_REASONING,
    FALLBACK_SCORE,
    FALLBACK_TAGS,
    ComplexityLevel,
    PromptCategory,
    estimate_tokens,
)
from promptscore.evaluation.chain import run_model_chain
from promptscore.evaluation.schemas import PromptScore, ScoreReasoning
from promptscore.evaluation.validator import parse_prompt_score
from promptscore.prompts import evaluation_messages
from promptscore.resilience.errors import classify_error

logger = logging.getLogger(__name__)


async def evaluate_prompt(
    content: str,
    title: str | None = None,
    description: str | None = None,
    settings: Settings | None = None,
) -> PromptScore:
    """Score a prompt on clarity, structure, usefulness and overall.

    Always returns a well-formed PromptScore: any failure (transport,
    timeout, open circuit, empty or invalid response) yields
    ``fallback_score(content)`` instead of an exception.
    """
    if settings is None:
        settings = Settings()

    try:
        outcome = await run_model_chain(
            evaluation_messages(content, title, description),
            parse_prompt_score,
            settings,
            temperature=settings.scoring_temperature,
            max_tokens=settings.scoring_max_tokens,
            component="evaluator",
        )
    except Exception as e:
        logger.error(
            "event=evaluation_fallback error_class=%s content_len=%d",
            classify_error(e).value,
            len(content),
            exc_info=True,
        )
        return fallback_score(content)

    if outcome.value is not None:
        logger.debug(
            "event=evaluation_complete model=%s overall=%d",
            outcome.model,
            outcome.value.overall,
        )
        return outcome.value

    logger.warning(
        "event=evaluation_fallback error_class=%s content_len=%d detail=%s",
        outcome.error_class.value if outcome.error_class else "unknown",
        len(content),
        outcome.detail,
    )
    return fallback_score(content)


def fallback_score(content: str) -> PromptScore:
    """Neutral 5/10 score substituted when evaluation fails."""
    return PromptScore(
        clarity=FALLBACK_SCORE,
        structure=FALLBACK_SCORE,
        usefulness=FALLBACK_SCORE,
        overall=FALLBACK_SCORE,
        reasoning=ScoreReasoning(
            clarity=FALLBACK_REASONING,
            structure=FALLBACK_REASONING,
            usefulness=FALLBACK_REASONING,
            overall=FALLBACK_REASONING,
        ),
        suggested_tags=list(FALLBACK_TAGS),
        category=PromptCategory.OTHER,
        complexity=ComplexityLevel.INTERMEDIATE,
        estimated_tokens=estimate_tokens(content),
    )
