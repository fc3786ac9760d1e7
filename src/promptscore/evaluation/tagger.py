"""Suggest discovery tags for a prompt.

Runs as its own request with its own prompt, so a scoring failure
never affects tagging and vice versa.
"""

from __future__ import annotations

import logging

from promptscore.config import Settings
from promptscore.constants import (
    FALLBACK_AUTO_TAG_CONFIDENCE,
    FALLBACK_AUTO_TAG_REASONING,
    FALLBACK_AUTO_TAGS,
)
from promptscore.evaluation.chain import run_model_chain
from promptscore.evaluation.schemas import AutoTagResult
from promptscore.evaluation.validator import parse_auto_tags
from promptscore.prompts import tagging_messages
from promptscore.resilience.errors import classify_error

logger = logging.getLogger(__name__)


async def generate_auto_tags(
    content: str,
    title: str | None = None,
    description: str | None = None,
    settings: Settings | None = None,
) -> AutoTagResult:
    """Generate up to 10 tags plus a confidence in [0, 1].

    Returns ``fallback_tags()`` (confidence 0.1) on any failure.
    """
    if settings is None:
        settings = Settings()

    try:
        outcome = await run_model_chain(
            tagging_messages(content, title, description),
            parse_auto_tags,
            settings,
            temperature=settings.tagging_temperature,
            max_tokens=settings.tagging_max_tokens,
            component="tagger",
        )
    except Exception as e:
        logger.error(
            "event=auto_tag_fallback error_class=%s",
            classify_error(e).value,
            exc_info=True,
        )
        return fallback_tags()

    if outcome.value is None:
        logger.warning(
            "event=auto_tag_fallback error_class=%s detail=%s",
            outcome.error_class.value if outcome.error_class else "unknown",
            outcome.detail,
        )
        return fallback_tags()
    return outcome.value


def fallback_tags() -> AutoTagResult:
    """Low-confidence placeholder tags."""
    return AutoTagResult(
        tags=list(FALLBACK_AUTO_TAGS),
        confidence=FALLBACK_AUTO_TAG_CONFIDENCE,
        reasoning=FALLBACK_AUTO_TAG_REASONING,
    )
