"""Evaluate many prompts in fixed-size, rate-limited windows."""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Sequence

from promptscore.config import Settings
from promptscore.constants import (
    ERROR_REASONING,
    ERROR_SCORE,
    ERROR_TAGS,
    UNKNOWN_ERROR_MESSAGE,
    ComplexityLevel,
    PromptCategory,
)
from promptscore.evaluation.evaluator import evaluate_prompt
from promptscore.evaluation.schemas import (
    BatchItem,
    BatchProgress,
    BatchResult,
    ProgressCallback,
    PromptScore,
    ScoreReasoning,
)

logger = logging.getLogger(__name__)


async def batch_evaluate_prompts(
    items: Sequence[BatchItem],
    settings: Settings | None = None,
    *,
    on_progress: ProgressCallback | None = None,
) -> list[BatchResult]:
    """Evaluate ``items`` window by window.

    1. Split into contiguous windows of ``settings.batch_size``
    2. Run every item of a window concurrently; wait for all of them
    3. Sleep ``settings.batch_delay_seconds`` before the next window
       (never after the last)

    Returns one BatchResult per item, in input order. An item whose
    evaluation raises gets ``error_score()`` and an ``error`` message;
    the rest of the batch is unaffected. Duplicate ids are kept as-is.
    """
    if settings is None:
        settings = Settings()

    total = len(items)
    if total == 0:
        return []

    size = settings.batch_size
    windows = [items[i:i + size] for i in range(0, total, size)]
    results: list[BatchResult] = []
    failed = 0
    started = time.monotonic()

    for index, window in enumerate(windows, 1):
        window_results = await _run_window(window, settings)
        results.extend(window_results)
        failed += sum(1 for r in window_results if r.error is not None)

        logger.debug(
            "event=batch_window_done window=%d windows=%d size=%d",
            index,
            len(windows),
            len(window),
        )
        if on_progress is not None:
            on_progress(
                BatchProgress(
                    completed=len(results),
                    total=total,
                    window=index,
                    windows=len(windows),
                    failed=failed,
                )
            )

        if index < len(windows):
            await asyncio.sleep(settings.batch_delay_seconds)

    logger.info(
        "event=batch_complete total=%d windows=%d failed=%d"
        " duration_ms=%.0f",
        total,
        len(windows),
        failed,
        (time.monotonic() - started) * 1000,
    )
    return results


async def _run_window(
    window: Sequence[BatchItem], settings: Settings
) -> list[BatchResult]:
    """Start every item, then wait for all; results keep window order."""
    async with asyncio.TaskGroup() as tg:
        tasks = [
            tg.create_task(_evaluate_item(item, settings))
            for item in window
        ]
    return [t.result() for t in tasks]


async def _evaluate_item(
    item: BatchItem, settings: Settings
) -> BatchResult:
    try:
        score = await evaluate_prompt(
            item.content, item.title, item.description, settings
        )
    except Exception as e:
        logger.warning(
            "event=batch_item_failed id=%s error=%s",
            item.id,
            e,
            exc_info=True,
        )
        return BatchResult(
            id=item.id,
            score=error_score(),
            error=str(e) or UNKNOWN_ERROR_MESSAGE,
        )
    return BatchResult(id=item.id, score=score)


def error_score() -> PromptScore:
    """Pessimistic 1/10 score for items whose evaluation raised."""
    return PromptScore(
        clarity=ERROR_SCORE,
        structure=ERROR_SCORE,
        usefulness=ERROR_SCORE,
        overall=ERROR_SCORE,
        reasoning=ScoreReasoning(
            clarity=ERROR_REASONING,
            structure=ERROR_REASONING,
            usefulness=ERROR_REASONING,
            overall=ERROR_REASONING,
        ),
        suggested_tags=list(ERROR_TAGS),
        category=PromptCategory.OTHER,
        complexity=ComplexityLevel.INTERMEDIATE,
    )
