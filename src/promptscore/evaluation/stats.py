"""Reduce a collection of PromptScores into summary statistics."""

from __future__ import annotations

from collections import Counter
from collections.abc import Sequence

from promptscore.constants import (
    SCORE_BUCKET_WIDTH,
    TOP_TAGS_LIMIT,
    ScoreDimension,
)
from promptscore.evaluation.schemas import (
    PromptScore,
    ScoreAverages,
    ScoreDistributions,
    ScoringStats,
    TagCount,
)


def score_bucket(value: int) -> str:
    """Width-2 bucket label: 1-2 → "1-2", 7 → "7-8", 10 → "9-10"."""
    low = ((value - 1) // SCORE_BUCKET_WIDTH) * SCORE_BUCKET_WIDTH + 1
    return f"{low}-{low + SCORE_BUCKET_WIDTH - 1}"


def calculate_scoring_stats(
    scores: Sequence[PromptScore],
) -> ScoringStats:
    """Averages, bucket histograms, top 20 tags and category counts.

    Inputs are trusted to be already validated. Empty input yields
    all-zero averages and empty collections.
    """
    if not scores:
        return ScoringStats()

    count = len(scores)
    dims = list(ScoreDimension)

    averages = {
        d.value: sum(getattr(s, d.value) for s in scores) / count
        for d in dims
    }

    histograms: dict[str, dict[str, int]] = {d.value: {} for d in dims}
    for s in scores:
        for d in dims:
            bucket = score_bucket(getattr(s, d.value))
            hist = histograms[d.value]
            hist[bucket] = hist.get(bucket, 0) + 1

    # Counter preserves first-seen order and most_common() sorts stably,
    # so equal counts keep first-seen order.
    tag_counts = Counter(
        tag for s in scores for tag in s.suggested_tags
    )
    top_tags = [
        TagCount(tag=tag, count=n)
        for tag, n in tag_counts.most_common(TOP_TAGS_LIMIT)
    ]

    categories: dict[str, int] = {}
    for s in scores:
        key = str(s.category)
        categories[key] = categories.get(key, 0) + 1

    return ScoringStats(
        averages=ScoreAverages(**averages),
        distributions=ScoreDistributions(**histograms),
        top_tags=top_tags,
        category_distribution=categories,
    )
