"""Prompt evaluation pipeline: scoring, tagging, batching, statistics."""

from promptscore.evaluation._llm_call import (
    LLMCallResult,
    guarded_llm_call,
)
from promptscore.evaluation.batch import batch_evaluate_prompts, error_score
from promptscore.evaluation.evaluator import evaluate_prompt, fallback_score
from promptscore.evaluation.schemas import (
    AutoTagResult,
    BatchItem,
    BatchProgress,
    BatchResult,
    PromptScore,
    ScoreReasoning,
    ScoringStats,
    TagCount,
)
from promptscore.evaluation.stats import calculate_scoring_stats, score_bucket
from promptscore.evaluation.tagger import fallback_tags, generate_auto_tags
from promptscore.evaluation.validator import (
    ParseError,
    ParseOk,
    ParseResult,
    parse_auto_tags,
    parse_prompt_score,
    validate_prompt_score,
)

__all__ = [
    "AutoTagResult",
    "BatchItem",
    "BatchProgress",
    "BatchResult",
    "LLMCallResult",
    "ParseError",
    "ParseOk",
    "ParseResult",
    "PromptScore",
    "ScoreReasoning",
    "ScoringStats",
    "TagCount",
    "batch_evaluate_prompts",
    "calculate_scoring_stats",
    "error_score",
    "evaluate_prompt",
    "fallback_score",
    "fallback_tags",
    "generate_auto_tags",
    "guarded_llm_call",
    "parse_auto_tags",
    "parse_prompt_score",
    "score_bucket",
    "validate_prompt_score",
]
