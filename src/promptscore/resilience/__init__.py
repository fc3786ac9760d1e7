"""Failure classification for LLM calls."""

from promptscore.resilience.errors import (
    ErrorClass,
    classify_error,
    is_retryable,
)

__all__ = ["ErrorClass", "classify_error", "is_retryable"]
