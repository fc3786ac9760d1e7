"""Shared test fixtures: fake LLM responses, breaker and retry resets."""

import os

# Force demo API keys for all tests: no real LLM calls.
# Set unconditionally at import time, so real keys in the shell
# environment are overwritten before any Settings() is created.
os.environ["ANTHROPIC_API_KEY"] = "for-demo-purposes-only"
os.environ["OPENAI_API_KEY"] = "for-demo-purposes-only"

import json
from typing import Any

import pytest
from circuitbreaker import CircuitBreakerMonitor
from tenacity import wait_none

from promptscore.config import Settings
from promptscore.evaluation._llm_call import (
    _breaker_registry,
    guarded_llm_call,
)


@pytest.fixture(autouse=True)
def _reset_breakers() -> None:
    """Reset circuit breakers between tests."""
    _breaker_registry.clear()
    for cb in CircuitBreakerMonitor.get_circuits():
        cb.reset()  # type: ignore[union-attr]


@pytest.fixture(autouse=True)
def _disable_retry_wait() -> Any:
    """Disable tenacity wait time for fast tests."""
    original_wait = guarded_llm_call.retry.wait  # type: ignore[union-attr]
    guarded_llm_call.retry.wait = wait_none()  # type: ignore[union-attr]
    yield
    guarded_llm_call.retry.wait = original_wait  # type: ignore[union-attr]


@pytest.fixture
def settings() -> Settings:
    """Single-model settings with no inter-window delay."""
    return Settings(
        litellm_model_chain=["model-a"],
        llm_timeout_seconds=5,
        batch_delay_seconds=0,
    )


def mock_response(content: str | None) -> Any:
    """Build a mock litellm response with usage metadata."""
    msg = type("Msg", (), {"content": content})()
    choice = type("Choice", (), {"message": msg})()
    usage = type(
        "Usage",
        (),
        {"prompt_tokens": 100, "completion_tokens": 50},
    )()
    return type(
        "Response", (), {"choices": [choice], "usage": usage}
    )()


def score_payload(**overrides: Any) -> dict[str, Any]:
    """A valid scoring response as decoded JSON."""
    data: dict[str, Any] = {
        "clarity": 8,
        "structure": 7,
        "usefulness": 9,
        "overall": 8,
        "reasoning": {
            "clarity": "Instructions are explicit",
            "structure": "Logical sections",
            "usefulness": "Broadly reusable",
            "overall": "Strong prompt",
        },
        "suggestedTags": ["coding", "python", "review"],
        "category": "technical",
        "complexity": "advanced",
        "estimatedTokens": 320,
    }
    data.update(overrides)
    return data


def score_json(**overrides: Any) -> str:
    return json.dumps(score_payload(**overrides))


def tags_json(**overrides: Any) -> str:
    data: dict[str, Any] = {
        "tags": ["marketing", "copywriting", "email"],
        "confidence": 0.87,
        "reasoning": "Marketing email generator",
    }
    data.update(overrides)
    return json.dumps(data)
