"""Tests for the guarded completion call: breaker, retry, timeout."""

from __future__ import annotations

import asyncio
from typing import Any
from unittest.mock import AsyncMock, patch

import pytest
from circuitbreaker import CircuitBreakerError
from litellm.exceptions import RateLimitError as LitellmRateLimitError

from promptscore.evaluation._llm_call import guarded_llm_call
from tests.conftest import mock_response

_MESSAGES = [{"role": "user", "content": "hi"}]


async def _call(model: str = "test-model", timeout: float = 5) -> Any:
    return await guarded_llm_call(
        model, _MESSAGES, timeout, temperature=0.3, max_tokens=1000
    )


def _rate_limit_error() -> LitellmRateLimitError:
    return LitellmRateLimitError(
        message="Rate limit exceeded",
        model="test",
        llm_provider="openai",
    )


class TestRequest:
    async def test_passes_sampling_parameters(self) -> None:
        mock = AsyncMock(return_value=mock_response("{}"))
        with patch(
            "promptscore.evaluation._llm_call._acompletion", mock
        ):
            result = await guarded_llm_call(
                "model-a",
                _MESSAGES,
                30,
                temperature=0.2,
                max_tokens=500,
            )

        kwargs = mock.call_args.kwargs
        assert kwargs["model"] == "model-a"
        assert kwargs["messages"] == _MESSAGES
        assert kwargs["temperature"] == 0.2
        assert kwargs["max_tokens"] == 500
        assert kwargs["timeout"] == 30
        assert "response_format" not in kwargs
        assert result.content == "{}"
        assert result.model == "model-a"
        assert result.input_tokens == 100
        assert result.output_tokens == 50

    async def test_json_mode_sends_response_format(self) -> None:
        mock = AsyncMock(return_value=mock_response("{}"))
        with patch(
            "promptscore.evaluation._llm_call._acompletion", mock
        ):
            await guarded_llm_call(
                "model-a",
                _MESSAGES,
                30,
                temperature=0.2,
                max_tokens=500,
                json_mode=True,
            )
        assert mock.call_args.kwargs["response_format"] == {
            "type": "json_object"
        }

    async def test_missing_content_becomes_empty_string(self) -> None:
        with patch(
            "promptscore.evaluation._llm_call._acompletion",
            new_callable=AsyncMock,
            return_value=mock_response(None),
        ):
            result = await _call()
        assert result.content == ""


class TestTimeout:
    async def test_hung_call_times_out(self) -> None:
        async def _hang(**_: Any) -> Any:
            await asyncio.sleep(10)

        with patch(
            "promptscore.evaluation._llm_call._acompletion", _hang
        ):
            with pytest.raises(TimeoutError):
                await _call(timeout=0.05)


class TestRateLimitRetry:
    async def test_retries_then_succeeds(self) -> None:
        rate_err = _rate_limit_error()
        mock = AsyncMock(
            side_effect=[rate_err, rate_err, mock_response("{}")]
        )
        with patch(
            "promptscore.evaluation._llm_call._acompletion", mock
        ):
            result = await _call()
        assert result.content == "{}"
        assert mock.call_count == 3

    async def test_gives_up_after_max_attempts(self) -> None:
        mock = AsyncMock(side_effect=_rate_limit_error())
        with patch(
            "promptscore.evaluation._llm_call._acompletion", mock
        ):
            with pytest.raises(LitellmRateLimitError):
                await _call()
        assert mock.call_count == 3

    async def test_other_errors_not_retried(self) -> None:
        mock = AsyncMock(side_effect=ConnectionError("API down"))
        with patch(
            "promptscore.evaluation._llm_call._acompletion", mock
        ):
            with pytest.raises(ConnectionError):
                await _call()
        assert mock.call_count == 1


class TestCircuitBreaker:
    async def test_circuit_opens_after_threshold(self) -> None:
        """Five failures open the circuit; the sixth call short-circuits."""
        mock = AsyncMock(side_effect=ConnectionError("API down"))
        with patch(
            "promptscore.evaluation._llm_call._acompletion", mock
        ):
            for _ in range(5):
                with pytest.raises(ConnectionError):
                    await _call()

            with pytest.raises(CircuitBreakerError):
                await _call()
        assert mock.call_count == 5

    async def test_breakers_are_per_model(self) -> None:
        with patch(
            "promptscore.evaluation._llm_call._acompletion",
            new_callable=AsyncMock,
            side_effect=ConnectionError("API down"),
        ):
            for _ in range(5):
                with pytest.raises(ConnectionError):
                    await _call("model-a")

        with patch(
            "promptscore.evaluation._llm_call._acompletion",
            new_callable=AsyncMock,
            return_value=mock_response("{}"),
        ):
            with pytest.raises(CircuitBreakerError):
                await _call("model-a")
            result = await _call("model-b")
        assert result.model == "model-b"

    async def test_rate_limits_do_not_open_circuit(self) -> None:
        with patch(
            "promptscore.evaluation._llm_call._acompletion",
            new_callable=AsyncMock,
            side_effect=_rate_limit_error(),
        ):
            for _ in range(3):
                with pytest.raises(LitellmRateLimitError):
                    await _call()

        with patch(
            "promptscore.evaluation._llm_call._acompletion",
            new_callable=AsyncMock,
            return_value=mock_response("{}"),
        ):
            result = await _call()
        assert result.content == "{}"
