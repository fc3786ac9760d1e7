"""Walk the model chain until one model returns a valid response."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass

from circuitbreaker import CircuitBreakerError

from promptscore.config import Settings
from promptscore.evaluation._llm_call import guarded_llm_call
from promptscore.evaluation.validator import (
    ParseError,
    ParseOk,
    ParseResult,
)
from promptscore.resilience.errors import (
    ErrorClass,
    classify_error,
    is_retryable,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ChainOutcome[T]:
    """Validated value from the first model that produced one.

    When every model failed, ``value`` is None and ``error_class`` /
    ``detail`` describe the last failure.
    """

    value: T | None
    model: str | None = None
    error_class: ErrorClass | None = None
    detail: str = ""


async def run_model_chain[T](
    messages: list[dict[str, str]],
    parse: Callable[[str], ParseResult[T]],
    settings: Settings,
    *,
    temperature: float,
    max_tokens: int,
    component: str,
) -> ChainOutcome[T]:
    """Try each model in ``settings.litellm_model_chain`` in order.

    Transport failures, open circuits and invalid responses all move
    on to the next model. Never raises (cancellation excepted).
    """
    error_class: ErrorClass | None = None
    detail = ""

    for model in settings.litellm_model_chain:
        try:
            result = await guarded_llm_call(
                model,
                messages,
                settings.llm_timeout_seconds,
                temperature=temperature,
                max_tokens=max_tokens,
                json_mode=settings.llm_json_mode,
            )
        except CircuitBreakerError as e:
            error_class, detail = ErrorClass.CIRCUIT_OPEN, str(e)
            logger.warning(
                "event=circuit_open model=%s component=%s",
                model,
                component,
            )
            continue
        except Exception as e:
            error_class, detail = classify_error(e), str(e)
            logger.warning(
                "event=llm_call_failed model=%s component=%s"
                " error_class=%s retryable=%s",
                model,
                component,
                error_class.value,
                is_retryable(e),
                exc_info=True,
            )
            continue

        match parse(result.content):
            case ParseOk(value=value):
                return ChainOutcome(value=value, model=model)
            case ParseError(reason=reason):
                error_class, detail = ErrorClass.MALFORMED, reason
                logger.warning(
                    "event=response_invalid model=%s component=%s"
                    " response_len=%d reason=%s",
                    model,
                    component,
                    len(result.content),
                    reason,
                )

    return ChainOutcome(
        value=None, error_class=error_class, detail=detail
    )
