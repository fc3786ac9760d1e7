"""Error classification for structured error handling.

Every evaluation failure collapses into the same fallback value, so
the class computed here is the only record of *why* a fallback was
substituted. It is logged alongside each fallback:
- transient/server/timeout: the provider or network misbehaved
- client: bad key, bad model id, bad request
- malformed: the model answered, but not with the expected JSON
- circuit_open: the call was never attempted
"""

from __future__ import annotations

import asyncio
from enum import Enum

from circuitbreaker import CircuitBreakerError


class ErrorClass(Enum):
    TRANSIENT = "transient"  # 429, network errors: retryable
    SERVER = "server"  # 500, 502, 503: retryable
    TIMEOUT = "timeout"  # deadline exceeded: retryable with backoff
    CLIENT = "client"  # 400, 401, 403: do NOT retry
    MALFORMED = "malformed"  # unusable model output: do NOT retry
    CIRCUIT_OPEN = "circuit_open"  # breaker short-circuited the call
    UNKNOWN = "unknown"  # unclassified: do NOT retry


def classify_error(error: BaseException) -> ErrorClass:
    """Classify an error to determine handling strategy.

    Checks exception types and structured attributes first
    (status_code), falls back to string matching for untyped
    exceptions.
    """
    if isinstance(error, CircuitBreakerError):
        return ErrorClass.CIRCUIT_OPEN

    # Structured status_code attribute (httpx, openai, litellm)
    status_code = getattr(error, "status_code", None)
    if isinstance(status_code, int):
        if status_code == 429:
            return ErrorClass.TRANSIENT
        if 400 <= status_code < 500:
            return ErrorClass.CLIENT
        if 500 <= status_code < 600:
            return ErrorClass.SERVER

    if isinstance(error, (TimeoutError, asyncio.TimeoutError)):
        return ErrorClass.TIMEOUT
    if isinstance(error, ConnectionError):
        return ErrorClass.TRANSIENT

    msg = str(error).lower()

    if "timeout" in msg or "timed out" in msg:
        return ErrorClass.TIMEOUT
    if "429" in msg or "rate limit" in msg or "rate_limit" in msg:
        return ErrorClass.TRANSIENT
    if any(code in msg for code in ("500", "502", "503", "504")):
        return ErrorClass.SERVER
    if "econnrefused" in msg or "connection" in msg:
        return ErrorClass.TRANSIENT
    if any(code in msg for code in ("400", "401", "403", "404")):
        return ErrorClass.CLIENT

    return ErrorClass.UNKNOWN


_RETRYABLE = frozenset({
    ErrorClass.TRANSIENT,
    ErrorClass.SERVER,
    ErrorClass.TIMEOUT,
})


def is_retryable(error: BaseException) -> bool:
    """Return True if the error category supports retry."""
    return classify_error(error) in _RETRYABLE
