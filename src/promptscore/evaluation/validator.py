"""Strict validation of model output into typed results.

Model output is untrusted. Parsing never raises: callers get either
``ParseOk(value)`` or ``ParseError(reason)`` and decide what to
substitute. Validation is all-or-nothing: a response with one bad
field is rejected as a whole.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ValidationError

from promptscore.constants import ERROR_TRUNCATION_CHARS
from promptscore.evaluation.schemas import AutoTagResult, PromptScore

# ```json\n{...}\n```: some models fence JSON even in JSON mode
_CODE_FENCE = re.compile(
    r"^\s*```(?:json)?\s*\n(?P<body>.*?)\n?\s*```\s*$",
    re.DOTALL | re.IGNORECASE,
)


@dataclass(frozen=True)
class ParseOk[T]:
    value: T


@dataclass(frozen=True)
class ParseError:
    reason: str


type ParseResult[T] = ParseOk[T] | ParseError


def parse_prompt_score(raw: str | None) -> ParseResult[PromptScore]:
    """Parse a scoring completion into a PromptScore."""
    return _parse_text(raw, PromptScore)


def parse_auto_tags(raw: str | None) -> ParseResult[AutoTagResult]:
    """Parse a tagging completion into an AutoTagResult."""
    return _parse_text(raw, AutoTagResult)


def validate_prompt_score(data: Any) -> ParseResult[PromptScore]:
    """Validate an already-decoded JSON value as a PromptScore."""
    return _validate(data, PromptScore)


def _parse_text[M: BaseModel](
    raw: str | None, model: type[M]
) -> ParseResult[M]:
    if raw is None or not raw.strip():
        return ParseError("empty response")

    fenced = _CODE_FENCE.match(raw)
    text = fenced.group("body") if fenced else raw

    try:
        data: Any = json.loads(text)
    except json.JSONDecodeError as e:
        return ParseError(f"invalid JSON: {e.msg} at char {e.pos}")

    return _validate(data, model)


def _validate[M: BaseModel](data: Any, model: type[M]) -> ParseResult[M]:
    if not isinstance(data, dict):
        return ParseError(
            f"expected JSON object, got {type(data).__name__}"
        )
    try:
        return ParseOk(model.model_validate(data))
    except ValidationError as e:
        return ParseError(_summarize(e))


def _summarize(error: ValidationError) -> str:
    """One-line digest of a ValidationError, e.g. ``clarity: ...``."""
    parts: list[str] = []
    for err in error.errors():
        loc = ".".join(str(p) for p in err["loc"]) or "<root>"
        parts.append(f"{loc}: {err['msg']}")
    summary = "; ".join(parts)
    if len(summary) > ERROR_TRUNCATION_CHARS:
        summary = summary[:ERROR_TRUNCATION_CHARS] + "..."
    return f"schema violation ({error.error_count()}): {summary}"
