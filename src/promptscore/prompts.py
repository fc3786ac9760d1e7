"""Consolidated LLM prompts for promptscore.

All instruction text sent to the completion API lives here. Builders
are pure string assembly so the same inputs always render the same
request.
"""

from __future__ import annotations

from promptscore.constants import (
    MAX_SUGGESTED_TAGS,
    NO_DESCRIPTION_PLACEHOLDER,
    NO_TITLE_PLACEHOLDER,
)

# ── System prompts ────────────────────────────────────────────────

EVALUATION_SYSTEM_PROMPT = (
    "You are an expert AI prompt evaluator. Always respond with valid "
    "JSON matching the requested schema."
)

TAGGING_SYSTEM_PROMPT = (
    "You are an expert at categorizing and tagging AI prompts. Always "
    "respond with valid JSON."
)

# ── Scoring rubric ────────────────────────────────────────────────

EVALUATION_PROMPT_TEMPLATE = """\
You are an expert AI prompt evaluator. Analyze the following prompt and \
provide detailed scoring and categorization.

PROMPT TO EVALUATE:
Title: {title}
Description: {description}
Content: {content}

Please evaluate this prompt on the following criteria (1-10 scale):

1. CLARITY (1-10): How clear and unambiguous are the instructions?
   - 1-3: Very unclear, ambiguous, confusing
   - 4-6: Somewhat clear but has ambiguous parts
   - 7-8: Clear with minor ambiguities
   - 9-10: Crystal clear, unambiguous

2. STRUCTURE (1-10): How well-organized and formatted is the prompt?
   - 1-3: Poor structure, hard to follow
   - 4-6: Basic structure, could be better organized
   - 7-8: Well-structured with good flow
   - 9-10: Excellent structure, perfectly organized

3. USEFULNESS (1-10): How practical and valuable is this prompt?
   - 1-3: Not useful, unclear purpose
   - 4-6: Somewhat useful for specific cases
   - 7-8: Very useful for intended purpose
   - 9-10: Extremely valuable, widely applicable

4. OVERALL (1-10): Overall quality considering all factors

Also provide:
- Suggested tags (up to {max_tags}) that best describe this prompt
- Category: creative, technical, business, educational, or other
- Complexity level: beginner, intermediate, or advanced
- Estimated token count for typical usage

Respond with a JSON object matching this exact structure:
{{
  "clarity": number,
  "structure": number,
  "usefulness": number,
  "overall": number,
  "reasoning": {{
    "clarity": "explanation for clarity score",
    "structure": "explanation for structure score",
    "usefulness": "explanation for usefulness score",
    "overall": "explanation for overall score"
  }},
  "suggestedTags": ["tag1", "tag2", ...],
  "category": "category_name",
  "complexity": "complexity_level",
  "estimatedTokens": number
}}
"""

# ── Tagging ───────────────────────────────────────────────────────

TAGGING_PROMPT_TEMPLATE = """\
Analyze the following prompt and generate relevant tags that describe its \
purpose, domain, and characteristics.

PROMPT TO TAG:
Title: {title}
Description: {description}
Content: {content}

Generate up to {max_tags} relevant tags that would help users discover this \
prompt. Consider:
- The domain/field (e.g., marketing, coding, writing, analysis)
- The task type (e.g., generation, analysis, summarization, translation)
- The output format (e.g., json, markdown, code, essay)
- The complexity level
- Any specific techniques or approaches used

Respond with a JSON object:
{{
  "tags": ["tag1", "tag2", ...],
  "confidence": 0.95,
  "reasoning": "explanation of why these tags were chosen"
}}
"""


def build_evaluation_prompt(
    content: str,
    title: str | None = None,
    description: str | None = None,
) -> str:
    """Render the scoring instruction for one prompt."""
    return EVALUATION_PROMPT_TEMPLATE.format(
        title=title or NO_TITLE_PLACEHOLDER,
        description=description or NO_DESCRIPTION_PLACEHOLDER,
        content=content,
        max_tags=MAX_SUGGESTED_TAGS,
    )


def build_tagging_prompt(
    content: str,
    title: str | None = None,
    description: str | None = None,
) -> str:
    """Render the tagging instruction for one prompt."""
    return TAGGING_PROMPT_TEMPLATE.format(
        title=title or NO_TITLE_PLACEHOLDER,
        description=description or NO_DESCRIPTION_PLACEHOLDER,
        content=content,
        max_tags=MAX_SUGGESTED_TAGS,
    )


def evaluation_messages(
    content: str,
    title: str | None = None,
    description: str | None = None,
) -> list[dict[str, str]]:
    """Chat message list for the scoring call."""
    return [
        {"role": "system", "content": EVALUATION_SYSTEM_PROMPT},
        {
            "role": "user",
            "content": build_evaluation_prompt(
                content, title, description
            ),
        },
    ]


def tagging_messages(
    content: str,
    title: str | None = None,
    description: str | None = None,
) -> list[dict[str, str]]:
    """Chat message list for the tagging call."""
    return [
        {"role": "system", "content": TAGGING_SYSTEM_PROMPT},
        {
            "role": "user",
            "content": build_tagging_prompt(
                content, title, description
            ),
        },
    ]
