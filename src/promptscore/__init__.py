"""LLM-backed quality scoring and auto-tagging for AI prompts."""

__version__ = "0.1.0"
