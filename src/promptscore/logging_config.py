"""Process-wide logging for the promptscore CLI and library users.

setup_logging() runs before litellm is imported: litellm reads
LITELLM_LOG once at import, and its provider clients log chatty
request lines unless their loggers are pinned to WARNING first.

cleanup_third_party_handlers() runs after imports and drops the
StreamHandlers litellm attaches to its own loggers.

apply_level() is called once Settings are loaded, so LOG_LEVEL from
.env (which phase 1 cannot see) and --verbose take effect.
"""

import logging
import os

LOG_FORMAT = "%(asctime)s - %(levelname)s - [%(name)s] - %(message)s"
LOG_DATEFMT = "%Y-%m-%dT%H:%M:%S"

# Pinned to WARNING regardless of the configured level
_NOISY_LOGGERS = (
    "LiteLLM",
    "LiteLLM Router",
    "LiteLLM Proxy",
    "openai._base_client",
    "httpx",
)

_LITELLM_LOGGERS = ("LiteLLM", "LiteLLM Router", "LiteLLM Proxy")

_phase1_done = False
_phase2_done = False


def _to_level(name: str | None) -> int:
    level = logging.getLevelName((name or "INFO").strip().upper())
    return level if isinstance(level, int) else logging.INFO


def setup_logging(level: str | None = None) -> None:
    """Configure the root logger; no-op after the first call.

    ``level`` defaults to the LOG_LEVEL environment variable.
    """
    global _phase1_done  # noqa: PLW0603
    if _phase1_done:
        return
    _phase1_done = True

    os.environ.setdefault("LITELLM_LOG", "WARNING")

    logging.basicConfig(
        level=_to_level(level or os.environ.get("LOG_LEVEL")),
        format=LOG_FORMAT,
        datefmt=LOG_DATEFMT,
    )

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def cleanup_third_party_handlers() -> None:
    """Let litellm records reach the root handler only once."""
    global _phase2_done  # noqa: PLW0603
    if _phase2_done:
        return
    _phase2_done = True

    for name in _LITELLM_LOGGERS:
        lg = logging.getLogger(name)
        lg.handlers.clear()
        lg.propagate = True


def apply_level(level: str, *, verbose: bool = False) -> None:
    """Set the root level from settings; ``verbose`` forces DEBUG."""
    logging.getLogger().setLevel(
        logging.DEBUG if verbose else _to_level(level)
    )
