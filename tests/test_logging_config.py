"""Tests for two-phase singleton logging configuration."""

from __future__ import annotations

import logging
import os
from unittest.mock import patch

import pytest

from promptscore.logging_config import (
    _NOISY_LOGGERS,
    apply_level,
    cleanup_third_party_handlers,
    setup_logging,
)


@pytest.fixture(autouse=True)
def _reset_flags() -> None:
    """Reset singleton flags before each test."""
    import promptscore.logging_config as mod

    mod._phase1_done = False
    mod._phase2_done = False


def test_setup_logging_is_idempotent() -> None:
    """Phase 1 executes once even when called twice."""
    with patch("promptscore.logging_config.logging.basicConfig") as mock_bc:
        setup_logging()
        setup_logging()
        mock_bc.assert_called_once()


def test_litellm_log_env_var_preserves_existing() -> None:
    """Phase 1 uses setdefault: doesn't overwrite user-set value."""
    os.environ["LITELLM_LOG"] = "ERROR"
    try:
        setup_logging()
        assert os.environ["LITELLM_LOG"] == "ERROR"
    finally:
        os.environ.pop("LITELLM_LOG", None)


def test_litellm_log_env_var_set() -> None:
    os.environ.pop("LITELLM_LOG", None)
    setup_logging()
    assert os.environ.get("LITELLM_LOG") == "WARNING"


def test_suppressed_loggers_at_warning() -> None:
    setup_logging()
    for name in _NOISY_LOGGERS:
        assert logging.getLogger(name).level == logging.WARNING


def test_cleanup_clears_litellm_handlers_once() -> None:
    """Phase 2 clears handlers; a second call is a no-op."""
    lg = logging.getLogger("LiteLLM")
    lg.propagate = False
    lg.addHandler(logging.StreamHandler())

    cleanup_third_party_handlers()
    assert len(lg.handlers) == 0
    assert lg.propagate is True

    lg.addHandler(logging.StreamHandler())
    cleanup_third_party_handlers()
    assert len(lg.handlers) == 1
    lg.handlers.clear()


def test_setup_logging_reads_log_level_env(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.setenv("LOG_LEVEL", "error")
    with patch("promptscore.logging_config.logging.basicConfig") as mock_bc:
        setup_logging()
    assert mock_bc.call_args.kwargs["level"] == logging.ERROR


def test_setup_logging_unknown_level_falls_back_to_info(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.setenv("LOG_LEVEL", "chatty")
    with patch("promptscore.logging_config.logging.basicConfig") as mock_bc:
        setup_logging()
    assert mock_bc.call_args.kwargs["level"] == logging.INFO


@pytest.mark.parametrize(
    "level,verbose,expected",
    [
        ("WARNING", False, logging.WARNING),
        ("error", False, logging.ERROR),
        ("WARNING", True, logging.DEBUG),
    ],
)
def test_apply_level(level: str, verbose: bool, expected: int) -> None:
    root = logging.getLogger()
    original = root.level
    try:
        apply_level(level, verbose=verbose)
        assert root.level == expected
    finally:
        root.setLevel(original)
