"""CLI entry point: ``promptscore evaluate|tag|batch|stats``."""

from __future__ import annotations

# Phase 1: Singleton logging: before any transitive litellm imports
from promptscore.logging_config import setup_logging

setup_logging()

import argparse  # noqa: E402
import asyncio  # noqa: E402
import json  # noqa: E402
import sys  # noqa: E402
from pathlib import Path  # noqa: E402
from typing import Any  # noqa: E402

from pydantic import BaseModel, ValidationError  # noqa: E402

from promptscore import __version__  # noqa: E402
from promptscore.config import Settings  # noqa: E402
from promptscore.evaluation import (  # noqa: E402
    BatchItem,
    BatchProgress,
    ParseError,
    ParseOk,
    PromptScore,
    batch_evaluate_prompts,
    calculate_scoring_stats,
    evaluate_prompt,
    generate_auto_tags,
    validate_prompt_score,
)
from promptscore.logging_config import (  # noqa: E402
    apply_level,
    cleanup_third_party_handlers,
)

# Phase 2: Clear litellm's duplicate handlers after all imports
cleanup_third_party_handlers()


class InputError(Exception):
    """Unreadable input file, malformed records or invalid settings."""


def main(argv: list[str] | None = None) -> None:
    """Main CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.version:
        print(f"promptscore {__version__}")
        return

    handlers = {
        "evaluate": _run_evaluate,
        "tag": _run_tag,
        "batch": _run_batch,
        "stats": _run_stats,
    }
    handler = handlers.get(args.command)
    if handler is None:
        parser.print_help()
        return

    try:
        settings = _load_settings(args)
        apply_level(
            settings.log_level, verbose=getattr(args, "verbose", False)
        )
        handler(args, settings)
    except InputError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="promptscore",
        description=(
            "Score, tag and summarize AI prompts "
            "with a language model."
        ),
    )
    parser.add_argument(
        "--version",
        action="store_true",
        help="Print version and exit",
    )

    sub = parser.add_subparsers(dest="command")

    for name, help_text in (
        ("evaluate", "Score a single prompt file"),
        ("tag", "Suggest tags for a single prompt file"),
    ):
        single = sub.add_parser(name, help=help_text)
        single.add_argument(
            "file",
            type=str,
            help="Path to a text file containing the prompt",
        )
        single.add_argument("--title", "-t", default=None)
        single.add_argument("--description", "-d", default=None)
        single.add_argument(
            "--verbose",
            "-v",
            action="store_true",
            help="Enable debug logging",
        )

    batch = sub.add_parser(
        "batch",
        help="Score many prompts from a JSON or JSON-lines file",
    )
    batch.add_argument(
        "file",
        type=str,
        help=(
            "JSON array or JSON lines of "
            "{id, content, title?, description?}"
        ),
    )
    batch.add_argument(
        "--output",
        "-o",
        default=None,
        help="Write results here (default: stdout)",
    )
    batch.add_argument(
        "--batch-size",
        type=int,
        default=None,
        help="Prompts per window (default: from settings)",
    )
    batch.add_argument(
        "--delay",
        type=float,
        default=None,
        help="Seconds between windows (default: from settings)",
    )
    batch.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Print per-window progress",
    )

    stats = sub.add_parser(
        "stats",
        help="Summarize a JSON array of scores or batch results",
    )
    stats.add_argument("file", type=str)

    return parser


def _load_settings(args: argparse.Namespace) -> Settings:
    """Settings from env/.env, with batch flags layered on top."""
    overrides: dict[str, Any] = {}
    if getattr(args, "batch_size", None) is not None:
        overrides["batch_size"] = args.batch_size
    if getattr(args, "delay", None) is not None:
        overrides["batch_delay_seconds"] = args.delay
    try:
        return Settings(**overrides)
    except ValidationError as e:
        raise InputError(f"invalid settings: {_first_error(e)}") from e


def _run_evaluate(args: argparse.Namespace, settings: Settings) -> None:
    content = _read_text(args.file)
    score = asyncio.run(
        evaluate_prompt(content, args.title, args.description, settings)
    )
    _print_json(score)


def _run_tag(args: argparse.Namespace, settings: Settings) -> None:
    content = _read_text(args.file)
    result = asyncio.run(
        generate_auto_tags(
            content, args.title, args.description, settings
        )
    )
    _print_json(result)


def _run_batch(args: argparse.Namespace, settings: Settings) -> None:
    items: list[BatchItem] = []
    for i, raw in enumerate(_read_records(args.file)):
        try:
            items.append(BatchItem.model_validate(raw))
        except ValidationError as e:
            raise InputError(f"item {i}: {_first_error(e)}") from e

    def on_progress(event: BatchProgress) -> None:
        if args.verbose:
            print(
                f"  window {event.window}/{event.windows}: "
                f"{event.completed}/{event.total} scored "
                f"({event.failed} failed)",
                file=sys.stderr,
            )

    results = asyncio.run(
        batch_evaluate_prompts(items, settings, on_progress=on_progress)
    )
    payload = json.dumps(
        [r.model_dump(mode="json", by_alias=True) for r in results],
        indent=2,
    )

    if args.output:
        Path(args.output).write_text(payload + "\n", encoding="utf-8")
        failed = sum(1 for r in results if r.error is not None)
        print(
            f"Scored {len(results)} prompts ({failed} failed) "
            f"-> {args.output}",
            file=sys.stderr,
        )
    else:
        print(payload)


def _run_stats(args: argparse.Namespace, settings: Settings) -> None:
    scores: list[PromptScore] = []
    for i, raw in enumerate(_read_records(args.file)):
        # Batch results wrap the score; plain scores stand alone
        if isinstance(raw, dict) and "score" in raw:
            raw = raw["score"]
        match validate_prompt_score(raw):
            case ParseOk(value=score):
                scores.append(score)
            case ParseError(reason=reason):
                raise InputError(f"record {i}: {reason}")
    _print_json(calculate_scoring_stats(scores))


def _read_text(path: str) -> str:
    p = Path(path)
    if not p.is_file():
        raise InputError(f"{p} does not exist")
    try:
        return p.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise InputError(f"{p} is not UTF-8 text ({e.reason})") from e
    except OSError as e:
        raise InputError(f"{p} cannot be read ({e.strerror})") from e


def _read_records(path: str) -> list[Any]:
    """Load a JSON array, or one JSON value per non-blank line."""
    text = _read_text(path)
    stripped = text.strip()
    if not stripped:
        return []
    try:
        if stripped.startswith("["):
            data: Any = json.loads(stripped)
            return list(data)
        return [
            json.loads(line)
            for line in stripped.splitlines()
            if line.strip()
        ]
    except json.JSONDecodeError as e:
        raise InputError(f"{path}: invalid JSON ({e.msg})") from e


def _first_error(error: ValidationError) -> str:
    err = error.errors()[0]
    loc = ".".join(str(p) for p in err["loc"])
    return f"{loc}: {err['msg']}" if loc else err["msg"]


def _print_json(value: BaseModel) -> None:
    print(
        json.dumps(value.model_dump(mode="json", by_alias=True), indent=2)
    )


if __name__ == "__main__":
    main()
