"""Command-line scoring of a single activity."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from pydantic import ValidationError

from .errors import FootprintCalculationError, FootprintError
from .logging_pipeline import configure_structured_logging, shutdown_listeners
from .model import load_purchase_model
from .settings import FootprintSettings, get_settings

LOGGER = logging.getLogger("carbon_footprint")


def _read_stdin() -> str | None:
    """Read the activity payload from stdin if available."""
    try:
        if sys.stdin and not sys.stdin.isatty():
            return sys.stdin.read()
    except OSError as e:
        print(f"Error reading stdin: {e}", file=sys.stderr)
    return None


def _load_json(path: str | None, stdin_payload: str | None) -> dict[str, object]:
    """Load the activity JSON from a file or stdin."""
    if path:
        text = Path(path).read_text(encoding="utf-8")
        return _parse_json_dict(text)
    if stdin_payload:
        return _parse_json_dict(stdin_payload)
    raise ValueError("No input provided. Use --input or pipe JSON via stdin.")


def _parse_json_dict(payload: str) -> dict[str, object]:
    """Parse a JSON string and ensure the result is an object."""

    data = json.loads(payload)
    if not isinstance(data, dict):
        raise ValueError("Input JSON must be an object at the top level.")
    return {str(key): value for key, value in data.items()}


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="carbon-footprint",
        description="Score the carbon footprint (kgCO2e) of an activity.",
    )
    parser.add_argument(
        "--input",
        "-i",
        help="Path to an activity JSON file. If omitted, reads from stdin.",
    )
    parser.add_argument(
        "--taxonomy",
        "-t",
        help="Footprint taxonomy document (YAML or JSON). Defaults to the packaged one.",
    )
    parser.add_argument(
        "--quiet",
        "-q",
        action="store_true",
        help="Quiet mode: suppress output, just return exit code.",
    )
    parser.add_argument(
        "--log-level",
        help="Logging level; defaults to FOOTPRINT_LOG_LEVEL or INFO.",
    )
    parser.add_argument(
        "--json-logs",
        action="store_true",
        help="Emit logs as JSON lines on stderr.",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """Score one activity and print the result as JSON."""
    parser = _build_parser()
    try:
        args = parser.parse_args(argv)
    except SystemExit as exc:  # pragma: no cover - controlled via tests
        exit_code = int(exc.code) if isinstance(exc.code, int) else 1
        return 0 if exit_code == 0 else 1

    settings = get_settings()
    listener = configure_structured_logging(
        LOGGER,
        level=(args.log_level or settings.log_level).upper(),
        json_output=args.json_logs,
    )
    try:
        return _run(args, settings)
    finally:
        shutdown_listeners([listener])
        for handler in list(LOGGER.handlers):
            LOGGER.removeHandler(handler)


def _run(args: argparse.Namespace, settings: FootprintSettings) -> int:
    try:
        activity = _load_json(args.input, None if args.input else _read_stdin())
        model = load_purchase_model(args.taxonomy, settings=settings)
        can_run = model.model_can_run(activity)
        emissions = model.carbon_emissions(activity)
    except FootprintCalculationError as exc:
        if not args.quiet:
            print(json.dumps({"error": exc.failure.to_dict()}), file=sys.stderr)
        return 1
    except (FootprintError, ValidationError, ValueError, OSError) as exc:
        if not args.quiet:
            print(str(exc), file=sys.stderr)
        return 1

    if not args.quiet:
        print(
            json.dumps(
                {
                    "modelVersion": model.model_version,
                    "canRun": can_run,
                    "kgCO2e": emissions,
                },
                separators=(",", ":"),
            )
        )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
