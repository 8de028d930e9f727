"""CLI entry point for gatehouse."""

from __future__ import annotations

import argparse
import json
from pathlib import Path
import sys
from typing import Sequence

import yaml

from gatehouse.config.loader import initialize_config, load_config
from gatehouse.core.doctor import build_report, effective_config, run_validation
from gatehouse.core.durations import parse_duration_string
from gatehouse.core.logging import configure_logging


DEFAULT_CONFIG = Path("./config/gatehouse.yml")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="gatehouse")
    subparsers = parser.add_subparsers(dest="command", required=True)

    init_parser = subparsers.add_parser("init", help="Create starter config")
    init_parser.add_argument("--config", type=Path, default=DEFAULT_CONFIG)
    init_parser.add_argument("--force", action="store_true")

    validate_parser = subparsers.add_parser(
        "validate",
        help="Validate the authentication backend config and report every problem",
    )
    validate_parser.add_argument("--config", type=Path, default=DEFAULT_CONFIG)

    effective_parser = subparsers.add_parser("effective", help="Print the config with every default applied")
    effective_parser.add_argument("--config", type=Path, default=DEFAULT_CONFIG)
    effective_parser.add_argument(
        "--format",
        dest="output_format",
        type=str,
        choices=["json", "yaml"],
        default="json",
    )
    effective_parser.add_argument(
        "--show-secrets",
        action="store_true",
        help="Do not redact passwords and secrets in the output",
    )

    duration_parser = subparsers.add_parser("parse-duration", help="Convert a duration notation to seconds")
    duration_parser.add_argument("value", type=str)

    return parser


def cmd_init(config_path: Path, force: bool) -> int:
    initialize_config(config_path, force=force)
    print(f"wrote config: {config_path}")
    return 0


def cmd_validate(config_path: Path) -> int:
    config = load_config(config_path)
    configure_logging(config.logging)
    diagnostics = run_validation(config, config_path=str(config_path))
    print(json.dumps(build_report(config, diagnostics), indent=2))
    return 1 if diagnostics.has_errors() else 0


def cmd_effective(config_path: Path, *, output_format: str, show_secrets: bool) -> int:
    config = load_config(config_path)
    configure_logging(config.logging)
    diagnostics = run_validation(config, config_path=str(config_path))
    if diagnostics.has_errors():
        for message in diagnostics.error_messages():
            print(f"error: {message}", file=sys.stderr)
        return 1
    payload = effective_config(config, redact=not show_secrets)
    if output_format == "yaml":
        print(yaml.safe_dump(payload, sort_keys=False), end="")
    else:
        print(json.dumps(payload, indent=2))
    return 0


def cmd_parse_duration(value: str) -> int:
    try:
        duration = parse_duration_string(value)
    except ValueError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    print(int(duration.total_seconds()))
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == "init":
        return cmd_init(args.config, args.force)
    if args.command == "validate":
        return cmd_validate(args.config)
    if args.command == "effective":
        return cmd_effective(args.config, output_format=args.output_format, show_secrets=args.show_secrets)
    if args.command == "parse-duration":
        return cmd_parse_duration(args.value)

    parser.error(f"unknown command: {args.command}")
    return 2

