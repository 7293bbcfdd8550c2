"""Command-line entrypoint for resolving a go.mod.

Usage:
  gomod-resolver [path/to/go.mod] [--format json|yaml] [--config PATH]
                 [--timeout SECONDS] [--strict] [-v]
"""

from __future__ import annotations

import argparse
import dataclasses
import json
import logging
import sys
from pathlib import Path

import yaml

from .config import ConfigError, load_settings
from .core import resolve_modules
from .gotool import GoCommandError
from .parsers.go_json import ModuleDecodeError
from .report import build_report

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_WARNINGS = 2


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="gomod-resolver",
        description="Resolve the external modules of a go.mod, with checksums.",
    )
    parser.add_argument(
        "manifest",
        nargs="?",
        type=Path,
        default=Path("go.mod"),
        help="Path to the go.mod to resolve (default: ./go.mod)",
    )
    parser.add_argument(
        "--format",
        choices=("json", "yaml"),
        default="json",
        help="Output format for the report",
    )
    parser.add_argument("--config", type=Path, default=None, help="Path to a JSON settings file")
    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Seconds allowed for the whole run (overrides the settings file)",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Exit with status 2 when any module was skipped or a warning was raised",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        settings = load_settings(args.config)
        if args.timeout is not None:
            if args.timeout <= 0:
                raise ConfigError("--timeout must be positive")
            settings = dataclasses.replace(settings, timeout=args.timeout)
        result = resolve_modules(args.manifest, settings=settings)
    except ConfigError as exc:
        print(f"ERROR: Invalid configuration: {exc}", file=sys.stderr)
        return EXIT_ERROR
    except (OSError, GoCommandError, ModuleDecodeError) as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return EXIT_ERROR

    report = build_report(result)
    if args.format == "yaml":
        sys.stdout.write(yaml.safe_dump(report, sort_keys=False))
    else:
        print(json.dumps(report, indent=2))

    if args.strict and result.warnings:
        return EXIT_WARNINGS
    return EXIT_OK


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
