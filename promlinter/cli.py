"""CLI entrypoints for promlinter commands."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import List, Sequence

from .config import ConfigError, load_config
from .logging import configure_logging
from .models import Issue, Occurrence
from .orchestrator import Orchestrator
from .validators import PromLintValidator

EXIT_OK = 0
EXIT_ISSUES = 1
EXIT_ERROR = 2


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity for troubleshooting.",
    }
    if suppress_default:
        kwargs["default"] = argparse.SUPPRESS
    else:
        kwargs["default"] = False
    parser.add_argument(
        "-v",
        "--verbose",
        **kwargs,
    )


def _add_common_options(parser: argparse.ArgumentParser) -> None:
    _add_verbose_option(parser, suppress_default=True)
    parser.add_argument(
        "paths",
        nargs="*",
        default=["."],
        help="Go files or directories to analyze (defaults to current directory).",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        default=None,
        help="Report call sites whose metric options cannot be resolved.",
    )
    parser.add_argument(
        "--include-tests",
        action="store_true",
        default=None,
        help="Also analyze _test.go files.",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Path to .promlinter.yml (defaults to the current directory).",
    )
    parser.add_argument(
        "--format",
        choices=("text", "json"),
        default="text",
        help="Output format.",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="promlinter",
        description="Find and lint Prometheus metric declarations in Go sources.",
    )
    _add_verbose_option(parser)
    parser.add_argument(
        "--log-file",
        default=None,
        help="Also write log records to this file.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    lint_parser = subparsers.add_parser(
        "lint",
        help="Report naming and documentation problems of declared metrics.",
    )
    _add_common_options(lint_parser)
    lint_parser.add_argument(
        "--disable",
        action="append",
        default=[],
        metavar="RULE",
        help="Disable a lint rule (repeatable).",
    )

    list_parser = subparsers.add_parser(
        "list",
        help="List declared metrics with their type and help text.",
    )
    _add_common_options(list_parser)

    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint for promlinter commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(
        verbose=bool(args.verbose),
        log_file=Path(args.log_file) if args.log_file else None,
    )

    try:
        config = load_config(Path(args.config) if args.config else Path.cwd())
    except ConfigError as exc:
        parser.exit(EXIT_ERROR, f"{exc}\n")
    if args.include_tests is not None:
        config.include_tests = args.include_tests

    disabled = list(config.lint.disabled_rules) + list(getattr(args, "disable", []))
    try:
        validator = PromLintValidator(disabled_rules=disabled)
    except ValueError as exc:
        parser.exit(EXIT_ERROR, f"{exc}\n")

    orchestrator = Orchestrator(config=config, validator=validator)
    try:
        report = orchestrator.lint_paths(args.paths, strict=args.strict)
    except FileNotFoundError as exc:
        parser.exit(EXIT_ERROR, f"{exc}\n")

    if args.command == "lint":
        _emit(_render_issues(report.issues, args.format))
        return EXIT_ISSUES if report.issues else EXIT_OK
    if args.command == "list":
        _emit(_render_occurrences(report.occurrences, args.format))
        return EXIT_OK
    parser.exit(EXIT_ERROR, "Unknown command\n")  # pragma: no cover - argparse enforces choices
    return EXIT_ERROR  # pragma: no cover


def _emit(output: str) -> None:
    if output:
        print(output)


def _render_issues(issues: Sequence[Issue], fmt: str) -> str:
    if fmt == "json":
        return json.dumps([issue.as_dict() for issue in issues], indent=2)
    lines: List[str] = []
    for issue in issues:
        prefix = f"{issue.position}: "
        if issue.metric:
            prefix += f"[{issue.metric}] "
        lines.append(prefix + issue.text)
    return "\n".join(lines)


def _render_occurrences(occurrences: Sequence[Occurrence], fmt: str) -> str:
    if fmt == "json":
        payload = [
            {
                "file": occurrence.position.file,
                "line": occurrence.position.line,
                "column": occurrence.position.column,
                "type": occurrence.descriptor.kind.value if occurrence.descriptor.kind else None,
                "name": occurrence.descriptor.name,
                "help": occurrence.descriptor.help,
            }
            for occurrence in occurrences
        ]
        return json.dumps(payload, indent=2)
    lines: List[str] = []
    for occurrence in occurrences:
        descriptor = occurrence.descriptor
        kind = descriptor.kind.value if descriptor.kind else "-"
        lines.append(f"{occurrence.position}\t{kind}\t{descriptor.name}\t{descriptor.help}")
    return "\n".join(lines)


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
