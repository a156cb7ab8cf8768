"""CLI behaviour tests."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from promlinter.cli import EXIT_ERROR, EXIT_ISSUES, EXIT_OK, _build_parser, main
from promlinter.logging import configure_logging
from tests._fixtures.go_tree import GoTreeBuilder

SOURCE = """
package main

var requests = prometheus.NewCounter(prometheus.CounterOpts{
    Namespace: "app",
    Name:      "requests",
    Help:      "Handled requests.",
})
"""


def test_cli_accepts_verbose_before_command() -> None:
    args = _build_parser().parse_args(["--verbose", "lint"])
    assert args.verbose is True
    assert args.command == "lint"
    assert args.paths == ["."]


def test_cli_accepts_verbose_after_command() -> None:
    args = _build_parser().parse_args(["list", "src", "--verbose"])
    assert args.verbose is True
    assert args.command == "list"
    assert args.paths == ["src"]


def test_cli_lint_flags() -> None:
    args = _build_parser().parse_args(
        ["lint", "--strict", "--include-tests", "--format", "json", "--disable", "help", "--disable", "counter"]
    )
    assert args.strict is True
    assert args.include_tests is True
    assert args.format == "json"
    assert args.disable == ["help", "counter"]


def test_cli_strict_defaults_to_config() -> None:
    args = _build_parser().parse_args(["lint"])
    assert args.strict is None
    assert args.include_tests is None


def _cli(go_tree: GoTreeBuilder, command: str, *options: str) -> list[str]:
    root = str(go_tree.path())
    return [command, root, "--config", root, *options]


def test_lint_reports_issues(go_tree: GoTreeBuilder, capsys: pytest.CaptureFixture[str]) -> None:
    go_tree.write({"main.go": SOURCE})

    code = main(_cli(go_tree, "lint"))

    out = capsys.readouterr().out.strip()
    expected_file = go_tree.path() / "main.go"
    assert code == EXIT_ISSUES
    assert out == f'{expected_file}:3:38: [app_requests] counter metrics should have "_total" suffix'


def test_lint_json_output(go_tree: GoTreeBuilder, capsys: pytest.CaptureFixture[str]) -> None:
    go_tree.write({"main.go": SOURCE})

    code = main(_cli(go_tree, "lint", "--format", "json"))

    payload = json.loads(capsys.readouterr().out)
    assert code == EXIT_ISSUES
    assert [(item["line"], item["column"], item["metric"]) for item in payload] == [(3, 38, "app_requests")]


def test_lint_disabled_rule_is_clean(go_tree: GoTreeBuilder, capsys: pytest.CaptureFixture[str]) -> None:
    go_tree.write({"main.go": SOURCE})

    code = main(_cli(go_tree, "lint", "--disable", "counter"))

    assert code == EXIT_OK
    assert capsys.readouterr().out == ""


def test_lint_honours_config_file(go_tree: GoTreeBuilder) -> None:
    go_tree.write({"main.go": SOURCE, ".promlinter.yml": "lint:\n  disabled_rules: [counter]\n"})

    assert main(_cli(go_tree, "lint")) == EXIT_OK


def test_list_prints_descriptors(go_tree: GoTreeBuilder, capsys: pytest.CaptureFixture[str]) -> None:
    go_tree.write({"main.go": SOURCE})

    code = main(_cli(go_tree, "list"))

    out = capsys.readouterr().out.strip()
    assert code == EXIT_OK
    assert out.endswith("\tcounter\tapp_requests\tHandled requests.")


def test_unknown_disabled_rule_exits_with_error(go_tree: GoTreeBuilder) -> None:
    go_tree.write({"main.go": SOURCE})

    with pytest.raises(SystemExit) as excinfo:
        main(_cli(go_tree, "lint", "--disable", "nonexistent"))

    assert excinfo.value.code == EXIT_ERROR


def test_missing_path_exits_with_error(tmp_path: Path) -> None:
    with pytest.raises(SystemExit) as excinfo:
        main(["lint", str(tmp_path / "missing"), "--config", str(tmp_path)])

    assert excinfo.value.code == EXIT_ERROR


def test_invalid_config_exits_with_error(tmp_path: Path) -> None:
    (tmp_path / ".promlinter.yml").write_text("strict: [true\n", encoding="utf-8")

    with pytest.raises(SystemExit) as excinfo:
        main(["lint", str(tmp_path), "--config", str(tmp_path)])

    assert excinfo.value.code == EXIT_ERROR


def test_log_file_receives_log_records(go_tree: GoTreeBuilder, tmp_path: Path) -> None:
    go_tree.write({"main.go": SOURCE})
    log_file = tmp_path / "promlinter.log"

    try:
        main(["--log-file", str(log_file), "--verbose", *_cli(go_tree, "lint")])
    finally:
        configure_logging()

    content = log_file.read_text(encoding="utf-8")
    assert "promlinter.orchestrator: Linting 1 Go file(s) (strict=False)" in content
