"""Tests for the lint pipeline."""

from __future__ import annotations

from pathlib import Path
from typing import Callable, List

import pytest

from promlinter.config import LintConfig, PromLinterConfig
from promlinter.models import Issue, MetricDescriptor, MetricKind, Problem, SourcePosition
from promlinter.orchestrator import Orchestrator, merge_issues, run
from promlinter.syntax import File
from promlinter.validators import DescriptorError
from tests._fixtures.go_tree import GoTreeBuilder

Parse = Callable[..., File]

BAD_COUNTER = """
package main

import "github.com/prometheus/client_golang/prometheus"

var a = prometheus.NewCounter(prometheus.CounterOpts{Name: "requests", Help: "Requests."})
var b = prometheus.NewCounter(prometheus.CounterOpts{Name: "requests", Help: "Requests."})
"""


def _issue(file: str, line: int, column: int, text: str = "x") -> Issue:
    return Issue(position=SourcePosition(file, line, column), text=text)


def test_merge_issues_orders_by_rendered_position() -> None:
    issues = merge_issues(
        [_issue("b.go", 1, 1), _issue("a.go", 9, 1)],
        [_issue("a.go", 10, 1), _issue("a.go", 9, 1, "second")],
    )

    assert [str(issue.position) for issue in issues] == ["a.go:10:1", "a.go:9:1", "a.go:9:1", "b.go:1:1"]
    assert issues[1].text == "x"
    assert issues[2].text == "second"
    assert merge_issues(issues) == issues


def test_run_reports_each_occurrence_separately(parse_go: Parse) -> None:
    issues = run([parse_go(BAD_COUNTER)])

    assert [(str(issue.position), issue.metric, issue.text) for issue in issues] == [
        ("main.go:5:31", "requests", 'counter metrics should have "_total" suffix'),
        ("main.go:6:31", "requests", 'counter metrics should have "_total" suffix'),
    ]


def test_run_merges_structural_and_semantic_issues(parse_go: Parse) -> None:
    structural = parse_go(
        """
        package main

        var g = prometheus.NewGaugeVec(prometheus.GaugeOpts{Name: "up", Help: "Up."})
        """,
        path="a.go",
    )
    semantic = parse_go(BAD_COUNTER, path="b.go")

    strict = run([semantic, structural], strict=True)
    lenient = run([semantic, structural], strict=False)

    assert [str(issue.position) for issue in strict] == ["a.go:3:9", "b.go:5:31", "b.go:6:31"]
    assert strict[0].text == "NewGaugeVec should have at least 2 arguments"
    assert [str(issue.position) for issue in lenient] == ["b.go:5:31", "b.go:6:31"]


class _RejectingValidator:
    name = "rejecting"

    def validate(self, descriptor: MetricDescriptor) -> List[Problem]:
        raise DescriptorError("bad descriptor")


def test_validator_failure_aborts_run(parse_go: Parse) -> None:
    with pytest.raises(DescriptorError):
        run([parse_go(BAD_COUNTER)], validator=_RejectingValidator())


def _orchestrator(root: Path, strict: bool = False) -> Orchestrator:
    return Orchestrator(config=PromLinterConfig(root=root, strict=strict))


def test_lint_paths_discovers_files(go_tree: GoTreeBuilder) -> None:
    go_tree.write(
        {
            "metrics.go": BAD_COUNTER,
            "pkg/ok.go": """
                package pkg

                var ok = prometheus.NewGauge(prometheus.GaugeOpts{Name: "up", Help: "Up."})
            """,
            "pkg/ok_test.go": BAD_COUNTER,
        }
    )

    report = _orchestrator(go_tree.path()).lint_paths([go_tree.path()])

    assert len(report.files) == 2
    assert [occurrence.descriptor.name for occurrence in report.occurrences] == ["requests", "requests", "up"]
    assert len(report.issues) == 2
    assert all(issue.position.file.endswith("metrics.go") for issue in report.issues)


def test_list_metrics_returns_descriptors(go_tree: GoTreeBuilder) -> None:
    go_tree.write(
        {
            "collector.go": """
                package main

                var desc = prometheus.NewDesc("jobs_total", "Jobs.", nil, nil)

                func collect(ch chan<- prometheus.Metric) {
                    ch <- prometheus.MustNewConstMetric(desc, prometheus.CounterValue, 1)
                }
            """,
        }
    )

    occurrences = _orchestrator(go_tree.path()).list_metrics([go_tree.path()])

    assert [occurrence.descriptor for occurrence in occurrences] == [
        MetricDescriptor(kind=MetricKind.COUNTER, name="jobs_total", help="Jobs.")
    ]


def test_lint_source_honours_disabled_rules(tmp_path: Path) -> None:
    orchestrator = Orchestrator(
        config=PromLinterConfig(root=tmp_path, lint=LintConfig(disabled_rules=["counter"]))
    )

    assert orchestrator.lint_source(BAD_COUNTER.lstrip("\n"), "main.go") == []


def test_lint_paths_uses_configured_strictness(go_tree: GoTreeBuilder) -> None:
    go_tree.write(
        {
            "main.go": """
                package main

                var c = prometheus.NewCounter()
            """,
        }
    )

    assert _orchestrator(go_tree.path()).lint_paths([go_tree.path()]).issues == []
    strict_report = _orchestrator(go_tree.path(), strict=True).lint_paths([go_tree.path()])
    assert [issue.text for issue in strict_report.issues] == ["NewCounter should have at least 1 arguments"]


def test_invalid_literal_skips_only_its_site(go_tree: GoTreeBuilder) -> None:
    go_tree.write(
        {
            "bad.go": """
                package main

                var c = prometheus.NewCounter(prometheus.CounterOpts{Name: "jobs_total", Help: "50\\% done"})
                var g = prometheus.NewGauge(prometheus.GaugeOpts{Name: "queue_depth", Help: "Depth."})
            """,
            "metrics.go": BAD_COUNTER,
        }
    )

    report = _orchestrator(go_tree.path()).lint_paths([go_tree.path()])

    assert len(report.files) == 2
    assert [occurrence.descriptor.name for occurrence in report.occurrences] == ["queue_depth", "requests", "requests"]
    assert [issue.metric for issue in report.issues] == ["requests", "requests"]
