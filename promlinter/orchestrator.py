"""Pipeline orchestration: discover, parse, walk, validate and order issues."""

from __future__ import annotations

from dataclasses import dataclass, field
from itertools import chain
from pathlib import Path
from typing import Iterable, List, Optional, Sequence

from .analyzers import MetricVisitor
from .config import PromLinterConfig, load_config
from .logging import get_logger
from .models import Issue, Occurrence
from .scanner import GoFileScanner
from .syntax import File, GoParser
from .validators import PromLintValidator, Validator

_logger = get_logger("orchestrator")


def merge_issues(*issue_lists: Iterable[Issue]) -> List[Issue]:
    """Concatenate issue lists and order them by rendered position.

    The sort is stable, so merging already merged output is a no-op.
    """
    return sorted(chain.from_iterable(issue_lists), key=lambda issue: str(issue.position))


def lint_occurrences(occurrences: Iterable[Occurrence], validator: Validator) -> List[Issue]:
    """Validate each occurrence on its own and attach its position to every problem.

    Validator errors propagate: a rejected descriptor is an internal bug.
    """
    issues: List[Issue] = []
    for occurrence in occurrences:
        for problem in validator.validate(occurrence.descriptor):
            issues.append(Issue(position=occurrence.position, text=problem.text, metric=problem.metric))
    return issues


def collect(tree: File, *, strict: bool = False) -> MetricVisitor:
    """Walk one tree with a dedicated visitor and return it."""
    visitor = MetricVisitor(strict=strict)
    visitor.visit(tree)
    return visitor


def run(files: Iterable[File], *, strict: bool = False, validator: Optional[Validator] = None) -> List[Issue]:
    """Lint parsed files and return every issue in position order."""
    validator = validator or PromLintValidator()
    per_file: List[List[Issue]] = []
    for tree in files:
        visitor = collect(tree, strict=strict)
        per_file.append(visitor.issues + lint_occurrences(visitor.occurrences, validator))
    return merge_issues(*per_file)


@dataclass
class LintReport:
    """Result of linting a set of paths."""

    issues: List[Issue] = field(default_factory=list)
    occurrences: List[Occurrence] = field(default_factory=list)
    files: List[Path] = field(default_factory=list)
    skipped: List[Path] = field(default_factory=list)


class Orchestrator:
    """Coordinates file discovery, parsing and linting for the CLI and service."""

    def __init__(
        self,
        config: PromLinterConfig | None = None,
        parser: GoParser | None = None,
        validator: Validator | None = None,
        scanner: GoFileScanner | None = None,
    ) -> None:
        self.config = config or load_config(Path.cwd())
        self.parser = parser or GoParser()
        self.validator = validator or PromLintValidator(disabled_rules=self.config.lint.disabled_rules)
        self.scanner = scanner or GoFileScanner(
            exclude_paths=self.config.exclude_paths,
            include_tests=self.config.include_tests,
        )
        self.logger = _logger

    def lint_paths(self, paths: Sequence[str | Path], *, strict: bool | None = None) -> LintReport:
        """Lint every Go file under ``paths``."""
        strict = self.config.strict if strict is None else strict
        files = self.scanner.scan(paths)
        self.logger.info("Linting %d Go file(s) (strict=%s)", len(files), strict)

        report = LintReport()
        per_file: List[List[Issue]] = []
        for path in files:
            try:
                tree = self.parser.parse_file(path)
            except OSError as exc:
                self.logger.warning("Skipping unreadable file %s: %s", path, exc)
                report.skipped.append(path)
                continue
            visitor = collect(tree, strict=strict)
            report.files.append(path)
            report.occurrences.extend(visitor.occurrences)
            per_file.append(visitor.issues + lint_occurrences(visitor.occurrences, self.validator))

        report.issues = merge_issues(*per_file)
        report.occurrences.sort(key=lambda occurrence: str(occurrence.position))
        self.logger.info(
            "Found %d metric(s) and %d issue(s) in %d file(s)",
            len(report.occurrences),
            len(report.issues),
            len(report.files),
        )
        return report

    def list_metrics(self, paths: Sequence[str | Path], *, strict: bool | None = None) -> List[Occurrence]:
        """Return every resolved metric declaration under ``paths`` in position order."""
        return self.lint_paths(paths, strict=strict).occurrences

    def lint_source(self, source: str, filename: str = "", *, strict: bool | None = None) -> List[Issue]:
        """Lint a single in-memory Go source."""
        strict = self.config.strict if strict is None else strict
        tree = self.parser.parse(source, filename)
        return run([tree], strict=strict, validator=self.validator)


__all__ = ["LintReport", "Orchestrator", "collect", "lint_occurrences", "merge_issues", "run"]
