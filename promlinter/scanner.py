"""Discovery of Go source files to lint."""

from __future__ import annotations

import os
from dataclasses import dataclass
from fnmatch import fnmatchcase
from pathlib import Path
from typing import Iterator, List, Sequence

from .logging import get_logger

_EXCLUDED_DIRS = {
    ".git",
    ".hg",
    ".svn",
    ".idea",
    "node_modules",
    "vendor",
    "testdata",
}

_GO_SUFFIX = ".go"
_TEST_SUFFIX = "_test.go"


@dataclass
class IgnoreRule:
    """Represents an exclude pattern from .promlinter.yml, gitignore style."""

    pattern: str
    directory_only: bool
    anchored: bool
    has_slash: bool

    def matches(self, rel_path: str, is_dir: bool) -> bool:
        if not self.pattern:
            return False
        if self.directory_only and not is_dir:
            return False

        if self.anchored or self.has_slash:
            if fnmatchcase(rel_path, self.pattern):
                return True
            if self.directory_only and rel_path.startswith(f"{self.pattern}/"):
                return True
            return False

        return any(fnmatchcase(part, self.pattern) for part in rel_path.split("/"))


def build_ignore_rule(pattern: str) -> IgnoreRule | None:
    pattern = pattern.strip()
    if not pattern:
        return None

    directory_only = pattern.endswith("/")
    if directory_only:
        pattern = pattern[:-1]

    anchored = pattern.startswith("/")
    if anchored:
        pattern = pattern[1:]

    return IgnoreRule(
        pattern=pattern,
        directory_only=directory_only,
        anchored=anchored,
        has_slash="/" in pattern,
    )


class GoFileScanner:
    """Expands files and directories into the Go sources to analyze."""

    def __init__(self, *, exclude_paths: Sequence[str] = (), include_tests: bool = False) -> None:
        self._rules = [rule for rule in map(build_ignore_rule, exclude_paths) if rule is not None]
        self._include_tests = include_tests
        self.logger = get_logger("scanner")

    def scan(self, paths: Sequence[str | Path]) -> List[Path]:
        """Return the sorted, de-duplicated Go files under ``paths``.

        Files named explicitly are always included when they are Go sources.
        """
        found: set[Path] = set()
        for raw in paths:
            path = Path(raw).expanduser()
            if not path.exists():
                raise FileNotFoundError(f"Path not found: {raw}")
            if path.is_file():
                if path.suffix == _GO_SUFFIX:
                    found.add(path)
                else:
                    self.logger.debug("Skipping non-Go file %s", path)
                continue
            found.update(self._iter_dir(path))
        files = sorted(found)
        self.logger.debug("Discovered %d Go file(s)", len(files))
        return files

    def _iter_dir(self, root: Path) -> Iterator[Path]:
        for dirpath, dirnames, filenames in os.walk(root):
            current_dir = Path(dirpath)
            rel_dir = current_dir.relative_to(root).as_posix() if current_dir != root else ""

            kept = []
            for name in sorted(dirnames):
                if name in _EXCLUDED_DIRS or name.startswith("."):
                    continue
                rel_path = f"{rel_dir}/{name}" if rel_dir else name
                if self._ignored(rel_path, True):
                    continue
                kept.append(name)
            dirnames[:] = kept

            for filename in filenames:
                if not filename.endswith(_GO_SUFFIX):
                    continue
                if filename.endswith(_TEST_SUFFIX) and not self._include_tests:
                    continue
                rel_path = f"{rel_dir}/{filename}" if rel_dir else filename
                if self._ignored(rel_path, False):
                    continue
                yield current_dir / filename

    def _ignored(self, rel_path: str, is_dir: bool) -> bool:
        return any(rule.matches(rel_path, is_dir) for rule in self._rules)


__all__ = ["GoFileScanner", "IgnoreRule", "build_ignore_rule"]
