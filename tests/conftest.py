from __future__ import annotations

import textwrap
from pathlib import Path
from typing import Callable

import pytest

from promlinter.syntax import File, GoParser
from tests._fixtures.go_tree import GoTreeBuilder


@pytest.fixture
def go_tree(tmp_path: Path) -> GoTreeBuilder:
    """Provide a reusable Go source tree rooted at the pytest tmp_path."""
    return GoTreeBuilder(tmp_path)


@pytest.fixture(scope="session")
def go_parser() -> GoParser:
    return GoParser()


@pytest.fixture
def parse_go(go_parser: GoParser) -> Callable[..., File]:
    """Parse dedented Go source text as ``main.go``."""

    def _parse(source: str, path: str = "main.go") -> File:
        return go_parser.parse(textwrap.dedent(source).lstrip("\n"), path)

    return _parse
