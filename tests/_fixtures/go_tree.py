"""Helper utilities for constructing temporary Go source trees in tests."""

from __future__ import annotations

import textwrap
from pathlib import Path
from typing import Mapping


class GoTreeBuilder:
    """Utility for writing Go files into a throwaway module directory."""

    def __init__(self, tmp_path: Path) -> None:
        self.root = tmp_path / "module"
        self.root.mkdir()

    def write(self, files: Mapping[str, str]) -> None:
        """Write `path -> contents` entries into the module."""
        for relative, content in files.items():
            path = self.root / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            normalised = textwrap.dedent(content).lstrip("\n")
            path.write_text(normalised, encoding="utf-8")

    def path(self) -> Path:
        """Return the module root path."""
        return self.root


__all__ = ["GoTreeBuilder"]
