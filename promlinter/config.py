"""Configuration loading for promlinter (.promlinter.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

CONFIG_FILENAME = ".promlinter.yml"


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class LintConfig:
    """Semantic lint settings."""

    disabled_rules: List[str] = field(default_factory=list)


@dataclass
class PromLinterConfig:
    """Represents the settings defined in .promlinter.yml."""

    root: Path
    strict: bool = False
    include_tests: bool = False
    exclude_paths: List[str] = field(default_factory=list)
    lint: LintConfig = field(default_factory=LintConfig)


def load_config(config_path: Path) -> PromLinterConfig:
    """Load configuration from disk; a missing file yields defaults."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return PromLinterConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    lint_data = _as_dict(data.get("lint"))
    lint = LintConfig()
    if lint_data:
        lint.disabled_rules = _as_str_list(lint_data.get("disabled_rules"))

    return PromLinterConfig(
        root=root,
        strict=_as_bool(data.get("strict")) or False,
        include_tests=_as_bool(data.get("include_tests")) or False,
        exclude_paths=_as_str_list(data.get("exclude_paths")),
        lint=lint,
    )


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded if loaded is not None else {}


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1"}:
            return True
        if lowered in {"false", "no", "0"}:
            return False
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float, bool))]
    return []


__all__ = ["CONFIG_FILENAME", "ConfigError", "LintConfig", "PromLinterConfig", "load_config"]
