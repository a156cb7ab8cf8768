"""Tests for promlinter.config."""

from __future__ import annotations

from pathlib import Path

import pytest

from promlinter.config import ConfigError, LintConfig, PromLinterConfig, load_config


def test_load_config_returns_defaults_when_missing(tmp_path: Path) -> None:
    config = load_config(tmp_path)

    assert isinstance(config, PromLinterConfig)
    assert config.root == tmp_path.resolve()
    assert config.strict is False
    assert config.include_tests is False
    assert config.exclude_paths == []
    assert config.lint == LintConfig()


def test_load_config_parses_expected_fields(tmp_path: Path) -> None:
    config_file = tmp_path / ".promlinter.yml"
    config_file.write_text(
        """
strict: true
include_tests: "yes"
exclude_paths:
  - "generated/"
  - "*_mock.go"
lint:
  disabled_rules: [help, camel_case]
""",
        encoding="utf-8",
    )

    config = load_config(config_file)

    assert config.root == tmp_path.resolve()
    assert config.strict is True
    assert config.include_tests is True
    assert config.exclude_paths == ["generated/", "*_mock.go"]
    assert config.lint.disabled_rules == ["help", "camel_case"]


def test_load_config_accepts_directory(tmp_path: Path) -> None:
    (tmp_path / ".promlinter.yml").write_text("exclude_paths: vendor_gen/\n", encoding="utf-8")

    config = load_config(tmp_path)

    assert config.exclude_paths == ["vendor_gen/"]


def test_load_config_treats_empty_file_as_defaults(tmp_path: Path) -> None:
    (tmp_path / ".promlinter.yml").write_text("\n", encoding="utf-8")

    assert load_config(tmp_path).strict is False


def test_load_config_rejects_invalid_yaml(tmp_path: Path) -> None:
    (tmp_path / ".promlinter.yml").write_text("strict: [true\n", encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_load_config_rejects_non_mapping_root(tmp_path: Path) -> None:
    (tmp_path / ".promlinter.yml").write_text("- strict\n", encoding="utf-8")

    with pytest.raises(ConfigError, match="mapping"):
        load_config(tmp_path)
