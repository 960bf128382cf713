# Copyright 2026 Overloadable Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for the workspace configuration module."""

from pathlib import Path

import pytest

from overloadable.generator import GeneratorOptions
from overloadable.workspace import (
    DEFAULT_BUILD_DIRECTORY,
    WorkspaceConfig,
    WorkspaceConfigError,
    load_workspace_config,
    parse_workspace_config,
    render_default_config,
)

# ###############
# Helpers
# ###############


def _write_config(tmp_path: Path, content: str) -> Path:
    """Write a workspace config file and return its path."""
    config_file = tmp_path / ".overloadable.yaml"
    config_file.write_text(content, encoding="utf-8")
    return config_file


# ###############
# Normal Cases
# ###############


def test_minimal_config(tmp_path: Path) -> None:
    """A config with only build-directory keeps every other default."""
    config = load_workspace_config(_write_config(tmp_path, "build-directory: out\n"))

    assert isinstance(config, WorkspaceConfig)
    assert config.build_directory == "out"
    assert config.source_suffix == ".rs.in"
    assert config.marker_suffix == ""
    assert config.ops_path == "::std::ops"
    assert config.indent == 4


def test_empty_document_yields_defaults() -> None:
    assert parse_workspace_config("") == WorkspaceConfig()


def test_full_config(tmp_path: Path) -> None:
    content = """\
build-directory: generated
source-suffix: .ovl
marker-suffix: _
ops-path: "::core::ops"
indent: 2
"""
    config = load_workspace_config(_write_config(tmp_path, content))

    assert config == WorkspaceConfig(
        build_directory="generated",
        source_suffix=".ovl",
        marker_suffix="_",
        ops_path="::core::ops",
        indent=2,
    )


def test_generator_options() -> None:
    config = WorkspaceConfig(marker_suffix="_", ops_path="::core::ops", indent=2)
    assert config.generator_options() == GeneratorOptions(marker_suffix="_", ops_path="::core::ops", indent=2)


def test_default_config_round_trips() -> None:
    config = parse_workspace_config(render_default_config())
    assert config == WorkspaceConfig()
    assert config.build_directory == DEFAULT_BUILD_DIRECTORY


# ###############
# Error Cases
# ###############


def test_missing_file_raises(tmp_path: Path) -> None:
    with pytest.raises(WorkspaceConfigError, match="not found"):
        load_workspace_config(tmp_path / "nonexistent.yaml")


def test_invalid_yaml_raises(tmp_path: Path) -> None:
    with pytest.raises(WorkspaceConfigError, match="Invalid YAML"):
        load_workspace_config(_write_config(tmp_path, "indent: [unclosed\n"))


def test_non_mapping_raises() -> None:
    with pytest.raises(WorkspaceConfigError, match="must be a YAML mapping"):
        parse_workspace_config("- a\n- b\n")


def test_unknown_field_raises() -> None:
    with pytest.raises(WorkspaceConfigError, match="unknown field\\(s\\): source-imports"):
        parse_workspace_config("source-imports: []\n")


def test_error_mentions_source_label() -> None:
    with pytest.raises(WorkspaceConfigError, match="^ws.yaml: "):
        parse_workspace_config("bogus: 1\n", source_label="ws.yaml")


@pytest.mark.parametrize("key", ["build-directory", "source-suffix", "marker-suffix", "ops-path"])
def test_non_string_field_raises(key: str) -> None:
    with pytest.raises(WorkspaceConfigError, match=f"'{key}' must be a string"):
        parse_workspace_config(f"{key}: 12\n")


@pytest.mark.parametrize("value", ["0", "-1", "two", "true", "1.5"])
def test_invalid_indent_raises(value: str) -> None:
    with pytest.raises(WorkspaceConfigError, match="'indent' must be a positive integer"):
        parse_workspace_config(f"indent: {value}\n")


def test_empty_source_suffix_raises() -> None:
    with pytest.raises(WorkspaceConfigError, match="'source-suffix' must not be empty"):
        parse_workspace_config('source-suffix: ""\n')


@pytest.mark.parametrize("value", ['"-x"', '"a b"', '"::"'])
def test_marker_suffix_must_be_identifier_characters(value: str) -> None:
    with pytest.raises(WorkspaceConfigError, match="'marker-suffix'"):
        parse_workspace_config(f"marker-suffix: {value}\n")
