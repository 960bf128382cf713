# Copyright 2026 Overloadable Contributors
# SPDX-License-Identifier: Apache-2.0

"""Data model and YAML parser for the workspace configuration file."""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path

import yaml

from overloadable.expansion.build import DEFAULT_SOURCE_SUFFIX
from overloadable.generator.common import GeneratorOptions

# ###############
# Public Interface
# ###############

CONFIG_FILE_NAME = ".overloadable.yaml"

DEFAULT_BUILD_DIRECTORY = ".overloadable-build"


class WorkspaceConfigError(Exception):
    """Raised when a workspace configuration file is invalid or cannot be loaded."""


@dataclass
class WorkspaceConfig:
    """The parsed configuration for a workspace.

    Attributes:
        build_directory: Relative path (from the workspace root) for expanded output.
        source_suffix: Suffix identifying template files to expand.
        marker_suffix: Appended to free-form overload names to form the marker type name.
        ops_path: Path of the module providing ``Fn``, ``FnMut`` and ``FnOnce``.
        indent: Spaces per indentation level in generated code.
    """

    build_directory: str = DEFAULT_BUILD_DIRECTORY
    source_suffix: str = DEFAULT_SOURCE_SUFFIX
    marker_suffix: str = ""
    ops_path: str = "::std::ops"
    indent: int = 4

    def generator_options(self) -> GeneratorOptions:
        """Return the generator options this configuration selects."""
        return GeneratorOptions(marker_suffix=self.marker_suffix, ops_path=self.ops_path, indent=self.indent)


def load_workspace_config(path: Path) -> WorkspaceConfig:
    """Load and parse a workspace configuration file.

    Args:
        path: Path to the `.overloadable.yaml` file.

    Returns:
        A WorkspaceConfig instance populated from the file.

    Raises:
        WorkspaceConfigError: If the file cannot be read or the configuration is invalid.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise WorkspaceConfigError(f"Workspace config file not found: {path}") from None
    except OSError as exc:
        raise WorkspaceConfigError(f"Cannot read workspace config file: {exc}") from exc

    return parse_workspace_config(text, source_label=str(path))


def parse_workspace_config(text: str, source_label: str = "<string>") -> WorkspaceConfig:
    """Parse workspace config YAML text into a WorkspaceConfig.

    An empty document yields the defaults.

    Args:
        text: Raw YAML content.
        source_label: Human-readable label used in error messages (e.g. the file path).

    Raises:
        WorkspaceConfigError: If the YAML is invalid or a field has the wrong shape.
    """
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise WorkspaceConfigError(f"Invalid YAML in {source_label}: {exc}") from exc

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise WorkspaceConfigError(f"{source_label}: workspace config must be a YAML mapping")

    unknown = sorted(set(data) - set(_KEYS))
    if unknown:
        raise WorkspaceConfigError(f"{source_label}: unknown field(s): {', '.join(map(str, unknown))}")

    config = WorkspaceConfig()
    for key in ("build-directory", "source-suffix", "marker-suffix", "ops-path"):
        if key in data:
            setattr(config, _KEYS[key], _require_string(data, key, source_label))
    if "indent" in data:
        config.indent = _require_positive_int(data, "indent", source_label)

    if not config.source_suffix:
        raise WorkspaceConfigError(f"{source_label}: 'source-suffix' must not be empty")
    if not _SUFFIX.fullmatch(config.marker_suffix):
        raise WorkspaceConfigError(f"{source_label}: 'marker-suffix' must contain only letters, digits and '_'")
    return config


def render_default_config() -> str:
    """Return the text ``overloadable init`` writes."""
    return (
        "# overloadable workspace configuration\n"
        f"build-directory: {DEFAULT_BUILD_DIRECTORY}\n"
        f'source-suffix: "{DEFAULT_SOURCE_SUFFIX}"\n'
        'marker-suffix: ""\n'
        'ops-path: "::std::ops"\n'
        "indent: 4\n"
    )


# ################
# Implementation
# ################

_SUFFIX = re.compile(r"[A-Za-z0-9_]*")

_KEYS: dict[str, str] = {
    "build-directory": "build_directory",
    "source-suffix": "source_suffix",
    "marker-suffix": "marker_suffix",
    "ops-path": "ops_path",
    "indent": "indent",
}


def _require_string(mapping: dict[str, object], key: str, source_label: str) -> str:
    """Extract a string field from a mapping, raising WorkspaceConfigError if it is not one."""
    value = mapping[key]
    if not isinstance(value, str):
        raise WorkspaceConfigError(f"{source_label}: '{key}' must be a string")
    return value


def _require_positive_int(mapping: dict[str, object], key: str, source_label: str) -> int:
    value = mapping[key]
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise WorkspaceConfigError(f"{source_label}: '{key}' must be a positive integer")
    return value
