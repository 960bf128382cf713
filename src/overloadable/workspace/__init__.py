# Copyright 2026 Overloadable Contributors
# SPDX-License-Identifier: Apache-2.0

"""Workspace configuration for template expansion."""

from overloadable.workspace.config import (
    CONFIG_FILE_NAME,
    DEFAULT_BUILD_DIRECTORY,
    WorkspaceConfig,
    WorkspaceConfigError,
    load_workspace_config,
    parse_workspace_config,
    render_default_config,
)

__all__ = [
    "CONFIG_FILE_NAME",
    "DEFAULT_BUILD_DIRECTORY",
    "WorkspaceConfig",
    "WorkspaceConfigError",
    "load_workspace_config",
    "parse_workspace_config",
    "render_default_config",
]
