# Copyright 2026 Overloadable Contributors
# SPDX-License-Identifier: Apache-2.0

"""Expansion entry points: single invocations, whole files and incremental builds."""

from overloadable.expansion.build import DEFAULT_SOURCE_SUFFIX, BuildError, BuildResult, build_files, output_path
from overloadable.expansion.source import (
    FREE_MACRO,
    MEMBER_MACRO,
    ExpandedInvocation,
    InvocationKind,
    SourceExpansion,
    expand_free,
    expand_member,
    expand_source,
)

__all__ = [
    "expand_free",
    "expand_member",
    "expand_source",
    "SourceExpansion",
    "ExpandedInvocation",
    "InvocationKind",
    "FREE_MACRO",
    "MEMBER_MACRO",
    "build_files",
    "output_path",
    "BuildResult",
    "BuildError",
    "DEFAULT_SOURCE_SUFFIX",
]
