# Copyright 2026 Overloadable Contributors
# SPDX-License-Identifier: Apache-2.0

"""Incremental expansion of template source files.

Implements a CMake-style cache: an output file is reused when it already
exists and is strictly newer than its template (and than the workspace
configuration, when one is given). Templates are written as
``<name>.rs.in`` under a source root and expanded to ``<name>.rs`` under the
build directory, mirroring the source layout.

A template with any failing invocation is not written at all; its errors are
reported in the returned :class:`BuildResult` instead.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from overloadable.errors import ExpansionError, LexerError
from overloadable.expansion.source import expand_source
from overloadable.generator.common import GeneratorOptions
from overloadable.validation.checks import ValidationWarning

# ###############
# Public Interface
# ###############

DEFAULT_SOURCE_SUFFIX = ".rs.in"


class BuildError(Exception):
    """Raised when a template cannot be read or its output cannot be written."""

    def __init__(self, message: str) -> None:
        super().__init__(message)


@dataclass
class BuildResult:
    """Outcome for one template file.

    Attributes:
        source: The template that was processed.
        output: Where the expanded file is (or would have been) written.
        up_to_date: True if the cached output was reused without expanding.
        errors: Expansion errors; the output is not written when non-empty.
        warnings: Advisory warnings from validation.
    """

    source: Path
    output: Path
    up_to_date: bool = False
    errors: list[ExpansionError] = field(default_factory=list)
    warnings: list[ValidationWarning] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


def output_path(source_file: Path, source_root: Path, build_dir: Path, suffix: str = DEFAULT_SOURCE_SUFFIX) -> Path:
    """Return the output path for *source_file*: its path under *build_dir* with *suffix* replaced by ``.rs``.

    Raises:
        BuildError: If *source_file* is not under *source_root* or lacks *suffix*.
    """
    try:
        rel = source_file.resolve().relative_to(source_root.resolve())
    except ValueError:
        raise BuildError(f"Source file '{source_file}' is not under '{source_root}'") from None
    if not rel.name.endswith(suffix):
        raise BuildError(f"Source file '{source_file}' does not end with '{suffix}'")
    return build_dir / rel.parent / (rel.name[: -len(suffix)] + ".rs")


def build_files(
    files: list[Path],
    source_root: Path,
    build_dir: Path,
    options: GeneratorOptions | None = None,
    *,
    suffix: str = DEFAULT_SOURCE_SUFFIX,
    config_path: Path | None = None,
) -> dict[str, BuildResult]:
    """Expand a list of template files.

    For each file, the builder:
    1. Checks whether an up-to-date output already exists (cache hit).
    2. Otherwise reads the template and expands every invocation in it.
    3. Writes the output only if no invocation failed.

    Args:
        files: Template files to expand.
        source_root: Root the output layout is mirrored from.
        build_dir: Root directory for expanded files.
        options: Generator options applied to every invocation.
        suffix: Template suffix replaced by ``.rs`` in the output name.
        config_path: Workspace configuration file; outputs older than it are stale.

    Returns:
        A mapping from the template's path relative to *source_root* (POSIX
        form) to its :class:`BuildResult`.

    Raises:
        BuildError: If a template cannot be read or an output cannot be written.
    """
    results: dict[str, BuildResult] = {}
    for source_file in files:
        output = output_path(source_file, source_root, build_dir, suffix)
        key = source_file.resolve().relative_to(source_root.resolve()).as_posix()
        results[key] = _build_file(source_file, output, options, config_path)
    return results


# ################
# Implementation
# ################


def _is_up_to_date(source_file: Path, output: Path, config_path: Path | None) -> bool:
    """Return True if *output* exists and is strictly newer than all of its inputs."""
    if not output.exists():
        return False
    output_mtime = output.stat().st_mtime
    if output_mtime <= source_file.stat().st_mtime:
        return False
    if config_path is not None and config_path.exists() and output_mtime <= config_path.stat().st_mtime:
        return False
    return True


def _build_file(
    source_file: Path,
    output: Path,
    options: GeneratorOptions | None,
    config_path: Path | None,
) -> BuildResult:
    result = BuildResult(source=source_file, output=output)
    if _is_up_to_date(source_file, output, config_path):
        result.up_to_date = True
        return result

    try:
        text = source_file.read_text(encoding="utf-8")
    except OSError as exc:
        raise BuildError(f"Cannot read source file '{source_file}': {exc}") from exc

    try:
        expanded = expand_source(text, options)
    except LexerError as exc:
        result.errors.append(exc)
        return result

    result.errors.extend(expanded.errors)
    result.warnings.extend(expanded.warnings)
    if result.errors:
        return result

    try:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(expanded.text, encoding="utf-8")
    except OSError as exc:
        raise BuildError(f"Cannot write output file '{output}': {exc}") from exc
    return result
