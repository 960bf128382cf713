# Copyright 2026 Overloadable Contributors
# SPDX-License-Identifier: Apache-2.0

"""Entry point for the overloadable command-line interface."""

import argparse
import json
import sys
from pathlib import Path

from overloadable.errors import ExpansionError, format_diagnostic
from overloadable.expansion.build import BuildError, build_files
from overloadable.expansion.source import expand_source
from overloadable.generator.common import GeneratorOptions
from overloadable.validation.checks import ValidationWarning
from overloadable.workspace.config import (
    CONFIG_FILE_NAME,
    WorkspaceConfig,
    WorkspaceConfigError,
    load_workspace_config,
    render_default_config,
)

# ###############
# Public Interface
# ###############


def main() -> None:
    """Run the overloadable CLI."""
    parser = argparse.ArgumentParser(
        prog="overloadable",
        description="overloadable: expand overload sets into Rust trait implementations",
    )
    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")

    # init subcommand
    init_parser = subparsers.add_parser(
        "init",
        help="Initialize a new workspace",
        description=f"Write a default {CONFIG_FILE_NAME} into a directory.",
    )
    init_parser.add_argument(
        "directory",
        nargs="?",
        default=".",
        help="Directory to initialize the workspace in (default: current directory)",
    )

    # expand subcommand
    expand_parser = subparsers.add_parser(
        "expand",
        help="Expand the invocations in one Rust file",
        description="Expand every overloadable! and overloadable_member! invocation in a file.",
    )
    expand_parser.add_argument("file", help="Rust source file to expand")
    expand_parser.add_argument("-o", "--output", help="Write the result here instead of stdout")
    expand_parser.add_argument("--config", help=f"Read generator options from this {CONFIG_FILE_NAME} file")

    # check subcommand
    check_parser = subparsers.add_parser(
        "check",
        help="Check every template in a workspace",
        description="Parse and validate every template without writing output.",
    )
    check_parser.add_argument(
        "directory",
        nargs="?",
        default=".",
        help="Directory containing the workspace (default: current directory)",
    )

    # build subcommand
    build_parser = subparsers.add_parser(
        "build",
        help="Expand every template in a workspace",
        description="Expand templates into the build directory, skipping up-to-date outputs.",
    )
    build_parser.add_argument(
        "directory",
        nargs="?",
        default=".",
        help="Directory containing the workspace (default: current directory)",
    )

    # inspect subcommand
    inspect_parser = subparsers.add_parser(
        "inspect",
        help="Dump the parsed invocations of a file as JSON",
        description="Print the intermediate representation of every invocation in a file.",
    )
    inspect_parser.add_argument("file", help="Rust source file to inspect")

    args = parser.parse_args()
    if args.command is None:
        parser.print_help()
        sys.exit(0)

    sys.exit(_dispatch(args))


# ################
# Implementation
# ################


def _dispatch(args: argparse.Namespace) -> int:
    """Dispatch to the appropriate subcommand handler."""
    if args.command == "init":
        return _cmd_init(args)
    if args.command == "expand":
        return _cmd_expand(args)
    if args.command == "check":
        return _cmd_build(args, write=False)
    if args.command == "build":
        return _cmd_build(args, write=True)
    if args.command == "inspect":
        return _cmd_inspect(args)
    return 0


def _cmd_init(args: argparse.Namespace) -> int:
    """Handle the init subcommand."""
    directory = Path(args.directory).resolve()

    if not directory.exists():
        print(f"Error: directory '{directory}' does not exist.", file=sys.stderr)
        return 1

    config_file = directory / CONFIG_FILE_NAME
    if config_file.exists():
        print(f"Error: workspace already exists at '{config_file}'.", file=sys.stderr)
        return 1

    config_file.write_text(render_default_config(), encoding="utf-8")
    print(f"Initialized overloadable workspace at '{config_file}'.")
    return 0


def _cmd_expand(args: argparse.Namespace) -> int:
    """Handle the expand subcommand."""
    source_file = Path(args.file)
    text = _read_source(source_file)
    if text is None:
        return 1

    options = GeneratorOptions()
    if args.config is not None:
        try:
            options = load_workspace_config(Path(args.config)).generator_options()
        except WorkspaceConfigError as exc:
            print(f"Error: {exc}", file=sys.stderr)
            return 1

    try:
        result = expand_source(text, options)
    except ExpansionError as exc:
        print(format_diagnostic(text, exc, str(source_file)), file=sys.stderr)
        return 1

    _print_warnings(result.warnings, str(source_file))
    if result.errors:
        for error in result.errors:
            print(format_diagnostic(text, error, str(source_file)), file=sys.stderr)
        return 1

    if args.output is None:
        sys.stdout.write(result.text)
    else:
        Path(args.output).write_text(result.text, encoding="utf-8")
    return 0


def _cmd_build(args: argparse.Namespace, *, write: bool) -> int:
    """Handle the build and check subcommands."""
    directory = Path(args.directory).resolve()
    config = _load_workspace(directory)
    if config is None:
        return 1

    build_dir = directory / config.build_directory
    templates = sorted(f for f in directory.rglob(f"*{config.source_suffix}") if build_dir not in f.parents)
    if not templates:
        print(f"No {config.source_suffix} files found in the workspace.")
        return 0

    verb = "Building" if write else "Checking"
    print(f"{verb} {len(templates)} template(s)...")

    has_errors = False
    if write:
        try:
            results = build_files(
                templates,
                directory,
                build_dir,
                config.generator_options(),
                suffix=config.source_suffix,
                config_path=directory / CONFIG_FILE_NAME,
            )
        except BuildError as exc:
            print(f"Error: {exc}", file=sys.stderr)
            return 1
        for key, outcome in results.items():
            _print_warnings(outcome.warnings, key)
            for error in outcome.errors:
                _print_error(outcome.source, error, key)
                has_errors = True
            if outcome.ok and not outcome.up_to_date:
                print(f"  {key}: expanded")
    else:
        for template in templates:
            key = template.relative_to(directory).as_posix()
            text = _read_source(template)
            if text is None:
                has_errors = True
                continue
            try:
                result = expand_source(text, config.generator_options())
            except ExpansionError as exc:
                print(format_diagnostic(text, exc, key), file=sys.stderr)
                has_errors = True
                continue
            _print_warnings(result.warnings, key)
            for error in result.errors:
                print(format_diagnostic(text, error, key), file=sys.stderr)
                has_errors = True

    if has_errors:
        return 1

    print("No issues found." if not write else "Build finished.")
    return 0


def _cmd_inspect(args: argparse.Namespace) -> int:
    """Handle the inspect subcommand."""
    source_file = Path(args.file)
    text = _read_source(source_file)
    if text is None:
        return 1

    try:
        result = expand_source(text)
    except ExpansionError as exc:
        print(format_diagnostic(text, exc, str(source_file)), file=sys.stderr)
        return 1

    dumped = []
    for expanded in result.invocations:
        entry: dict[str, object] = {"kind": expanded.kind.value}
        if expanded.invocation is not None:
            entry["invocation"] = expanded.invocation.model_dump(mode="json")
        if expanded.error is not None:
            entry["error"] = str(expanded.error)
        dumped.append(entry)
    print(json.dumps(dumped, indent=2))
    return 1 if result.errors else 0


def _load_workspace(directory: Path) -> WorkspaceConfig | None:
    if not directory.exists():
        print(f"Error: directory '{directory}' does not exist.", file=sys.stderr)
        return None

    config_file = directory / CONFIG_FILE_NAME
    if not config_file.exists():
        print(
            f"Error: no workspace found at '{directory}'. Run 'overloadable init' to initialize a workspace.",
            file=sys.stderr,
        )
        return None

    try:
        return load_workspace_config(config_file)
    except WorkspaceConfigError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return None


def _read_source(path: Path) -> str | None:
    try:
        return path.read_text(encoding="utf-8")
    except OSError as exc:
        print(f"Error: cannot read '{path}': {exc}", file=sys.stderr)
        return None


def _print_warnings(warnings: list[ValidationWarning], label: str) -> None:
    for warning in warnings:
        location = f"{label}:{warning.span.line}:{warning.span.column}" if warning.span is not None else label
        print(f"Warning: {location}: {warning.message}")


def _print_error(source_file: Path, error: ExpansionError, label: str) -> None:
    try:
        text = source_file.read_text(encoding="utf-8")
    except OSError:
        print(f"Error: {label}: {error}", file=sys.stderr)
        return
    print(format_diagnostic(text, error, label), file=sys.stderr)
