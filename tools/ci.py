#!/usr/bin/env python3
# Copyright 2026 Overloadable Contributors
# SPDX-License-Identifier: Apache-2.0

"""Run the CI steps locally: formatting, linting, type checking, tests, example expansion and packaging.

Pass step names to run only those, e.g. ``tools/ci.py lint tests``.
"""

import argparse
import pathlib
import subprocess
import sys
import time

from yachalk import chalk

# ###############
# Public Interface
# ###############

STEPS: dict[str, list[str]] = {
    "format": ["uv", "run", "ruff", "format", "--check", "src/", "tests/", "tools/"],
    "lint": ["uv", "run", "ruff", "check", "src/", "tests/", "tools/"],
    "typecheck": ["uv", "run", "ty", "check", "src/"],
    "tests": ["uv", "run", "pytest", "--cov=overloadable", "--cov-report=term-missing"],
    "examples": ["uv", "run", "overloadable", "check", "examples/"],
    "build": ["uv", "build"],
}


def main() -> int:
    """Run the selected CI steps and report a coloured summary."""
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("steps", nargs="*", help=f"Steps to run: {', '.join(STEPS)} (default: all)")
    selected = parser.parse_args().steps or list(STEPS)
    unknown = [name for name in selected if name not in STEPS]
    if unknown:
        parser.error(f"unknown step(s): {', '.join(unknown)}")

    results: list[tuple[str, bool, float]] = []
    for name in selected:
        _banner(name)
        start = time.monotonic()
        proc = subprocess.run(STEPS[name], cwd=_REPO_ROOT)
        results.append((name, proc.returncode == 0, time.monotonic() - start))

    _banner("Summary")
    for name, passed, elapsed in results:
        colour = chalk.green if passed else chalk.red
        print(colour(f"  {'PASS' if passed else 'FAIL'}  {name} ({elapsed:.1f}s)"))
    print()
    return 0 if all(passed for _, passed, _ in results) else 1


# ################
# Implementation
# ################

_REPO_ROOT = pathlib.Path(__file__).parent.parent


def _banner(title: str) -> None:
    sep = chalk.blue("=" * 60)
    print(f"\n{sep}\n{chalk.blue(title)}\n{sep}")


if __name__ == "__main__":
    sys.exit(main())
