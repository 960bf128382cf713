# Copyright 2026 Overloadable Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for the incremental template build."""

from __future__ import annotations

import os
import time
from pathlib import Path

import pytest

from overloadable.errors import LexerError, MalformedSignature
from overloadable.expansion.build import BuildError, build_files, output_path
from overloadable.generator import GeneratorOptions

FREE_TEMPLATE = """#![feature(unboxed_closures, fn_traits)]

overloadable! {
    pub area as fn(side: f64) -> f64 { side * side }, fn(w: f64, h: f64) -> f64 { w * h }
}
"""

# ###############
# Helpers
# ###############


def _write(path: Path, content: str, *, mtime_offset: float = -2.0) -> None:
    """Write *content* to *path*, creating parent directories as needed.

    Sets the file's mtime to *mtime_offset* seconds relative to now (default:
    2 seconds in the past) so that subsequently written outputs are reliably
    newer regardless of filesystem timestamp resolution.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    t = time.time() + mtime_offset
    os.utime(path, (t, t))


# ###############
# Output Paths
# ###############


class TestOutputPath:
    def test_mirrors_source_layout(self, tmp_path: Path) -> None:
        src = tmp_path / "src"
        build = tmp_path / "build"
        assert output_path(src / "geo" / "area.rs.in", src, build) == build / "geo" / "area.rs"

    def test_custom_suffix(self, tmp_path: Path) -> None:
        src = tmp_path / "src"
        build = tmp_path / "build"
        assert output_path(src / "lib.ovl", src, build, ".ovl") == build / "lib.rs"

    def test_outside_source_root(self, tmp_path: Path) -> None:
        with pytest.raises(BuildError, match="is not under"):
            output_path(tmp_path / "other" / "a.rs.in", tmp_path / "src", tmp_path / "build")

    def test_wrong_suffix(self, tmp_path: Path) -> None:
        with pytest.raises(BuildError, match="does not end with"):
            output_path(tmp_path / "src" / "a.rs", tmp_path / "src", tmp_path / "build")


# ###############
# Single File
# ###############


class TestSingleFile:
    def test_expands_template(self, tmp_path: Path) -> None:
        src = tmp_path / "src"
        build = tmp_path / "build"
        _write(src / "area.rs.in", FREE_TEMPLATE)
        results = build_files([src / "area.rs.in"], src, build)

        result = results["area.rs.in"]
        assert result.ok
        assert not result.up_to_date
        assert result.output == build / "area.rs"
        text = result.output.read_text(encoding="utf-8")
        assert text.startswith(
            "#![feature(unboxed_closures, fn_traits)]\n\n#[allow(non_camel_case_types)]\npub struct area;"
        )
        assert "overloadable!" not in text

    def test_nested_key_uses_posix_separators(self, tmp_path: Path) -> None:
        src = tmp_path / "src"
        _write(src / "geo" / "shapes" / "area.rs.in", FREE_TEMPLATE)
        results = build_files([src / "geo" / "shapes" / "area.rs.in"], src, tmp_path / "build")
        assert list(results) == ["geo/shapes/area.rs.in"]
        assert (tmp_path / "build" / "geo" / "shapes" / "area.rs").exists()

    def test_options_applied(self, tmp_path: Path) -> None:
        src = tmp_path / "src"
        _write(src / "area.rs.in", FREE_TEMPLATE)
        results = build_files([src / "area.rs.in"], src, tmp_path / "build", GeneratorOptions(marker_suffix="_"))
        assert "pub struct area_;" in results["area.rs.in"].output.read_text(encoding="utf-8")

    def test_warnings_collected(self, tmp_path: Path) -> None:
        src = tmp_path / "src"
        _write(src / "area.rs.in", "overloadable! { f as fn() {} }\n")
        result = build_files([src / "area.rs.in"], src, tmp_path / "build")["area.rs.in"]
        assert result.ok
        assert len(result.warnings) == 1
        assert result.output.exists()

    def test_failed_invocation_prevents_output(self, tmp_path: Path) -> None:
        src = tmp_path / "src"
        _write(src / "bad.rs.in", "overloadable! { f as fn() {} }\noverloadable! { g as fn() }\n")
        result = build_files([src / "bad.rs.in"], src, tmp_path / "build")["bad.rs.in"]
        assert not result.ok
        assert isinstance(result.errors[0], MalformedSignature)
        assert result.errors[0].line == 2
        assert not result.output.exists()

    def test_lexer_error_recorded(self, tmp_path: Path) -> None:
        src = tmp_path / "src"
        _write(src / "bad.rs.in", 'const S: &str = "open;\n')
        result = build_files([src / "bad.rs.in"], src, tmp_path / "build")["bad.rs.in"]
        assert isinstance(result.errors[0], LexerError)
        assert not result.output.exists()

    def test_missing_source_raises(self, tmp_path: Path) -> None:
        src = tmp_path / "src"
        src.mkdir()
        with pytest.raises(BuildError, match="Cannot read"):
            build_files([src / "missing.rs.in"], src, tmp_path / "build")


# ###############
# Caching
# ###############


class TestCaching:
    def test_cache_hit_skips_rebuild(self, tmp_path: Path) -> None:
        src = tmp_path / "src"
        build = tmp_path / "build"
        source = src / "area.rs.in"
        _write(source, FREE_TEMPLATE)  # mtime set 2s in the past
        build_files([source], src, build)
        output = build / "area.rs"
        mtime_first = output.stat().st_mtime

        result = build_files([source], src, build)["area.rs.in"]
        assert result.up_to_date
        assert output.stat().st_mtime == mtime_first  # output was NOT rewritten

    def test_stale_output_triggers_rebuild(self, tmp_path: Path) -> None:
        src = tmp_path / "src"
        build = tmp_path / "build"
        source = src / "area.rs.in"
        _write(source, FREE_TEMPLATE)
        build_files([source], src, build)

        _write(source, FREE_TEMPLATE.replace("area", "surface"), mtime_offset=2.0)  # newer than the output
        result = build_files([source], src, build)["area.rs.in"]
        assert not result.up_to_date
        assert "pub struct surface;" in result.output.read_text(encoding="utf-8")

    def test_newer_config_invalidates_output(self, tmp_path: Path) -> None:
        src = tmp_path / "src"
        build = tmp_path / "build"
        source = src / "area.rs.in"
        config = tmp_path / ".overloadable.yaml"
        _write(source, FREE_TEMPLATE)
        _write(config, "indent: 4\n")
        build_files([source], src, build, config_path=config)
        assert build_files([source], src, build, config_path=config)["area.rs.in"].up_to_date

        _write(config, "indent: 2\n", mtime_offset=2.0)
        result = build_files([source], src, build, GeneratorOptions(indent=2), config_path=config)["area.rs.in"]
        assert not result.up_to_date
        assert '\n  extern "rust-call" fn call(' in result.output.read_text(encoding="utf-8")

    def test_missing_config_path_is_ignored(self, tmp_path: Path) -> None:
        src = tmp_path / "src"
        build = tmp_path / "build"
        source = src / "area.rs.in"
        _write(source, FREE_TEMPLATE)
        build_files([source], src, build, config_path=tmp_path / "absent.yaml")
        assert build_files([source], src, build, config_path=tmp_path / "absent.yaml")["area.rs.in"].up_to_date

    def test_failed_build_is_retried(self, tmp_path: Path) -> None:
        src = tmp_path / "src"
        build = tmp_path / "build"
        source = src / "bad.rs.in"
        _write(source, "overloadable! { g as fn() }\n")
        build_files([source], src, build)
        result = build_files([source], src, build)["bad.rs.in"]
        assert not result.up_to_date
        assert not result.ok


# ###############
# Multiple Files
# ###############


def test_each_file_built_independently(tmp_path: Path) -> None:
    src = tmp_path / "src"
    build = tmp_path / "build"
    _write(src / "good.rs.in", FREE_TEMPLATE)
    _write(src / "bad.rs.in", "overloadable! { g as fn() }\n")
    results = build_files([src / "good.rs.in", src / "bad.rs.in"], src, build)
    assert results["good.rs.in"].ok
    assert not results["bad.rs.in"].ok
    assert (build / "good.rs").exists()
    assert not (build / "bad.rs").exists()
