# Copyright 2026 Overloadable Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for expanding invocations in place within Rust source files."""

import pytest

from overloadable.errors import LexerError, MalformedSignature, ReceiverNotAllowed
from overloadable.expansion import InvocationKind, expand_free, expand_member, expand_source
from overloadable.generator import GeneratorOptions, ItemKind

FEATURES = "#![feature(unboxed_closures, fn_traits)]\n"

# ###############
# Single-Invocation Entry Points
# ###############


class TestEntryPoints:
    def test_expand_free(self) -> None:
        expansion = expand_free("f as fn() {}, fn(x: u8) {}")
        assert len(expansion.of_kind(ItemKind.MARKER)) == 1
        assert len(expansion.of_kind(ItemKind.PROTOCOL_IMPL)) == 6

    def test_expand_member(self) -> None:
        expansion = expand_member("T::m as fn(&self) {}, fn(self) {}")
        assert len(expansion.of_kind(ItemKind.TRAIT)) == 2
        assert len(expansion.of_kind(ItemKind.TRAIT_IMPL)) == 2

    def test_expand_free_rejects_receiver(self) -> None:
        with pytest.raises(ReceiverNotAllowed):
            expand_free("f as fn(&self) {}")

    def test_options_are_forwarded(self) -> None:
        expansion = expand_free("f as fn() {}", GeneratorOptions(marker_suffix="_"))
        assert expansion.items[0].name == "f_"


# ###############
# File Expansion
# ###############


class TestExpandSource:
    def test_surrounding_text_preserved(self) -> None:
        before = FEATURES + "use std::fmt::Debug;\n\n"
        after = "\n\nfn main() {\n    let _ = f(1u8);\n}\n"
        source = before + "overloadable! {\n    pub f as fn(x: u8) -> u8 { x }\n}" + after
        result = expand_source(source)
        assert result.text.startswith(before + "#[allow(non_camel_case_types)]\npub struct f;\n\nimpl ")
        assert result.text.endswith("}" + after)
        assert result.errors == []

    def test_no_invocations(self) -> None:
        source = "fn main() { println!(\"hi\"); }\n"
        result = expand_source(source)
        assert result.text == source
        assert result.invocations == []
        assert result.warnings == []

    def test_replacement_matches_direct_expansion(self) -> None:
        body = "T::m as fn(&self) -> u8 { 1 }"
        result = expand_source(f"overloadable_member! {{ {body} }}")
        assert result.text == expand_member(body).render().rstrip("\n")
        assert result.invocations[0].kind == InvocationKind.MEMBER

    def test_path_call_with_semicolon(self) -> None:
        source = FEATURES + "overloadable::overloadable!(f as fn() {});\nstruct After;\n"
        result = expand_source(source)
        assert "overloadable::" not in result.text
        assert "for f {" in result.text
        assert result.text.endswith("}\nstruct After;\n")

    def test_bracket_call(self) -> None:
        result = expand_source(FEATURES + "overloadable![f as fn() {}];")
        assert len(result.invocations) == 1
        assert result.invocations[0].error is None
        assert not result.text.rstrip().endswith(";")

    def test_macro_definition_is_not_a_call(self) -> None:
        source = "macro_rules! overloadable { () => {} }\n"
        assert expand_source(source).text == source

    def test_unclosed_call_is_left_alone(self) -> None:
        source = "overloadable! { f as fn() {}\n"
        result = expand_source(source)
        assert result.text == source
        assert result.invocations == []

    def test_options_applied_to_every_invocation(self) -> None:
        source = FEATURES + "overloadable! { f as fn() {} }\noverloadable! { g as fn() {} }\n"
        result = expand_source(source, GeneratorOptions(marker_suffix="_"))
        assert "struct f_;" in result.text
        assert "struct g_;" in result.text

    def test_lexer_error_in_file_propagates(self) -> None:
        with pytest.raises(LexerError):
            expand_source('overloadable! { f as fn() {} }\nconst S: &str = "open;\n')


# ###############
# Error Isolation
# ###############


class TestErrorIsolation:
    def test_failed_invocation_does_not_affect_neighbours(self) -> None:
        bad = "overloadable! { f as fn(x: u8) -> u8 }"
        good = "overloadable! { g as fn() {} }"
        source = FEATURES + "\n" + bad + "\n" + good + "\n"
        result = expand_source(source)

        assert len(result.invocations) == 2
        assert isinstance(result.invocations[0].error, MalformedSignature)
        assert result.invocations[1].error is None
        assert "struct g;" in result.text
        assert "struct f;" not in result.text
        assert len(result.errors) == 1

    def test_error_reported_in_file_coordinates(self) -> None:
        bad = "overloadable! { f as fn(x: u8) -> u8 }"
        source = FEATURES + "\n" + bad + "\n"
        error = expand_source(source).errors[0]
        assert error.line == 3
        assert error.column == bad.rindex("}") + 1
        assert error.span.start == source.rindex("}")

    def test_failed_invocation_becomes_compile_error(self) -> None:
        source = "overloadable! { f as fn(&self) {} }"
        result = expand_source(source)
        assert result.text == (
            'compile_error!("Line 1, column 25: Free overloads have no instance to bind; '
            'remove the receiver or use the member form");'
        )

    def test_compile_error_message_is_escaped(self) -> None:
        source = 'overloadable! { f as fn() "x" }'
        result = expand_source(source)
        assert result.text.startswith('compile_error!("Line 1, column 27: ')
        assert "got '\\\"x\\\"'" in result.text

    def test_failed_invocation_adds_no_warnings(self) -> None:
        source = "overloadable_member! { T::m as fn(&self) {} fn(&self) {} }"
        result = expand_source(source)
        assert result.errors
        assert result.warnings == []


# ###############
# Warnings
# ###############


class TestWarnings:
    def test_missing_feature_gates(self) -> None:
        result = expand_source("overloadable! { f as fn() {} }")
        assert len(result.warnings) == 1
        assert "unboxed_closures" in result.warnings[0].message
        assert "fn_traits" in result.warnings[0].message

    def test_partial_feature_gates(self) -> None:
        result = expand_source("#![feature(fn_traits)]\noverloadable! { f as fn() {} }")
        assert len(result.warnings) == 1
        assert "missing: unboxed_closures" in result.warnings[0].message

    def test_member_form_needs_no_feature_gates(self) -> None:
        assert expand_source("overloadable_member! { T::m as fn(&self) {} }").warnings == []

    def test_duplicate_overloads_reported(self) -> None:
        source = "overloadable_member! { T::m as fn(&self, x: u8) {}, fn(&self, x : u8) {} }"
        result = expand_source(source)
        assert result.errors == []
        assert len(result.warnings) == 1
        assert "Signatures 1 and 2 of 'm'" in result.warnings[0].message
