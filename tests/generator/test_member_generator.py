# Copyright 2026 Overloadable Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for the member generator."""

import pytest

from overloadable.errors import MalformedHeader
from overloadable.generator import Expansion, GeneratorOptions, ItemKind, generate_member, trait_name
from overloadable.parser import parse_invocation

# ###############
# Test Helpers
# ###############


def _generate(source: str, options: GeneratorOptions | None = None) -> Expansion:
    return generate_member(parse_invocation(source), options)


def _traits(expansion: Expansion) -> list[str]:
    return [item.text for item in expansion.of_kind(ItemKind.TRAIT)]


def _impls(expansion: Expansion) -> list[str]:
    return [item.text for item in expansion.of_kind(ItemKind.TRAIT_IMPL)]


# ###############
# Trait and Impl Pairs
# ###############


class TestPairs:
    def test_reference_and_by_value_receivers(self) -> None:
        expansion = _generate("Type::name as fn(&self) -> usize {1}, fn(self, x: usize) -> Vec<Self> { vec![self] }")
        assert _traits(expansion) == [
            "#[allow(non_camel_case_types)]\ntrait Type_name_0 {\n    fn name(&self) -> usize;\n}",
            "#[allow(non_camel_case_types)]\ntrait Type_name_1: Sized {\n    fn name(self, x: usize) -> Vec<Self>;\n}",
        ]
        assert _impls(expansion) == [
            "impl Type_name_0 for Type {\n    fn name(&self) -> usize {1}\n}",
            "impl Type_name_1 for Type {\n    fn name(self, x: usize) -> Vec<Self> { vec![self] }\n}",
        ]

    def test_items_alternate_trait_then_impl(self) -> None:
        expansion = _generate("T::m as fn(&self) {}, fn(&mut self) {}")
        assert [item.kind for item in expansion.items] == [
            ItemKind.TRAIT,
            ItemKind.TRAIT_IMPL,
            ItemKind.TRAIT,
            ItemKind.TRAIT_IMPL,
        ]

    def test_trait_names_are_unique(self) -> None:
        signatures = ", ".join(f"fn(&self, a: [u8; {n}]) {{}}" for n in range(5))
        expansion = _generate(f"Buf::put as {signatures}")
        names = [item.name for item in expansion.of_kind(ItemKind.TRAIT)]
        assert names == [f"Buf_put_{n}" for n in range(5)]
        assert len(set(names)) == 5

    def test_trait_name_helper(self) -> None:
        header = parse_invocation("Counter::get as fn(&self) {}").header
        assert trait_name(header, 3) == "Counter_get_3"

    def test_trait_name_rejects_free_header(self) -> None:
        header = parse_invocation("get as fn() {}").header
        with pytest.raises(MalformedHeader, match="owner type") as exc_info:
            trait_name(header, 0)
        assert exc_info.value.span == header.name.span

    def test_visibility_applies_to_traits(self) -> None:
        expansion = _generate("pub(crate) T::m as fn(&self) {}")
        assert "\npub(crate) trait T_m_0 {" in _traits(expansion)[0]
        assert _impls(expansion)[0].startswith("impl T_m_0 for T {")


# ###############
# Receivers and the Sized Supertrait
# ###############


class TestSizedSupertrait:
    @pytest.mark.parametrize("receiver", ["&self", "&mut self", "&'a self", "self: Box<Self>", "self: Rc<Self>"])
    def test_no_sized_requirement(self, receiver: str) -> None:
        generics = "<'a>" if "'a" in receiver else ""
        expansion = _generate(f"T::m as fn{generics}({receiver}) {{}}")
        assert "trait T_m_0 {" in _traits(expansion)[0]

    @pytest.mark.parametrize("receiver", ["self", "mut self"])
    def test_by_value_requires_sized(self, receiver: str) -> None:
        expansion = _generate(f"T::m as fn({receiver}) {{}}")
        assert "trait T_m_0: Sized {" in _traits(expansion)[0]

    def test_mut_self_dropped_from_declaration_only(self) -> None:
        expansion = _generate("T::m as fn(mut self) -> Self { self }")
        assert "    fn m(self) -> Self;" in _traits(expansion)[0]
        assert "    fn m(mut self) -> Self { self }" in _impls(expansion)[0]

    def test_static_function(self) -> None:
        expansion = _generate("Point::new as fn(x: i32, y: i32) -> Self { Point { x, y } }")
        assert _traits(expansion)[0] == (
            "#[allow(non_camel_case_types)]\ntrait Point_new_0 {\n    fn new(x: i32, y: i32) -> Self;\n}"
        )


# ###############
# Method Shape
# ###############


class TestMethodShape:
    def test_omitted_return_type_stays_omitted(self) -> None:
        expansion = _generate("T::m as fn(&self) {}")
        assert "    fn m(&self);" in _traits(expansion)[0]
        assert expansion.items[0].output is None

    def test_generics_and_constraint(self) -> None:
        expansion = _generate("T::m as fn<'a, U>(&'a self, u: U) -> &'a str where [U: Display] { \"\" }")
        assert "    fn m<'a, U>(&'a self, u: U) -> &'a str where U: Display;" in _traits(expansion)[0]
        assert "    fn m<'a, U>(&'a self, u: U) -> &'a str where U: Display { \"\" }" in _impls(expansion)[0]

    def test_declaration_patterns(self) -> None:
        expansion = _generate("T::m as fn(&self, (a, b): (u8, u8), mut n: u8, _: u8, r#type: u8) {}")
        assert "    fn m(&self, _: (u8, u8), n: u8, _: u8, r#type: u8);" in _traits(expansion)[0]
        assert "    fn m(&self, (a, b): (u8, u8), mut n: u8, _: u8, r#type: u8) {}" in _impls(expansion)[0]

    def test_annotations_only_on_impl_method(self) -> None:
        expansion = _generate("T::m as #[inline] fn(&self) {}")
        assert "#[inline]" not in _traits(expansion)[0]
        assert _impls(expansion)[0] == "impl T_m_0 for T {\n    #[inline]\n    fn m(&self) {}\n}"

    def test_indent_option(self) -> None:
        expansion = _generate("T::m as fn(&self) {}", GeneratorOptions(indent=2))
        assert "\n  fn m(&self);\n" in _traits(expansion)[0]

    def test_arg_types_recorded(self) -> None:
        expansion = _generate("T::m as fn(&self, a: u8, b: &str) {}")
        assert all(item.arg_types == ("u8", "&str") for item in expansion.items)


# ###############
# Rejections
# ###############


def test_owner_required() -> None:
    source = "name as fn(&self) {}"
    with pytest.raises(MalformedHeader, match="owner type") as exc_info:
        _generate(source)
    assert exc_info.value.span.start == 0
    assert exc_info.value.span.end == len("name")
