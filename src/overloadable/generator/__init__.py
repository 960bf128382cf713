# Copyright 2026 Overloadable Contributors
# SPDX-License-Identifier: Apache-2.0

"""Rust code generators for free-function and member overload sets."""

from overloadable.generator.common import EmittedItem, Expansion, GeneratorOptions, ItemKind, return_type_or_unit
from overloadable.generator.free import generate_free
from overloadable.generator.member import generate_member, trait_name

__all__ = [
    "GeneratorOptions",
    "ItemKind",
    "EmittedItem",
    "Expansion",
    "return_type_or_unit",
    "generate_free",
    "generate_member",
    "trait_name",
]
