# Copyright 2026 Overloadable Contributors
# SPDX-License-Identifier: Apache-2.0

"""Output model and helpers shared by the free-function and member generators."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

from pydantic import BaseModel, ConfigDict

from overloadable.model.entities import Header, Signature
from overloadable.model.spans import Fragment, Span

# ###############
# Public Interface
# ###############


@dataclass(frozen=True)
class GeneratorOptions:
    """Knobs that change the emitted text but never its meaning.

    Attributes:
        marker_suffix: Appended to the declared name to form the marker type name.
        ops_path: Path prefix of the invocation protocol traits (``::core::ops`` for no_std).
        indent: Number of spaces per indentation level.
    """

    marker_suffix: str = ""
    ops_path: str = "::std::ops"
    indent: int = 4


class ItemKind(Enum):
    """Kinds of top-level item a generator emits."""

    MARKER = "marker"
    PROTOCOL_IMPL = "protocol_impl"
    TRAIT = "trait"
    TRAIT_IMPL = "trait_impl"


class EmittedItem(BaseModel):
    """One emitted Rust item together with the source span it was generated from.

    Attributes:
        kind: What sort of item this is.
        name: Marker type name, protocol trait name (``Fn``/``FnMut``/``FnOnce``)
            or per-signature trait name.
        text: The Rust source of the item.
        span: Source span diagnostics about this item should point at.
        arg_types: Declared parameter types, in order (protocol impls and traits).
        output: The item's return type; the unit default is anchored at the
            parameter list parentheses.
    """

    model_config = ConfigDict(frozen=True)

    kind: ItemKind
    name: str
    text: str
    span: Span
    arg_types: tuple[str, ...] = ()
    output: Fragment | None = None


class Expansion(BaseModel):
    """The complete output of one invocation, in emission order."""

    model_config = ConfigDict(frozen=True)

    items: tuple[EmittedItem, ...]

    def of_kind(self, kind: ItemKind) -> tuple[EmittedItem, ...]:
        return tuple(item for item in self.items if item.kind == kind)

    def render(self) -> str:
        """Return the Rust source for all items separated by blank lines."""
        return "\n\n".join(item.text for item in self.items) + "\n"


def return_type_or_unit(signature: Signature) -> Fragment:
    """Return the declared return type, or ``()`` anchored at the parameter parentheses."""
    if signature.return_type is not None:
        return signature.return_type
    return Fragment(text="()", span=signature.params_span)


def render_annotations(signature: Signature, indent: str) -> list[str]:
    """Return one ``#[meta]`` line per annotation, verbatim and in declaration order."""
    return [f"{indent}#[{annotation.meta.text}]" for annotation in signature.annotations]


def render_tuple(items: tuple[str, ...] | list[str]) -> str:
    """Render a tuple with a trailing comma so that one-element tuples stay tuples."""
    if not items:
        return "()"
    return "(" + ", ".join(items) + ",)"


def render_where(signature: Signature) -> str:
    if signature.constraint is None:
        return ""
    return f" where {signature.constraint.text}"


def visibility_prefix(header: Header) -> str:
    if header.visibility is None:
        return ""
    return header.visibility.text + " "


def declaration_pattern(pattern: Fragment) -> str:
    """Reduce a parameter pattern to what a body-less declaration may use.

    Plain identifiers survive, ``mut x`` becomes ``x``, everything else ``_``.
    """
    match = _MUT_BINDING.match(pattern.text)
    if match:
        return match.group(1)
    if _IDENTIFIER.match(pattern.text):
        return pattern.text
    return "_"


# ################
# Implementation
# ################

_IDENTIFIER = re.compile(r"^(?:r#)?[A-Za-z_][A-Za-z0-9_]*$")
_MUT_BINDING = re.compile(r"^mut\s+((?:r#)?[A-Za-z_][A-Za-z0-9_]*)$")
