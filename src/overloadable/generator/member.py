# Copyright 2026 Overloadable Contributors
# SPDX-License-Identifier: Apache-2.0

"""Member generator.

Rust allows only one method of a given name per trait, so every signature
gets its own single-method trait (``<Owner>_<name>_<index>``) plus an
implementation of that trait on the owner type. The traits are independent,
which lets signatures with different receivers and arities share one name.
"""

from __future__ import annotations

from overloadable.errors import MalformedHeader
from overloadable.generator.common import (
    EmittedItem,
    Expansion,
    GeneratorOptions,
    ItemKind,
    declaration_pattern,
    render_annotations,
    render_where,
    visibility_prefix,
)
from overloadable.model.entities import Header, Invocation, Signature
from overloadable.model.spans import Fragment

# ###############
# Public Interface
# ###############


def generate_member(invocation: Invocation, options: GeneratorOptions | None = None) -> Expansion:
    """Generate one trait and one impl on the owner type per signature.

    Args:
        invocation: A parsed invocation with an owner type.
        options: Output options; defaults apply when omitted.

    Returns:
        Alternating trait declarations and impls, in signature order.

    Raises:
        MalformedHeader: If the invocation has no owner type.
    """
    options = options or GeneratorOptions()
    header = invocation.header
    _require_owner(header)
    items: list[EmittedItem] = []
    for index, signature in enumerate(invocation.signatures):
        items.extend(_emit_pair(header, signature, trait_name(header, index), options))
    return Expansion(items=tuple(items))


def trait_name(header: Header, index: int) -> str:
    """Return the name of the trait generated for the signature at *index*.

    Raises:
        MalformedHeader: If *header* has no owner type.
    """
    owner = _require_owner(header)
    return f"{owner.text}_{header.name.text}_{index}"


# ################
# Implementation
# ################


def _require_owner(header: Header) -> Fragment:
    if header.owner is None:
        raise MalformedHeader(
            "Member overloads need an owner type: expected 'Owner::name as'",
            header.name.span,
        )
    return header.owner


def _emit_pair(header: Header, signature: Signature, name: str, options: GeneratorOptions) -> list[EmittedItem]:
    assert header.owner is not None
    indent = " " * options.indent
    receiver = signature.receiver
    supertrait = ": Sized" if receiver is not None and receiver.requires_sized else ""

    declaration = _method_head(header, signature, in_trait=True) + ";"
    trait_lines = [
        "#[allow(non_camel_case_types)]",
        f"{visibility_prefix(header)}trait {name}{supertrait} {{",
        f"{indent}{declaration}",
        "}",
    ]

    impl_lines = [f"impl {name} for {header.owner.text} {{"]
    impl_lines.extend(render_annotations(signature, indent))
    impl_lines.append(f"{indent}{_method_head(header, signature, in_trait=False)} {signature.body.text}")
    impl_lines.append("}")

    return [
        EmittedItem(
            kind=kind,
            name=name,
            text="\n".join(lines),
            span=signature.span,
            arg_types=signature.param_types,
            output=signature.return_type,
        )
        for kind, lines in ((ItemKind.TRAIT, trait_lines), (ItemKind.TRAIT_IMPL, impl_lines))
    ]


def _method_head(header: Header, signature: Signature, *, in_trait: bool) -> str:
    """Render ``fn name<G>(receiver, params) -> R where C`` without body or ';'."""
    parts: list[str] = []
    receiver = signature.receiver
    if receiver is not None:
        if in_trait and receiver.mutable and not receiver.reference:
            # `mut self` is a binding pattern, which declarations may not use.
            typed = f": {receiver.type.text}" if receiver.type is not None else ""
            parts.append(f"self{typed}")
        else:
            parts.append(receiver.text.text)
    for param in signature.params:
        pattern = declaration_pattern(param.pattern) if in_trait else param.pattern.text
        parts.append(f"{pattern}: {param.type.text}")
    generics = signature.generics.render() if signature.generics else ""
    ret = f" -> {signature.return_type.text}" if signature.return_type is not None else ""
    return f"fn {header.name.text}{generics}({', '.join(parts)}){ret}{render_where(signature)}"
