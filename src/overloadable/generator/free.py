# Copyright 2026 Overloadable Contributors
# SPDX-License-Identifier: Apache-2.0

"""Free-function generator.

Emits one zero-sized marker type and, for every signature, implementations of
``Fn``, ``FnMut`` and ``FnOnce`` for it. Each signature's generics and
constraint clause scope only its own three implementations, so the host
compiler picks the body from the argument types at each call site.
"""

from __future__ import annotations

from overloadable.errors import MalformedHeader, ReceiverNotAllowed
from overloadable.generator.common import (
    EmittedItem,
    Expansion,
    GeneratorOptions,
    ItemKind,
    render_annotations,
    render_tuple,
    render_where,
    return_type_or_unit,
    visibility_prefix,
)
from overloadable.model.entities import Invocation, Signature

# ###############
# Public Interface
# ###############


def generate_free(invocation: Invocation, options: GeneratorOptions | None = None) -> Expansion:
    """Generate the marker type and invocation-protocol impls for a free-form invocation.

    Args:
        invocation: A parsed invocation without owner type.
        options: Output options; defaults apply when omitted.

    Returns:
        The marker declaration followed by three impls per signature.

    Raises:
        MalformedHeader: If the invocation names an owner type.
        ReceiverNotAllowed: If any signature declares a receiver.
    """
    options = options or GeneratorOptions()
    header = invocation.header
    if header.owner is not None:
        raise MalformedHeader(
            "'Owner::name' invocations belong to the member form, not the free-function form",
            header.owner.span,
        )
    for signature in invocation.signatures:
        if signature.receiver is not None:
            raise ReceiverNotAllowed(
                "Free overloads have no instance to bind; remove the receiver or use the member form",
                signature.receiver.text.span,
            )

    marker = header.name.text + options.marker_suffix
    items = [
        EmittedItem(
            kind=ItemKind.MARKER,
            name=marker,
            text=f"#[allow(non_camel_case_types)]\n{visibility_prefix(header)}struct {marker};",
            span=header.name.span,
        )
    ]
    for signature in invocation.signatures:
        items.extend(_ProtocolImpls(signature, marker, options).emit())
    return Expansion(items=tuple(items))


# ################
# Implementation
# ################


class _ProtocolImpls:
    """Builds the Fn / FnMut / FnOnce triple for one signature."""

    def __init__(self, signature: Signature, marker: str, options: GeneratorOptions) -> None:
        self._signature = signature
        self._marker = marker
        self._ops = options.ops_path
        self._indent = " " * options.indent
        self._args = render_tuple([p.type.text for p in signature.params])
        self._output = return_type_or_unit(signature)

    def emit(self) -> list[EmittedItem]:
        params = [p.pattern.text for p in self._signature.params]
        call = self._impl(
            "Fn",
            [],
            f'extern "rust-call" fn call(&self, {render_tuple(params)}: {self._args}) -> {self._output.text} '
            + self._signature.body.text,
        )
        call_mut = self._impl(
            "FnMut",
            [],
            self._forwarding_method("call_mut(&mut self", "self"),
        )
        call_once = self._impl(
            "FnOnce",
            [f"type Output = {self._output.text};"],
            self._forwarding_method("call_once(self", "&self"),
        )
        return [call, call_mut, call_once]

    def _forwarding_method(self, head: str, receiver: str) -> str:
        return (
            f'extern "rust-call" fn {head}, args: {self._args}) -> {self._output.text} {{\n'
            f"{self._indent * 2}<Self as {self._ops}::Fn<{self._args}>>::call({receiver}, args)\n"
            f"{self._indent}}}"
        )

    def _impl(self, protocol: str, associated: list[str], method: str) -> EmittedItem:
        generics = self._signature.generics.render() if self._signature.generics else ""
        where = render_where(self._signature)
        lines = [f"impl{generics} {self._ops}::{protocol}<{self._args}> for {self._marker}{where} {{"]
        lines.extend(f"{self._indent}{line}" for line in associated)
        lines.extend(render_annotations(self._signature, self._indent))
        lines.append(f"{self._indent}{method}")
        lines.append("}")
        return EmittedItem(
            kind=ItemKind.PROTOCOL_IMPL,
            name=protocol,
            text="\n".join(lines),
            span=self._signature.span,
            arg_types=self._signature.param_types,
            output=self._output,
        )
