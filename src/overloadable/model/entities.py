# Copyright 2026 Overloadable Contributors
# SPDX-License-Identifier: Apache-2.0

"""Intermediate representation shared by the parser and both generators.

Records are built bottom-up from parsed tokens once per expansion and are
read-only afterwards.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict

from overloadable.model.spans import Fragment, Span

# ###############
# Public Interface
# ###############


class GenericParamKind(Enum):
    """The three kinds of generic parameter the DSL accepts."""

    LIFETIME = "lifetime"
    TYPE = "type"
    CONST = "const"


class ReceiverKind(Enum):
    """How a member signature binds its owning instance."""

    EXPLICIT = "explicit"
    IMPLICIT = "implicit"


class Header(BaseModel):
    """Visibility, shared name and optional owner type of an invocation."""

    model_config = ConfigDict(frozen=True)

    visibility: Fragment | None = None
    name: Fragment
    owner: Fragment | None = None

    @property
    def is_member(self) -> bool:
        """Return True for the ``Owner::name as`` form."""
        return self.owner is not None


class Annotation(BaseModel):
    """An outer attribute ``#[meta]`` attached to one signature.

    Attributes:
        meta: The bracketed meta-item, without the brackets.
        span: Span of the whole attribute, ``#`` through ``]``.
    """

    model_config = ConfigDict(frozen=True)

    meta: Fragment
    span: Span


class GenericParam(BaseModel):
    """One entry of a generic parameter list, e.g. ``'a``, ``T: Debug`` or ``const N: usize``."""

    model_config = ConfigDict(frozen=True)

    kind: GenericParamKind
    name: str
    bounds: Fragment | None = None
    text: Fragment


class Generics(BaseModel):
    """An angle-bracketed generic parameter list. Lifetimes always come first."""

    model_config = ConfigDict(frozen=True)

    params: tuple[GenericParam, ...] = ()
    span: Span

    @property
    def lifetimes(self) -> tuple[GenericParam, ...]:
        return tuple(p for p in self.params if p.kind == GenericParamKind.LIFETIME)

    def render(self) -> str:
        """Return ``<...>`` with each parameter re-emitted verbatim, or '' when empty."""
        if not self.params:
            return ""
        return "<" + ", ".join(p.text.text for p in self.params) + ">"


class Receiver(BaseModel):
    """The ``self`` parameter of a member signature.

    An explicit receiver carries a declared type (``self: Box<Self>``); an
    implicit one does not and may be a reference (``&self``, ``&'a mut self``).
    """

    model_config = ConfigDict(frozen=True)

    kind: ReceiverKind
    reference: bool = False
    mutable: bool = False
    lifetime: str | None = None
    type: Fragment | None = None
    text: Fragment

    @property
    def requires_sized(self) -> bool:
        """Return True when the receiver moves the owner by value (``self`` / ``mut self``)."""
        return self.kind == ReceiverKind.IMPLICIT and not self.reference


class Parameter(BaseModel):
    """An ordinary ``pattern: Type`` parameter."""

    model_config = ConfigDict(frozen=True)

    pattern: Fragment
    type: Fragment


class Signature(BaseModel):
    """One parsed function-like definition within an invocation."""

    model_config = ConfigDict(frozen=True)

    annotations: tuple[Annotation, ...] = ()
    generics: Generics | None = None
    receiver: Receiver | None = None
    params: tuple[Parameter, ...] = ()
    params_span: Span
    return_type: Fragment | None = None
    constraint: Fragment | None = None
    body: Fragment
    span: Span

    @property
    def arity(self) -> int:
        return len(self.params)

    @property
    def param_types(self) -> tuple[str, ...]:
        return tuple(p.type.text for p in self.params)


class Invocation(BaseModel):
    """A fully parsed invocation: header plus a non-empty, ordered signature list."""

    model_config = ConfigDict(frozen=True)

    header: Header
    signatures: tuple[Signature, ...]
    span: Span
