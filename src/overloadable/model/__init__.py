# Copyright 2026 Overloadable Contributors
# SPDX-License-Identifier: Apache-2.0

"""Intermediate representation for overloadable invocations."""

from overloadable.model.entities import (
    Annotation,
    GenericParam,
    GenericParamKind,
    Generics,
    Header,
    Invocation,
    Parameter,
    Receiver,
    ReceiverKind,
    Signature,
)
from overloadable.model.spans import Fragment, Span

__all__ = [
    # Source locations
    "Span",
    "Fragment",
    # Entities
    "Header",
    "Annotation",
    "GenericParamKind",
    "GenericParam",
    "Generics",
    "ReceiverKind",
    "Receiver",
    "Parameter",
    "Signature",
    "Invocation",
]
