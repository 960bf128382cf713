# Copyright 2026 Overloadable Contributors
# SPDX-License-Identifier: Apache-2.0

"""Advisory checks for parsed invocations.

Expansion never rejects overlapping overloads; the host compiler reports
them later, as duplicate implementations in the free form and as ambiguous
method calls in the member form. These checks surface the obvious
cases earlier as warnings. They never block expansion.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from overloadable.model.entities import Invocation, Receiver, Signature
from overloadable.model.spans import Span

# ###############
# Public Interface
# ###############


@dataclass(frozen=True)
class ValidationWarning:
    """A likely problem the host compiler will report after expansion.

    Attributes:
        message: Human-readable description of the warning.
        span: Source span the warning refers to, if any.
    """

    message: str
    span: Span | None = None


@dataclass
class ValidationResult:
    """Result of running the advisory checks.

    Attributes:
        warnings: Issues found; empty when nothing looks suspicious.
    """

    warnings: list[ValidationWarning] = field(default_factory=list)

    @property
    def has_warnings(self) -> bool:
        """Return True if any warning was found."""
        return len(self.warnings) > 0


def validate(invocation: Invocation) -> ValidationResult:
    """Run all advisory checks on a parsed invocation.

    Checks performed:

    1. **Duplicate overload identity**: two non-generic, unconstrained
       signatures with the same receiver shape and the same parameter types
       (whitespace-insensitive) would produce conflicting implementations.

    2. **Ambiguous associated functions** (member form only): two signatures
       without receiver both become ``Owner::name``; calls through that path
       are ambiguous and need ``<Owner as Trait>::name``.

    Args:
        invocation: A parsed invocation of either form.

    Returns:
        A :class:`ValidationResult` with any warnings found.
    """
    warnings: list[ValidationWarning] = []
    warnings.extend(_check_duplicate_identity(invocation))
    if invocation.header.is_member:
        warnings.extend(_check_ambiguous_statics(invocation))
    return ValidationResult(warnings=warnings)


def check_feature_gates(text: str) -> list[ValidationWarning]:
    """Warn when a file using the free form lacks the nightly features it needs."""
    missing = [feature for feature in _REQUIRED_FEATURES if not _has_feature(text, feature)]
    if not missing:
        return []
    attribute = f"#![feature({', '.join(_REQUIRED_FEATURES)})]"
    return [
        ValidationWarning(
            message=f"Free-form overloads implement the Fn traits directly; add `{attribute}` to the crate root "
            f"(missing: {', '.join(missing)})."
        )
    ]


# ################
# Implementation
# ################

_REQUIRED_FEATURES = ("unboxed_closures", "fn_traits")

_WHITESPACE = re.compile(r"\s+")


def _has_feature(text: str, feature: str) -> bool:
    return re.search(r"#!\s*\[\s*feature\s*\([^)]*\b" + feature + r"\b", text) is not None


def _normalize(text: str) -> str:
    return _WHITESPACE.sub("", text)


def _receiver_shape(receiver: Receiver | None) -> tuple[object, ...]:
    if receiver is None:
        return ()
    receiver_type = _normalize(receiver.type.text) if receiver.type is not None else None
    return (receiver.kind, receiver.reference, receiver.mutable, receiver_type)


def _identity(signature: Signature) -> tuple[object, ...] | None:
    """Return the overload identity, or None when type parameters make it undecidable here.

    Lifetime parameters never separate two implementations, so they do not
    make the identity undecidable.
    """
    generics = signature.generics
    if generics is not None and len(generics.lifetimes) < len(generics.params):
        return None
    if signature.constraint is not None:
        return None
    params = tuple(_normalize(t) for t in signature.param_types)
    return (_receiver_shape(signature.receiver), signature.arity, params)


def _check_duplicate_identity(invocation: Invocation) -> list[ValidationWarning]:
    """Return warnings for signatures that repeat an earlier signature's identity."""
    warnings: list[ValidationWarning] = []
    seen: dict[tuple[object, ...], int] = {}
    header = invocation.header
    name = header.name.text
    if header.is_member:
        owner = header.owner.text if header.owner is not None else ""
        consequence = f"the host compiler will reject calls to '{owner}::{name}' as ambiguous."
    else:
        consequence = "the host compiler will reject the duplicate implementation."
    for index, signature in enumerate(invocation.signatures):
        identity = _identity(signature)
        if identity is None:
            continue
        if identity in seen:
            types = ", ".join(signature.param_types)
            warnings.append(
                ValidationWarning(
                    message=f"Signatures {seen[identity] + 1} and {index + 1} of '{name}' "
                    f"both take ({types}); {consequence}",
                    span=signature.params_span,
                )
            )
        else:
            seen[identity] = index
    return warnings


def _check_ambiguous_statics(invocation: Invocation) -> list[ValidationWarning]:
    """Return a warning for every receiver-less signature after the first."""
    warnings: list[ValidationWarning] = []
    first: int | None = None
    header = invocation.header
    for index, signature in enumerate(invocation.signatures):
        if signature.receiver is not None:
            continue
        if first is None:
            first = index
            continue
        owner = header.owner.text if header.owner is not None else ""
        warnings.append(
            ValidationWarning(
                message=f"Signatures {first + 1} and {index + 1} are both associated functions; "
                f"'{owner}::{header.name.text}(..)' is ambiguous and must be called through "
                f"'<{owner} as Trait>::{header.name.text}(..)'.",
                span=signature.params_span,
            )
        )
    return warnings
